"""Hand-authored schema catalog.

Each known component kind has one factory on ``SchemaMapper`` that returns a
fully populated ``ComponentSchema``. Fields are inserted in authoring order
and numbered by a position counter that restarts at zero for every factory
call. There is no inference from an external design source: the mapper is a
catalog lookup, and ``resolve_catalog_entry`` is how callers find the right
factory for a requested name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from src.utils import to_display_name, to_snake_case

from .models import ComponentSchema, FieldType, OptionEntry, SchemaCategory, SchemaField


# ---------------------------------------------------------------------------
# Shared option sets
# ---------------------------------------------------------------------------

HEADING_LEVELS: list[tuple[str, str]] = [
    ("h1", "H1"),
    ("h2", "H2"),
    ("h3", "H3"),
    ("h4", "H4"),
    ("h5", "H5"),
    ("h6", "H6"),
]

ALIGNMENTS: list[tuple[str, str]] = [("Left", "Left"), ("Center", "Center")]

BUTTON_VARIANTS: list[tuple[str, str]] = [("On Dark", "On Dark"), ("On Light", "On Light")]


def _options(pairs: list[tuple[str, str]]) -> list[OptionEntry]:
    return [OptionEntry(value=value, name=name) for value, name in pairs]


def _backgrounds(*names: str) -> list[tuple[str, str]]:
    return [(n, n) for n in names]


# ---------------------------------------------------------------------------
# SchemaMapper
# ---------------------------------------------------------------------------


class SchemaMapper:
    """Builds the canned schema for every known component."""

    def __init__(self) -> None:
        self._position = 0

    # -- Field helpers -------------------------------------------------------

    def _reset(self) -> dict[str, SchemaField]:
        self._position = 0
        return {}

    def _field(self, field_type: FieldType, **kwargs: Any) -> SchemaField:
        """Create a field at the next position."""
        field_ = SchemaField(type=field_type, pos=self._position, **kwargs)
        self._position += 1
        return field_

    def _section_header(
        self,
        fields: dict[str, SchemaField],
        *,
        show_subtext: bool,
        alignment_default: str,
    ) -> None:
        """Append the headline block shared by every section schema."""
        fields["headline"] = self._field(
            FieldType.TEXT, required=True, description="Main section headline"
        )
        # Heading level sits right after the headline so editors set both together.
        fields["heading_level"] = self._field(
            FieldType.OPTION,
            required=False,
            default_value="h2",
            options=_options(HEADING_LEVELS),
            description="Heading tag level",
        )
        fields["subtext"] = self._field(
            FieldType.TEXTAREA, required=False, description="Section description/subtext"
        )
        if show_subtext:
            fields["show_subtext"] = self._field(
                FieldType.BOOLEAN,
                required=False,
                default_value=True,
                description="Show/hide subtext",
            )
        fields["alignment"] = self._field(
            FieldType.OPTION,
            required=False,
            default_value=alignment_default,
            options=_options(ALIGNMENTS),
            description="Text alignment for header",
        )

    def _padding(self, fields: dict[str, SchemaField]) -> None:
        fields["padding_top"] = self._field(
            FieldType.NUMBER, required=False, default_value=96, description="Padding top in pixels"
        )
        fields["padding_bottom"] = self._field(
            FieldType.NUMBER,
            required=False,
            default_value=96,
            description="Padding bottom in pixels",
        )

    def _item_list(self, description: str, component: str, required: bool) -> SchemaField:
        return self._field(
            FieldType.BLOKS,
            required=required,
            description=description,
            restrict_components=True,
            component_whitelist=[component],
        )

    # -- Section factories ---------------------------------------------------

    def map_section(self, block_name: str, display_name: str | None = None) -> ComponentSchema:
        """Generic benefits-style section for names without a dedicated factory."""
        fields = self._reset()
        self._section_header(fields, show_subtext=False, alignment_default="Left")
        fields["background"] = self._field(
            FieldType.OPTION,
            required=False,
            default_value="White",
            options=_options(_backgrounds("White", "Grey", "Dark")),
            description="Section background color",
        )
        self._padding(fields)
        fields["benefits"] = self._item_list("List of benefit items", "benefit_item", required=False)

        return ComponentSchema(
            name=to_snake_case(block_name),
            display_name=display_name or to_display_name(block_name),
            is_nestable=True,
            is_root=False,
            schema=fields,
        )

    def business_types_section(self) -> ComponentSchema:
        fields = self._reset()
        self._section_header(fields, show_subtext=True, alignment_default="Center")
        fields["background"] = self._field(
            FieldType.OPTION,
            required=False,
            default_value="White",
            options=_options(_backgrounds("White", "Grey")),
            description="Section background color",
        )
        self._padding(fields)
        fields["business_cards"] = self._item_list(
            "List of business type cards", "business_type_card", required=False
        )
        return _nestable("business_types_section", "Business Types Section", fields)

    def stats_section(self) -> ComponentSchema:
        fields = self._reset()
        self._section_header(fields, show_subtext=True, alignment_default="Center")
        fields["background_color"] = self._field(
            FieldType.OPTION,
            required=False,
            default_value="White",
            options=_options(_backgrounds("White", "Grey", "Dark")),
            description="Section background color",
        )
        fields["stats"] = self._item_list("List of stat items", "stat_item", required=True)
        return _nestable("stats_section", "Stats Section", fields)

    def data_security_section(self) -> ComponentSchema:
        fields = self._reset()
        self._section_header(fields, show_subtext=True, alignment_default="Center")
        fields["background"] = self._field(
            FieldType.OPTION,
            required=False,
            default_value="White",
            options=_options(_backgrounds("White", "Grey", "Dark")),
            description="Section background color",
        )
        self._padding(fields)
        fields["security_cards"] = self._item_list(
            "List of security certification cards", "security_card", required=True
        )
        return _nestable("data_security_section", "Data Security Section", fields)

    # -- Nested item factories -----------------------------------------------

    def benefit_item(self) -> ComponentSchema:
        fields = self._reset()
        fields["icon"] = self._field(
            FieldType.ASSET,
            required=False,
            description="Icon image for the benefit",
            filetypes=["images"],
        )
        fields["headline"] = self._field(FieldType.TEXT, required=True, description="Benefit headline")
        fields["description"] = self._field(
            FieldType.TEXTAREA, required=False, description="Benefit description"
        )
        fields["link"] = self._field(
            FieldType.MULTILINK, required=False, description="Optional link for the benefit"
        )
        fields["link_label"] = self._field(
            FieldType.TEXT,
            required=False,
            description="Link label text (shown if link is provided)",
        )
        fields["light_dark"] = self._field(
            FieldType.OPTION,
            required=False,
            default_value="false",
            options=_options([("false", "Light"), ("true", "Dark")]),
            description="Use dark/light variant (for dark backgrounds)",
        )
        return _nestable("benefit_item", "Benefit Item", fields)

    def business_type_card(self) -> ComponentSchema:
        fields = self._reset()
        fields["headline"] = self._field(
            FieldType.TEXT,
            required=True,
            description='Business type headline (e.g., "HR people")',
        )
        fields["description"] = self._field(
            FieldType.TEXTAREA, required=False, description="Business type description"
        )
        # Chips are entered one per line or comma-separated.
        fields["tags"] = self._field(
            FieldType.TEXTAREA,
            required=False,
            description="Tags/chips (one per line or comma-separated)",
        )
        fields["image"] = self._field(
            FieldType.ASSET,
            required=False,
            description="Business type image",
            filetypes=["images"],
        )
        return _nestable("business_type_card", "Business Type Card", fields)

    def _button(self, name: str, display_name: str) -> ComponentSchema:
        fields = self._reset()
        fields["label"] = self._field(
            FieldType.TEXT, required=True, default_value="Button", description="Button label"
        )
        fields["link"] = self._field(
            FieldType.MULTILINK,
            required=True,
            description="Button link (URL or page)",
            allow_target_blank=True,
            link_type=["url", "story", "email"],
        )
        fields["variant"] = self._field(
            FieldType.OPTION,
            required=False,
            default_value="On Dark",
            options=_options(BUTTON_VARIANTS),
            description="Button variant for different backgrounds",
        )
        return _nestable(name, display_name, fields)

    def primary_button(self) -> ComponentSchema:
        return self._button("primary_button", "Primary Button")

    def secondary_button(self) -> ComponentSchema:
        return self._button("secondary_button", "Secondary Button")

    def stat_item(self) -> ComponentSchema:
        fields = self._reset()
        fields["number"] = self._field(
            FieldType.TEXT, required=True, default_value="NN", description="Stat number or value"
        )
        fields["description"] = self._field(
            FieldType.TEXT,
            required=True,
            default_value="Description",
            description="Stat description text",
        )
        return _nestable("stat_item", "Stat Item", fields)

    def security_card(self) -> ComponentSchema:
        fields = self._reset()
        fields["image"] = self._field(
            FieldType.ASSET,
            required=False,
            description="Security certification image",
            filetypes=["images"],
        )
        fields["headline"] = self._field(FieldType.TEXT, required=True, description="Card headline")
        fields["subtext"] = self._field(
            FieldType.TEXTAREA, required=False, description="Card description/subtext"
        )
        fields["show_subtext"] = self._field(
            FieldType.BOOLEAN, required=False, default_value=True, description="Show/hide subtext"
        )
        fields["link"] = self._field(
            FieldType.MULTILINK, required=False, description="Optional link for the card"
        )
        fields["link_label"] = self._field(
            FieldType.TEXT,
            required=False,
            description="Link label text (shown if link is provided)",
        )
        fields["show_link"] = self._field(
            FieldType.BOOLEAN, required=False, default_value=True, description="Show/hide link"
        )
        fields["card_type"] = self._field(
            FieldType.OPTION,
            required=False,
            default_value="Shadow",
            options=_options(_backgrounds("Shadow", "Border", "Dark")),
            description="Card visual style type",
        )
        return _nestable("security_card", "Security Card", fields)


def _nestable(name: str, display_name: str, fields: dict[str, SchemaField]) -> ComponentSchema:
    return ComponentSchema(
        name=name,
        display_name=display_name,
        is_nestable=True,
        is_root=False,
        schema=fields,
    )


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CatalogEntry:
    """How to build one known component and what must exist before it."""

    name: str
    factory: str
    category: SchemaCategory
    prerequisites: tuple[str, ...] = field(default_factory=tuple)

    def build(self, mapper: SchemaMapper) -> ComponentSchema:
        builder: Callable[[], ComponentSchema] = getattr(mapper, self.factory)
        return builder()


CATALOG: dict[str, CatalogEntry] = {
    entry.name: entry
    for entry in (
        CatalogEntry("benefit_item", "benefit_item", SchemaCategory.NESTED),
        CatalogEntry("business_type_card", "business_type_card", SchemaCategory.NESTED),
        CatalogEntry("primary_button", "primary_button", SchemaCategory.NESTED),
        CatalogEntry("secondary_button", "secondary_button", SchemaCategory.NESTED),
        CatalogEntry("stat_item", "stat_item", SchemaCategory.NESTED),
        CatalogEntry("security_card", "security_card", SchemaCategory.NESTED),
        CatalogEntry(
            "business_types_section",
            "business_types_section",
            SchemaCategory.BLOKS,
            ("business_type_card",),
        ),
        CatalogEntry("stats_section", "stats_section", SchemaCategory.BLOKS, ("stat_item",)),
        CatalogEntry(
            "data_security_section",
            "data_security_section",
            SchemaCategory.BLOKS,
            ("security_card",),
        ),
    )
}

_ALIASES: dict[str, str] = {"content_block_stats": "stats_section"}


def canonical_name(name: str) -> str:
    """Normalise kebab-case and known aliases to a catalog key."""
    normalised = name.replace("-", "_")
    return _ALIASES.get(normalised, normalised)


def resolve_catalog_entry(name: str) -> CatalogEntry | None:
    """Return the catalog entry for *name*, or ``None`` for unknown names."""
    return CATALOG.get(canonical_name(name))


def build_schemas(
    name: str,
    display_name: str | None = None,
    mapper: SchemaMapper | None = None,
) -> list[tuple[ComponentSchema, SchemaCategory]]:
    """Build *name* and its prerequisites, prerequisites first.

    Unknown names become a generic section in ``bloks`` that nests
    ``benefit_item``.
    """
    mapper = mapper or SchemaMapper()
    entry = resolve_catalog_entry(name)

    if entry is None:
        prerequisite = CATALOG["benefit_item"]
        return [
            (prerequisite.build(mapper), prerequisite.category),
            (mapper.map_section(name, display_name), SchemaCategory.BLOKS),
        ]

    built = [
        (CATALOG[dep].build(mapper), CATALOG[dep].category) for dep in entry.prerequisites
    ]
    built.append((entry.build(mapper), entry.category))
    return built
