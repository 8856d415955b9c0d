"""React component scaffolding from component schemas.

Given a ``ComponentSchema``, renders three sources into the Next.js app:

- a presentational component ``src/components/presentational/<Pascal>.tsx``
- its CSS module ``<Pascal>.module.css`` beside it
- a Storyblok wrapper ``src/storyblok/components/<name>.tsx``

Existing files are never overwritten. After writing, the registration
manifest is regenerated so every wrapper on disk is resolvable by name.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from src.config import Config
from src.schema.models import ComponentSchema
from src.schema.store import SchemaStore
from src.utils import to_pascal_case

from .registry import RegistryWriter
from .templates import TemplateRenderer, write_if_absent
from .typescript import props_for


# ---------------------------------------------------------------------------
# Result types
# ---------------------------------------------------------------------------


@dataclass
class ComponentPaths:
    """Where the three generated sources for one component live."""

    presentational: Path
    style: Path
    wrapper: Path


@dataclass
class ComponentFileStatus:
    """Which generated artifacts already exist for a component."""

    presentational: bool
    wrapper: bool
    registered: bool
    paths: ComponentPaths

    @property
    def complete(self) -> bool:
        return self.presentational and self.wrapper and self.registered


@dataclass
class ScaffoldSources:
    """Rendered source text, not yet written to disk."""

    presentational: str
    style: str
    wrapper: str


@dataclass
class ScaffoldResult:
    """Outcome of ``ComponentScaffolder.write``."""

    name: str
    created: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)
    registry_updated: bool = False
    used_design_context: bool = False


# ---------------------------------------------------------------------------
# Scaffolder
# ---------------------------------------------------------------------------


class ComponentScaffolder:
    """Renders and writes the React sources for stored schemas."""

    def __init__(
        self,
        config: Config,
        store: SchemaStore | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.config = config
        self.store = store or SchemaStore(config.schemas_root)
        self.renderer = renderer or TemplateRenderer()
        self.registry = RegistryWriter(config, self.renderer)

    # -- Paths -------------------------------------------------------------

    def component_paths(self, name: str) -> ComponentPaths:
        pascal = to_pascal_case(name)
        return ComponentPaths(
            presentational=self.config.presentational_dir / f"{pascal}.tsx",
            style=self.config.presentational_dir / f"{pascal}.module.css",
            wrapper=self.config.wrapper_dir / f"{name}.tsx",
        )

    def check_component_files(self, name: str) -> ComponentFileStatus:
        paths = self.component_paths(name)
        return ComponentFileStatus(
            presentational=paths.presentational.exists(),
            wrapper=paths.wrapper.exists(),
            registered=self.registry.is_registered(name),
            paths=paths,
        )

    # -- Rendering ---------------------------------------------------------

    def _build_context(self, schema: ComponentSchema, design: bool) -> dict[str, Any]:
        component_name = to_pascal_case(schema.name)
        fields = schema.fields
        return {
            "name": schema.name,
            "display_name": schema.display_name,
            "component_name": component_name,
            "props_name": f"{component_name}Props",
            "wrapper_name": f"{component_name}Blok",
            "css_module": f"{component_name}.module.css",
            "props": props_for(schema),
            "design": design,
            "has_headline": "headline" in fields,
            "has_subtext": "subtext" in fields,
            "has_heading_level": "heading_level" in fields,
            "has_alignment": "alignment" in fields,
            "has_show_subtext": "show_subtext" in fields,
            "has_background": "background" in fields,
            "has_padding_top": "padding_top" in fields,
            "has_padding_bottom": "padding_bottom" in fields,
            "has_benefits": "benefits" in fields,
        }

    def scaffold(
        self, schema: ComponentSchema, design_context: str | None = None
    ) -> ScaffoldSources:
        """Render all three sources for *schema*.

        When *design_context* is given the presentational component and its
        stylesheet reproduce the section structure (background variants,
        padding, benefits grid) instead of the placeholder layout.
        """
        context = self._build_context(schema, design=design_context is not None)
        return ScaffoldSources(
            presentational=self.renderer.render("presentational.tsx.j2", context),
            style=self.renderer.render("styles.module.css.j2", context),
            wrapper=self.renderer.render("wrapper.tsx.j2", context),
        )

    # -- Writing -----------------------------------------------------------

    def write(
        self, schema: ComponentSchema, design_context: str | None = None
    ) -> ScaffoldResult:
        """Write each missing source, then regenerate the manifest."""
        result = ScaffoldResult(
            name=schema.name, used_design_context=design_context is not None
        )
        paths = self.component_paths(schema.name)
        sources = self.scaffold(schema, design_context)

        for path, content in (
            (paths.presentational, sources.presentational),
            (paths.style, sources.style),
            (paths.wrapper, sources.wrapper),
        ):
            if write_if_absent(path, content):
                result.created.append(path)
            else:
                result.skipped.append(path)

        result.registry_updated = self.registry.write(self.store)
        return result

    def generate(self, name: str) -> ScaffoldResult:
        """Load *name* (and its design note, if any) and write its sources.

        Raises:
            SchemaNotFoundError: If no schema is stored under *name*.
        """
        schema = self.store.load_model(name)
        design_context = self.store.load_design_context(name)
        return self.write(schema, design_context)
