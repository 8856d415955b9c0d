"""Pydantic v2 models for Storyblok component schemas.

A ``ComponentSchema`` mirrors the JSON document stored under
``<schemas_root>/<bloks|nested>/<name>.json``. The field map is serialised
under the Storyblok key ``"schema"`` and field positions under ``"pos"``;
both are exposed with descriptive attribute names in Python.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class FieldType(str, Enum):
    """The closed set of Storyblok field types."""
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OPTION = "option"
    MULTILINK = "multilink"
    ASSET = "asset"
    BLOKS = "bloks"
    RICHTEXT = "richtext"
    MARKDOWN = "markdown"
    DATE = "date"
    DATETIME = "datetime"
    FILE = "file"
    IMAGE = "image"
    VIDEO = "video"
    CUSTOM = "custom"


VALID_FIELD_TYPES: list[str] = [t.value for t in FieldType]


class SchemaCategory(str, Enum):
    """Storage category of a schema file."""
    BLOKS = "bloks"
    NESTED = "nested"


# ---------------------------------------------------------------------------
# Field & Schema Models
# ---------------------------------------------------------------------------

class OptionEntry(BaseModel):
    """One selectable value of an ``option`` field."""
    value: str = Field(..., description="Stored value")
    name: str = Field(..., description="Label shown to editors")


class SchemaField(BaseModel):
    """A single field of a component schema.

    Storyblok-specific keys not modelled here (``filetypes``,
    ``allow_target_blank``, ``link_type`` ...) are kept as extras and written
    back unchanged.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: FieldType = Field(..., description="Field type")
    required: bool = Field(default=True, description="Whether editors must fill the field")
    position: Optional[int] = Field(default=None, alias="pos", description="Zero-based order")
    default_value: Optional[Any] = Field(default=None, description="Type-dependent default")
    description: Optional[str] = Field(default=None, description="Editor help text")
    options: Optional[list[OptionEntry]] = Field(
        default=None, description="Choices for option fields"
    )
    restrict_components: Optional[bool] = Field(
        default=None, description="Limit a bloks field to the whitelist"
    )
    component_whitelist: Optional[list[str]] = Field(
        default=None, description="Schema names a bloks field may nest"
    )


class ComponentSchema(BaseModel):
    """The declarative field definition for one CMS component."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Unique snake_case identifier")
    display_name: str = Field(..., description="Human-readable name")
    is_nestable: bool = Field(default=True)
    is_root: bool = Field(default=False)
    fields: dict[str, SchemaField] = Field(
        default_factory=dict,
        alias="schema",
        description="Field name to field definition, in authoring order",
    )

    def to_dict(self) -> dict[str, Any]:
        """Return the Storyblok JSON shape (``schema`` / ``pos`` keys).

        Unset optional attributes are omitted so written files stay minimal.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ComponentSchema":
        return cls.model_validate(data)

    def field_names(self) -> list[str]:
        return list(self.fields)

    def positions(self) -> list[int]:
        """Positions of all fields that carry one, in field order."""
        return [f.position for f in self.fields.values() if f.position is not None]

    def nested_references(self) -> list[str]:
        """Every schema name referenced from a bloks whitelist."""
        refs: list[str] = []
        for field in self.fields.values():
            if field.type == FieldType.BLOKS and field.component_whitelist:
                refs.extend(field.component_whitelist)
        return refs
