"""TypeScript property derivation for generated React components.

Turns schema fields into prop declarations: optionality follows
``required``, option fields become literal unions, multilink fields a link
object and bloks fields an array of tagged blok objects.
"""

from __future__ import annotations

from dataclasses import dataclass

from src.schema.models import ComponentSchema, FieldType, SchemaField

LINK_TYPE = (
    "{\n"
    "    url?: string\n"
    "    cached_url?: string\n"
    "    id?: string\n"
    "    email?: string\n"
    "    linktype?: string\n"
    "  }"
)

BLOKS_TYPE = (
    "Array<{\n"
    "    _uid: string\n"
    "    component: string\n"
    "    [key: string]: any\n"
    "  }>"
)

_SCALAR_TYPES: dict[FieldType, str] = {
    FieldType.TEXT: "string",
    FieldType.TEXTAREA: "string",
    FieldType.ASSET: "string",
    FieldType.NUMBER: "number",
    FieldType.BOOLEAN: "boolean",
}


@dataclass
class PropSpec:
    """One component prop derived from a schema field."""

    name: str
    ts_type: str
    optional: bool
    description: str = ""

    @property
    def declaration(self) -> str:
        """``name?: type`` as it appears inside an interface body."""
        marker = "?" if self.optional else ""
        return f"{self.name}{marker}: {self.ts_type}"

    @property
    def commented_declaration(self) -> str:
        if self.description:
            return f"{self.declaration}  // {self.description}"
        return self.declaration


def _quote(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def typescript_type(field: SchemaField) -> str:
    """Map a schema field to its TypeScript type expression."""
    if field.type in _SCALAR_TYPES:
        return _SCALAR_TYPES[field.type]
    if field.type == FieldType.OPTION:
        if field.options:
            return " | ".join(_quote(opt.value) for opt in field.options)
        return "string"
    if field.type == FieldType.MULTILINK:
        return LINK_TYPE
    if field.type == FieldType.BLOKS:
        return BLOKS_TYPE
    return "any"


def props_for(schema: ComponentSchema) -> list[PropSpec]:
    """Derive one prop per field, in field order."""
    return [
        PropSpec(
            name=name,
            ts_type=typescript_type(field),
            optional=not field.required,
            description=field.description or "",
        )
        for name, field in schema.fields.items()
    ]
