"""Component schema model, persistence, validation and mapping.

Quick usage::

    from src.schema import SchemaStore, validate_schema_file

    store = SchemaStore("schemas/storyblok")
    report = validate_schema_file("benefits_section", store)
"""

from src.schema.mapper import CATALOG, CatalogEntry, SchemaMapper, build_schemas, resolve_catalog_entry
from src.schema.models import (
    VALID_FIELD_TYPES,
    ComponentSchema,
    FieldType,
    OptionEntry,
    SchemaCategory,
    SchemaField,
)
from src.schema.store import (
    LoadedSchema,
    SchemaNotFoundError,
    SchemaParseError,
    SchemaStore,
    WriteResult,
)
from src.schema.validator import (
    ValidationIssue,
    ValidationReport,
    check_nested_components,
    validate_schema_file,
    validate_schema_structure,
)

__all__ = [
    "CATALOG",
    "CatalogEntry",
    "ComponentSchema",
    "FieldType",
    "LoadedSchema",
    "OptionEntry",
    "SchemaCategory",
    "SchemaField",
    "SchemaMapper",
    "SchemaNotFoundError",
    "SchemaParseError",
    "SchemaStore",
    "VALID_FIELD_TYPES",
    "ValidationIssue",
    "ValidationReport",
    "WriteResult",
    "build_schemas",
    "check_nested_components",
    "resolve_catalog_entry",
    "validate_schema_file",
    "validate_schema_structure",
]
