"""Structural validation of component schema documents.

Validation runs on the raw JSON dictionary rather than on the Pydantic model
so that malformed documents produce readable, field-annotated issues instead
of exceptions. Every problem is collected; nothing stops at the first error.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .models import VALID_FIELD_TYPES
from .store import SchemaNotFoundError, SchemaParseError, SchemaStore


@dataclass
class ValidationIssue:
    """A single validation problem, optionally tied to a field."""

    message: str
    field: str | None = None

    def __str__(self) -> str:
        if self.field:
            return f"[{self.field}] {self.message}"
        return self.message


@dataclass
class ValidationReport:
    """Outcome of validating one persisted schema file."""

    valid: bool
    errors: list[ValidationIssue] = field(default_factory=list)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_schema_structure(schema: Any, expected_name: str) -> list[ValidationIssue]:
    """Check the shape of a schema document.

    Args:
        schema: The parsed JSON document.
        expected_name: Name the schema must carry (its file name).

    Returns:
        All issues found, in check order. An empty list means the structure
        is valid.
    """
    errors: list[ValidationIssue] = []
    if not isinstance(schema, dict):
        return [ValidationIssue("Schema document must be a JSON object")]

    if not schema.get("name"):
        errors.append(ValidationIssue('Schema missing "name" field'))

    if not schema.get("display_name"):
        errors.append(ValidationIssue('Schema missing "display_name" field'))

    if schema.get("name") != expected_name:
        errors.append(
            ValidationIssue(
                f'Schema name "{schema.get("name")}" does not match component name "{expected_name}"'
            )
        )

    if not isinstance(schema.get("is_nestable"), bool):
        errors.append(ValidationIssue('Schema "is_nestable" must be a boolean'))

    if not isinstance(schema.get("is_root"), bool):
        errors.append(ValidationIssue('Schema "is_root" must be a boolean'))

    fields = schema.get("schema")
    if not isinstance(fields, dict):
        errors.append(ValidationIssue('Schema missing or invalid "schema" field'))
        return errors

    positions: list[float] = []

    for field_name, spec in fields.items():
        if not isinstance(spec, dict) or not spec.get("type"):
            errors.append(ValidationIssue('Field missing "type"', field_name))
            continue

        field_type = spec["type"]
        if field_type not in VALID_FIELD_TYPES:
            errors.append(
                ValidationIssue(
                    f'Invalid field type "{field_type}". Valid types: {", ".join(VALID_FIELD_TYPES)}',
                    field_name,
                )
            )

        if "pos" in spec and spec["pos"] is not None:
            pos = spec["pos"]
            if not _is_number(pos):
                errors.append(ValidationIssue('Field "pos" must be a number', field_name))
            elif pos in positions:
                errors.append(ValidationIssue(f"Duplicate position {pos}", field_name))
            else:
                positions.append(pos)

        if "required" in spec and not isinstance(spec["required"], bool):
            errors.append(ValidationIssue('Field "required" must be a boolean', field_name))

        if field_type == "option":
            options = spec.get("options")
            if not isinstance(options, list):
                errors.append(ValidationIssue('Option field must have "options" array', field_name))
            else:
                for option in options:
                    if not isinstance(option, dict) or not option.get("value") or not option.get("name"):
                        errors.append(
                            ValidationIssue('Option must have "value" and "name"', field_name)
                        )

        if field_type == "bloks" and spec.get("restrict_components"):
            if not spec.get("component_whitelist"):
                errors.append(
                    ValidationIssue(
                        "Bloks field with restrict_components must have component_whitelist",
                        field_name,
                    )
                )

    # Positions must form 0..n-1 once sorted; report the first gap only.
    for expected, actual in enumerate(sorted(positions)):
        if actual != expected:
            errors.append(
                ValidationIssue(
                    f"Field positions are not sequential. Expected {expected}, found {actual}"
                )
            )
            break

    return errors


def check_nested_components(schema: Any, store: SchemaStore) -> list[ValidationIssue]:
    """Report every whitelisted component that has no persisted schema."""
    errors: list[ValidationIssue] = []
    if not isinstance(schema, dict) or not isinstance(schema.get("schema"), dict):
        return errors

    for field_name, spec in schema["schema"].items():
        if not isinstance(spec, dict) or spec.get("type") != "bloks":
            continue
        whitelist = spec.get("component_whitelist")
        if not isinstance(whitelist, list):
            continue
        for nested_name in whitelist:
            if not store.exists(str(nested_name)):
                errors.append(
                    ValidationIssue(
                        f'Referenced nested component "{nested_name}" schema not found',
                        field_name,
                    )
                )

    return errors


def validate_schema_file(component_name: str, store: SchemaStore) -> ValidationReport:
    """Load a persisted schema and run every structural and nested check.

    A missing or unparseable file is reported as a single error entry.
    """
    try:
        loaded = store.load(component_name)
    except SchemaNotFoundError:
        return ValidationReport(
            valid=False,
            errors=[ValidationIssue(f"Schema file not found: {component_name}.json")],
        )
    except SchemaParseError as exc:
        return ValidationReport(valid=False, errors=[ValidationIssue(str(exc))])

    all_errors = validate_schema_structure(loaded.data, component_name)
    all_errors.extend(check_nested_components(loaded.data, store))
    return ValidationReport(valid=not all_errors, errors=all_errors)
