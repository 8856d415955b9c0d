"""Tests for schema validation (src.schema.validator).

Covers:
- Top-level key checks and the name/file-name match
- Field type, position, required, option and whitelist checks
- Contiguous positions (first gap reported once)
- Nested reference resolution across both store categories
- validate_schema_file for missing and unparseable files
"""

from __future__ import annotations

from typing import Any

import pytest

from src.schema.validator import (
    ValidationIssue,
    check_nested_components,
    validate_schema_file,
    validate_schema_structure,
)

pytestmark = pytest.mark.unit


def _messages(issues: list[ValidationIssue]) -> list[str]:
    return [issue.message for issue in issues]


# ---------------------------------------------------------------------------
# validate_schema_structure
# ---------------------------------------------------------------------------


class TestTopLevel:
    def test_valid_schema_has_no_issues(self, hero_section_schema):
        assert validate_schema_structure(hero_section_schema, "hero_section") == []

    def test_missing_name_and_display_name(self, hero_section_schema):
        del hero_section_schema["name"]
        del hero_section_schema["display_name"]
        messages = _messages(validate_schema_structure(hero_section_schema, "hero_section"))
        assert messages[0] == 'Schema missing "name" field'
        assert messages[1] == 'Schema missing "display_name" field'
        assert 'Schema name "None" does not match component name "hero_section"' in messages

    def test_name_mismatch(self, hero_section_schema):
        messages = _messages(validate_schema_structure(hero_section_schema, "other_section"))
        assert messages == [
            'Schema name "hero_section" does not match component name "other_section"'
        ]

    def test_non_boolean_flags(self, hero_section_schema):
        hero_section_schema["is_nestable"] = "yes"
        hero_section_schema["is_root"] = 0
        messages = _messages(validate_schema_structure(hero_section_schema, "hero_section"))
        assert 'Schema "is_nestable" must be a boolean' in messages
        assert 'Schema "is_root" must be a boolean' in messages

    @pytest.mark.parametrize("fields", [None, [], "text"])
    def test_invalid_schema_map_stops_validation(self, hero_section_schema, fields):
        hero_section_schema["schema"] = fields
        messages = _messages(validate_schema_structure(hero_section_schema, "hero_section"))
        assert messages == ['Schema missing or invalid "schema" field']

    def test_non_dict_document(self):
        issues = validate_schema_structure(["not", "a", "schema"], "x")
        assert len(issues) == 1


class TestFields:
    def test_missing_type_skips_remaining_field_checks(self, hero_section_schema):
        hero_section_schema["schema"]["headline"] = {"pos": "zero", "required": "yes"}
        issues = validate_schema_structure(hero_section_schema, "hero_section")
        headline_issues = [i for i in issues if i.field == "headline"]
        assert [i.message for i in headline_issues] == ['Field missing "type"']

    def test_invalid_type_lists_valid_types(self, hero_section_schema):
        hero_section_schema["schema"]["headline"]["type"] = "colour"
        issues = validate_schema_structure(hero_section_schema, "hero_section")
        assert issues[0].field == "headline"
        assert issues[0].message.startswith('Invalid field type "colour". Valid types: text, textarea')

    def test_non_numeric_position(self, hero_section_schema):
        hero_section_schema["schema"]["cta_link"]["pos"] = "4"
        messages = _messages(validate_schema_structure(hero_section_schema, "hero_section"))
        assert 'Field "pos" must be a number' in messages

    def test_boolean_position_is_not_a_number(self, hero_section_schema):
        hero_section_schema["schema"]["cta_link"]["pos"] = True
        messages = _messages(validate_schema_structure(hero_section_schema, "hero_section"))
        assert 'Field "pos" must be a number' in messages

    def test_duplicate_position(self, hero_section_schema):
        hero_section_schema["schema"]["subtext"]["pos"] = 0
        issues = validate_schema_structure(hero_section_schema, "hero_section")
        duplicate = [i for i in issues if i.message == "Duplicate position 0"]
        assert len(duplicate) == 1
        assert duplicate[0].field == "subtext"

    def test_non_boolean_required(self, hero_section_schema):
        hero_section_schema["schema"]["headline"]["required"] = "true"
        issues = validate_schema_structure(hero_section_schema, "hero_section")
        assert issues == [ValidationIssue('Field "required" must be a boolean', "headline")]

    def test_option_field_without_options(self, hero_section_schema):
        del hero_section_schema["schema"]["background"]["options"]
        messages = _messages(validate_schema_structure(hero_section_schema, "hero_section"))
        assert messages == ['Option field must have "options" array']

    def test_option_entry_missing_value_or_name(self, hero_section_schema):
        hero_section_schema["schema"]["background"]["options"] = [
            {"value": "White"},
            {"name": "Dark"},
            {"value": "", "name": "Empty"},
        ]
        messages = _messages(validate_schema_structure(hero_section_schema, "hero_section"))
        assert messages == ['Option must have "value" and "name"'] * 3

    def test_restricted_bloks_without_whitelist(self, hero_section_schema):
        hero_section_schema["schema"]["items"]["component_whitelist"] = []
        issues = validate_schema_structure(hero_section_schema, "hero_section")
        assert issues == [
            ValidationIssue(
                "Bloks field with restrict_components must have component_whitelist", "items"
            )
        ]

    def test_unrestricted_bloks_may_omit_whitelist(self, hero_section_schema):
        items = hero_section_schema["schema"]["items"]
        items["restrict_components"] = False
        del items["component_whitelist"]
        assert validate_schema_structure(hero_section_schema, "hero_section") == []


class TestPositions:
    def test_gap_reported_once(self, hero_section_schema):
        hero_section_schema["schema"]["subtext"]["pos"] = 7
        hero_section_schema["schema"]["background"]["pos"] = 9
        messages = _messages(validate_schema_structure(hero_section_schema, "hero_section"))
        gaps = [m for m in messages if m.startswith("Field positions are not sequential")]
        assert gaps == ["Field positions are not sequential. Expected 1, found 3"]

    def test_positions_need_not_follow_field_order(self, hero_section_schema):
        fields = hero_section_schema["schema"]
        fields["headline"]["pos"], fields["cta_link"]["pos"] = 4, 0
        assert validate_schema_structure(hero_section_schema, "hero_section") == []

    def test_fields_without_position_are_ignored(self, hero_section_schema):
        del hero_section_schema["schema"]["cta_link"]["pos"]
        assert validate_schema_structure(hero_section_schema, "hero_section") == []


# ---------------------------------------------------------------------------
# check_nested_components
# ---------------------------------------------------------------------------


class TestNestedComponents:
    def test_missing_reference(self, store, hero_section_schema):
        issues = check_nested_components(hero_section_schema, store)
        assert issues == [
            ValidationIssue('Referenced nested component "hero_item" schema not found', "items")
        ]

    def test_reference_found_in_nested(self, store, write_schema, hero_item_schema, hero_section_schema):
        write_schema(hero_item_schema, "nested")
        assert check_nested_components(hero_section_schema, store) == []

    def test_reference_found_in_bloks(self, store, write_schema, hero_item_schema, hero_section_schema):
        write_schema(hero_item_schema, "bloks")
        assert check_nested_components(hero_section_schema, store) == []

    def test_every_missing_entry_reported(self, store, hero_section_schema):
        hero_section_schema["schema"]["items"]["component_whitelist"] = ["a_item", "b_item"]
        messages = _messages(check_nested_components(hero_section_schema, store))
        assert messages == [
            'Referenced nested component "a_item" schema not found',
            'Referenced nested component "b_item" schema not found',
        ]


# ---------------------------------------------------------------------------
# validate_schema_file
# ---------------------------------------------------------------------------


class TestValidateSchemaFile:
    def test_valid_file(self, populated_store):
        report = validate_schema_file("hero_section", populated_store)
        assert report.valid is True
        assert report.errors == []

    def test_missing_file(self, store):
        report = validate_schema_file("ghost", store)
        assert report.valid is False
        assert _messages(report.errors) == ["Schema file not found: ghost.json"]

    def test_unparseable_file(self, config, store):
        path = config.schemas_root / "bloks" / "broken.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")
        report = validate_schema_file("broken", store)
        assert report.valid is False
        assert len(report.errors) == 1
        assert report.errors[0].message.startswith("Invalid JSON in broken.json")

    def test_structure_and_nested_issues_combined(self, store, write_schema, hero_section_schema):
        hero_section_schema["schema"]["headline"]["type"] = "heading"
        write_schema(hero_section_schema, "bloks")
        report = validate_schema_file("hero_section", store)
        messages = _messages(report.errors)
        assert report.valid is False
        assert messages[0].startswith('Invalid field type "heading"')
        assert messages[-1] == 'Referenced nested component "hero_item" schema not found'


class TestValidationIssue:
    def test_str_with_field(self):
        assert str(ValidationIssue("Duplicate position 1", "subtext")) == "[subtext] Duplicate position 1"

    def test_str_without_field(self):
        assert str(ValidationIssue("Schema missing \"name\" field")) == 'Schema missing "name" field'


def _positions(schema: dict[str, Any]) -> list[int]:
    return sorted(spec["pos"] for spec in schema["schema"].values())


def test_sample_schema_positions_are_contiguous(hero_section_schema):
    assert _positions(hero_section_schema) == list(range(len(hero_section_schema["schema"])))
