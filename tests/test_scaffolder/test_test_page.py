"""Tests for development test pages (src.scaffolder.test_page)."""

from __future__ import annotations

import json

import pytest

from src.schema.mapper import SchemaMapper
from src.schema.models import ComponentSchema
from src.scaffolder.test_page import (
    TEST_UID,
    generate_test_data,
    render_test_page,
    write_test_page,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def hero_section(hero_section_schema) -> ComponentSchema:
    return ComponentSchema.from_dict(hero_section_schema)


class TestGenerateTestData:
    def test_sample_values_per_type(self, hero_section):
        data = generate_test_data(hero_section)
        assert data == {
            "_uid": TEST_UID,
            "component": "hero_section",
            "headline": "Test headline",
            "subtext": "Test subtext",
            "background": "White",
            "items": [],
            "cta_link": {"url": "https://example.com", "linktype": "url"},
        }

    def test_defaults_win_over_samples(self):
        data = generate_test_data(SchemaMapper().map_section("pricing_section"))
        assert data["heading_level"] == "h2"
        assert data["padding_top"] == 96
        assert data["alignment"] == "Left"

    def test_falsy_defaults_are_kept(self):
        schema = ComponentSchema.from_dict(
            {
                "name": "toggle",
                "display_name": "Toggle",
                "schema": {
                    "enabled": {"type": "boolean", "pos": 0, "default_value": False},
                    "count": {"type": "number", "pos": 1, "default_value": 0},
                },
            }
        )
        data = generate_test_data(schema)
        assert data["enabled"] is False
        assert data["count"] == 0

    def test_option_without_default_uses_first_option(self, hero_section_schema):
        del hero_section_schema["schema"]["background"]["default_value"]
        data = generate_test_data(ComponentSchema.from_dict(hero_section_schema))
        assert data["background"] == "White"


class TestRender:
    def test_page_imports_wrapper(self, hero_section):
        page = render_test_page(hero_section, generate_test_data(hero_section))
        assert "// Test page for Hero Section" in page
        assert "import HeroSectionBlok from '@/src/storyblok/components/hero_section'" in page
        assert "<div style={{ padding: '2rem' }}>" in page
        assert "<HeroSectionBlok blok={testData} />" in page

    def test_write_test_page(self, config, hero_section):
        path, data = write_test_page(hero_section, config)
        assert path == config.test_pages_dir / "hero_section.test.tsx"
        text = path.read_text(encoding="utf-8")
        embedded = text.split("const testData = ", 1)[1].split("\n\nexport default", 1)[0]
        assert json.loads(embedded) == data

    def test_write_replaces_previous_page(self, config, hero_section):
        path = config.test_pages_dir / "hero_section.test.tsx"
        path.parent.mkdir(parents=True)
        path.write_text("old", encoding="utf-8")
        write_test_page(hero_section, config)
        assert path.read_text(encoding="utf-8") != "old"
