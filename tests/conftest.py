"""Shared pytest fixtures for the blok schema generator test suite.

Provides reusable fixtures for:
- A ``Config`` rooted in a temporary directory
- Schema stores with sample bloks and nested schemas
- Sample schema documents (valid and deliberately broken)
- Mock subprocess helpers
"""

from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Callable
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config import Config
from src.schema.store import SchemaStore


# ---------------------------------------------------------------------------
# Paths & Configuration
# ---------------------------------------------------------------------------

@pytest.fixture
def config(tmp_path: Path) -> Config:
    """Configuration whose schema store and app live under ``tmp_path``."""
    return Config(
        schemas_root=tmp_path / "schemas" / "storyblok",
        app_root=tmp_path / "storyblok-app",
        n8n_webhook_url="https://hooks.example.test/webhook/storyblok",
        storyblok_management_token="mgmt-token",
        storyblok_space_id="12345",
        storyblok_access_token="preview-token",
        push_delay=0,
    )


@pytest.fixture
def store(config: Config) -> SchemaStore:
    """Empty schema store rooted at ``config.schemas_root``."""
    return SchemaStore(config.schemas_root)


# ---------------------------------------------------------------------------
# Sample Schemas
# ---------------------------------------------------------------------------

_HERO_ITEM: dict[str, Any] = {
    "name": "hero_item",
    "display_name": "Hero Item",
    "is_nestable": True,
    "is_root": False,
    "schema": {
        "title": {"type": "text", "required": True, "pos": 0, "description": "Item title"},
        "icon": {"type": "asset", "required": False, "pos": 1, "filetypes": ["images"]},
    },
}

_HERO_SECTION: dict[str, Any] = {
    "name": "hero_section",
    "display_name": "Hero Section",
    "is_nestable": True,
    "is_root": False,
    "schema": {
        "headline": {"type": "text", "required": True, "pos": 0},
        "subtext": {"type": "textarea", "required": False, "pos": 1},
        "background": {
            "type": "option",
            "required": False,
            "pos": 2,
            "default_value": "White",
            "options": [
                {"value": "White", "name": "White"},
                {"value": "Dark", "name": "Dark"},
            ],
        },
        "items": {
            "type": "bloks",
            "required": False,
            "pos": 3,
            "restrict_components": True,
            "component_whitelist": ["hero_item"],
        },
        "cta_link": {"type": "multilink", "required": False, "pos": 4},
    },
}


@pytest.fixture
def hero_item_schema() -> dict[str, Any]:
    """A valid nested schema."""
    return copy.deepcopy(_HERO_ITEM)


@pytest.fixture
def hero_section_schema() -> dict[str, Any]:
    """A valid bloks schema whitelisting ``hero_item``."""
    return copy.deepcopy(_HERO_SECTION)


@pytest.fixture
def write_schema(config: Config) -> Callable[[dict[str, Any], str], Path]:
    """Factory writing a raw schema document into the store.

    Usage:
        def test_x(write_schema, hero_item_schema):
            write_schema(hero_item_schema, "nested")
    """
    def factory(data: dict[str, Any], category: str = "bloks", name: str | None = None) -> Path:
        path = config.schemas_root / category / f"{name or data['name']}.json"
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        return path

    return factory


@pytest.fixture
def populated_store(
    store: SchemaStore,
    write_schema: Callable[..., Path],
    hero_item_schema: dict[str, Any],
    hero_section_schema: dict[str, Any],
) -> SchemaStore:
    """Store holding ``hero_section`` (bloks) and ``hero_item`` (nested)."""
    write_schema(hero_item_schema, "nested")
    write_schema(hero_section_schema, "bloks")
    return store


# ---------------------------------------------------------------------------
# Mock Subprocess
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
