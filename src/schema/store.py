"""File-system persistence for component schemas.

Schemas live under ``<root>/bloks/<name>.json`` (page-level sections) or
``<root>/nested/<name>.json`` (reusable items). Lookups check ``bloks`` first
and ``nested`` second; the first match wins.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from src.utils import dump_json

from .models import ComponentSchema, SchemaCategory

# Search order for every name lookup.
_LOOKUP_ORDER: tuple[SchemaCategory, ...] = (SchemaCategory.BLOKS, SchemaCategory.NESTED)


class SchemaNotFoundError(FileNotFoundError):
    """Raised when a schema exists in neither storage category."""

    def __init__(self, name: str, checked: list[Path]) -> None:
        self.name = name
        self.checked = checked
        lines = [f"Schema file not found: {name}.json"]
        lines.extend(f"   Checked: {p}" for p in checked)
        super().__init__("\n".join(lines))


class SchemaParseError(ValueError):
    """Raised when a schema file exists but is not valid JSON."""

    def __init__(self, name: str, path: Path, detail: str) -> None:
        self.name = name
        self.path = path
        super().__init__(f"Invalid JSON in {name}.json: {detail}")


@dataclass
class LoadedSchema:
    """A parsed schema document together with where it was found."""

    data: dict[str, Any]
    path: Path
    category: SchemaCategory


@dataclass
class WriteResult:
    """Outcome of ``SchemaStore.write``."""

    path: Path
    written: bool

    @property
    def skipped(self) -> bool:
        return not self.written


class SchemaStore:
    """Reads and writes schema JSON documents under a root directory."""

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)

    # -- Paths ---------------------------------------------------------------

    def category_dir(self, category: SchemaCategory | str) -> Path:
        return self.root / SchemaCategory(category).value

    def path_for(self, name: str, category: SchemaCategory | str) -> Path:
        return self.category_dir(category) / f"{name}.json"

    def find(self, name: str) -> tuple[Path, SchemaCategory] | None:
        """Return the path and category of *name*, or ``None`` if absent."""
        for category in _LOOKUP_ORDER:
            path = self.path_for(name, category)
            if path.exists():
                return path, category
        return None

    def exists(self, name: str) -> bool:
        return self.find(name) is not None

    # -- Reading -------------------------------------------------------------

    def load(self, name: str) -> LoadedSchema:
        """Load the raw JSON document for *name*.

        Raises:
            SchemaNotFoundError: If neither category holds the file.
            SchemaParseError: If the file is not valid JSON.
        """
        found = self.find(name)
        if found is None:
            raise SchemaNotFoundError(
                name, [self.path_for(name, category) for category in _LOOKUP_ORDER]
            )

        path, category = found
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise SchemaParseError(name, path, str(exc)) from exc
        return LoadedSchema(data=data, path=path, category=category)

    def load_model(self, name: str) -> ComponentSchema:
        """Load *name* and validate it into a ``ComponentSchema``."""
        return ComponentSchema.from_dict(self.load(name).data)

    def list_names(self, category: SchemaCategory | str | None = None) -> list[str]:
        """Sorted schema names, bloks before nested when no category is given."""
        categories = [SchemaCategory(category)] if category else list(_LOOKUP_ORDER)
        names: list[str] = []
        for cat in categories:
            directory = self.category_dir(cat)
            if directory.is_dir():
                names.extend(sorted(p.stem for p in directory.glob("*.json")))
        return names

    # -- Writing -------------------------------------------------------------

    def write(
        self,
        schema: ComponentSchema | dict[str, Any],
        category: SchemaCategory | str = SchemaCategory.BLOKS,
        skip_if_exists: bool = True,
    ) -> WriteResult:
        """Persist *schema* as pretty-printed JSON.

        With *skip_if_exists* an existing file in the same category is left
        untouched so hand edits survive re-runs.
        """
        data = schema.to_dict() if isinstance(schema, ComponentSchema) else schema
        path = self.path_for(data["name"], category)

        if skip_if_exists and path.exists():
            return WriteResult(path=path, written=False)

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(dump_json(data), encoding="utf-8")
        return WriteResult(path=path, written=True)

    # -- Design context ------------------------------------------------------

    def design_context_path(self, name: str) -> Path:
        return self.root / "figma-context" / f"{name}.txt"

    def save_design_context(self, name: str, text: str) -> Path:
        path = self.design_context_path(name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    def load_design_context(self, name: str) -> str | None:
        path = self.design_context_path(name)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")
