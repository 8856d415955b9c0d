"""Registration manifest for Storyblok wrapper components.

``generated.components.ts`` maps every block type name to the wrapper
component that renders it. The file is regenerated wholesale from the schema
store on every scaffold, so its content depends only on which schemas exist
and which wrappers have been written.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from src.config import Config
from src.schema.store import SchemaStore
from src.utils import to_pascal_case

from .templates import TemplateRenderer

_ENTRY_RE = re.compile(r"^\s*'([^']+)':", re.MULTILINE)


@dataclass(frozen=True)
class RegistryEntry:
    """One ``'<name>': <Identifier>`` line of the manifest."""

    name: str
    identifier: str


class RegistryWriter:
    """Builds and writes ``generated.components.ts``."""

    def __init__(self, config: Config, renderer: TemplateRenderer | None = None) -> None:
        self.config = config
        self.renderer = renderer or TemplateRenderer()

    @property
    def path(self) -> Path:
        return self.config.registry_path

    def wrapper_path(self, name: str) -> Path:
        return self.config.wrapper_dir / f"{name}.tsx"

    def build_entries(self, store: SchemaStore) -> list[RegistryEntry]:
        """Collect every registrable component, sorted by name.

        A name is registrable once its wrapper file exists, whether it comes
        from a stored schema or from ``config.extra_registrations``
        (hand-authored wrappers). The manifest never imports a missing file.
        """
        candidates = set(store.list_names()) | set(self.config.extra_registrations)
        names = {name for name in candidates if self.wrapper_path(name).exists()}

        entries: list[RegistryEntry] = []
        used: set[str] = set()
        for name in sorted(names):
            identifier = to_pascal_case(name)
            # Two names can share a PascalCase form (``stat-item``/``stat_item``).
            suffix = 2
            base = identifier
            while identifier in used:
                identifier = f"{base}{suffix}"
                suffix += 1
            used.add(identifier)
            entries.append(RegistryEntry(name=name, identifier=identifier))
        return entries

    def render(self, entries: list[RegistryEntry]) -> str:
        return self.renderer.render("registry.ts.j2", {"entries": entries})

    def write(self, store: SchemaStore) -> bool:
        """Regenerate the manifest; returns ``True`` if the file changed."""
        content = self.render(self.build_entries(store))
        if self.path.exists() and self.path.read_text(encoding="utf-8") == content:
            return False
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(content, encoding="utf-8")
        return True

    def is_registered(self, name: str) -> bool:
        if not self.path.exists():
            return False
        return f"'{name}':" in self.path.read_text(encoding="utf-8")

    def registered_names(self) -> list[str]:
        """Names currently registered in the manifest on disk."""
        if not self.path.exists():
            return []
        return sorted(set(_ENTRY_RE.findall(self.path.read_text(encoding="utf-8"))))
