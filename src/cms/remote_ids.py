"""Ledger of remote component ids keyed by schema name.

After a direct push creates or updates a component, its remote id is stored
in ``<schemas_root>/.remote-ids.json`` so later updates address the
component by id instead of scanning the remote component list by name.
"""

from __future__ import annotations

from pathlib import Path

from src.utils import load_json, save_json


class RemoteIdStore:
    """A small JSON-backed ``name -> id`` mapping."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        data = load_json(self.path)
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get(self, name: str) -> str | None:
        return self._read().get(name)

    def set(self, name: str, remote_id: str | int) -> None:
        data = self._read()
        data[name] = str(remote_id)
        save_json(dict(sorted(data.items())), self.path)

    def remove(self, name: str) -> bool:
        """Forget *name*; returns ``True`` if an id was recorded."""
        data = self._read()
        if name not in data:
            return False
        del data[name]
        save_json(data, self.path)
        return True

    def all(self) -> dict[str, str]:
        return self._read()
