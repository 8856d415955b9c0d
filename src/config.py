"""Blok schema generator configuration.

Centralised, typed configuration for the whole generation pipeline. All
settings use Pydantic v2 models so they can be validated at construction time
and serialised to/from JSON or environment variables without boiler-plate.

A single ``Config`` instance is built once per process (normally by
``Config.from_env``) and passed explicitly into every client that needs it.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import BaseModel, Field


class ReviewConfig(BaseModel):
    """Commands and timeouts for the advisory code-review stage."""

    typecheck_command: list[str] = Field(default=["npm", "run", "typecheck"])
    lint_command: list[str] = Field(default=["npm", "run", "lint"])
    typecheck_timeout: int = Field(default=300, ge=10, description="Type-check timeout in seconds")
    lint_timeout: int = Field(default=300, ge=10, description="Lint timeout in seconds")


class Config(BaseModel):
    """Global configuration for schema generation, scaffolding and push.

    Holds every tuneable parameter and derived path used by the pipeline.
    """

    schemas_root: Path = Field(default=Path("./schemas/storyblok"))
    app_root: Path = Field(default=Path("./storyblok-app"))

    # Remote CMS access
    n8n_webhook_url: str | None = Field(default=None)
    storyblok_management_token: str | None = Field(default=None)
    storyblok_space_id: str | None = Field(default=None)
    storyblok_access_token: str | None = Field(default=None)
    mapi_base_url: str = Field(default="https://mapi.storyblok.com/v1")
    cdn_base_url: str = Field(default="https://api.storyblok.com/v2/cdn")

    webhook_require_ack: bool = Field(
        default=False,
        description="Treat empty or non-JSON webhook replies as failures",
    )
    push_delay: float = Field(default=0.5, ge=0, description="Seconds between batch pushes")
    http_timeout: float = Field(default=30.0, gt=0)

    review: ReviewConfig = Field(default_factory=ReviewConfig)

    # Hand-authored wrappers that have no schema file but must stay registered.
    extra_registrations: list[str] = Field(default=["default-page"])

    # ------------------------------------------------------------------
    # Derived paths (read-only properties)
    # ------------------------------------------------------------------

    @property
    def bloks_dir(self) -> Path:
        """Directory holding top-level block schemas."""
        return self.schemas_root / "bloks"

    @property
    def nested_dir(self) -> Path:
        """Directory holding nested (reusable item) schemas."""
        return self.schemas_root / "nested"

    @property
    def design_context_dir(self) -> Path:
        """Directory for stored design-reference notes."""
        return self.schemas_root / "figma-context"

    @property
    def remote_ids_path(self) -> Path:
        """Ledger of remote component ids recorded after direct pushes."""
        return self.schemas_root / ".remote-ids.json"

    @property
    def presentational_dir(self) -> Path:
        return self.app_root / "src" / "components" / "presentational"

    @property
    def wrapper_dir(self) -> Path:
        return self.app_root / "src" / "storyblok" / "components"

    @property
    def registry_path(self) -> Path:
        """The generated component registration manifest."""
        return self.app_root / "src" / "storyblok" / "generated.components.ts"

    @property
    def test_pages_dir(self) -> Path:
        return self.app_root / "test"

    @property
    def space_api_url(self) -> str:
        """Management API base URL for the configured space."""
        return f"{self.mapi_base_url.rstrip('/')}/spaces/{self.storyblok_space_id}"

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Args:
            path: Destination file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls, env_file: Path | None = None) -> "Config":
        """Build a ``Config`` from an env file and environment variables.

        The env file defaults to ``$BLOKGEN_ENV_FILE`` or
        ``<app_root>/.env.local``. Real environment variables win over values
        read from the file.

        Recognised variables (all optional):
            N8N_WEBHOOK_URL, STORYBLOK_MANAGEMENT_TOKEN, STORYBLOK_SPACE_ID,
            STORYBLOK_ACCESS_TOKEN, BLOKGEN_SCHEMAS_ROOT, BLOKGEN_APP_ROOT,
            BLOKGEN_WEBHOOK_REQUIRE_ACK, BLOKGEN_PUSH_DELAY,
            BLOKGEN_EXTRA_REGISTRATIONS (comma-separated names).
        """
        app_root = Path(os.environ.get("BLOKGEN_APP_ROOT", "./storyblok-app"))
        if env_file is None:
            env_file = Path(os.environ.get("BLOKGEN_ENV_FILE", app_root / ".env.local"))

        values: dict[str, Any] = {}
        if env_file.exists():
            values.update({k: v for k, v in dotenv_values(env_file).items() if v is not None})
        values.update(os.environ)

        kwargs: dict[str, Any] = {
            "app_root": Path(values.get("BLOKGEN_APP_ROOT", app_root)),
            "schemas_root": Path(values.get("BLOKGEN_SCHEMAS_ROOT", "./schemas/storyblok")),
            "n8n_webhook_url": values.get("N8N_WEBHOOK_URL") or None,
            "storyblok_management_token": values.get("STORYBLOK_MANAGEMENT_TOKEN") or None,
            "storyblok_space_id": values.get("STORYBLOK_SPACE_ID") or None,
            "storyblok_access_token": values.get("STORYBLOK_ACCESS_TOKEN") or None,
        }
        if values.get("BLOKGEN_WEBHOOK_REQUIRE_ACK"):
            kwargs["webhook_require_ack"] = values["BLOKGEN_WEBHOOK_REQUIRE_ACK"].lower() in (
                "1",
                "true",
                "yes",
            )
        if values.get("BLOKGEN_PUSH_DELAY"):
            kwargs["push_delay"] = float(values["BLOKGEN_PUSH_DELAY"])
        # Present but empty means "register nothing extra".
        if "BLOKGEN_EXTRA_REGISTRATIONS" in values:
            kwargs["extra_registrations"] = [
                name.strip()
                for name in values["BLOKGEN_EXTRA_REGISTRATIONS"].split(",")
                if name.strip()
            ]

        return cls(**kwargs)
