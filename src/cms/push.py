"""Async client that pushes component schemas to Storyblok.

Two transports are supported:

- ``n8n``: POST the raw schema JSON to a workflow-automation webhook which
  performs the CMS update on our behalf.
- ``direct``: talk to the Storyblok Management API. A component whose
  remote id is recorded is updated by id; otherwise the remote component
  list is scanned by name and the schema is updated (PUT) or created (POST).

Failures never raise. Every outcome is reported through ``PushResult``.

Typical usage::

    client = PushClient(Config.from_env())
    result = await client.push("benefits_section", method=PushMethod.DIRECT)
    if not result.success:
        print(result.message)
"""

from __future__ import annotations

import asyncio
import sys
from enum import Enum
from typing import Any

import httpx
from pydantic import BaseModel, Field

from src.config import Config
from src.schema.store import SchemaParseError, SchemaStore
from src.schema.validator import validate_schema_file

from .remote_ids import RemoteIdStore


class PushMethod(str, Enum):
    """Transport used to deliver a schema."""
    N8N = "n8n"
    DIRECT = "direct"


class PushResult(BaseModel):
    """Outcome of pushing one schema."""

    name: str = Field(default="", description="Schema name that was pushed")
    success: bool = Field(default=False)
    component_id: str | None = Field(default=None, description="Remote component id, when known")
    message: str = Field(default="")
    errors: list[str] = Field(
        default_factory=list, description="Validation issues when validation failed"
    )


class PushSummary(BaseModel):
    """Outcome of a batch push."""

    results: list[PushResult] = Field(default_factory=list)

    @property
    def succeeded(self) -> list[str]:
        return [r.name for r in self.results if r.success]

    @property
    def failed(self) -> list[str]:
        return [r.name for r in self.results if not r.success]

    @property
    def all_succeeded(self) -> bool:
        return not self.failed


def _numeric_id(value: Any) -> tuple[int, str]:
    """Sort key preferring the lowest numeric id; non-numeric ids sort last."""
    try:
        return int(value), ""
    except (TypeError, ValueError):
        return sys.maxsize, str(value)


def _match_component(listing: Any, name: str) -> dict[str, Any] | None:
    """Pick the remote component named *name* from a list response."""
    components = listing.get("components") if isinstance(listing, dict) else None
    candidates = [
        c for c in components or [] if isinstance(c, dict) and c.get("name") == name
    ]
    if not candidates:
        return None
    return min(candidates, key=lambda c: _numeric_id(c.get("id")))


def _component_id(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict) or not isinstance(body.get("component"), dict):
        return None
    remote_id = body["component"].get("id")
    return str(remote_id) if remote_id is not None else None


class PushClient:
    """Pushes stored schemas to the remote CMS."""

    def __init__(
        self,
        config: Config,
        store: SchemaStore | None = None,
        remote_ids: RemoteIdStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config
        self.store = store or SchemaStore(config.schemas_root)
        self.remote_ids = remote_ids or RemoteIdStore(config.remote_ids_path)
        self.transport = transport

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _client(self, **kwargs: Any) -> httpx.AsyncClient:
        """Return a fresh ``AsyncClient`` with our timeout and transport."""
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.config.http_timeout, connect=10.0),
            transport=self.transport,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def push(
        self,
        name: str,
        validate: bool = True,
        method: PushMethod | str = PushMethod.N8N,
    ) -> PushResult:
        """Push the stored schema *name*.

        Args:
            name: Schema name (file stem under ``bloks/`` or ``nested/``).
            validate: Run the schema validator first and refuse to push an
                invalid schema.
            method: ``n8n`` webhook or ``direct`` Management API.

        Returns:
            A ``PushResult``. No network request is made when the schema is
            missing, unparseable or invalid.
        """
        method = PushMethod(method)

        if not self.store.exists(name):
            return PushResult(name=name, message=f"Schema file not found: {name}.json")

        if validate:
            report = validate_schema_file(name, self.store)
            if not report.valid:
                return PushResult(
                    name=name,
                    message="Validation failed",
                    errors=[str(issue) for issue in report.errors],
                )

        try:
            schema = self.store.load(name).data
        except SchemaParseError as exc:
            return PushResult(name=name, message=str(exc))

        if method == PushMethod.N8N:
            return await self._push_webhook(name, schema)
        return await self._push_direct(name, schema)

    async def push_all(
        self,
        names: list[str] | None = None,
        validate: bool = True,
        method: PushMethod | str = PushMethod.N8N,
        delay: float | None = None,
    ) -> PushSummary:
        """Push several schemas one after another.

        Defaults to every stored schema, bloks before nested. A fixed delay
        separates consecutive requests.
        """
        if names is None:
            names = self.store.list_names()
        if delay is None:
            delay = self.config.push_delay

        summary = PushSummary()
        for index, name in enumerate(names):
            if index and delay > 0:
                await asyncio.sleep(delay)
            summary.results.append(await self.push(name, validate=validate, method=method))
        return summary

    # ------------------------------------------------------------------
    # Webhook transport
    # ------------------------------------------------------------------

    async def _push_webhook(self, name: str, schema: dict[str, Any]) -> PushResult:
        url = self.config.n8n_webhook_url
        if not url:
            return PushResult(
                name=name, message="N8N_WEBHOOK_URL not set in environment variables"
            )

        try:
            async with self._client() as client:
                response = await client.post(url, json=schema)
        except httpx.HTTPError as exc:
            return PushResult(name=name, message=f"Error: {exc}")

        if not response.is_success:
            return PushResult(
                name=name, message=f"HTTP {response.status_code}: {response.text}"
            )

        require_ack = self.config.webhook_require_ack
        if not response.text.strip():
            if require_ack:
                return PushResult(name=name, message="Webhook returned an empty response")
            return PushResult(
                name=name,
                success=True,
                message="Schema pushed successfully (n8n returned empty response)",
            )

        try:
            body = response.json()
        except ValueError:
            body = None
        if not isinstance(body, dict):
            if require_ack:
                return PushResult(
                    name=name,
                    message=f"Webhook returned no acknowledgement (HTTP {response.status_code})",
                )
            return PushResult(
                name=name, success=True, message=f"Schema pushed (HTTP {response.status_code})"
            )

        component_id = body.get("componentId")
        return PushResult(
            name=name,
            success=body.get("success") is not False,
            component_id=str(component_id) if component_id is not None else None,
            message=body.get("message") or "Schema pushed successfully",
        )

    # ------------------------------------------------------------------
    # Management API transport
    # ------------------------------------------------------------------

    async def _push_direct(self, name: str, schema: dict[str, Any]) -> PushResult:
        token = self.config.storyblok_management_token
        if not token or not self.config.storyblok_space_id:
            return PushResult(
                name=name, message="STORYBLOK_MANAGEMENT_TOKEN or STORYBLOK_SPACE_ID not set"
            )

        try:
            async with self._client(
                base_url=self.config.space_api_url,
                headers={"Authorization": token},
            ) as client:
                remote_id = self.remote_ids.get(name)
                if remote_id:
                    response = await client.put(
                        f"/components/{remote_id}", json={"component": schema}
                    )
                    if response.status_code != 404:
                        return self._updated(name, response, remote_id)
                    # Deleted remotely; resolve by name again.
                    self.remote_ids.remove(name)

                listing = await client.get("/components")
                if not listing.is_success:
                    return PushResult(
                        name=name, message=f"Failed to list components: {listing.text}"
                    )

                existing = _match_component(listing.json(), name)
                if existing is not None:
                    response = await client.put(
                        f"/components/{existing['id']}", json={"component": schema}
                    )
                    return self._updated(name, response, str(existing["id"]))

                response = await client.post("/components", json=schema)
                return self._created(name, response)
        except (httpx.HTTPError, ValueError) as exc:
            return PushResult(name=name, message=f"Error: {exc}")

    def _updated(self, name: str, response: httpx.Response, known_id: str) -> PushResult:
        if not response.is_success:
            return PushResult(name=name, message=f"Failed to update component: {response.text}")
        component_id = _component_id(response) or known_id
        self.remote_ids.set(name, component_id)
        return PushResult(
            name=name,
            success=True,
            component_id=component_id,
            message=f"Component '{name}' updated successfully",
        )

    def _created(self, name: str, response: httpx.Response) -> PushResult:
        if not response.is_success:
            return PushResult(name=name, message=f"Failed to create component: {response.text}")
        component_id = _component_id(response)
        if component_id:
            self.remote_ids.set(name, component_id)
        return PushResult(
            name=name,
            success=True,
            component_id=component_id,
            message=f"Component '{name}' created successfully",
        )
