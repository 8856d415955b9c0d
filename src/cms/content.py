"""Read-only client for the Storyblok Content Delivery API.

The rendering site fetches a story by slug and dispatches every content block
to the component registered under its ``component`` name. This client
performs the same fetch so operators can list block types that would render
without a registered component.
"""

from __future__ import annotations

import time
from collections.abc import Iterable, Iterator
from typing import Any

import httpx

from src.config import Config


class ContentFetchError(RuntimeError):
    """Raised when a story cannot be fetched from the content API."""


class ContentClient:
    """Fetches stories from the Content Delivery API."""

    def __init__(
        self, config: Config, transport: httpx.AsyncBaseTransport | None = None
    ) -> None:
        self.config = config
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.config.cdn_base_url,
            timeout=httpx.Timeout(self.config.http_timeout, connect=10.0),
            transport=self.transport,
        )

    async def fetch_story(
        self,
        slug: str,
        draft: bool = False,
        resolve_relations: str | None = None,
    ) -> dict[str, Any]:
        """Return the ``story`` object for *slug*.

        Draft requests carry a ``cv`` timestamp so the CDN never serves a
        cached version.

        Raises:
            ContentFetchError: On missing token, transport failure, non-2xx
                status or a body without a ``story``.
        """
        token = self.config.storyblok_access_token
        if not token:
            raise ContentFetchError("STORYBLOK_ACCESS_TOKEN not set")

        params: dict[str, Any] = {
            "token": token,
            "version": "draft" if draft else "published",
        }
        if draft:
            params["cv"] = int(time.time() * 1000)
        if resolve_relations:
            params["resolve_relations"] = resolve_relations

        slug = slug.strip("/") or "home"
        try:
            async with self._client() as client:
                response = await client.get(f"/stories/{slug}", params=params)
        except httpx.HTTPError as exc:
            raise ContentFetchError(f"Error fetching story '{slug}': {exc}") from exc

        if not response.is_success:
            raise ContentFetchError(
                f"Error fetching story '{slug}': HTTP {response.status_code}: {response.text}"
            )
        try:
            story = response.json().get("story")
        except (ValueError, AttributeError) as exc:
            raise ContentFetchError(f"Invalid response for story '{slug}'") from exc
        if not isinstance(story, dict):
            raise ContentFetchError(f"Response for story '{slug}' has no story")
        return story


def iter_blocks(node: Any) -> Iterator[dict[str, Any]]:
    """Yield every block (a dict with a ``component`` key), depth first."""
    if isinstance(node, dict):
        if isinstance(node.get("component"), str):
            yield node
        for value in node.values():
            yield from iter_blocks(value)
    elif isinstance(node, list):
        for item in node:
            yield from iter_blocks(item)


def find_unregistered(story: dict[str, Any], registered: Iterable[str]) -> list[str]:
    """Sorted block type names used in *story* that have no registration."""
    known = set(registered)
    used = {block["component"] for block in iter_blocks(story.get("content"))}
    return sorted(used - known)
