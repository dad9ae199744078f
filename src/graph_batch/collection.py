"""Pageable Graph results."""

import re
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qs, urlparse

if TYPE_CHECKING:
    from .core.protocols import GraphOwner

# Leading "/v19.0/" style version segment of a paging URL
VERSION_PREFIX = re.compile(r"^/?v\d+(\.\d+)?/")


class GraphCollection(list):
    """
    A page of Graph results with the paging information needed to fetch more.

    Behaves like the ``data`` list of the response; the rest of the response is
    kept on the instance.
    """

    def __init__(self, response: Mapping[str, Any], api: "GraphOwner"):
        super().__init__(response["data"])
        self.paging: dict[str, Any] = dict(response.get("paging") or {})
        self.summary: dict[str, Any] | None = response.get("summary")
        self.raw_response = response
        self.api = api

    @classmethod
    def evaluate(cls, response: Any, api: "GraphOwner") -> Any:
        """Wrap ``{"data": [...], ...}`` responses; return anything else unchanged."""
        if isinstance(response, Mapping) and isinstance(response.get("data"), list):
            return cls(response, api)
        return response

    @staticmethod
    def parse_page_url(url: str) -> tuple[str, dict[str, str]]:
        """Split a paging URL into a Graph path and its query parameters."""
        parsed = urlparse(url)
        path = VERSION_PREFIX.sub("", parsed.path).lstrip("/")
        params = {key: values[-1] for key, values in parse_qs(parsed.query).items()}
        return path, params

    def next_page_params(self) -> tuple[str, dict[str, str]] | None:
        url = self.paging.get("next")
        return self.parse_page_url(url) if url else None

    def previous_page_params(self) -> tuple[str, dict[str, str]] | None:
        url = self.paging.get("previous")
        return self.parse_page_url(url) if url else None

    async def next_page(self, extra_params: dict[str, Any] | None = None) -> Any:
        """Fetch the following page, or None when this is the last one."""
        return await self._fetch(self.next_page_params(), extra_params)

    async def previous_page(self, extra_params: dict[str, Any] | None = None) -> Any:
        """Fetch the preceding page, or None when this is the first one."""
        return await self._fetch(self.previous_page_params(), extra_params)

    async def _fetch(
        self,
        page: tuple[str, dict[str, str]] | None,
        extra_params: dict[str, Any] | None,
    ) -> Any:
        if page is None:
            return None
        path, params = page
        return await self.api.graph_call(path, {**params, **(extra_params or {})})

    def __repr__(self) -> str:
        return f"GraphCollection({list.__repr__(self)}, paging={self.paging!r})"
