"""HTTP transport for single Graph API requests."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import httpx

from .base import HTTPResponse
from .core.config import GraphConfig
from .errors import GraphTransportError
from .uploadable import UploadableIO, as_uploadable, is_binary_content
from .utils import encode_value

logger = logging.getLogger(__name__)


@dataclass
class GraphRequest:
    """
    One request to the Graph API, before it is turned into HTTP.

    Attributes:
        path: Graph path, with or without a leading slash
        args: Parameters, including access_token/appsecret_proof when set
        verb: Logical verb (get, post, delete, ...)
        options: Normalized per-request options
    """

    path: str
    args: dict[str, Any] = field(default_factory=dict)
    verb: str = "get"
    options: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        self.verb = self.verb.lower()
        # The Graph API only speaks GET and POST; other verbs are tunnelled
        if self.verb not in ("get", "post"):
            self.args = {**self.args, "method": self.verb}

    @property
    def http_verb(self) -> str:
        return "GET" if self.verb == "get" else "POST"

    def url(self, config: GraphConfig) -> str:
        path = self.path.lstrip("/")
        version = self.options.get("api_version", config.api_version)
        prefix = f"/{version}" if version else ""
        return f"{config.base_url}{prefix}/{path}"

    def files(self) -> dict[str, UploadableIO]:
        return {
            key: as_uploadable(value)
            for key, value in self.args.items()
            if is_binary_content(value)
        }

    def params(self) -> dict[str, str]:
        return {
            key: encode_value(value)
            for key, value in self.args.items()
            if value is not None and not is_binary_content(value)
        }


class Transport(ABC):
    """Executes a single Graph request and returns its raw response."""

    @abstractmethod
    async def make_request(self, request: GraphRequest) -> HTTPResponse:
        """
        Send ``request`` and return status, raw body text and headers.

        Raises:
            GraphTransportError: If no HTTP response was received
        """
        pass

    async def aclose(self) -> None:
        """Release any held resources. Default: no-op."""
        pass


class HttpxTransport(Transport):
    """Transport backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        config: GraphConfig | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize the transport.

        Args:
            config: Graph server settings (default: GraphConfig())
            client: Pre-built client, e.g. one using ``httpx.MockTransport``
        """
        self.config = config or GraphConfig()
        self.config.validate()
        self._client = client
        self._owns_client = client is None

    @property
    def client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.timeout)
        return self._client

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()
        return False

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def make_request(self, request: GraphRequest) -> HTTPResponse:
        url = request.url(self.config)
        params = request.params()
        files = request.files()
        logger.debug(f"{request.http_verb} {url} ({len(params)} params, {len(files)} files)")

        kwargs: dict[str, Any] = {}
        if request.http_verb == "GET":
            kwargs["params"] = params
        else:
            kwargs["data"] = params
            if files:
                kwargs["files"] = {key: upload.to_multipart() for key, upload in files.items()}

        try:
            response = await self.client.request(request.http_verb, url, **kwargs)
        except httpx.RequestError as e:
            logger.error(f"✗ Graph request to {url} failed: {type(e).__name__}: {e}")
            raise GraphTransportError(f"Graph request to {url} failed: {e}") from e

        return HTTPResponse(
            status=response.status_code,
            body=response.text,
            headers=dict(response.headers),
        )
