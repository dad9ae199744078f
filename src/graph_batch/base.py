"""Core data types shared by the batch queue, demultiplexer and API."""

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .uploadable import UploadableIO

# Type alias for per-call post-processing callbacks
PostProcessingFunc = Callable[[Any], Any]

# Canonical option keys and the spellings accepted for them
OPTION_ALIASES = {
    "accessToken": "access_token",
    "apiVersion": "api_version",
    "httpComponent": "http_component",
    "batchArgs": "batch_args",
}


class HttpComponent(Enum):
    """Which part of a (sub-)response the caller wants back."""

    BODY = "body"
    STATUS = "status"
    HEADERS = "headers"
    FULL_RESPONSE = "response"

    @classmethod
    def coerce(cls, value: "HttpComponent | str | None") -> "HttpComponent":
        """Accept enum members and the string spellings callers use."""
        if value is None:
            return cls.BODY
        if isinstance(value, cls):
            return value
        normalized = str(value).replace("_", "").lower()
        if normalized in ("response", "fullresponse"):
            return cls.FULL_RESPONSE
        try:
            return cls(normalized)
        except ValueError:
            raise ValueError(
                f"Unknown http_component {value!r}. "
                f"Use one of: body, status, headers, response."
            ) from None


def normalize_options(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a copy of ``options`` with canonical snake_case keys."""
    normalized: dict[str, Any] = {}
    for key, value in (options or {}).items():
        key = str(key)
        normalized[OPTION_ALIASES.get(key, key)] = value
    if "http_component" in normalized:
        normalized["http_component"] = HttpComponent.coerce(normalized["http_component"])
    return normalized


@dataclass(frozen=True)
class HTTPResponse:
    """
    Status, body and headers of one HTTP exchange.

    Returned by transports (body is the raw text) and produced for batch slots
    that request ``HttpComponent.FULL_RESPONSE`` (body is decoded JSON).
    """

    status: int
    body: Any
    headers: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class CallDescriptor:
    """
    One call waiting in a batch queue.

    Attributes:
        relative_path: Graph endpoint without scheme or host (e.g. "me/friends")
        parameters: Call parameters, with binary attachments already moved to ``files``
        method: Lower-case HTTP verb
        auth_token: Per-call token override, None to use the owner's token
        request_options: Normalized options; ``http_component`` is always set
        post_processing: Optional transform applied to the shaped result
        batch_args: Extra fields for this operation's batch entry (name, depends_on, ...)
        files: Attachments keyed by their batch-wide attachment name
    """

    relative_path: str
    parameters: dict[str, Any] = field(default_factory=dict)
    method: str = "get"
    auth_token: str | None = None
    request_options: dict[str, Any] = field(default_factory=dict)
    post_processing: PostProcessingFunc | None = None
    batch_args: dict[str, Any] = field(default_factory=dict)
    files: dict[str, UploadableIO] = field(default_factory=dict)

    @property
    def http_component(self) -> HttpComponent:
        return HttpComponent.coerce(self.request_options.get("http_component"))

    @property
    def args_in_url(self) -> bool:
        """GET and DELETE carry their parameters in the relative URL."""
        return self.method in ("get", "delete")
