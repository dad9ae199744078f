"""Exceptions raised (or returned as slot values) by graph_batch."""

from typing import Any


class GraphBatchError(Exception):
    """Base class for all graph_batch errors."""

    pass


class GraphTransportError(GraphBatchError):
    """The underlying HTTP request could not be completed."""

    pass


class BatchStateError(GraphBatchError, RuntimeError):
    """
    A batch queue was used after it had been composed or executed.

    Queues are single use: once the combined request has been built, new calls
    must go to a fresh batch.
    """

    pass


class MalformedBatchResponse(GraphBatchError):
    """
    The combined batch response could not be demultiplexed.

    Raised when the decoded body is missing, is not a JSON array, or does not
    hold exactly one entry per queued call.
    """

    def __init__(self, http_status: int, response_body: str, message: str):
        self.http_status = http_status
        self.response_body = response_body
        super().__init__(f"{message} [HTTP {http_status}]")


class RemoteCallError(GraphBatchError):
    """
    Error reported by the Graph API for a single call.

    Inside a batch these are returned as the value of the failing slot rather
    than raised, so sibling calls are unaffected.

    Attributes:
        http_status: HTTP status code of the (sub-)response
        response_body: Raw body text of the (sub-)response
        error_info: Decoded ``error`` object merged with debug headers
    """

    def __init__(
        self,
        http_status: int,
        response_body: str,
        error_info: dict[str, Any] | None = None,
    ):
        self.http_status = http_status
        self.response_body = response_body
        self.error_info = dict(error_info or {})

        self.error_type = self.error_info.get("type")
        self.error_code = self.error_info.get("code")
        self.error_subcode = self.error_info.get("error_subcode")
        self.error_message = self.error_info.get("message")
        self.error_user_msg = self.error_info.get("error_user_msg")
        self.error_user_title = self.error_info.get("error_user_title")
        self.trace_id = self.error_info.get("x-fb-trace-id") or self.error_info.get(
            "fbtrace_id"
        )
        self.debug = self.error_info.get("x-fb-debug")
        self.rev = self.error_info.get("x-fb-rev")

        super().__init__(self._build_message())

    def _build_message(self) -> str:
        if not self.error_info or self.error_message is None:
            return f"HTTP {self.http_status}: {self.response_body[:200]}"

        parts = [f"type: {self.error_type}", f"code: {self.error_code}"]
        if self.error_subcode is not None:
            parts.append(f"error_subcode: {self.error_subcode}")
        parts.append(f"message: {self.error_message}")
        if self.error_user_title:
            parts.append(f"error_user_title: {self.error_user_title}")
        if self.error_user_msg:
            parts.append(f"error_user_msg: {self.error_user_msg}")
        if self.trace_id:
            parts.append(f"x-fb-trace-id: {self.trace_id}")
        return f"{', '.join(parts)} [HTTP {self.http_status}]"


class ClientError(RemoteCallError):
    """4xx response that is not an authentication failure."""

    pass


class ServerError(RemoteCallError):
    """5xx response from the Graph API."""

    pass


class AuthenticationError(ClientError):
    """The access token was rejected (OAuthException with an auth error code)."""

    pass
