"""Error classification for Graph API responses."""

import json
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from ..errors import AuthenticationError, ClientError, RemoteCallError, ServerError

# OAuthException codes that mean the token itself is bad
AUTHENTICATION_ERROR_CODES = (102, 190, 450, 452, 2500)

# Response headers copied into the error info for support requests
DEBUG_HEADERS = ("x-fb-debug", "x-fb-rev", "x-fb-trace-id")


class ErrorClassifier(ABC):
    """Abstract base class for turning an HTTP response into an error (or not)."""

    @abstractmethod
    def classify(
        self, status: int, body: str, headers: Mapping[str, str]
    ) -> RemoteCallError | None:
        """
        Decide whether a response represents a failed call.

        Args:
            status: HTTP status code
            body: Raw response body text (possibly empty)
            headers: Response headers

        Returns:
            The error describing the failure, or None if the call succeeded
        """
        pass


class GraphErrorClassifier(ErrorClassifier):
    """Default classifier for Graph API error payloads."""

    def _error_info(self, body: str) -> dict[str, Any]:
        """Decode the ``error`` object from the body, empty dict if absent or invalid."""
        if not body:
            return {}
        try:
            decoded = json.loads(body)
        except ValueError:
            return {}
        if not isinstance(decoded, dict):
            return {}
        error = decoded.get("error")
        if isinstance(error, dict):
            return dict(error)
        return {}

    def _debug_info(self, headers: Mapping[str, str]) -> dict[str, str]:
        lowered = {str(name).lower(): value for name, value in headers.items()}
        return {name: lowered[name] for name in DEBUG_HEADERS if name in lowered}

    def _is_auth_error(self, error_info: dict[str, Any]) -> bool:
        if error_info.get("type") != "OAuthException":
            return False
        code = error_info.get("code")
        if code is None:
            return True
        try:
            return int(code) in AUTHENTICATION_ERROR_CODES
        except (TypeError, ValueError):
            return False

    def classify(
        self, status: int, body: str, headers: Mapping[str, str]
    ) -> RemoteCallError | None:
        """Classify Graph responses: 4xx/5xx become errors, everything else passes."""
        if status < 400:
            return None

        error_info = self._error_info(body)

        # 5xx with no structured error: plain server failure
        if status >= 500 and not error_info:
            return ServerError(status, body, self._debug_info(headers))

        info = {**error_info, **self._debug_info(headers)}

        if self._is_auth_error(error_info):
            return AuthenticationError(status, body, info)
        if status >= 500:
            return ServerError(status, body, info)
        return ClientError(status, body, info)
