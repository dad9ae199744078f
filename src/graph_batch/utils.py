"""Encoding helpers shared by the batch queue and the transport."""

import hashlib
import hmac
import json
from collections.abc import Mapping
from typing import Any
from urllib.parse import urlencode


def encode_value(value: Any) -> str:
    """Strings go through unchanged; everything else is sent as JSON."""
    return value if isinstance(value, str) else json.dumps(value)


def encode_params(params: Mapping[str, Any] | None) -> str:
    """URL-encode parameters sorted by key, JSON-encoding non-string values."""
    if not params:
        return ""
    items = sorted(
        (str(key), encode_value(value)) for key, value in params.items() if value is not None
    )
    return urlencode(items)


def appsecret_proof(app_secret: str, access_token: str) -> str:
    """HMAC-SHA256 hex digest of the access token keyed by the app secret."""
    return hmac.new(
        app_secret.encode("utf-8"), access_token.encode("utf-8"), hashlib.sha256
    ).hexdigest()


def parse_json_quirks(text: str | None) -> Any:
    """
    Decode a Graph response body that may be a bare scalar.

    The Graph API sometimes answers with a raw ``true``/``false`` instead of a
    JSON document, so the text is parsed inside a one-element array and
    unwrapped. An empty body decodes to None.

    Raises:
        json.JSONDecodeError: If the text is not valid JSON
    """
    loaded = json.loads(f"[{text or ''}]")
    return loaded[0] if loaded else None


def decode_body(body: str | None) -> Any:
    """Decode a response body the quirks way, falling back to the raw text."""
    try:
        return parse_json_quirks(body)
    except ValueError:
        return body
