"""Pluggable strategies."""

from .errors import (
    AUTHENTICATION_ERROR_CODES,
    DEBUG_HEADERS,
    ErrorClassifier,
    GraphErrorClassifier,
)

__all__ = [
    "AUTHENTICATION_ERROR_CODES",
    "DEBUG_HEADERS",
    "ErrorClassifier",
    "GraphErrorClassifier",
]
