"""Core components for batch processing."""

from .config import GraphConfig
from .protocols import GraphOwner, ResultShaper

__all__ = [
    "GraphConfig",
    "GraphOwner",
    "ResultShaper",
]
