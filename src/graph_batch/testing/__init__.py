"""Testing utilities for graph_batch."""

from .mocks import MockTransport, batch_response, sub_response

__all__ = ["MockTransport", "batch_response", "sub_response"]
