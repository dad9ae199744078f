"""Batched Graph API calls: many requests, one round trip.

This module queues independent Graph API calls, sends them as a single batch
request, and hands back one result per call in the order the calls were made.

Key features:
- Per-call error isolation: a failing call yields its error as data
- Binary attachments merged into the single multipart request
- Choice of HTTP component per call (body, status, headers, full response)
- Pageable results wrapped as GraphCollection, then per-call post-processing
- Pluggable error classification, result shaping and transport

Example:
    >>> from graph_batch import GraphAPI
    >>>
    >>> async with GraphAPI(access_token="token") as api:
    ...     batch = api.batch()
    ...     await batch.get_object("me")
    ...     await batch.get_connections("me", "friends")
    ...     me, friends = await batch.execute()
"""

from .api import GraphAPI, GraphAPIMethods
from .base import CallDescriptor, HTTPResponse, HttpComponent, PostProcessingFunc
from .batch import BatchExecutor, GraphBatchAPI
from .collection import GraphCollection
from .core import GraphConfig, GraphOwner, ResultShaper
from .demux import ResponseDemultiplexer, is_error
from .errors import (
    AuthenticationError,
    BatchStateError,
    ClientError,
    GraphBatchError,
    GraphTransportError,
    MalformedBatchResponse,
    RemoteCallError,
    ServerError,
)
from .http import GraphRequest, HttpxTransport, Transport
from .queue import BatchQueue, QueueState
from .strategies import ErrorClassifier, GraphErrorClassifier
from .uploadable import UploadableIO

__all__ = [
    # API
    "GraphAPI",
    "GraphAPIMethods",
    "GraphBatchAPI",
    "BatchExecutor",
    # Core types
    "CallDescriptor",
    "HTTPResponse",
    "HttpComponent",
    "PostProcessingFunc",
    "UploadableIO",
    # Batching engine
    "BatchQueue",
    "QueueState",
    "ResponseDemultiplexer",
    "is_error",
    # Collaborators
    "ErrorClassifier",
    "GraphErrorClassifier",
    "GraphCollection",
    "ResultShaper",
    "GraphOwner",
    # Transport and configuration
    "GraphConfig",
    "GraphRequest",
    "Transport",
    "HttpxTransport",
    # Errors
    "GraphBatchError",
    "GraphTransportError",
    "BatchStateError",
    "MalformedBatchResponse",
    "RemoteCallError",
    "ClientError",
    "ServerError",
    "AuthenticationError",
]

__version__ = "0.1.0"
