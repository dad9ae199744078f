"""Batch executor: many Graph calls, one HTTP round trip."""

import asyncio
import json
import logging
from typing import TYPE_CHECKING, Any

from .api import GraphAPIMethods
from .base import HTTPResponse, HttpComponent, PostProcessingFunc, normalize_options
from .core.protocols import ResultShaper
from .demux import ResponseDemultiplexer, is_error
from .errors import MalformedBatchResponse
from .queue import BatchQueue, QueueState
from .strategies import ErrorClassifier
from .utils import parse_json_quirks

if TYPE_CHECKING:
    from .api import GraphAPI

logger = logging.getLogger(__name__)


class GraphBatchAPI(GraphAPIMethods):
    """
    Queues Graph calls and sends them as a single batch request.

    Every GraphAPIMethods call made on a batch is queued and returns None;
    ``execute()`` returns the results in the order the calls were made. A
    failed call's slot holds its RemoteCallError instead of raising.

    A batch is single use: after ``execute()`` (successful or not) further
    calls raise BatchStateError.
    """

    def __init__(
        self,
        api: "GraphAPI",
        error_classifier: ErrorClassifier | None = None,
        result_shaper: ResultShaper | None = None,
    ):
        """
        Initialize the batch.

        Args:
            api: The API the batch belongs to; supplies token, secret and transport
            error_classifier: Classifier for sub-responses (default: the API's)
            result_shaper: Shaper for sub-results (default: the API's)
        """
        self.original_api = api
        self.queue = BatchQueue()
        self.demultiplexer = ResponseDemultiplexer(
            error_classifier=error_classifier or api.error_classifier,
            result_shaper=result_shaper or api.result_shaper,
            owner=api,
        )

    @property
    def access_token(self) -> str | None:
        return self.original_api.access_token

    @property
    def app_secret(self) -> str | None:
        return self.original_api.app_secret

    async def graph_call(
        self,
        path: str,
        args: dict[str, Any] | None = None,
        verb: str = "get",
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> None:
        """Queue a call; see GraphAPI.graph_call for the arguments."""
        self.queue.enqueue(path, args, verb, options, post_processing)
        return None

    async def execute(self, http_options: dict[str, Any] | None = None) -> list[Any]:
        """
        Send every queued call in one request and demultiplex the response.

        Args:
            http_options: Options for the outer request (e.g. api_version)

        Returns:
            One result per queued call, in enqueue order; None for calls the
            server skipped, a RemoteCallError for calls that failed

        Raises:
            MalformedBatchResponse: If the combined response cannot be aligned with the queue
            RemoteCallError: If the batch request as a whole was rejected
            BatchStateError: If this batch was already executed
        """
        self.queue.ensure_open("execute")
        if len(self.queue) == 0:
            self.queue.mark(QueueState.CONSUMED)
            logger.debug("Empty batch, nothing to send")
            return []

        attachments, payload = self.queue.compose(self.access_token, self.app_secret)
        args: dict[str, Any] = {"batch": json.dumps(payload)}
        args.update(attachments)
        options = {
            **normalize_options(http_options),
            "http_component": HttpComponent.FULL_RESPONSE,
        }

        logger.info(
            f"ℹ️  Sending batch of {len(payload)} calls ({len(attachments)} attachment(s))"
        )
        try:
            results = await self.original_api.graph_call(
                "/", args, "post", options, post_processing=self._handle_response
            )
        except (Exception, asyncio.CancelledError):
            self.queue.mark(QueueState.FAILED)
            raise

        self.queue.mark(QueueState.CONSUMED)
        failed = sum(1 for result in results if is_error(result))
        logger.info(f"✓ Batch of {len(results)} calls completed ({failed} failed)")
        return results

    def _handle_response(self, response: HTTPResponse) -> list[Any]:
        try:
            entries = parse_json_quirks(response.body)
        except ValueError as exc:
            logger.warning(f"⚠️  Batch response body is not valid JSON: {str(response.body)[:200]}")
            raise MalformedBatchResponse(
                response.status, response.body, "Batch response body is not valid JSON"
            ) from exc

        return self.demultiplexer.demultiplex(
            self.queue.calls, entries, response.status, response.body
        )


BatchExecutor = GraphBatchAPI
