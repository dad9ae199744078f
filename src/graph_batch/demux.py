"""Map a combined batch response back onto the queued calls."""

import json
import logging
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, ValidationError, field_validator

from .base import CallDescriptor, HTTPResponse, HttpComponent
from .core.protocols import GraphOwner, ResultShaper
from .errors import MalformedBatchResponse, RemoteCallError
from .strategies import ErrorClassifier
from .utils import decode_body

logger = logging.getLogger(__name__)


class HeaderPair(BaseModel):
    """One ``{"name": ..., "value": ...}`` header of a sub-response."""

    name: str
    value: str


class SubResponse(BaseModel):
    """One non-null entry of the combined batch response."""

    code: int
    body: str = ""
    headers: list[HeaderPair] = []

    @field_validator("body", mode="before")
    @classmethod
    def _text_body(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, str):
            return value
        # some entries carry the body already decoded
        return json.dumps(value)

    @field_validator("headers", mode="before")
    @classmethod
    def _none_headers(cls, value: Any) -> Any:
        return [] if value is None else value

    def headers_map(self) -> dict[str, str]:
        """Header pairs as a dict; later duplicates win."""
        return {pair.name: pair.value for pair in self.headers}


class ResponseDemultiplexer:
    """
    Turns the decoded combined response into one result per queued call.

    Errors of individual calls, including entries that are not a valid
    sub-response, become the raw result of their slot and go through the
    result shaper and post-processing like any other result. Only a response
    that cannot be aligned with the queue as a whole raises.
    """

    def __init__(
        self,
        error_classifier: ErrorClassifier,
        result_shaper: ResultShaper,
        owner: GraphOwner,
    ):
        self.error_classifier = error_classifier
        self.result_shaper = result_shaper
        self.owner = owner

    def demultiplex(
        self,
        calls: Sequence[CallDescriptor],
        entries: Any,
        http_status: int = 200,
        raw_body: str = "",
    ) -> list[Any]:
        """
        Produce the results for ``calls`` from the decoded response ``entries``.

        Raises:
            MalformedBatchResponse: If ``entries`` is not a list of the queue's length
        """
        if entries is None:
            # the Graph API reportedly returns an empty body at times
            raise MalformedBatchResponse(http_status, raw_body, "Graph API returned an empty body")
        if not isinstance(entries, list):
            raise MalformedBatchResponse(
                http_status,
                raw_body,
                f"Batch response must be a JSON array, got {type(entries).__name__}",
            )
        if len(entries) != len(calls):
            raise MalformedBatchResponse(
                http_status,
                raw_body,
                f"Batch response has {len(entries)} entries for {len(calls)} queued calls",
            )

        return [
            self._slot_result(index, call, entry)
            for index, (call, entry) in enumerate(zip(calls, entries))
        ]

    def _slot_result(self, index: int, call: CallDescriptor, entry: Any) -> Any:
        if entry is None:
            # skipped by the server, e.g. a failed dependency
            return None

        try:
            response = SubResponse.model_validate(entry)
        except ValidationError as exc:
            logger.warning(f"⚠️  Batch entry {index} ({call.relative_path}) is malformed")
            raw = self._malformed_entry_error(index, entry, exc)
        else:
            headers = response.headers_map()
            raw = self.error_classifier.classify(response.code, response.body, headers)
            if raw is not None:
                logger.info(f"✗ Batch call {index} ({call.relative_path}) failed: {raw}")
            else:
                raw = self._component(call, response, headers)

        result = self.result_shaper(raw, self.owner)
        if call.post_processing is not None:
            return call.post_processing(result)
        return result

    @staticmethod
    def _malformed_entry_error(index: int, entry: Any, exc: ValidationError) -> RemoteCallError:
        code = entry.get("code") if isinstance(entry, dict) else None
        return RemoteCallError(
            code if isinstance(code, int) else 0,
            json.dumps(entry, default=str),
            {
                "type": "MalformedBatchEntry",
                "message": f"Batch entry {index} is malformed: {exc.error_count()} error(s)",
            },
        )

    def _component(
        self, call: CallDescriptor, response: SubResponse, headers: dict[str, str]
    ) -> Any:
        component = call.http_component
        if component is HttpComponent.STATUS:
            return response.code
        if component is HttpComponent.HEADERS:
            return headers
        if component is HttpComponent.FULL_RESPONSE:
            return HTTPResponse(response.code, decode_body(response.body), headers)
        return decode_body(response.body)


def is_error(result: Any) -> bool:
    """True for batch slots that hold a per-call error."""
    return isinstance(result, RemoteCallError)
