"""Queue of calls waiting to be sent as one batch request."""

import logging
from enum import Enum
from typing import Any

from .base import CallDescriptor, HttpComponent, PostProcessingFunc, normalize_options
from .errors import BatchStateError
from .uploadable import UploadableIO, as_uploadable, is_binary_content
from .utils import appsecret_proof, encode_params

logger = logging.getLogger(__name__)


class QueueState(Enum):
    """Lifecycle of a batch queue."""

    EMPTY = "empty"
    ACCUMULATING = "accumulating"
    COMPOSED = "composed"
    CONSUMED = "consumed"
    FAILED = "failed"


class BatchQueue:
    """
    Ordered calls plus the logic that turns them into one batch request.

    The position of a call in the queue is the only link between it and its
    entry in the combined response, so entries are never reordered.
    """

    def __init__(self):
        self._calls: list[CallDescriptor] = []
        self.state = QueueState.EMPTY

    def __len__(self) -> int:
        return len(self._calls)

    def __getitem__(self, index: int) -> CallDescriptor:
        return self._calls[index]

    def __iter__(self):
        return iter(self._calls)

    @property
    def calls(self) -> tuple[CallDescriptor, ...]:
        return tuple(self._calls)

    def ensure_open(self, action: str) -> None:
        if self.state not in (QueueState.EMPTY, QueueState.ACCUMULATING):
            raise BatchStateError(
                f"Cannot {action} a batch queue in state '{self.state.value}'. "
                f"Start a new batch for further calls."
            )

    def mark(self, state: QueueState) -> None:
        self.state = state

    def enqueue(
        self,
        path: str,
        parameters: dict[str, Any] | None = None,
        method: str = "get",
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> None:
        """
        Queue a call for the next batch request.

        Batched calls never produce an immediate result; their results come
        back, in order, from executing the batch.

        Args:
            path: Graph path relative to the API root
            parameters: Call parameters; binary values become attachments
            method: HTTP verb (case-insensitive)
            options: Per-call options (access_token, http_component, batch_args)
            post_processing: Optional callback applied to this call's result
        """
        self.ensure_open("enqueue into")

        options = normalize_options(options)
        options.setdefault("http_component", HttpComponent.BODY)
        batch_args = dict(options.get("batch_args") or {})

        index = len(self._calls)
        params = dict(parameters or {})
        files: dict[str, UploadableIO] = {}
        for key in list(params):
            if is_binary_content(params[key]):
                # attached_files is a comma-separated list, so no commas in names
                file_key = f"op{index}_file{len(files)}_{key}".replace(",", "_")
                files[file_key] = as_uploadable(params.pop(key))

        self._calls.append(
            CallDescriptor(
                relative_path=path,
                parameters=params,
                method=str(method).lower(),
                auth_token=options.get("access_token"),
                request_options=options,
                post_processing=post_processing,
                batch_args=batch_args,
                files=files,
            )
        )
        self.state = QueueState.ACCUMULATING

    def attachments(self) -> dict[str, UploadableIO]:
        """All attachments across the queue, merged in enqueue order."""
        merged: dict[str, UploadableIO] = {}
        for call in self._calls:
            merged.update(call.files)
        return merged

    def _batch_entry(
        self, call: CallDescriptor, owner_token: str | None, app_secret: str | None
    ) -> dict[str, Any]:
        args = dict(call.parameters)
        token = call.auth_token or owner_token
        if token and token != owner_token:
            args["access_token"] = token
            if app_secret:
                args["appsecret_proof"] = appsecret_proof(app_secret, token)

        entry: dict[str, Any] = {
            "method": call.method.upper(),
            "relative_url": call.relative_path,
        }
        entry.update(call.batch_args)
        if call.files:
            entry["attached_files"] = ",".join(call.files)

        args_string = encode_params(args)
        if args_string:
            if call.args_in_url:
                separator = "&" if "?" in call.relative_path else "?"
                entry["relative_url"] = f"{call.relative_path}{separator}{args_string}"
            else:
                entry["body"] = args_string
        return entry

    def compose(
        self, owner_token: str | None, app_secret: str | None = None
    ) -> tuple[dict[str, UploadableIO], list[dict[str, Any]]]:
        """
        Build the single outbound request for everything queued.

        Args:
            owner_token: Token of the API the batch belongs to
            app_secret: App secret used to sign per-call token overrides

        Returns:
            (attachments, batch_payload), the payload in enqueue order
        """
        self.ensure_open("compose")

        payload = [self._batch_entry(call, owner_token, app_secret) for call in self._calls]
        attachments = self.attachments()
        self.state = QueueState.COMPOSED

        logger.debug(
            f"Composed batch of {len(payload)} calls with {len(attachments)} attachment(s)"
        )
        return attachments, payload
