"""Type protocols for the collaborators of the batching engine."""

from typing import Any, Protocol

from ..base import PostProcessingFunc


class GraphOwner(Protocol):
    """The API object a batch is created from; used for follow-up requests."""

    access_token: str | None
    app_secret: str | None

    async def graph_call(
        self,
        path: str,
        args: dict[str, Any] | None = None,
        verb: str = "get",
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        """Make a single Graph API call."""
        ...


class ResultShaper(Protocol):
    """Recognizes pageable results and wraps them; identity otherwise."""

    def __call__(self, raw_result: Any, owner: GraphOwner) -> Any:
        """Shape a raw result for the caller."""
        ...
