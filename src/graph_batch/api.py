"""Graph API client and the convenience methods shared with batches."""

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

from .base import HTTPResponse, HttpComponent, PostProcessingFunc, normalize_options
from .collection import GraphCollection
from .core.config import GraphConfig
from .core.protocols import ResultShaper
from .errors import AuthenticationError
from .http import GraphRequest, HttpxTransport, Transport
from .strategies import ErrorClassifier, GraphErrorClassifier
from .uploadable import UploadableIO
from .utils import appsecret_proof, decode_body

if TYPE_CHECKING:
    from .batch import GraphBatchAPI

logger = logging.getLogger(__name__)


def _chain(
    first: PostProcessingFunc, second: PostProcessingFunc | None
) -> PostProcessingFunc:
    if second is None:
        return first
    return lambda result: second(first(result))


class GraphAPIMethods(ABC):
    """
    Convenience wrappers around ``graph_call``.

    Mixed into both GraphAPI and GraphBatchAPI: on the API they return results,
    inside a batch they queue the call and return None.
    """

    access_token: str | None

    @abstractmethod
    async def graph_call(
        self,
        path: str,
        args: dict[str, Any] | None = None,
        verb: str = "get",
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        """Make the call, or queue it when used on a batch."""
        pass

    def _require_token(self, options: dict[str, Any] | None) -> None:
        if not (self.access_token or normalize_options(options).get("access_token")):
            raise AuthenticationError(
                401,
                "",
                {"type": "OAuthException", "message": "Write operations require an access token"},
            )

    # Reads

    async def get_object(
        self,
        id: str,
        args: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        """Fetch a single Graph object, e.g. ``await api.get_object("me")``."""
        return await self.graph_call(id, args, "get", options, post_processing)

    async def get_objects(
        self,
        ids: list[str] | str,
        args: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        """Fetch several objects in one call; result is keyed by id."""
        if not isinstance(ids, str):
            ids = ",".join(ids)
        if not ids:
            return {}
        return await self.graph_call(
            "", {**(args or {}), "ids": ids}, "get", options, post_processing
        )

    async def get_connections(
        self,
        id: str,
        connection_name: str,
        args: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        """Fetch a connection (e.g. "friends"); pageable results come back as GraphCollection."""
        return await self.graph_call(
            f"{id}/{connection_name}", args, "get", options, post_processing
        )

    get_connection = get_connections

    async def get_page(
        self,
        params: tuple[str, dict[str, Any]],
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        """Fetch a page described by ``GraphCollection.next_page_params()``."""
        path, args = params
        return await self.graph_call(path, args, "get", options, post_processing)

    async def get_picture_data(
        self,
        object_id: str,
        args: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        """Picture metadata (url, width, height, is_silhouette) instead of a redirect."""

        def extract(result: Any) -> Any:
            return result.get("data") if isinstance(result, dict) else result

        return await self.get_connections(
            object_id,
            "picture",
            {**(args or {}), "redirect": False},
            options,
            _chain(extract, post_processing),
        )

    # Writes

    async def put_connections(
        self,
        id: str,
        connection_name: str,
        args: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        """Create an object on a connection, e.g. a post on "feed"."""
        self._require_token(options)
        return await self.graph_call(
            f"{id}/{connection_name}", args, "post", options, post_processing
        )

    async def put_picture(
        self,
        picture: Any,
        content_type: str | None = None,
        args: dict[str, Any] | None = None,
        target_id: str = "me",
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        """
        Upload a photo from bytes, a file, a path, or a public URL.

        Args:
            picture: Bytes, binary file object, path, UploadableIO, or "http(s)://" URL
            content_type: MIME type; guessed from the file name if omitted
            args: Extra parameters (message, published, ...)
            target_id: Object receiving the photo (user, page or album)
        """
        args = dict(args or {})
        if isinstance(picture, str) and picture.startswith(("http://", "https://")):
            args["url"] = picture
        elif isinstance(picture, UploadableIO):
            args["source"] = picture
        else:
            args["source"] = UploadableIO(picture, content_type)
        return await self.put_connections(target_id, "photos", args, options, post_processing)

    async def put_comment(
        self,
        id: str,
        message: str,
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        return await self.put_connections(
            id, "comments", {"message": message}, options, post_processing
        )

    async def put_like(
        self,
        id: str,
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        return await self.put_connections(id, "likes", {}, options, post_processing)

    async def delete_like(
        self,
        id: str,
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        self._require_token(options)
        return await self.graph_call(f"{id}/likes", {}, "delete", options, post_processing)

    async def delete_object(
        self,
        id: str,
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        self._require_token(options)
        return await self.graph_call(id, {}, "delete", options, post_processing)

    async def delete_connections(
        self,
        id: str,
        connection_name: str,
        args: dict[str, Any] | None = None,
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        self._require_token(options)
        return await self.graph_call(
            f"{id}/{connection_name}", args, "delete", options, post_processing
        )


class GraphAPI(GraphAPIMethods):
    """
    Client for single Graph API calls and the owner of batches.

    Example:
        >>> api = GraphAPI(access_token="token")
        >>> me = await api.get_object("me")
        >>> batch = api.batch()
        >>> await batch.get_object("me")
        >>> await batch.get_connections("me", "friends")
        >>> me, friends = await batch.execute()
    """

    def __init__(
        self,
        access_token: str | None = None,
        app_secret: str | None = None,
        transport: Transport | None = None,
        config: GraphConfig | None = None,
        error_classifier: ErrorClassifier | None = None,
        result_shaper: ResultShaper | None = None,
    ):
        """
        Initialize the API client.

        Args:
            access_token: Default token for every call
            app_secret: App secret; when set, calls carry an appsecret_proof
            transport: Executes HTTP requests (default: HttpxTransport)
            config: Graph server settings, used when building the default transport
            error_classifier: Strategy turning responses into errors (default: GraphErrorClassifier)
            result_shaper: Wraps pageable results (default: GraphCollection.evaluate)
        """
        self.access_token = access_token
        self.app_secret = app_secret
        self.config = config or GraphConfig()
        self.config.validate()
        self.transport = transport or HttpxTransport(self.config)
        self.error_classifier = error_classifier or GraphErrorClassifier()
        self.result_shaper = result_shaper or GraphCollection.evaluate

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.transport.aclose()
        return False

    def batch(self) -> "GraphBatchAPI":
        """Start a new batch; calls made on it are sent together by ``execute()``."""
        from .batch import GraphBatchAPI

        return GraphBatchAPI(self)

    async def api(
        self,
        path: str,
        args: dict[str, Any] | None = None,
        verb: str = "get",
        options: dict[str, Any] | None = None,
    ) -> HTTPResponse:
        """Send one authenticated request and return the raw response."""
        options = normalize_options(options)
        args = dict(args or {})

        token = options.get("access_token") or self.access_token
        if token:
            args.setdefault("access_token", token)
            if self.app_secret:
                args.setdefault("appsecret_proof", appsecret_proof(self.app_secret, token))

        request = GraphRequest(path=path, args=args, verb=verb, options=options)
        return await self.transport.make_request(request)

    async def graph_call(
        self,
        path: str,
        args: dict[str, Any] | None = None,
        verb: str = "get",
        options: dict[str, Any] | None = None,
        post_processing: PostProcessingFunc | None = None,
    ) -> Any:
        """
        Make a Graph API call.

        Args:
            path: Graph path, e.g. "me/friends"
            args: Call parameters
            verb: HTTP verb
            options: access_token override, http_component, api_version
            post_processing: Optional transform applied to the result

        Returns:
            The requested HTTP component, pageable bodies wrapped as GraphCollection

        Raises:
            RemoteCallError: If the Graph API reported an error
        """
        options = normalize_options(options)
        response = await self.api(path, args, verb, options)

        error = self.error_classifier.classify(response.status, response.body, response.headers)
        if error is not None:
            logger.warning(f"⚠️  Graph call {verb.upper()} {path} failed: {error}")
            raise error

        result = self.result_shaper(self._component(response, options), self)
        if post_processing is not None:
            return post_processing(result)
        return result

    def _component(self, response: HTTPResponse, options: dict[str, Any]) -> Any:
        component = HttpComponent.coerce(options.get("http_component"))
        if component is HttpComponent.STATUS:
            return response.status
        if component is HttpComponent.HEADERS:
            return response.headers
        if component is HttpComponent.FULL_RESPONSE:
            return response
        return decode_body(response.body)
