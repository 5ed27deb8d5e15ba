"""Prompt search service.

Wires the pieces together for callers:
SearchRequest -> parse_query -> combine_filters -> resolve_ranking ->
gateway.retrieve -> SearchResult.

The gateway (live or mock) is chosen once, at startup, by create_gateway().
Requests are independent; the service holds no per-request state, so
callers handle debouncing and discard stale responses themselves.
"""

from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError
from prompthub_common import (
    Settings,
    StorageError,
    ValidationError,
    get_logger,
    init_telemetry,
    instrument_function,
)
from prompthub_contracts import Prompt, SearchRequest, SearchResult

from prompthub_retrieval.connection import (
    DatabaseConfig,
    check_connection_health,
    close_pool,
    create_pool,
)
from prompthub_retrieval.filters import filter_from_request
from prompthub_retrieval.gateway import RetrievalGateway
from prompthub_retrieval.live_gateway import LiveGateway
from prompthub_retrieval.mock_gateway import MockGateway
from prompthub_retrieval.pagination import load_more, next_request
from prompthub_retrieval.ranking import resolve_ranking

logger = get_logger(__name__)

RequestLike = Union[SearchRequest, Mapping[str, Any]]


def coerce_request(
    request: RequestLike, default_limit: Optional[int] = None
) -> SearchRequest:
    """Validate caller input into a SearchRequest.

    Mappings without a `limit` get `default_limit` when one is given.

    Raises:
        ValidationError: If the input does not describe a valid request
    """
    if isinstance(request, SearchRequest):
        return request
    if not isinstance(request, Mapping):
        raise ValidationError(
            f"expected SearchRequest or mapping, got {type(request).__name__}"
        )
    data = dict(request)
    if default_limit is not None:
        data.setdefault("limit", default_limit)
    try:
        return SearchRequest.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid search request: {e}") from e


class PromptSearchService:
    """Search, paginate and suggest over one retrieval gateway.

    Example:
        >>> service = PromptSearchService(MockGateway())
        >>> result = await service.search({"query_text": "handoff tag:sbar"})
        >>> [p.title for p in result.prompts]
        ['Mental Report Prep Partner']
    """

    def __init__(
        self,
        gateway: RetrievalGateway,
        max_limit: Optional[int] = None,
        default_limit: Optional[int] = None,
        related_limit: int = 3,
    ):
        """Initialize the service.

        Args:
            gateway: Retrieval backend
            max_limit: Largest page size accepted (None = unbounded)
            default_limit: Page size for mapping requests that omit one
            related_limit: Default number of related prompts
        """
        self.gateway = gateway
        self.max_limit = max_limit
        self.default_limit = default_limit
        self.related_limit = related_limit

    @instrument_function("search_service.search")
    async def search(self, request: RequestLike) -> SearchResult:
        """Run one search.

        Args:
            request: SearchRequest or a mapping of its fields

        Returns:
            SearchResult for the requested window

        Raises:
            ValidationError: If the request is malformed
            RetrievalError: If the live backend fails
        """
        request = coerce_request(request, self.default_limit)
        if self.max_limit is not None and request.limit > self.max_limit:
            raise ValidationError(
                f"limit must be <= {self.max_limit}, got {request.limit}"
            )

        query_filter = filter_from_request(request)
        ranking = resolve_ranking(
            request.sort_by, request.sort_direction, query_filter.free_text
        )

        result = await self.gateway.retrieve(
            query_filter, ranking, limit=request.limit, offset=request.offset
        )

        logger.info(
            "search_completed",
            backend=self.gateway.backend,
            sort_by=request.sort_by.value,
            free_text=query_filter.free_text,
            total=result.total,
            returned=len(result.prompts),
            offset=request.offset,
            has_more=result.has_more,
        )
        return result

    async def load_more(self, request: RequestLike, previous: SearchResult) -> SearchResult:
        """Fetch the page after `previous` and append it.

        Returns `previous` unchanged when nothing remains. Callers must not
        issue overlapping load_more calls for the same result.
        """
        follow_up = next_request(coerce_request(request, self.default_limit), previous)
        if follow_up is None:
            return previous
        return load_more(previous, await self.search(follow_up))

    async def suggest(self, partial_text: str) -> list[str]:
        """Best-effort suggestions; never raises on backend errors."""
        return await self.gateway.suggest(partial_text)

    async def related(self, prompt_id: str, limit: Optional[int] = None) -> list[Prompt]:
        if limit is None:
            limit = self.related_limit
        return await self.gateway.related(prompt_id, limit)

    async def get_prompt(self, prompt_id: str) -> Optional[Prompt]:
        return await self.gateway.get_prompt(prompt_id)

    async def close(self) -> None:
        await self.gateway.close()


async def create_gateway(settings: Settings) -> RetrievalGateway:
    """Select the retrieval backend for this process.

    An unconfigured backend, one that stays unreachable through the startup
    connection attempts, or one whose pool fails its first health check is
    replaced by the mock corpus.

    Args:
        settings: Application settings

    Returns:
        LiveGateway or MockGateway
    """
    if not settings.backend_configured:
        logger.info("gateway_selected", backend="mock", reason="database_url not configured")
        return MockGateway(suggestion_limit=settings.suggestion_limit)

    config = DatabaseConfig.from_settings(settings)
    try:
        pool = await create_pool(config)
    except StorageError as e:
        logger.warning(
            "gateway_selected",
            backend="mock",
            reason="database unreachable",
            dsn=config.safe_dsn,
            error=str(e),
        )
        return MockGateway(suggestion_limit=settings.suggestion_limit)

    if not await check_connection_health(pool):
        await close_pool(pool)
        logger.warning(
            "gateway_selected",
            backend="mock",
            reason="health check failed",
            dsn=config.safe_dsn,
        )
        return MockGateway(suggestion_limit=settings.suggestion_limit)

    logger.info("gateway_selected", backend="postgres", dsn=config.safe_dsn)
    return LiveGateway(pool, suggestion_limit=settings.suggestion_limit, owns_pool=True)


async def create_search_service(settings: Settings) -> PromptSearchService:
    """Build a PromptSearchService with the backend chosen from settings.

    Also installs the tracer provider (idempotent). Logging is left to the
    application entry point; see configure_from_settings().
    """
    init_telemetry(settings.otel_service_name, settings.otel_console_export)
    gateway = await create_gateway(settings)
    gateway.suggestion_min_chars = settings.suggestion_min_chars
    return PromptSearchService(
        gateway,
        max_limit=settings.search_max_limit,
        default_limit=settings.search_default_limit,
        related_limit=settings.related_limit,
    )
