"""In-memory retrieval gateway.

Serves a fixed corpus with the same filter, ranking and pagination rules
the live gateway compiles to SQL. Used when no prompt store is configured
and as the reference implementation in parity tests.
"""

from collections.abc import Iterable
from typing import Optional

from prompthub_common import ValidationError, get_logger, instrument_function
from prompthub_contracts import Prompt, SearchResult, SortBy, SortDirection

from prompthub_retrieval.filters import NormalizedFilter
from prompthub_retrieval.gateway import RetrievalGateway, check_filter, check_window
from prompthub_retrieval.mock_data import MOCK_PROMPTS, MOCK_SUGGESTIONS
from prompthub_retrieval.pagination import build_result, slice_page
from prompthub_retrieval.ranking import RankingPolicy, resolve_ranking

logger = get_logger(__name__)


def _contains_any(value: Optional[str], needles: frozenset[str]) -> bool:
    if value is None:
        return False
    value = value.lower()
    return any(needle in value for needle in needles)


def matches(prompt: Prompt, query_filter: NormalizedFilter) -> bool:
    """Apply the retrieval matching rules to one prompt.

    - every free-text term is a substring of title + content
    - category / specialty contain any filter value (substring)
    - at least one tag equals a filter value
    - owner and alternate-versions flag match exactly when set
    All comparisons are case-insensitive.
    """
    terms = query_filter.terms
    if terms:
        haystack = f"{prompt.title} {prompt.content}".lower()
        if not all(term in haystack for term in terms):
            return False

    if query_filter.categories and not _contains_any(prompt.category, query_filter.categories):
        return False

    if query_filter.specialties and not _contains_any(
        prompt.specialty, query_filter.specialties
    ):
        return False

    if query_filter.tags and not any(
        tag.lower() in query_filter.tags for tag in prompt.tags
    ):
        return False

    if query_filter.owner_id is not None and prompt.owner_id != query_filter.owner_id:
        return False

    if (
        query_filter.has_alternate_versions is not None
        and prompt.has_alternate_versions != query_filter.has_alternate_versions
    ):
        return False

    return True


def is_related(candidate: Prompt, origin: Prompt) -> bool:
    """Same category, same specialty, or at least one shared tag."""
    if candidate.id == origin.id:
        return False
    if candidate.category.lower() == origin.category.lower():
        return True
    if (
        candidate.specialty is not None
        and origin.specialty is not None
        and candidate.specialty.lower() == origin.specialty.lower()
    ):
        return True
    origin_tags = {tag.lower() for tag in origin.tags}
    return any(tag.lower() in origin_tags for tag in candidate.tags)


class MockGateway(RetrievalGateway):
    """Retrieval over an in-memory list of prompts.

    Example:
        >>> gateway = MockGateway()
        >>> result = await gateway.retrieve(NormalizedFilter(), resolve_ranking(), 20, 0)
        >>> result.total
        9
    """

    def __init__(
        self,
        prompts: Optional[Iterable[Prompt]] = None,
        suggestions: Optional[Iterable[str]] = None,
        suggestion_limit: Optional[int] = None,
    ):
        """Initialize the mock gateway.

        Args:
            prompts: Corpus to serve (default: built-in demo prompts)
            suggestions: Suggestion vocabulary (default: built-in list)
            suggestion_limit: Cap on suggestions returned

        Raises:
            ValidationError: If two prompts share an id
        """
        self._prompts = list(MOCK_PROMPTS if prompts is None else prompts)
        self._suggestions = list(MOCK_SUGGESTIONS if suggestions is None else suggestions)
        if suggestion_limit is not None:
            self.suggestion_limit = suggestion_limit

        ids = [prompt.id for prompt in self._prompts]
        if len(ids) != len(set(ids)):
            raise ValidationError("mock corpus contains duplicate prompt ids")

    @property
    def backend(self) -> str:
        return "mock"

    @property
    def prompts(self) -> list[Prompt]:
        return list(self._prompts)

    def _filtered(self, query_filter: NormalizedFilter) -> list[Prompt]:
        check_filter(query_filter)
        return [prompt for prompt in self._prompts if matches(prompt, query_filter)]

    @instrument_function("mock_gateway.retrieve")
    async def retrieve(
        self,
        query_filter: NormalizedFilter,
        ranking: RankingPolicy,
        limit: int,
        offset: int,
    ) -> SearchResult:
        check_window(limit, offset)

        ranked = ranking.sort(self._filtered(query_filter))
        result = build_result(
            prompts=slice_page(ranked, limit, offset),
            total=len(ranked),
            limit=limit,
            offset=offset,
        )

        logger.debug(
            "mock_retrieve_completed",
            sort_by=ranking.sort_by.value,
            total=result.total,
            returned=len(result.prompts),
            offset=offset,
        )
        return result

    async def count(self, query_filter: NormalizedFilter) -> int:
        return len(self._filtered(query_filter))

    async def get_prompt(self, prompt_id: str) -> Optional[Prompt]:
        for prompt in self._prompts:
            if prompt.id == prompt_id:
                return prompt
        return None

    @instrument_function("mock_gateway.related")
    async def related(self, prompt_id: str, limit: int = 3) -> list[Prompt]:
        check_window(limit, 0)

        origin = await self.get_prompt(prompt_id)
        if origin is None:
            return []

        ranking = resolve_ranking(SortBy.VOTES, SortDirection.DESC)
        candidates = [prompt for prompt in self._prompts if is_related(prompt, origin)]
        return ranking.sort(candidates)[:limit]

    async def _suggestion_candidates(self, partial_text: str) -> list[str]:
        needle = partial_text.lower()
        return [
            suggestion for suggestion in self._suggestions if needle in suggestion.lower()
        ]
