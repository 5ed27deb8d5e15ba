"""Abstract base class for retrieval gateways.

Provides one retrieval contract with interchangeable backends:
- MockGateway: in-memory corpus (backend not configured, tests, demos)
- LiveGateway: PostgreSQL prompt store

Both apply the same NormalizedFilter and RankingPolicy and therefore agree
on the filtered set, its total, and the window returned for an offset.
"""

from abc import ABC, abstractmethod
from typing import Optional

from prompthub_common import ValidationError, get_logger
from prompthub_contracts import Prompt, SearchResult

from prompthub_retrieval.filters import NormalizedFilter
from prompthub_retrieval.ranking import RankingPolicy

logger = get_logger(__name__)

DEFAULT_SUGGESTION_LIMIT = 5
MIN_SUGGESTION_CHARS = 2


def check_filter(query_filter: NormalizedFilter) -> None:
    if not isinstance(query_filter, NormalizedFilter):
        raise ValidationError(
            f"expected NormalizedFilter, got {type(query_filter).__name__}"
        )


def check_window(limit: int, offset: int) -> None:
    """Reject windows that could never be served."""
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValidationError(f"limit must be a positive integer, got {limit!r}")
    if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
        raise ValidationError(f"offset must be a non-negative integer, got {offset!r}")


class RetrievalGateway(ABC):
    """Abstract base for prompt retrieval backends."""

    suggestion_limit: int = DEFAULT_SUGGESTION_LIMIT
    suggestion_min_chars: int = MIN_SUGGESTION_CHARS

    @property
    @abstractmethod
    def backend(self) -> str:
        """Identifier used in logs ("mock", "postgres")."""
        pass

    @abstractmethod
    async def retrieve(
        self,
        query_filter: NormalizedFilter,
        ranking: RankingPolicy,
        limit: int,
        offset: int,
    ) -> SearchResult:
        """Filter, rank and window the corpus.

        Args:
            query_filter: Normalized filter set
            ranking: Ranking policy to apply before pagination
            limit: Maximum prompts to return
            offset: Number of ranked prompts to skip

        Returns:
            SearchResult with total counted before pagination

        Raises:
            ValidationError: On a malformed window
            RetrievalError: If the backend fails (live gateway only)
        """
        pass

    @abstractmethod
    async def count(self, query_filter: NormalizedFilter) -> int:
        """Number of prompts matching the filter."""
        pass

    @abstractmethod
    async def get_prompt(self, prompt_id: str) -> Optional[Prompt]:
        """Fetch one prompt by id, or None."""
        pass

    @abstractmethod
    async def related(self, prompt_id: str, limit: int = 3) -> list[Prompt]:
        """Prompts sharing the given prompt's category, specialty or a tag.

        Excludes the prompt itself and ranks by votes (descending).
        Returns an empty list when the prompt does not exist.
        """
        pass

    @abstractmethod
    async def _suggestion_candidates(self, partial_text: str) -> list[str]:
        """Backend-specific suggestion lookup; may raise."""
        pass

    async def suggest(self, partial_text: str) -> list[str]:
        """Search suggestions for partially typed input.

        Best effort: inputs shorter than suggestion_min_chars and backend
        failures both produce an empty list.

        Args:
            partial_text: Text typed so far

        Returns:
            At most suggestion_limit distinct suggestions
        """
        partial_text = (partial_text or "").strip()
        if len(partial_text) < self.suggestion_min_chars:
            return []

        try:
            candidates = await self._suggestion_candidates(partial_text)
        except Exception as e:
            logger.warning(
                "suggestions_degraded",
                backend=self.backend,
                partial_text=partial_text,
                error=str(e),
            )
            return []

        return list(dict.fromkeys(candidates))[: self.suggestion_limit]

    async def close(self) -> None:
        """Release backend resources. No-op by default."""
        return None

    async def __aenter__(self) -> "RetrievalGateway":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
