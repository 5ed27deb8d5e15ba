"""Ranking policy shared by every gateway.

A policy is data: an ordered tuple of SortKeys. The mock gateway turns it
into a comparator; the live gateway compiles the same keys into ORDER BY.
Every policy ends with `id` ascending, so the order is total and offset
pagination never repeats or skips a prompt.

Policies per sort key:
- date:       created_at (requested direction), id asc
- votes:      vote_count (requested direction), created_at desc, id asc
- popularity: same as votes (no separate popularity signal exists yet)
- relevance:  term-overlap score (requested direction), vote_count desc, id asc;
              without free text it falls back to the votes policy
"""

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from functools import cmp_to_key
from typing import Any, Callable, Union

from prompthub_common import ValidationError
from prompthub_contracts import Prompt, SortBy, SortDirection


class SortField(str, Enum):
    """Prompt attributes a policy can compare on."""

    RELEVANCE = "relevance"
    CREATED_AT = "created_at"
    VOTE_COUNT = "vote_count"
    ID = "id"


@dataclass(frozen=True)
class SortKey:
    field: SortField
    descending: bool = False


def relevance_score(prompt: Prompt, terms: Iterable[str]) -> int:
    """Count query terms that occur in the prompt's title or content.

    Args:
        prompt: Prompt to score
        terms: Lower-cased query terms

    Returns:
        Number of terms found as case-insensitive substrings
    """
    haystack = f"{prompt.title} {prompt.content}".lower()
    return sum(1 for term in terms if term in haystack)


@dataclass(frozen=True)
class RankingPolicy:
    """Resolved ordering for one request.

    Attributes:
        sort_by: Sort key the caller asked for
        direction: Direction the caller asked for
        keys: Comparison keys in priority order
        terms: Lower-cased free-text terms (relevance scoring only)
    """

    sort_by: SortBy
    direction: SortDirection
    keys: tuple[SortKey, ...]
    terms: tuple[str, ...] = ()

    @property
    def uses_relevance(self) -> bool:
        return any(key.field is SortField.RELEVANCE for key in self.keys)

    def value_of(self, prompt: Prompt, field: SortField) -> Any:
        if field is SortField.RELEVANCE:
            return relevance_score(prompt, self.terms)
        if field is SortField.CREATED_AT:
            return prompt.created_at
        if field is SortField.VOTE_COUNT:
            return prompt.vote_count
        return prompt.id

    def compare(self, a: Prompt, b: Prompt) -> int:
        """Three-way comparison; 0 only for prompts with the same id."""
        for key in self.keys:
            left = self.value_of(a, key.field)
            right = self.value_of(b, key.field)
            if left == right:
                continue
            result = -1 if left < right else 1
            return -result if key.descending else result
        return 0

    def comparator(self) -> Callable[[Prompt, Prompt], int]:
        return self.compare

    def sort(self, prompts: Sequence[Prompt]) -> list[Prompt]:
        """Return prompts ordered by this policy."""
        return sorted(prompts, key=cmp_to_key(self.compare))


def _primary(field: SortField, direction: SortDirection) -> SortKey:
    return SortKey(field, descending=direction is SortDirection.DESC)


def _date_keys(direction: SortDirection) -> tuple[SortKey, ...]:
    return (
        _primary(SortField.CREATED_AT, direction),
        SortKey(SortField.ID),
    )


def _vote_keys(direction: SortDirection) -> tuple[SortKey, ...]:
    return (
        _primary(SortField.VOTE_COUNT, direction),
        SortKey(SortField.CREATED_AT, descending=True),
        SortKey(SortField.ID),
    )


def _relevance_keys(direction: SortDirection) -> tuple[SortKey, ...]:
    return (
        _primary(SortField.RELEVANCE, direction),
        SortKey(SortField.VOTE_COUNT, descending=True),
        SortKey(SortField.ID),
    )


# TODO: replace the popularity alias once product defines a recency-weighted signal
_POLICY_KEYS: dict[SortBy, Callable[[SortDirection], tuple[SortKey, ...]]] = {
    SortBy.DATE: _date_keys,
    SortBy.VOTES: _vote_keys,
    SortBy.POPULARITY: _vote_keys,
    SortBy.RELEVANCE: _relevance_keys,
}


def resolve_ranking(
    sort_by: Union[SortBy, str] = SortBy.RELEVANCE,
    direction: Union[SortDirection, str] = SortDirection.DESC,
    free_text: str = "",
) -> RankingPolicy:
    """Select the ranking policy for a sort key and direction.

    Args:
        sort_by: relevance | date | votes | popularity
        direction: asc | desc
        free_text: Free text left after operator parsing

    Returns:
        RankingPolicy

    Raises:
        ValidationError: If sort_by or direction is not recognised
    """
    try:
        sort_by = SortBy(sort_by)
        direction = SortDirection(direction)
    except ValueError as e:
        raise ValidationError(str(e)) from e

    terms = tuple(free_text.lower().split())
    if sort_by is SortBy.RELEVANCE and not terms:
        return RankingPolicy(sort_by, direction, _vote_keys(direction))

    return RankingPolicy(sort_by, direction, _POLICY_KEYS[sort_by](direction), terms)
