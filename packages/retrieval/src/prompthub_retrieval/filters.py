"""Filter combination.

Merges the operators parsed out of the query text with the explicit filter
lists of a SearchRequest into one NormalizedFilter, the only filter shape
the gateways understand.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Optional

from prompthub_common import ValidationError
from prompthub_contracts import SearchRequest

from prompthub_retrieval.query_parser import ParsedQuery, parse_query


@dataclass(frozen=True)
class NormalizedFilter:
    """Merged, lower-cased, deduplicated filter set for one request.

    Within a dimension values are OR-ed; dimensions are AND-ed together.
    Empty sets and None mean "no constraint".
    """

    free_text: str = ""
    tags: frozenset[str] = field(default_factory=frozenset)
    categories: frozenset[str] = field(default_factory=frozenset)
    specialties: frozenset[str] = field(default_factory=frozenset)
    owner_id: Optional[str] = None
    has_alternate_versions: Optional[bool] = None

    @property
    def terms(self) -> list[str]:
        """Lower-cased whitespace-split free-text terms."""
        return self.free_text.lower().split()

    @property
    def is_empty(self) -> bool:
        return not (
            self.terms
            or self.tags
            or self.categories
            or self.specialties
            or self.owner_id is not None
            or self.has_alternate_versions is not None
        )


def _normalize_values(name: str, values: Optional[Iterable[str]]) -> frozenset[str]:
    if values is None:
        return frozenset()
    if isinstance(values, (str, bytes)) or not isinstance(values, Iterable):
        raise ValidationError(
            f"{name} must be a collection of strings, got {type(values).__name__}"
        )

    normalized = set()
    for value in values:
        if not isinstance(value, str):
            raise ValidationError(
                f"{name} must contain only strings, got {type(value).__name__}"
            )
        value = value.strip().lower()
        if value:
            normalized.add(value)
    return frozenset(normalized)


def combine_filters(
    parsed: ParsedQuery,
    *,
    tags: Optional[Iterable[str]] = None,
    categories: Optional[Iterable[str]] = None,
    specialties: Optional[Iterable[str]] = None,
    owner_id: Optional[str] = None,
    has_alternate_versions: Optional[bool] = None,
) -> NormalizedFilter:
    """Union explicit filters with parsed operators.

    Args:
        parsed: Operators extracted from the query text
        tags: Explicit tag filter
        categories: Explicit category filter
        specialties: Explicit specialty filter
        owner_id: Exact owner match (passed through)
        has_alternate_versions: Exact flag match (passed through)

    Returns:
        NormalizedFilter

    Raises:
        ValidationError: If a filter is not a collection of strings, or the
            pass-through values have the wrong type
    """
    if owner_id is not None and not isinstance(owner_id, str):
        raise ValidationError(f"owner_id must be a string, got {type(owner_id).__name__}")
    if has_alternate_versions is not None and not isinstance(has_alternate_versions, bool):
        raise ValidationError(
            "has_alternate_versions must be a boolean, "
            f"got {type(has_alternate_versions).__name__}"
        )

    return NormalizedFilter(
        free_text=parsed.free_text,
        tags=_normalize_values("tags", tags) | parsed.tags,
        categories=_normalize_values("categories", categories) | parsed.categories,
        specialties=_normalize_values("specialties", specialties) | parsed.specialties,
        owner_id=owner_id,
        has_alternate_versions=has_alternate_versions,
    )


def filter_from_request(request: SearchRequest) -> NormalizedFilter:
    """Parse the request's query text and merge it with its explicit filters."""
    return combine_filters(
        parse_query(request.query_text),
        tags=request.tags,
        categories=request.categories,
        specialties=request.specialties,
        owner_id=request.owner_id,
        has_alternate_versions=request.has_alternate_versions,
    )
