"""Offset pagination helpers.

Pagination is stateless: every page is recomputable from the original
SearchRequest plus an offset. The paginator does not deduplicate prompts
across pages; callers must not request the same scroll position twice
while a load is in flight.
"""

from typing import Optional

from prompthub_common import ValidationError
from prompthub_contracts import SearchRequest, SearchResult


def page_window(page: int, page_size: int) -> tuple[int, int]:
    """Translate a zero-based page number into (offset, limit).

    Raises:
        ValidationError: If page is negative or page_size is not positive
    """
    if page < 0:
        raise ValidationError(f"page must be >= 0, got {page}")
    if page_size <= 0:
        raise ValidationError(f"page_size must be > 0, got {page_size}")
    return page * page_size, page_size


def slice_page(items: list, limit: int, offset: int) -> list:
    """Return items[offset : offset + limit]."""
    return items[offset : offset + limit]


def build_result(prompts: list, total: int, limit: int, offset: int) -> SearchResult:
    """Wrap one window of prompts; has_more is derived from the window."""
    return SearchResult(prompts=prompts, total=total, offset=offset, limit=limit)


def next_offset(result: SearchResult) -> int:
    """Offset of the first prompt after `result`."""
    return result.offset + len(result.prompts)


def next_request(request: SearchRequest, result: SearchResult) -> Optional[SearchRequest]:
    """Request for the page following `result`, or None when nothing remains."""
    if not result.has_more:
        return None
    return request.model_copy(update={"offset": next_offset(result)})


def load_more(previous: SearchResult, next_page: SearchResult) -> SearchResult:
    """Append `next_page` to `previous`.

    The combined result starts at previous.offset, reports next_page.total,
    and takes has_more from the new page's window.

    Args:
        previous: Pages loaded so far
        next_page: Page fetched at next_offset(previous)

    Returns:
        Combined SearchResult
    """
    return SearchResult(
        prompts=[*previous.prompts, *next_page.prompts],
        total=next_page.total,
        offset=previous.offset,
        limit=previous.limit + next_page.limit,
        has_more=next_page.offset + len(next_page.prompts) < next_page.total,
    )
