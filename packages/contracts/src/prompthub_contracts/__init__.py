"""PromptHub Contracts - Shared pydantic models.

Version: 1.0.0
"""

from prompthub_contracts.models import (
    Prompt,
    SearchRequest,
    SearchResult,
    SortBy,
    SortDirection,
)

__version__ = "1.0.0"

__all__ = [
    "Prompt",
    "SearchRequest",
    "SearchResult",
    "SortBy",
    "SortDirection",
]
