"""PromptHub Retrieval - prompt search, ranking and pagination.

Version: 1.0.0

This package provides:
- Query parsing (tag:/category:/specialty: operators)
- Filter combination (explicit filters + parsed operators)
- Ranking policies (relevance, date, votes, popularity)
- Offset pagination helpers
- RetrievalGateway with MockGateway (in-memory) and LiveGateway (PostgreSQL)
- PromptSearchService facade and backend selection from settings
"""

from prompthub_retrieval.connection import (
    DatabaseConfig,
    check_connection_health,
    close_pool,
    create_pool,
)
from prompthub_retrieval.filters import NormalizedFilter, combine_filters, filter_from_request
from prompthub_retrieval.gateway import RetrievalGateway
from prompthub_retrieval.live_gateway import LiveGateway
from prompthub_retrieval.mock_data import MOCK_PROMPTS, MOCK_SUGGESTIONS
from prompthub_retrieval.mock_gateway import MockGateway, matches
from prompthub_retrieval.pagination import load_more, next_offset, next_request, page_window
from prompthub_retrieval.query_parser import OPERATOR_PATTERN, ParsedQuery, parse_query
from prompthub_retrieval.ranking import (
    RankingPolicy,
    SortField,
    SortKey,
    relevance_score,
    resolve_ranking,
)
from prompthub_retrieval.search import (
    PromptSearchService,
    coerce_request,
    create_gateway,
    create_search_service,
)

__version__ = "1.0.0"

__all__ = [
    # Parsing & filters
    "ParsedQuery",
    "parse_query",
    "OPERATOR_PATTERN",
    "NormalizedFilter",
    "combine_filters",
    "filter_from_request",
    # Ranking
    "RankingPolicy",
    "SortField",
    "SortKey",
    "relevance_score",
    "resolve_ranking",
    # Pagination
    "page_window",
    "next_offset",
    "next_request",
    "load_more",
    # Gateways
    "RetrievalGateway",
    "MockGateway",
    "LiveGateway",
    "matches",
    "MOCK_PROMPTS",
    "MOCK_SUGGESTIONS",
    # Connection
    "DatabaseConfig",
    "create_pool",
    "close_pool",
    "check_connection_health",
    # Service
    "PromptSearchService",
    "coerce_request",
    "create_gateway",
    "create_search_service",
]
