"""PostgreSQL retrieval gateway.

Compiles a NormalizedFilter and RankingPolicy into one parameterised query
against the `prompts` table:

- free-text terms: ILIKE on title || ' ' || content, one clause per term (AND)
- category / specialty: ILIKE ANY(patterns) (substring, OR within dimension)
- tags: lower-cased exact membership over unnest(tags)
- ordering: the policy's keys; ids compare with COLLATE "C" so ties break
  exactly as in MockGateway
- window: LIMIT / OFFSET with count(*) OVER () as the exact total

Matching never relies on the text-search index, so the filtered set is the
one MockGateway produces. `relevance` ordering uses ts_rank, which may
order differently from the mock's term-count heuristic.
"""

from typing import Any, Optional

import asyncpg
from prompthub_common import RetrievalError, get_logger, instrument_function
from prompthub_contracts import Prompt, SearchResult, SortBy, SortDirection

from prompthub_retrieval.connection import close_pool
from prompthub_retrieval.filters import NormalizedFilter
from prompthub_retrieval.gateway import RetrievalGateway, check_filter, check_window
from prompthub_retrieval.pagination import build_result
from prompthub_retrieval.ranking import RankingPolicy, SortField, resolve_ranking

logger = get_logger(__name__)

PROMPT_COLUMNS = """
    p.id::text AS id,
    p.title,
    p.content,
    p.category,
    p.specialty,
    p.tags,
    p.votes,
    p.created_at,
    p.created_by::text AS created_by,
    p.is_anonymous,
    p.has_versions
"""

SUGGESTIONS_PER_SOURCE = 3

_SEARCHABLE_TEXT = "(p.title || ' ' || p.content)"

_ORDER_COLUMNS = {
    SortField.CREATED_AT: "p.created_at",
    SortField.VOTE_COUNT: "p.votes",
    SortField.ID: 'p.id::text COLLATE "C"',
}


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so the value matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def contains_pattern(value: str) -> str:
    return f"%{escape_like(value)}%"


class QueryParams:
    """Collects positional parameters ($1, $2, ...) while SQL is assembled."""

    def __init__(self) -> None:
        self.values: list[Any] = []

    def add(self, value: Any) -> str:
        self.values.append(value)
        return f"${len(self.values)}"


def compile_where(query_filter: NormalizedFilter, params: QueryParams) -> str:
    """Translate a NormalizedFilter into a WHERE clause body."""
    clauses = []

    for term in query_filter.terms:
        clauses.append(f"{_SEARCHABLE_TEXT} ILIKE {params.add(contains_pattern(term))}")

    if query_filter.categories:
        patterns = [contains_pattern(c) for c in sorted(query_filter.categories)]
        clauses.append(f"p.category ILIKE ANY({params.add(patterns)}::text[])")

    if query_filter.specialties:
        patterns = [contains_pattern(s) for s in sorted(query_filter.specialties)]
        clauses.append(f"p.specialty ILIKE ANY({params.add(patterns)}::text[])")

    if query_filter.tags:
        placeholder = params.add(sorted(query_filter.tags))
        clauses.append(
            "EXISTS (SELECT 1 FROM unnest(p.tags) AS t(tag) "
            f"WHERE lower(t.tag) = ANY({placeholder}::text[]))"
        )

    if query_filter.owner_id is not None:
        clauses.append(f"p.created_by::text = {params.add(query_filter.owner_id)}")

    if query_filter.has_alternate_versions is not None:
        clauses.append(f"p.has_versions = {params.add(query_filter.has_alternate_versions)}")

    return " AND ".join(clauses) if clauses else "TRUE"


def compile_order_by(ranking: RankingPolicy, params: QueryParams) -> str:
    """Translate a RankingPolicy into an ORDER BY list."""
    parts = []
    for key in ranking.keys:
        if key.field is SortField.RELEVANCE:
            query = params.add(" ".join(ranking.terms))
            column = (
                f"ts_rank(to_tsvector('english', {_SEARCHABLE_TEXT}), "
                f"plainto_tsquery('english', {query}))"
            )
        else:
            column = _ORDER_COLUMNS[key.field]
        parts.append(f"{column} {'DESC' if key.descending else 'ASC'}")
    return ", ".join(parts)


def _row_to_prompt(row: asyncpg.Record) -> Prompt:
    """Convert a database row to a Prompt."""
    return Prompt(
        id=row["id"],
        title=row["title"],
        content=row["content"],
        category=row["category"],
        specialty=row["specialty"],
        tags=list(row["tags"] or []),
        vote_count=row["votes"] or 0,
        created_at=row["created_at"],
        owner_id=row["created_by"],
        is_anonymous=row["is_anonymous"],
        has_alternate_versions=row["has_versions"],
    )


class LiveGateway(RetrievalGateway):
    """Retrieval against the PostgreSQL prompt store.

    Example:
        >>> pool = await create_pool(DatabaseConfig(dsn="postgresql://..."))
        >>> gateway = LiveGateway(pool)
        >>> result = await gateway.retrieve(query_filter, ranking, limit=20, offset=0)
    """

    def __init__(
        self,
        pool: asyncpg.Pool,
        suggestion_limit: Optional[int] = None,
        owns_pool: bool = False,
    ):
        """Initialize the live gateway.

        Args:
            pool: asyncpg pool connected to the prompt store
            suggestion_limit: Cap on suggestions returned
            owns_pool: Close the pool when the gateway is closed
        """
        self._pool = pool
        self._owns_pool = owns_pool
        if suggestion_limit is not None:
            self.suggestion_limit = suggestion_limit

    @property
    def backend(self) -> str:
        return "postgres"

    async def _fetch(self, operation: str, sql: str, *args: Any) -> list[asyncpg.Record]:
        try:
            async with self._pool.acquire() as conn:
                return await conn.fetch(sql, *args)
        except RetrievalError:
            raise
        except Exception as e:
            logger.error("retrieval_failed", operation=operation, error=str(e))
            raise RetrievalError(f"{operation} failed: {e}") from e

    async def _fetchval(self, operation: str, sql: str, *args: Any) -> Any:
        try:
            async with self._pool.acquire() as conn:
                return await conn.fetchval(sql, *args)
        except RetrievalError:
            raise
        except Exception as e:
            logger.error("retrieval_failed", operation=operation, error=str(e))
            raise RetrievalError(f"{operation} failed: {e}") from e

    @instrument_function("live_gateway.retrieve")
    async def retrieve(
        self,
        query_filter: NormalizedFilter,
        ranking: RankingPolicy,
        limit: int,
        offset: int,
    ) -> SearchResult:
        check_filter(query_filter)
        check_window(limit, offset)

        params = QueryParams()
        where = compile_where(query_filter, params)
        order_by = compile_order_by(ranking, params)
        sql = f"""
        SELECT {PROMPT_COLUMNS}, count(*) OVER () AS total_count
        FROM prompts p
        WHERE {where}
        ORDER BY {order_by}
        LIMIT {params.add(limit)} OFFSET {params.add(offset)}
        """

        rows = await self._fetch("retrieve", sql, *params.values)

        if rows:
            total = rows[0]["total_count"]
        elif offset > 0:
            # Window starts past the end; the window count saw no rows.
            total = await self.count(query_filter)
        else:
            total = 0

        result = build_result(
            prompts=[_row_to_prompt(row) for row in rows],
            total=total,
            limit=limit,
            offset=offset,
        )

        logger.debug(
            "live_retrieve_completed",
            sort_by=ranking.sort_by.value,
            total=result.total,
            returned=len(result.prompts),
            offset=offset,
        )
        return result

    async def count(self, query_filter: NormalizedFilter) -> int:
        check_filter(query_filter)
        params = QueryParams()
        where = compile_where(query_filter, params)
        sql = f"SELECT count(*) FROM prompts p WHERE {where}"
        return await self._fetchval("count", sql, *params.values) or 0

    async def get_prompt(self, prompt_id: str) -> Optional[Prompt]:
        sql = f"SELECT {PROMPT_COLUMNS} FROM prompts p WHERE p.id::text = $1"
        rows = await self._fetch("get_prompt", sql, prompt_id)
        return _row_to_prompt(rows[0]) if rows else None

    @instrument_function("live_gateway.related")
    async def related(self, prompt_id: str, limit: int = 3) -> list[Prompt]:
        check_window(limit, 0)

        params = QueryParams()
        origin_id = params.add(prompt_id)
        order_by = compile_order_by(resolve_ranking(SortBy.VOTES, SortDirection.DESC), params)
        sql = f"""
        WITH origin AS (
            SELECT id, category, specialty, tags FROM prompts WHERE id::text = {origin_id}
        )
        SELECT {PROMPT_COLUMNS}
        FROM prompts p, origin o
        WHERE p.id <> o.id
          AND (
            lower(p.category) = lower(o.category)
            OR (p.specialty IS NOT NULL AND lower(p.specialty) = lower(o.specialty))
            OR EXISTS (
                SELECT 1
                FROM unnest(p.tags) AS a(tag)
                JOIN unnest(o.tags) AS b(tag) ON lower(a.tag) = lower(b.tag)
            )
          )
        ORDER BY {order_by}
        LIMIT {params.add(limit)}
        """

        rows = await self._fetch("related", sql, *params.values)
        return [_row_to_prompt(row) for row in rows]

    async def _suggestion_candidates(self, partial_text: str) -> list[str]:
        pattern = contains_pattern(partial_text)
        async with self._pool.acquire() as conn:
            titles = await conn.fetch(
                "SELECT title AS value FROM prompts WHERE title ILIKE $1 "
                "ORDER BY votes DESC, title LIMIT $2",
                pattern,
                SUGGESTIONS_PER_SOURCE,
            )
            categories = await conn.fetch(
                "SELECT DISTINCT category AS value FROM prompts WHERE category ILIKE $1 "
                "ORDER BY category LIMIT $2",
                pattern,
                SUGGESTIONS_PER_SOURCE,
            )
            tags = await conn.fetch(
                "SELECT DISTINCT t.tag AS value FROM prompts p, unnest(p.tags) AS t(tag) "
                "WHERE t.tag ILIKE $1 ORDER BY t.tag LIMIT $2",
                pattern,
                SUGGESTIONS_PER_SOURCE,
            )
        return [row["value"] for row in (*titles, *categories, *tags)]

    async def close(self) -> None:
        if self._owns_pool:
            await close_pool(self._pool)
