"""Contract tests: LiveGateway and MockGateway agree on the same corpus.

The live side runs against PostgreSQL seeded with the built-in corpus
(see the live_pool fixture). Skipped unless TEST_DATABASE_URL points at a
reachable server.

For relevance ordering only membership and totals are compared; the live
ranker (ts_rank) and the mock's term-count heuristic may order differently.
"""

import itertools

import pytest
from prompthub_contracts import SortBy, SortDirection

from prompthub_retrieval.filters import NormalizedFilter
from prompthub_retrieval.live_gateway import LiveGateway
from prompthub_retrieval.mock_gateway import MockGateway
from prompthub_retrieval.ranking import resolve_ranking

pytestmark = pytest.mark.integration

FILTERS = [
    NormalizedFilter(),
    NormalizedFilter(free_text="handoff"),
    NormalizedFilter(free_text="icu handoff"),
    NormalizedFilter(free_text="care", tags=frozenset({"documentation"})),
    NormalizedFilter(categories=frozenset({"burnout", "self-care"})),
    NormalizedFilter(specialties=frozenset({"icu", "er"})),
    NormalizedFilter(tags=frozenset({"patient-safety"})),
    NormalizedFilter(tags=frozenset({"nonexistent-tag"})),
    NormalizedFilter(owner_id="550e8400-e29b-41d4-a716-446655440108"),
    NormalizedFilter(has_alternate_versions=True),
    NormalizedFilter(free_text="50%_off"),
]

ORDERED_SORTS = [
    (sort_by, direction)
    for sort_by, direction in itertools.product(SortBy, SortDirection)
    if sort_by is not SortBy.RELEVANCE
]


@pytest.fixture
def live_gateway(live_pool) -> LiveGateway:
    return LiveGateway(live_pool)


@pytest.fixture
def reference() -> MockGateway:
    return MockGateway()


class TestFilteredSetParity:
    """Same filter, same prompts."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query_filter", FILTERS)
    async def test_membership_and_total(self, live_gateway, reference, query_filter):
        ranking = resolve_ranking(SortBy.RELEVANCE, SortDirection.DESC, query_filter.free_text)

        live = await live_gateway.retrieve(query_filter, ranking, limit=50, offset=0)
        mock = await reference.retrieve(query_filter, ranking, limit=50, offset=0)

        assert set(live.ids) == set(mock.ids)
        assert live.total == mock.total
        assert live.has_more == mock.has_more

    @pytest.mark.asyncio
    @pytest.mark.parametrize("query_filter", FILTERS)
    async def test_count(self, live_gateway, reference, query_filter):
        assert await live_gateway.count(query_filter) == await reference.count(query_filter)


class TestOrderParity:
    """Deterministic sorts order identically."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("sort_by, direction", ORDERED_SORTS)
    async def test_same_order(self, live_gateway, reference, sort_by, direction):
        ranking = resolve_ranking(sort_by, direction)

        live = await live_gateway.retrieve(NormalizedFilter(), ranking, limit=50, offset=0)
        mock = await reference.retrieve(NormalizedFilter(), ranking, limit=50, offset=0)

        assert live.ids == mock.ids

    @pytest.mark.asyncio
    async def test_same_windows(self, live_gateway, reference):
        ranking = resolve_ranking(SortBy.DATE, SortDirection.DESC)

        for offset in (0, 4, 8, 12):
            live = await live_gateway.retrieve(NormalizedFilter(), ranking, 4, offset)
            mock = await reference.retrieve(NormalizedFilter(), ranking, 4, offset)
            assert live.ids == mock.ids
            assert live.total == mock.total == 9
            assert live.has_more == mock.has_more


class TestLookupParity:
    """get_prompt, related and attribution."""

    @pytest.mark.asyncio
    async def test_get_prompt(self, live_gateway, reference):
        for prompt in reference.prompts:
            live = await live_gateway.get_prompt(prompt.id)
            assert live.id == prompt.id
            assert live.tags == prompt.tags
            assert live.attributed_owner_id == prompt.attributed_owner_id
            assert live.created_at == prompt.created_at

    @pytest.mark.asyncio
    async def test_related(self, live_gateway, reference):
        for prompt in reference.prompts:
            live = await live_gateway.related(prompt.id, limit=3)
            mock = await reference.related(prompt.id, limit=3)
            assert [p.id for p in live] == [p.id for p in mock]

    @pytest.mark.asyncio
    async def test_suggestions_bounded(self, live_gateway):
        suggestions = await live_gateway.suggest("ca")

        assert 0 < len(suggestions) <= 5
        assert len(set(suggestions)) == len(suggestions)
