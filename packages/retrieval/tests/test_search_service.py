"""Tests for PromptSearchService."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from prompthub_common import RetrievalError, ValidationError
from prompthub_contracts import SearchRequest, SearchResult, SortBy

from prompthub_retrieval.filters import NormalizedFilter
from prompthub_retrieval.gateway import RetrievalGateway
from prompthub_retrieval.mock_gateway import MockGateway
from prompthub_retrieval.search import PromptSearchService, coerce_request

ID = "550e8400-e29b-41d4-a716-446655{:06d}".format


@pytest.fixture
def service(mock_gateway) -> PromptSearchService:
    return PromptSearchService(mock_gateway, max_limit=100)


class TestCoerceRequest:
    """Caller input validation."""

    def test_request_passed_through(self):
        request = SearchRequest(query_text="icu")

        assert coerce_request(request) is request

    def test_mapping_validated(self):
        request = coerce_request({"query_text": "icu", "sort_by": "date"})

        assert request.sort_by is SortBy.DATE

    def test_default_limit_applied_to_mapping(self):
        assert coerce_request({}, default_limit=7).limit == 7
        assert coerce_request({"limit": 3}, default_limit=7).limit == 3

    @pytest.mark.parametrize(
        "data",
        [
            {"limit": 0},
            {"offset": -1},
            {"sort_by": "trending"},
            {"tags": "sbar"},
        ],
    )
    def test_invalid_mapping_raises_validation_error(self, data):
        with pytest.raises(ValidationError, match="Invalid search request"):
            coerce_request(data)

    def test_wrong_type_rejected(self):
        with pytest.raises(ValidationError, match="expected SearchRequest"):
            coerce_request(["icu"])


class TestSearch:
    """End-to-end search over the mock corpus."""

    @pytest.mark.asyncio
    async def test_free_text_with_operator(self, service):
        result = await service.search({"query_text": "handoff tag:sbar"})

        assert [p.title for p in result.prompts] == ["Mental Report Prep Partner"]

    @pytest.mark.asyncio
    async def test_phrase_category_operator(self, service):
        # Given a multi-word category operator
        request = SearchRequest(query_text="category:Shift Report Prep", sort_by="votes")

        # When searching
        result = await service.search(request)

        # Then both Shift Report Prep prompts match, most voted first
        assert result.ids == [ID(440003), ID(440008)]

    @pytest.mark.asyncio
    async def test_operator_and_explicit_filters_union(self, service):
        result = await service.search(
            {"query_text": "tag:sbar", "tags": ["hydration"], "sort_by": "votes"}
        )

        assert result.ids == [ID(440003), ID(440009)]

    @pytest.mark.asyncio
    async def test_empty_relevance_equals_votes(self, service):
        relevance = await service.search({"query_text": "", "sort_by": "relevance"})
        votes = await service.search({"query_text": "", "sort_by": "votes"})

        assert relevance.ids == votes.ids
        assert relevance.total == votes.total == 9

    @pytest.mark.asyncio
    async def test_every_term_must_match(self, service):
        result = await service.search({"query_text": "icu handoff"})

        assert result.ids == [ID(440008)]

    @pytest.mark.asyncio
    async def test_unknown_tag_is_empty_not_error(self, service):
        result = await service.search({"tags": ["nonexistent-tag"]})

        assert result.prompts == []
        assert result.total == 0
        assert result.has_more is False

    @pytest.mark.asyncio
    async def test_owner_and_versions_filters(self, service):
        owned = await service.search({"owner_id": ID(440107)})
        versions = await service.search({"has_alternate_versions": False})

        assert owned.ids == [ID(440007)]
        assert versions.total == 7

    @pytest.mark.asyncio
    async def test_limit_above_max_rejected(self, service):
        with pytest.raises(ValidationError, match="limit must be <= 100"):
            await service.search({"limit": 101})

    @pytest.mark.asyncio
    async def test_default_limit_used(self, mock_gateway):
        service = PromptSearchService(mock_gateway, default_limit=4)

        result = await service.search({})

        assert len(result.prompts) == 4
        assert result.has_more is True

    @pytest.mark.asyncio
    async def test_has_more_invariant(self, service):
        for offset in range(0, 10, 3):
            result = await service.search({"limit": 3, "offset": offset})
            assert result.total >= len(result.prompts)
            assert result.has_more == (offset + len(result.prompts) < result.total)

    @pytest.mark.asyncio
    async def test_retrieval_error_propagates(self):
        gateway = MagicMock(spec=RetrievalGateway)
        gateway.backend = "postgres"
        gateway.retrieve = AsyncMock(side_effect=RetrievalError("retrieve failed"))
        service = PromptSearchService(gateway)

        with pytest.raises(RetrievalError):
            await service.search({"query_text": "icu"})

    @pytest.mark.asyncio
    async def test_gateway_receives_normalized_filter(self):
        gateway = MagicMock(spec=RetrievalGateway)
        gateway.backend = "mock"
        gateway.retrieve = AsyncMock(return_value=SearchResult.empty(limit=5, offset=10))
        service = PromptSearchService(gateway)

        await service.search({"query_text": "drips specialty:ICU", "limit": 5, "offset": 10})

        query_filter, ranking = gateway.retrieve.await_args.args
        assert query_filter == NormalizedFilter(
            free_text="drips", specialties=frozenset({"icu"})
        )
        assert ranking.terms == ("drips",)
        assert gateway.retrieve.await_args.kwargs == {"limit": 5, "offset": 10}


class TestLoadMore:
    """Appending pages through the service."""

    @pytest.mark.asyncio
    async def test_load_all_pages(self, service):
        request = {"sort_by": "date", "limit": 4}
        result = await service.search(request)

        while result.has_more:
            result = await service.load_more(request, result)

        assert len(result.prompts) == 9
        assert len(set(result.ids)) == 9
        assert result.offset == 0
        assert result.total == 9

    @pytest.mark.asyncio
    async def test_exhausted_result_returned_unchanged(self, service):
        result = await service.search({"limit": 20})

        assert await service.load_more({"limit": 20}, result) is result


class TestDelegation:
    """Suggestions, related prompts and lookup."""

    @pytest.mark.asyncio
    async def test_suggest(self, service):
        assert await service.suggest("burn") == ["burnout"]

    @pytest.mark.asyncio
    async def test_related_uses_default_limit(self, mock_gateway):
        service = PromptSearchService(mock_gateway, related_limit=2)

        related = await service.related(ID(440001))

        assert [p.id for p in related] == [ID(440002), ID(440004)]

    @pytest.mark.asyncio
    async def test_related_zero_limit_rejected(self, mock_gateway):
        service = PromptSearchService(mock_gateway, related_limit=2)

        with pytest.raises(ValidationError):
            await service.related(ID(440001), limit=0)

    @pytest.mark.asyncio
    async def test_get_prompt(self, service):
        prompt = await service.get_prompt(ID(440002))

        assert prompt.title == "Post-Shift Reset Coach"

    @pytest.mark.asyncio
    async def test_close_closes_gateway(self):
        gateway = MockGateway()
        gateway.close = AsyncMock()

        await PromptSearchService(gateway).close()

        gateway.close.assert_awaited_once()
