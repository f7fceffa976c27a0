"""
Notes Gateway — Search Gateway Tests
=====================================

What we test:
    ✅ Absent query answers [] without calling the search service
    ✅ Unconfigured gateway answers []
    ✅ Only the text query is forwarded
    ✅ Search service failures surface as BackendError
"""

import pytest

from gateway.exceptions import BackendError
from gateway.models.note import Note
from gateway.schemas.note import SearchArgs
from gateway.services.search_gateway import SearchGateway


class TestSearch:
    @pytest.mark.asyncio
    async def test_absent_query_makes_no_call(self, search_gateway, search_service):
        search_service.results = [Note(id="1")]

        assert await search_gateway.search(SearchArgs()) == []
        assert search_service.queries == []

    @pytest.mark.asyncio
    async def test_unconfigured_search_is_empty(self):
        gateway = SearchGateway()

        assert not gateway.enabled
        assert await gateway.search(SearchArgs(query="milk")) == []

    @pytest.mark.asyncio
    async def test_hits_are_wrapped_in_order(self, search_gateway, search_service):
        search_service.results = [Note(id="2", title="b"), Note(id="1", title="a")]

        result = await search_gateway.search(SearchArgs(query="milk"))

        assert [r.id() for r in result] == ["2", "1"]

    @pytest.mark.asyncio
    async def test_only_query_is_forwarded(self, search_gateway, search_service):
        await search_gateway.search(
            SearchArgs(query="milk", authors=["ada@example.com"], team="home", fromdate=10)
        )

        (sent,) = search_service.queries
        assert sent.query == "milk"
        assert sent.authors is None
        assert sent.team == ""
        assert sent.fromdate is None

    @pytest.mark.asyncio
    async def test_empty_query_string_is_still_searched(self, search_gateway, search_service):
        await search_gateway.search(SearchArgs(query=""))

        assert [q.query for q in search_service.queries] == [""]

    @pytest.mark.asyncio
    async def test_backend_error_propagates(self, search_gateway, search_service):
        search_service.fail_with = BackendError(service="search service", context={"status": 503})

        with pytest.raises(BackendError) as exc_info:
            await search_gateway.search(SearchArgs(query="milk"))
        assert exc_info.value.service == "search service"
