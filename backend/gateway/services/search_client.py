"""
Notes Gateway — Search Service HTTP Client
===========================================

What:  SearchService implementation speaking JSON over HTTP.

Endpoints (relative to SEARCH_SERVICE_URL):
    POST /search    SearchQuery → {"notes": [Note, ...]}
    GET  /health    → 200 when ready
"""

from typing import List

from gateway.models.note import Note, NoteList, SearchQuery
from gateway.services.backends import SearchService
from gateway.services.http_client import HttpServiceClient


class HttpSearchService(HttpServiceClient, SearchService):
    service_name = "search service"

    async def search(self, query: SearchQuery) -> List[Note]:
        result = await self._post("/search", query.to_wire(), NoteList)
        return result.notes
