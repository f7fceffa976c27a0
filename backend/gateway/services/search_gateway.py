"""
Notes Gateway — Search Gateway Adapter
=======================================

What:  Runs the `search` operation against the search service.
How:   Builds a SearchQuery from the free-text argument, calls the service,
       wraps each hit in a NoteResolver.

Empty results without a backend call:
    - `query` argument absent
    - no search service configured for this gateway instance

Only the text query is forwarded; `authors`, `team` and the date arguments
are accepted by the schema but not sent yet.
"""

import logging
from typing import List, Optional

from gateway.models.note import SearchQuery
from gateway.schemas.note import SearchArgs
from gateway.services.backends import SearchService
from gateway.services.note_resolver import NoteResolver

logger = logging.getLogger(__name__)


class SearchGateway:
    def __init__(self, search_service: Optional[SearchService] = None):
        self.search_service = search_service

    @property
    def enabled(self) -> bool:
        return self.search_service is not None

    async def search(self, args: SearchArgs) -> List[NoteResolver]:
        """
        Raises:
            BackendError: Search service call failed
        """
        if args.query is None:
            return []

        if not self.enabled:
            logger.debug("Search requested but no search service is configured")
            return []

        notes = await self.search_service.search(SearchQuery(query=args.query))
        logger.info("Search returned %d notes", len(notes))
        return [NoteResolver(note) for note in notes]
