"""
Notes Gateway — Abstract Backend Interfaces
============================================

What:  Contracts for the two collaborators the gateway fans out to.
How:   Concrete implementations inherit from RecordService / SearchService.
       The HTTP clients live in record_client.py and search_client.py;
       tests substitute in-memory doubles.
Who:   Called by RecordGateway and SearchGateway.

Contract shared by every implementation:
    - Return backend domain objects (Note), never raw transport payloads
    - Wrap every transport or upstream failure in BackendError
    - Never retry; one failed call fails the operation
    - Let asyncio cancellation propagate unchanged
"""

from abc import ABC, abstractmethod
from typing import List

from gateway.models.note import Note, Query, SearchQuery


class RecordService(ABC):
    """The notes record service: owner of durable note storage and CRUD."""

    @abstractmethod
    async def list_notes(self, query: Query) -> List[Note]:
        """
        Return the notes matching `query`, in the order the service chooses.

        Raises:
            BackendError: The call failed or the service answered with an error.
        """
        ...

    @abstractmethod
    async def create_note(self, note: Note) -> Note:
        """
        Store a new note and return it as stored.

        The returned note may differ from the input (e.g. an assigned id).
        """
        ...

    @abstractmethod
    async def update_note(self, note: Note) -> Note:
        """Replace the note with `note.id` and return the stored result."""
        ...

    @abstractmethod
    async def delete_note(self, note: Note) -> Note:
        """Delete the note with `note.id` and return the deleted record."""
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """True if the service is reachable. Never raises."""
        ...


class SearchService(ABC):
    """The search index service over notes."""

    @abstractmethod
    async def search(self, query: SearchQuery) -> List[Note]:
        """
        Return the notes matching the free-text query.

        Raises:
            BackendError: The call failed or the service answered with an error.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        """True if the service is reachable. Never raises."""
        ...
