"""
Notes Gateway — Test Configuration (conftest.py)
=================================================

What:  Shared pytest fixtures for the entire test suite.
How:   In-memory doubles stand in for the record service, the search service
       and the Redis publisher, so no test touches the network.

Fixture Hierarchy:
    record_service ─┐
    publisher ──────┼── notifier ── record_gateway ──┐
    search_service ─┴──────────────  search_gateway ─┴── dispatcher ── backends ── test_client
    caller / anonymous
"""

import os

# Settings are read at import time; configure before any gateway import.
os.environ["RECORD_SERVICE_URL"] = "http://records.test"
os.environ["SEARCH_SERVICE_URL"] = "http://search.test"
os.environ["REDIS_URL"] = "redis://localhost:6379/15"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_REQUESTS"] = "100000"

from typing import Dict, List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from gateway.connections import Backends, get_backends
from gateway.exceptions import BackendError, PublishError
from gateway.models.note import Note, Query, SearchQuery
from gateway.services.backends import RecordService, SearchService
from gateway.services.dispatch import Dispatcher
from gateway.services.identity import ANONYMOUS, CallerIdentity
from gateway.services.publisher import Channels, MutationNotifier, NotificationPublisher
from gateway.services.record_gateway import RecordGateway
from gateway.services.search_gateway import SearchGateway


# ══════════════════════════════════════════════════════════════════════════
# In-Memory Doubles
# ══════════════════════════════════════════════════════════════════════════

class InMemoryRecordService(RecordService):
    """
    Stateful record service: stores notes by id and records every call.

    Set `fail_with` to make the next calls raise that BackendError.
    """

    def __init__(self):
        self.notes: Dict[str, Note] = {}
        self.calls: List[Tuple[str, object]] = []
        self.fail_with: Optional[BackendError] = None
        self.healthy = True
        self._next_id = 1

    def _check(self, name: str, payload: object) -> None:
        self.calls.append((name, payload))
        if self.fail_with is not None:
            raise self.fail_with

    def seed(self, *notes: Note) -> None:
        for note in notes:
            self.notes[note.id] = note

    async def list_notes(self, query: Query) -> List[Note]:
        self._check("list", query)
        found = []
        for note in self.notes.values():
            if query.ids is not None and note.id not in query.ids:
                continue
            if query.authors is not None and note.author not in query.authors:
                continue
            if query.title and query.title not in note.title:
                continue
            if query.team and note.team != query.team:
                continue
            if query.fromdate is not None and note.date_created < query.fromdate:
                continue
            if query.todate is not None and note.date_created > query.todate:
                continue
            found.append(note)
        return found

    async def create_note(self, note: Note) -> Note:
        self._check("create", note)
        stored = note
        if not note.id:
            stored = note.model_copy(update={"id": str(self._next_id)})
            self._next_id += 1
        self.notes[stored.id] = stored
        return stored

    async def update_note(self, note: Note) -> Note:
        self._check("update", note)
        if note.id not in self.notes:
            raise BackendError(service="record service", context={"status": 404})
        self.notes[note.id] = note
        return note

    async def delete_note(self, note: Note) -> Note:
        self._check("delete", note)
        if note.id not in self.notes:
            raise BackendError(service="record service", context={"status": 404})
        return self.notes.pop(note.id)

    async def health_check(self) -> bool:
        return self.healthy


class FakeSearchService(SearchService):
    def __init__(self, results: Optional[List[Note]] = None):
        self.results = results or []
        self.queries: List[SearchQuery] = []
        self.fail_with: Optional[BackendError] = None
        self.healthy = True

    async def search(self, query: SearchQuery) -> List[Note]:
        self.queries.append(query)
        if self.fail_with is not None:
            raise self.fail_with
        return list(self.results)

    async def health_check(self) -> bool:
        return self.healthy


class RecordingPublisher(NotificationPublisher):
    """Keeps every (channel, note) it was asked to publish."""

    def __init__(self):
        self.published: List[Tuple[str, Note]] = []
        self.fail = False
        self.healthy = True

    async def publish(self, channel: str, note: Note) -> None:
        if self.fail:
            raise PublishError(channel=channel, context={"note_id": note.id})
        self.published.append((channel, note))

    async def health_check(self) -> bool:
        return self.healthy

    def on(self, channel: str) -> List[Note]:
        return [note for name, note in self.published if name == channel]


CHANNELS = Channels(create="notes.create", update="notes.update", delete="notes.delete")


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures (created fresh for each test)
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def record_service():
    return InMemoryRecordService()


@pytest.fixture
def search_service():
    return FakeSearchService()


@pytest.fixture
def publisher():
    return RecordingPublisher()


@pytest.fixture
def notifier(publisher):
    return MutationNotifier(publisher, CHANNELS)


@pytest.fixture
def record_gateway(record_service, notifier):
    return RecordGateway(record_service, notifier)


@pytest.fixture
def search_gateway(search_service):
    return SearchGateway(search_service)


@pytest.fixture
def dispatcher(record_gateway, search_gateway):
    return Dispatcher(record_gateway, search_gateway)


@pytest.fixture
def caller():
    return CallerIdentity(email="ada@example.com")


@pytest.fixture
def anonymous():
    return ANONYMOUS


@pytest.fixture
def backends(record_service, search_service, publisher, dispatcher):
    return Backends(
        record_service=record_service,
        search_service=search_service,
        publisher=publisher,
        dispatcher=dispatcher,
    )


@pytest_asyncio.fixture
async def test_client(backends):
    """
    HTTPX AsyncClient routed straight into the FastAPI app.

    ASGITransport does not run the lifespan, so the backends are injected
    through a dependency override instead of app.state.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from gateway.main import app

    app.dependency_overrides[get_backends] = lambda: backends
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()
