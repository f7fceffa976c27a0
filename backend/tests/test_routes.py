"""
Notes Gateway — HTTP Surface Tests
===================================

What:  End-to-end tests through FastAPI with in-memory backends.
How:   httpx.AsyncClient over ASGITransport (see conftest.test_client).

What we test:
    ✅ POST /api/operations returns data, errors and request_id
    ✅ Caller identity comes from the X-User-Email header
    ✅ Operation errors keep HTTP 200; malformed envelopes are 422
    ✅ GET /api/operations lists the entry points
    ✅ GET /health aggregates collaborator status
"""

import pytest

from gateway.exceptions import BackendError
from gateway.models.note import Note

IDENTITY = {"X-User-Email": "ada@example.com"}


class TestOperations:
    @pytest.mark.asyncio
    async def test_create_then_list(self, test_client):
        created = await test_client.post(
            "/api/operations",
            json={
                "operation": "createNote",
                "arguments": {"title": "Groceries", "body": "milk"},
                "fields": ["id", "title", "author"],
            },
            headers=IDENTITY,
        )
        listed = await test_client.post(
            "/api/operations",
            json={"operation": "notes", "fields": ["title"]},
            headers=IDENTITY,
        )

        assert created.status_code == 200
        body = created.json()
        assert body["errors"] == []
        assert body["data"] == {"id": "1", "title": "Groceries", "author": "ada@example.com"}
        assert body["request_id"]
        assert listed.json()["data"] == [{"title": "Groceries"}]

    @pytest.mark.asyncio
    async def test_request_id_is_echoed(self, test_client):
        response = await test_client.post(
            "/api/operations",
            json={"operation": "search"},
            headers={"X-Request-ID": "trace-123"},
        )

        assert response.headers["X-Request-ID"] == "trace-123"
        assert response.json() == {"data": [], "errors": [], "request_id": "trace-123"}

    @pytest.mark.asyncio
    async def test_missing_identity_is_an_operation_error(self, test_client):
        response = await test_client.post("/api/operations", json={"operation": "notes"})

        assert response.status_code == 200
        body = response.json()
        assert body["data"] is None
        assert body["errors"][0]["error"] == "missing_identity"

    @pytest.mark.asyncio
    async def test_publish_error_reports_channel(self, test_client, record_service, publisher):
        record_service.seed(Note(id="1", title="T1", author="ada@example.com"))
        publisher.fail = True

        response = await test_client.post(
            "/api/operations",
            json={"operation": "updateNote", "arguments": {"id": "1", "title": "T2"}},
            headers=IDENTITY,
        )

        (error,) = response.json()["errors"]
        assert error["error"] == "publish_error"
        assert error["details"] == {"channel": "notes.update"}
        assert record_service.notes["1"].title == "T2"

    @pytest.mark.asyncio
    async def test_backend_error_hides_upstream_status(self, test_client, record_service):
        record_service.fail_with = BackendError(service="record service", context={"status": 500})

        response = await test_client.post(
            "/api/operations", json={"operation": "notes"}, headers=IDENTITY
        )

        (error,) = response.json()["errors"]
        assert error["error"] == "backend_error"
        assert error["details"] == {"service": "record service"}

    @pytest.mark.asyncio
    async def test_malformed_envelope_is_422(self, test_client):
        response = await test_client.post("/api/operations", json={"arguments": {}})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_list_operations(self, test_client):
        response = await test_client.get("/api/operations")

        assert response.status_code == 200
        names = [entry["name"] for entry in response.json()]
        assert names == ["notes", "search", "createNote", "updateNote", "deleteNote"]


class TestHealth:
    @pytest.mark.asyncio
    async def test_healthy(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["record_service"] == "reachable"
        assert body["search_service"] == "reachable"
        assert body["notifications"] == "connected"

    @pytest.mark.asyncio
    async def test_degraded_when_redis_down(self, test_client, publisher):
        publisher.healthy = False

        body = (await test_client.get("/health")).json()

        assert body["status"] == "degraded"
        assert body["notifications"] == "disconnected"

    @pytest.mark.asyncio
    async def test_unhealthy_when_record_service_down(self, test_client, record_service):
        record_service.healthy = False

        response = await test_client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "unhealthy"
