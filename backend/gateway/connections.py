"""
Notes Gateway — Backend Connection Management
==============================================

What:  Builds the backend clients, the Redis publisher and the Dispatcher, and
       exposes them to route handlers as FastAPI dependencies.
How:   `create_backends()` runs once in the app lifespan and the result is
       stored on `app.state.backends`; `dispose_backends()` closes every
       pooled connection on shutdown.
Who:   Used by main.py (lifespan) and by route handlers via Depends().
When:  Connections are created at startup; request handlers only borrow them.

Connection Strategy:
    One httpx.AsyncClient per backend (connection pool, base URL, timeout)
    and one Redis client for publishing, shared by all requests. None of
    them holds request state, so no locking is needed.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request

from gateway.config import Settings, settings
from gateway.services.dispatch import Dispatcher
from gateway.services.http_client import build_client
from gateway.services.identity import CallerIdentity
from gateway.services.publisher import Channels, MutationNotifier, RedisPublisher
from gateway.services.record_client import HttpRecordService
from gateway.services.record_gateway import RecordGateway
from gateway.services.search_client import HttpSearchService
from gateway.services.search_gateway import SearchGateway

logger = logging.getLogger(__name__)


@dataclass
class Backends:
    """Everything the request handlers need, built once per process."""

    record_service: HttpRecordService
    search_service: Optional[HttpSearchService]
    publisher: RedisPublisher
    dispatcher: Dispatcher


def create_backends(config: Settings = settings) -> Backends:
    """
    Wire clients, gateways and the dispatcher from configuration.

    The search service is optional: without SEARCH_SERVICE_URL the search
    gateway has no backend and answers every search with no results.
    """
    record_service = HttpRecordService(
        build_client(config.record_service_url, config.backend_timeout)
    )

    search_service: Optional[HttpSearchService] = None
    if config.search_enabled:
        search_service = HttpSearchService(
            build_client(config.search_service_url, config.backend_timeout)
        )

    publisher = RedisPublisher.from_url(config.redis_url)
    notifier = MutationNotifier(
        publisher,
        Channels(
            create=config.create_channel,
            update=config.update_channel,
            delete=config.delete_channel,
        ),
        publish_on_create=config.publish_on_create,
    )

    dispatcher = Dispatcher(
        record_gateway=RecordGateway(record_service, notifier),
        search_gateway=SearchGateway(search_service),
    )

    logger.info(
        "Backends configured: record=%s search=%s redis=%s",
        config.record_service_url,
        config.search_service_url or "disabled",
        config.redis_url,
    )
    return Backends(
        record_service=record_service,
        search_service=search_service,
        publisher=publisher,
        dispatcher=dispatcher,
    )


# ── Lifecycle Helpers ─────────────────────────────────────────────────────
async def dispose_backends(backends: Backends) -> None:
    """
    What:  Closes every pooled connection.
    When:  Called during application shutdown (lifespan handler).
    """
    await backends.record_service.aclose()
    if backends.search_service is not None:
        await backends.search_service.aclose()
    await backends.publisher.aclose()


# ── Request Dependencies ──────────────────────────────────────────────────
def get_backends(request: Request) -> Backends:
    """FastAPI dependency returning the process-wide Backends."""
    return request.app.state.backends


def get_dispatcher(backends: Backends = Depends(get_backends)) -> Dispatcher:
    return backends.dispatcher


def get_caller_identity(request: Request) -> CallerIdentity:
    """
    FastAPI dependency building the caller identity from the identity header.

    A missing header yields an anonymous caller; operations that need an
    author then fail with MissingIdentityError instead of guessing.
    """
    return CallerIdentity.from_header(request.headers.get(settings.identity_header))
