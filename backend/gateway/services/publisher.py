"""
Notes Gateway — Mutation Notifier
==================================

What:  Publishes a note to a downstream channel after a successful mutation.
How:   MutationNotifier knows which channel belongs to which mutation kind and
       hands the note to a NotificationPublisher. The production publisher
       sends the note's JSON over Redis pub/sub (redis.asyncio).
Who:   Called by RecordGateway after the record service reports success.
When:  At most once per mutation, and only after the mutation succeeded.

Failure semantics:
    A failed publish raises PublishError. The mutation it follows is already
    stored and is NOT rolled back; the two effects are not transactional.
    Nothing is retried.

Channels (configurable):
    notes.create   createNote (only when PUBLISH_ON_CREATE is enabled)
    notes.update   updateNote, receives the note as requested
    notes.delete   deleteNote, receives the note as returned by the backend
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

import redis.asyncio as redis
from redis.exceptions import RedisError

from gateway.exceptions import PublishError
from gateway.models.note import Note

logger = logging.getLogger(__name__)


class NotificationPublisher(ABC):
    """Transport that delivers a note to the subscribers of a channel."""

    @abstractmethod
    async def publish(self, channel: str, note: Note) -> None:
        """
        Deliver `note` to `channel`.

        Raises:
            PublishError: The transport rejected or failed the publish.
        """
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        ...


class RedisPublisher(NotificationPublisher):
    """Publishes notes as JSON messages on Redis pub/sub channels."""

    def __init__(self, client: "redis.Redis"):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisPublisher":
        return cls(redis.from_url(url, decode_responses=False))

    async def publish(self, channel: str, note: Note) -> None:
        message = json.dumps(note.to_wire())
        try:
            receivers = await self._client.publish(channel, message)
        except (RedisError, OSError) as e:
            logger.error(
                "Publish of note %s to %s failed: %s",
                note.id,
                channel,
                repr(e),
            )
            raise PublishError(
                channel=channel,
                context={"note_id": note.id, "error_type": type(e).__name__},
            )
        logger.info(
            "Published note %s to %s (%d subscribers)",
            note.id,
            channel,
            receivers,
        )

    async def health_check(self) -> bool:
        try:
            return bool(await self._client.ping())
        except (RedisError, OSError) as e:
            logger.warning("Redis health check failed: %s", repr(e))
            return False

    async def aclose(self) -> None:
        await self._client.aclose()


@dataclass(frozen=True)
class Channels:
    create: str
    update: str
    delete: str


class MutationNotifier:
    """
    Maps mutation kinds to channels and publishes exactly once per call.

    `publish_on_create` keeps the create channel wired but silent unless
    enabled, since no subscriber consumes created notes yet.
    """

    def __init__(
        self,
        publisher: NotificationPublisher,
        channels: Channels,
        publish_on_create: bool = False,
    ):
        self.publisher = publisher
        self.channels = channels
        self.publish_on_create = publish_on_create

    async def notify_created(self, note: Note) -> None:
        if not self.publish_on_create:
            return
        await self.publisher.publish(self.channels.create, note)

    async def notify_updated(self, note: Note) -> None:
        await self.publisher.publish(self.channels.update, note)

    async def notify_deleted(self, note: Note) -> None:
        await self.publisher.publish(self.channels.delete, note)
