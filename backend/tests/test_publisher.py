"""
Notes Gateway — Notification Publisher Tests
=============================================

What:  Tests for RedisPublisher (with a mocked redis client) and MutationNotifier.

What we test:
    ✅ Note is published as JSON in the backend wire format
    ✅ Redis failures become PublishError carrying the channel
    ✅ Health check never raises
    ✅ Create channel is silent unless enabled
"""

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from gateway.exceptions import PublishError
from gateway.models.note import Note
from gateway.services.publisher import Channels, MutationNotifier, RedisPublisher


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.publish = AsyncMock(return_value=1)
    client.ping = AsyncMock(return_value=True)
    client.aclose = AsyncMock()
    return client


class TestRedisPublisher:
    @pytest.mark.asyncio
    async def test_publish_sends_wire_json(self, redis_client):
        publisher = RedisPublisher(redis_client)
        note = Note(id="1", title="T", image=b"\x00\xff")

        await publisher.publish("notes.update", note)

        channel, message = redis_client.publish.await_args.args
        assert channel == "notes.update"
        payload = json.loads(message)
        assert payload["id"] == "1"
        assert payload["title"] == "T"
        assert payload["image"] == "AP8="
        assert payload["dateCreated"].startswith("1970-01-01T00:00:00")

    @pytest.mark.asyncio
    async def test_redis_failure_raises_publish_error(self, redis_client):
        redis_client.publish.side_effect = RedisConnectionError("connection refused")
        publisher = RedisPublisher(redis_client)

        with pytest.raises(PublishError) as exc_info:
            await publisher.publish("notes.delete", Note(id="1"))

        assert exc_info.value.channel == "notes.delete"
        assert exc_info.value.context["note_id"] == "1"

    @pytest.mark.asyncio
    async def test_health_check(self, redis_client):
        assert await RedisPublisher(redis_client).health_check() is True

        redis_client.ping.side_effect = RedisConnectionError("down")
        assert await RedisPublisher(redis_client).health_check() is False

    @pytest.mark.asyncio
    async def test_aclose(self, redis_client):
        await RedisPublisher(redis_client).aclose()
        redis_client.aclose.assert_awaited_once()


class TestMutationNotifier:
    channels = Channels(create="c", update="u", delete="d")

    @pytest.mark.asyncio
    async def test_created_is_silent_by_default(self):
        publisher = AsyncMock()
        await MutationNotifier(publisher, self.channels).notify_created(Note(id="1"))
        publisher.publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_created_when_enabled(self):
        publisher = AsyncMock()
        note = Note(id="1")
        await MutationNotifier(publisher, self.channels, publish_on_create=True).notify_created(note)
        publisher.publish.assert_awaited_once_with("c", note)

    @pytest.mark.asyncio
    async def test_updated_and_deleted_channels(self):
        publisher = AsyncMock()
        notifier = MutationNotifier(publisher, self.channels)
        note = Note(id="1")

        await notifier.notify_updated(note)
        await notifier.notify_deleted(note)

        assert [call.args[0] for call in publisher.publish.await_args_list] == ["u", "d"]
