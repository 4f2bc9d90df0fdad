"""Tests for the in-memory publish/subscribe transport."""

import pytest

from httpdispatch.pubsub import InMemoryPubSub, Message


@pytest.mark.asyncio
async def test_published_values_are_received_in_order() -> None:
    pubsub = InMemoryPubSub("orders")

    await pubsub.publish_event("", {"id": 1})
    await pubsub.publish_event("", {"id": 2}, headers={"source": "test"})

    assert await pubsub.subscribe() == Message(topic="orders", value={"id": 1})
    assert await pubsub.subscribe() == Message(
        topic="orders", value={"id": 2}, headers={"source": "test"}
    )


@pytest.mark.asyncio
async def test_values_round_trip_through_json() -> None:
    pubsub = InMemoryPubSub("orders")
    original = {"items": [1, 2]}

    await pubsub.publish_event("k", original)
    original["items"].append(3)

    message = await pubsub.subscribe()
    assert message.value == {"items": [1, 2]}


@pytest.mark.asyncio
async def test_unserializable_value_fails_on_publish() -> None:
    pubsub = InMemoryPubSub("orders")

    with pytest.raises(TypeError):
        await pubsub.publish_event("k", object())


def test_health_check_reports_topic() -> None:
    assert InMemoryPubSub("orders").health_check() == {
        "name": "in-memory",
        "status": "UP",
        "details": {"topic": "orders"},
    }
