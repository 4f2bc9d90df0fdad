"""Publish/subscribe contract consumed by handlers.

Real transports (MQTT, Kafka, ...) live outside this package and only need to
satisfy PublisherSubscriber. InMemoryPubSub is a queue-backed stand-in for
tests and local runs.
"""

import asyncio
import json
from dataclasses import dataclass, field
from typing import Any, Protocol

from httpdispatch.logging import get_logger

logger = get_logger(__name__)


@dataclass
class Message:
    topic: str
    value: Any
    headers: dict[str, str] = field(default_factory=dict)


class PublisherSubscriber(Protocol):
    async def publish_event(
        self, key: str, value: Any, headers: dict[str, str] | None = None
    ) -> None: ...

    async def subscribe(self) -> Message: ...

    def health_check(self) -> dict[str, Any]: ...


class InMemoryPubSub:
    """Single-topic pub/sub over an asyncio.Queue.

    Values are JSON-encoded on publish and decoded on subscribe, like a wire
    transport would, so unserializable values fail at publish time.
    """

    def __init__(self, topic: str) -> None:
        self.topic = topic
        self._queue: asyncio.Queue[tuple[str, dict[str, str]]] = asyncio.Queue()

    async def publish_event(
        self, key: str, value: Any, headers: dict[str, str] | None = None
    ) -> None:
        encoded = json.dumps(value)
        await self._queue.put((encoded, dict(headers or {})))
        logger.debug("event_published", topic=self.topic, key=key)

    async def subscribe(self) -> Message:
        encoded, headers = await self._queue.get()
        return Message(topic=self.topic, value=json.loads(encoded), headers=headers)

    def health_check(self) -> dict[str, Any]:
        return {"name": "in-memory", "status": "UP", "details": {"topic": self.topic}}
