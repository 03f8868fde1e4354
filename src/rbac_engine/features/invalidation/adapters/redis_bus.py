"""Redis pub/sub invalidation bus."""

import asyncio
import logging
from typing import List, Optional

from redis.asyncio import Redis
from redis.asyncio.client import PubSub
from redis.exceptions import RedisError

from ....config.constants import InvalidationChannels
from ....core.exceptions import InvalidationError
from ..entities.event import InvalidationEvent
from ..entities.protocols import InvalidationHandler


logger = logging.getLogger(__name__)


class RedisInvalidationBus:
    """Publishes events on a Redis channel and dispatches received ones.

    A background task reads the subscription; after a connection error it
    waits ``reconnect_delay`` seconds and subscribes again. Events published
    while disconnected are lost.
    """

    def __init__(
        self,
        redis_client: Redis,
        channel: str = InvalidationChannels.PERMISSIONS,
        reconnect_delay: float = 1.0,
    ):
        self._redis = redis_client
        self.channel = channel
        self._reconnect_delay = reconnect_delay
        self._handlers: List[InvalidationHandler] = []
        self._pubsub: Optional[PubSub] = None
        self._background_tasks: List[asyncio.Task] = []
        self._running = False

    def subscribe(self, handler: InvalidationHandler) -> None:
        self._handlers.append(handler)

    async def start(self) -> None:
        if self._running:
            return
        try:
            await self._subscribe()
        except RedisError:
            self._pubsub = None
            raise
        self._running = True
        self._background_tasks.append(asyncio.create_task(self._listen_loop()))
        logger.info(f"Listening for permission invalidations on '{self.channel}'")

    async def stop(self) -> None:
        self._running = False
        for task in self._background_tasks:
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._background_tasks.clear()
        await self._close_pubsub()

    async def publish(self, event: InvalidationEvent) -> None:
        try:
            await self._redis.publish(self.channel, event.to_json())
        except RedisError as e:
            raise InvalidationError(f"Failed to publish invalidation {event.event_id}: {e}") from e

    async def _subscribe(self) -> None:
        self._pubsub = self._redis.pubsub(ignore_subscribe_messages=True)
        await self._pubsub.subscribe(self.channel)

    async def _close_pubsub(self) -> None:
        if self._pubsub is None:
            return
        try:
            await self._pubsub.unsubscribe(self.channel)
            await self._pubsub.aclose()
        except RedisError as e:
            logger.warning(f"Error closing invalidation subscription: {e}")
        self._pubsub = None

    async def _listen_loop(self) -> None:
        while self._running:
            try:
                async for message in self._pubsub.listen():
                    if message.get("type") != "message":
                        continue
                    await self._handle_message(message.get("data"))
            except RedisError as e:
                logger.error(f"Invalidation subscription lost: {e}; reconnecting")
            else:
                if not self._running:
                    break
                logger.warning("Invalidation subscription ended; resubscribing")
            await self._close_pubsub()
            await self._subscribe_with_retry()

    async def _subscribe_with_retry(self) -> None:
        while self._running and self._pubsub is None:
            await asyncio.sleep(self._reconnect_delay)
            try:
                await self._subscribe()
            except RedisError as e:
                logger.error(f"Invalidation resubscribe failed: {e}")
                self._pubsub = None

    async def _handle_message(self, data) -> None:
        try:
            event = InvalidationEvent.from_json(data)
        except InvalidationError as e:
            logger.warning(f"Ignoring malformed invalidation message: {e}")
            return
        for handler in list(self._handlers):
            try:
                await handler(event)
            except Exception as e:
                logger.error(f"Invalidation handler failed for event {event.event_id}: {e}")
