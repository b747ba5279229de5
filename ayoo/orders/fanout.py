"""
Order change fan-out.

Views register zero-argument callbacks and re-read the repository when
called. A notification is a hint that something changed, never a delta:
bursts may be coalesced, order is not preserved and nothing is retried.
Writes are announced locally and, through the broadcaster, to sibling
processes listening on the same Redis channel.
"""

import asyncio
import inspect
import json
import time
import uuid
from typing import Awaitable, Callable, List, Optional, Union

import structlog

from ayoo.config import settings

logger = structlog.get_logger()

Callback = Callable[[], Union[None, Awaitable[None]]]


class NullBroadcaster:
    """Broadcaster for single-process deployments and tests"""
    
    async def broadcast(self, message: dict) -> None:
        return None
    
    async def listen(self, hub: "OrderEventHub") -> None:
        return None
    
    async def close(self) -> None:
        return None


class RedisBroadcaster:
    """Cross-process fan-out over Redis pub/sub"""
    
    def __init__(self, redis_url: str, channel: str):
        self.redis_url = redis_url
        self.channel = channel
        self._client = None
    
    def _get_client(self):
        if self._client is None:
            from redis import asyncio as aioredis
            
            self._client = aioredis.from_url(self.redis_url, decode_responses=True)
        return self._client
    
    async def broadcast(self, message: dict) -> None:
        await self._get_client().publish(self.channel, json.dumps(message))
    
    async def listen(self, hub: "OrderEventHub") -> None:
        """Relay messages from other processes until cancelled"""
        pubsub = self._get_client().pubsub()
        await pubsub.subscribe(self.channel)
        logger.info("Listening for order sync", channel=self.channel)
        try:
            async for message in pubsub.listen():
                if message.get("type") != "message":
                    continue
                try:
                    payload = json.loads(message["data"])
                except (TypeError, ValueError):
                    logger.warning("Dropping malformed sync message", data=message.get("data"))
                    continue
                await hub.handle_remote(payload)
        finally:
            await pubsub.unsubscribe(self.channel)
            await pubsub.close()
    
    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None


class OrderEventHub:
    """Publish/subscribe hub for order repository changes"""
    
    def __init__(self, broadcaster=None):
        self.broadcaster = broadcaster or NullBroadcaster()
        self.origin = uuid.uuid4().hex
        self._subscribers: List[Callback] = []
    
    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)
    
    def subscribe(self, callback: Callback) -> Callable[[], None]:
        """Register a callback; returns a disposer that unregisters it"""
        self._subscribers.append(callback)
        
        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)
        
        return unsubscribe
    
    async def notify_local(self) -> None:
        # Snapshot so callbacks may unsubscribe while being notified
        for callback in list(self._subscribers):
            try:
                result = callback()
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                logger.error("Order sync subscriber failed", error=str(e))
    
    async def publish(self, reason: str, order_id: Optional[str] = None) -> None:
        """Announce a repository write to local and remote views"""
        await self.notify_local()
        message = {
            "type": "SYNC",
            "origin": self.origin,
            "reason": reason,
            "order_id": order_id,
            "timestamp": int(time.time() * 1000),
        }
        try:
            await self.broadcaster.broadcast(message)
        except Exception as e:
            logger.warning("Order sync broadcast failed", reason=reason, error=str(e))
    
    async def handle_remote(self, message: dict) -> None:
        if message.get("origin") == self.origin:
            return
        logger.debug("Order sync received", reason=message.get("reason"))
        await self.notify_local()
    
    async def run_listener(self) -> None:
        try:
            await self.broadcaster.listen(self)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            logger.error("Order sync listener stopped", error=str(e))


def build_broadcaster():
    if settings.sync_broadcast_enabled:
        return RedisBroadcaster(settings.redis_url, settings.sync_channel)
    return NullBroadcaster()


hub = OrderEventHub(broadcaster=build_broadcaster())


def get_event_hub() -> OrderEventHub:
    """FastAPI dependency returning the process-wide hub"""
    return hub
