"""
Queue transport - pushes JSON notifications onto named Redis lists.

Each destination queue is a Redis list. Consumers BRPOP from the list name,
so LPUSH + BRPOP gives FIFO delivery per queue.
"""
import json
import logging
from typing import Any, Optional, Protocol

logger = logging.getLogger(__name__)

# Redis client (lazily initialized)
_redis_client = None


async def get_redis():
    """Get or create Redis connection."""
    global _redis_client
    if _redis_client is None:
        import redis.asyncio as aioredis
        from event_proxy.config import get_settings
        _redis_client = aioredis.from_url(
            get_settings().redis_url,
            decode_responses=True,
        )
    return _redis_client


async def close_redis() -> None:
    """Close the shared Redis connection, if one was opened."""
    global _redis_client
    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None


class QueuePublisher(Protocol):
    """Anything that can publish a message to a named queue. Raises on failure."""

    async def publish(self, queue_name: str, message: dict[str, Any]) -> None:
        ...


class RedisQueuePublisher:
    """Publishes messages by LPUSHing their JSON encoding onto a Redis list."""

    def __init__(self, redis_client: Optional[Any] = None):
        self._redis = redis_client

    async def _client(self):
        if self._redis is None:
            self._redis = await get_redis()
        return self._redis

    async def publish(self, queue_name: str, message: dict[str, Any]) -> None:
        redis = await self._client()
        payload = json.dumps(message)
        await redis.lpush(queue_name, payload)
        logger.debug("Pushed %d bytes to %s", len(payload), queue_name)

    async def ping(self) -> bool:
        redis = await self._client()
        return bool(await redis.ping())
