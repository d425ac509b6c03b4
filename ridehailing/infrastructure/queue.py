"""
Redis-backed ride event queue.

Events are published as JSON on ``rides.<event>`` channels; consumers
(payment, notifications) subscribe outside this service.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import redis.asyncio as aioredis
from redis.exceptions import RedisError

from ridehailing.application.ports import Queue
from ridehailing.config import settings
from ridehailing.domain.exceptions import GatewayError

logger = logging.getLogger(__name__)

_pool = aioredis.ConnectionPool.from_url(
    settings.redis_url, decode_responses=True
)


async def get_redis() -> aioredis.Redis:
    """Return a Redis client backed by the shared connection pool."""
    return aioredis.Redis(connection_pool=_pool)


class RedisQueue(Queue):
    def __init__(self, client: aioredis.Redis, prefix: str = "rides"):
        self.redis = client
        self.prefix = prefix

    def channel(self, event: str) -> str:
        return f"{self.prefix}.{event}"

    async def publish(self, event: str, payload: dict[str, Any]) -> None:
        try:
            await self.redis.publish(self.channel(event), json.dumps(payload))
        except RedisError as exc:
            logger.exception("Could not publish %s", event)
            raise GatewayError(f"Could not publish {event}") from exc
