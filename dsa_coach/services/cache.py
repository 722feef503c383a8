from __future__ import annotations

import json
import logging
from hashlib import sha256
from typing import Any, Dict, Optional

from redis.asyncio import Redis
from redis.exceptions import RedisError

from dsa_coach.core.config import settings

logger = logging.getLogger(__name__)


class CacheService:
    """
    Thin wrapper around Redis for namespaced caching of catalog lookups.

    Redis is optional infrastructure: read and write errors are logged and treated
    as cache misses.
    """

    def __init__(self, client: Redis, ttl_seconds: Optional[int] = None) -> None:
        self._client = client
        self._ttl = settings.cache_ttl_seconds if ttl_seconds is None else ttl_seconds

    @staticmethod
    def build_key(namespace: str, payload: Dict[str, Any]) -> str:
        serialized = json.dumps(payload, sort_keys=True, ensure_ascii=False)
        digest = sha256(serialized.encode("utf-8")).hexdigest()
        return f"catalog:{namespace}:{digest}"

    async def get(self, key: str) -> Optional[Any]:
        try:
            value = await self._client.get(key)
        except (RedisError, OSError) as exc:
            logger.warning("Cache read failed for %s: %s", key, exc)
            return None
        if value is None:
            return None
        try:
            return json.loads(value)
        except ValueError:
            logger.warning("Discarding undecodable cache entry %s", key)
            return None

    async def set(self, key: str, data: Any) -> None:
        try:
            await self._client.set(key, json.dumps(data), ex=self._ttl)
        except (RedisError, OSError) as exc:
            logger.warning("Cache write failed for %s: %s", key, exc)
