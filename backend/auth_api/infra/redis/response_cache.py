from __future__ import annotations

import json
import logging
from typing import Any, cast

import redis  # type: ignore[import-untyped]
from redis.exceptions import RedisError  # type: ignore[import-untyped]

logger = logging.getLogger(__name__)


class RedisResponseCache:
    """
    JSON response cache keyed under a common prefix.

    Redis failures never break a request: reads degrade to a miss and
    writes to a no-op, with a warning in the log.
    """

    def __init__(self, r: redis.Redis, *, default_ttl: int = 3600, prefix: str = "cache:"):
        self.r = r
        self.default_ttl = default_ttl
        self.prefix = prefix

    def _k(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Any | None:
        try:
            raw = self.r.get(self._k(key))
        except RedisError:
            logger.warning("Cache read failed", exc_info=True, extra={"kind": "cache"})
            return None
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Dropping undecodable cache entry", extra={"kind": "cache"})
            self.delete(key)
            return None

    def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        seconds = max(1, int(ttl if ttl is not None else self.default_ttl))
        try:
            self.r.setex(self._k(key), seconds, json.dumps(value, default=str))
        except RedisError:
            logger.warning("Cache write failed", exc_info=True, extra={"kind": "cache"})

    def delete(self, key: str) -> None:
        try:
            self.r.delete(self._k(key))
        except RedisError:
            logger.warning("Cache delete failed", exc_info=True, extra={"kind": "cache"})

    def clear(self) -> int:
        """Delete every key under the prefix; return how many were removed."""
        removed = 0
        try:
            batch: list[Any] = []
            for k in self.r.scan_iter(match=f"{self.prefix}*", count=500):
                batch.append(k)
                if len(batch) >= 500:
                    removed += cast(int, self.r.delete(*batch))
                    batch.clear()
            if batch:
                removed += cast(int, self.r.delete(*batch))
        except RedisError:
            logger.warning("Cache clear failed", exc_info=True, extra={"kind": "cache"})
        return removed
