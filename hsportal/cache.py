"""Cache store clients used by the dashboard API.

``RedisCacheStore`` is the production store.  ``NullCacheStore`` stands in
when dashboard caching is switched off, so callers never need to check
whether a cache is configured.  ``BackgroundWriter`` runs cache writes off
the request thread.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional

from redis import Redis

logger = logging.getLogger(__name__)


class RedisCacheStore:
    """Thin string key-value wrapper around a Redis client."""

    def __init__(self, client: Redis) -> None:
        self.client = client

    @classmethod
    def from_config(cls, config: Dict[str, Any]) -> "RedisCacheStore":
        url = config.get("REDIS_URL")
        if url:
            client = Redis.from_url(url, decode_responses=True)
        else:
            client = Redis(
                host=config.get("REDIS_HOST", "localhost"),
                port=config.get("REDIS_PORT", 6379),
                db=config.get("REDIS_DB", 0),
                password=config.get("REDIS_PASSWORD"),
                decode_responses=True,
            )
        return cls(client)

    def get(self, key: str) -> Optional[str]:
        value = self.client.get(key)
        if isinstance(value, bytes):
            return value.decode("utf-8")
        return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        self.client.set(key, value, ex=ttl_seconds)

    def close(self) -> None:
        self.client.close()


class NullCacheStore:
    """Cache store that never holds anything."""

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        pass

    def close(self) -> None:
        pass


def build_cache_store(config: Dict[str, Any]):
    if not config.get("DASHBOARD_CACHE_ENABLED", True):
        logger.info("Dashboard caching disabled")
        return NullCacheStore()
    return RedisCacheStore.from_config(config)


class BackgroundWriter:
    """Run callables on a small thread pool without waiting for them."""

    def __init__(self, max_workers: int = 2) -> None:
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="cache-writer"
        )

    def submit(self, func: Callable[..., Any], *args: Any) -> Future:
        return self._executor.submit(func, *args)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
