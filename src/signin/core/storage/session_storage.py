"""Session storage interface and implementations.

Web sessions live in Redis when it is configured and reachable, and in
process memory otherwise.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from typing import Any, TypeVar

from loguru import logger
from pydantic import BaseModel, ValidationError

T = TypeVar("T", bound=BaseModel)


class SessionStorage(ABC):
    """Abstract interface for session storage backends."""

    @abstractmethod
    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        """Store a value with a time to live."""

    @abstractmethod
    async def get(self, key: str, model_class: type[T]) -> T | None:
        """Retrieve a value, or None if missing or expired."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Delete a value. Deleting a missing key is not an error."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether a live value is stored under ``key``."""

    @abstractmethod
    async def cleanup_expired(self) -> int:
        """Drop expired values and return how many were removed."""


class InMemorySessionStorage(SessionStorage):
    """In-memory session storage with TTL support."""

    def __init__(self) -> None:
        self._data: dict[str, tuple[str, float]] = {}

    def _live_entry(self, key: str) -> str | None:
        entry = self._data.get(key)
        if entry is None:
            return None
        payload, expires_at = entry
        if time.time() > expires_at:
            del self._data[key]
            return None
        return payload

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        self._data[key] = (value.model_dump_json(), time.time() + ttl_seconds)

    async def get(self, key: str, model_class: type[T]) -> T | None:
        payload = self._live_entry(key)
        if payload is None:
            return None
        try:
            return model_class.model_validate_json(payload)
        except ValidationError:
            logger.warning("Dropping unreadable session entry {}", key)
            del self._data[key]
            return None

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    async def exists(self, key: str) -> bool:
        return self._live_entry(key) is not None

    async def cleanup_expired(self) -> int:
        now = time.time()
        expired = [key for key, (_, expires_at) in self._data.items() if now > expires_at]
        for key in expired:
            del self._data[key]
        return len(expired)


class RedisSessionStorage(SessionStorage):
    """Redis-based session storage; expiry is delegated to Redis TTLs."""

    def __init__(self, redis_client: Any) -> None:
        self._redis = redis_client

    async def set(self, key: str, value: BaseModel, ttl_seconds: int) -> None:
        try:
            await self._redis.setex(key, ttl_seconds, value.model_dump_json())
        except Exception as e:
            raise RuntimeError(f"Redis set failed: {e}") from e

    async def get(self, key: str, model_class: type[T]) -> T | None:
        try:
            data = await self._redis.get(key)
        except Exception as e:
            raise RuntimeError(f"Redis get failed: {e}") from e
        if data is None:
            return None
        if isinstance(data, bytes):
            data = data.decode("utf-8")
        return model_class.model_validate_json(data)

    async def delete(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except Exception as e:
            raise RuntimeError(f"Redis delete failed: {e}") from e

    async def exists(self, key: str) -> bool:
        try:
            return bool(await self._redis.exists(key))
        except Exception as e:
            raise RuntimeError(f"Redis exists failed: {e}") from e

    async def cleanup_expired(self) -> int:
        return 0

    async def ping(self) -> bool:
        try:
            await self._redis.ping()
            return True
        except Exception:
            return False


_storage: SessionStorage | None = None


async def _detect_redis_availability() -> SessionStorage:
    """Use Redis when configured and answering, in-memory storage otherwise."""
    import redis.asyncio as redis

    from src.signin.runtime.context import get_config

    config = get_config()
    if not config.redis.enabled or not config.redis.url:
        logger.info("Session storage: in-memory (Redis not configured)")
        return InMemorySessionStorage()

    client = redis.from_url(
        config.redis.connection_string,
        encoding="utf-8",
        decode_responses=True,
        socket_connect_timeout=2,
        socket_timeout=2,
    )
    redis_storage = RedisSessionStorage(client)
    if await redis_storage.ping():
        logger.info("Session storage: Redis connected")
        return redis_storage

    if config.app.environment == "production":
        raise RuntimeError("Redis session storage configured but unreachable")
    logger.warning("Redis unavailable, using in-memory session storage")
    return InMemorySessionStorage()


async def get_session_storage() -> SessionStorage:
    """Get the configured session storage instance."""
    global _storage

    if _storage is None:
        _storage = await _detect_redis_availability()

    return _storage


def _reset_storage() -> None:
    """Reset storage instance (for testing)."""
    global _storage
    _storage = None
