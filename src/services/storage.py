import logging
from typing import Dict, Optional

import redis
from redis.exceptions import RedisError

from services.journey_engine.models import StorageError
from src.core.config import RedisSettings, redis_settings

logger = logging.getLogger(__name__)


class RedisSessionStorage:
    """
    Stores serialized journey sessions in Redis.

    Every Redis failure is re-raised as StorageError so the session store can
    log it and carry on with its in-memory copy.
    """

    def __init__(self, client: Optional[redis.Redis] = None, settings: RedisSettings = redis_settings):
        self.settings = settings
        if client is None:
            logger.info(f"Creating Redis client for session storage at: {settings.url}")
            # decode_responses=True so payloads come back as str
            client = redis.Redis.from_url(
                settings.url,
                decode_responses=True,
                socket_connect_timeout=settings.socket_connect_timeout,
                socket_timeout=settings.socket_timeout,
            )
        self.client = client

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.client.get(key)
        except RedisError as e:
            logger.error(f"Error getting session key '{key}': {e}")
            raise StorageError(f"Redis GET failed for '{key}'") from e
        if value is not None:
            logger.debug(f"Session hit: key='{key}'")
        else:
            logger.debug(f"Session miss: key='{key}'")
        return value

    def set(self, key: str, value: str) -> None:
        ttl = self.settings.session_ttl_seconds
        try:
            self.client.set(key, value, ex=ttl if ttl > 0 else None)
            logger.debug(f"Session set: key='{key}', expiry={ttl}s")
        except RedisError as e:
            logger.error(f"Error setting session key '{key}': {e}")
            raise StorageError(f"Redis SET failed for '{key}'") from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete(key)
        except RedisError as e:
            logger.error(f"Error deleting session key '{key}': {e}")
            raise StorageError(f"Redis DELETE failed for '{key}'") from e


class InMemorySessionStorage:
    """Process-local storage for tests and single-process local runs."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self):
        return list(self._data)


def get_session_storage(backend: str):
    """Builds the configured storage backend ('redis' or 'memory')."""
    if backend == "memory":
        logger.warning("Using in-memory session storage; sessions will not survive a restart.")
        return InMemorySessionStorage()
    if backend == "redis":
        return RedisSessionStorage()
    raise ValueError(f"Unknown session storage backend: {backend}")
