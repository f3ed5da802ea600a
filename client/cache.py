"""
Snapshot cache.
Кэш снимков состояния сторов с ограниченным временем жизни.

Запись хранится как {"data": ..., "timestamp": <ms>}. Запись старше TTL
удаляется при чтении и считается промахом.
"""

import json
import math
import time
from typing import Any, Callable, Dict, Optional

from loguru import logger

from services.redis_client import RedisClient


class CacheStorage:
    """Хранилище строк по ключу."""

    async def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    async def set(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        raise NotImplementedError

    async def delete(self, key: str) -> None:
        raise NotImplementedError

    async def close(self) -> None:
        pass


class MemoryStorage(CacheStorage):
    """Хранилище в памяти процесса. Срок жизни проверяет SnapshotCache."""

    def __init__(self):
        self._data: Dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        self._data[key] = value

    async def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def __contains__(self, key: str) -> bool:
        return key in self._data


class RedisStorage(CacheStorage):
    """Общее хранилище в Redis. Ключ дополнительно получает EXPIRE."""

    def __init__(self, redis_client: RedisClient):
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        return await self.redis.get(key)

    async def set(self, key: str, value: str, ttl: Optional[float] = None) -> None:
        await self.redis.set(key, value, expire=math.ceil(ttl) if ttl else None)

    async def delete(self, key: str) -> None:
        await self.redis.delete(key)

    async def close(self) -> None:
        await self.redis.disconnect()


class SnapshotCache:
    """
    Кэш снимков с TTL.

    Args:
        storage: Хранилище (MemoryStorage, RedisStorage)
        ttl: Время жизни записи в секундах
        clock: Источник времени в секундах (подменяется в тестах)
        namespace: Префикс ключей
    """

    def __init__(
        self,
        storage: CacheStorage,
        ttl: float,
        clock: Callable[[], float] = time.time,
        namespace: str = "",
    ):
        self.storage = storage
        self.ttl = ttl
        self.clock = clock
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}" if self.namespace else key

    def _now_ms(self) -> int:
        return int(self.clock() * 1000)

    async def get(self, key: str) -> Optional[Any]:
        """Данные снимка или None при промахе."""
        full_key = self._key(key)
        raw = await self.storage.get(full_key)
        if raw is None:
            return None

        try:
            entry = json.loads(raw)
            data, timestamp = entry["data"], entry["timestamp"]
        except (ValueError, TypeError, KeyError) as e:
            logger.warning(f"Corrupted cache entry {full_key}: {e}")
            await self.storage.delete(full_key)
            return None

        if self._now_ms() - timestamp > self.ttl * 1000:
            await self.storage.delete(full_key)
            return None

        return data

    async def set(self, key: str, data: Any) -> int:
        """Сохраняет снимок. Возвращает отметку времени (ms)."""
        timestamp = self._now_ms()
        entry = json.dumps({"data": data, "timestamp": timestamp}, default=str)
        await self.storage.set(self._key(key), entry, ttl=self.ttl)
        return timestamp

    async def invalidate(self, key: str) -> None:
        await self.storage.delete(self._key(key))
