"""
Redis client service.
Асинхронный клиент Redis для общего кэша снимков.
"""

import redis.asyncio as redis
from typing import Optional, Any
from loguru import logger


class RedisClient:
    """
    Асинхронный клиент Redis.

    Один экземпляр создаётся при старте и передаётся потребителям явно.
    Пока подключения нет, операции возвращают пустой результат.
    """

    def __init__(self, url: str):
        self.url = url
        self._redis: Optional[redis.Redis] = None

    async def connect(self) -> None:
        """Подключается к Redis."""
        if self._redis is None:
            try:
                self._redis = redis.from_url(
                    self.url,
                    encoding="utf-8",
                    decode_responses=True,
                )
                await self._redis.ping()
                logger.info(f"Connected to Redis: {self.url}")
            except redis.RedisError as e:
                logger.warning(f"Failed to connect to Redis: {e}. Cache disabled.")
                self._redis = None

    async def disconnect(self) -> None:
        """Отключается от Redis."""
        if self._redis:
            await self._redis.aclose()
            self._redis = None
            logger.info("Disconnected from Redis")

    @property
    def is_connected(self) -> bool:
        return self._redis is not None

    async def get(self, key: str) -> Optional[str]:
        """Получает значение по ключу."""
        if not self._redis:
            return None
        try:
            return await self._redis.get(key)
        except redis.RedisError as e:
            logger.error(f"Redis GET error: {e}")
            return None

    async def set(
        self,
        key: str,
        value: Any,
        expire: Optional[int] = None,
    ) -> bool:
        """
        Устанавливает значение.

        Args:
            key: Ключ
            value: Значение
            expire: Время жизни в секундах
        """
        if not self._redis:
            return False
        try:
            await self._redis.set(key, value, ex=expire)
            return True
        except redis.RedisError as e:
            logger.error(f"Redis SET error: {e}")
            return False

    async def delete(self, key: str) -> bool:
        """Удаляет ключ."""
        if not self._redis:
            return False
        try:
            await self._redis.delete(key)
            return True
        except redis.RedisError as e:
            logger.error(f"Redis DELETE error: {e}")
            return False
