"""
Access control.
Проверка прав на действия модерации.
"""

from typing import Optional
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.constants import PRIVILEGED_ROLES
from database.repositories.user import UserRepository


class AccessControl:
    """
    Доступ к модерации.

    Привилегированный чат (ADMIN_CHAT_ID) допускается всегда, остальные
    только с ролью ADMIN или MODERATOR. Неизвестному актору отказ.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        admin_chat_id: Optional[int] = None,
    ):
        self._session_factory = session_factory
        self.admin_chat_id = admin_chat_id

    async def check_access(self, actor_telegram_id: int) -> bool:
        if self.admin_chat_id is not None and actor_telegram_id == self.admin_chat_id:
            return True

        async with self._session_factory() as session:
            role = await UserRepository(session).get_role(actor_telegram_id)

        allowed = role is not None and role in PRIVILEGED_ROLES
        if not allowed:
            logger.warning(f"Access denied for {actor_telegram_id} (role={role})")
        return allowed
