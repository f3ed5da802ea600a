"""
User repository.
CRUD операции для пользователей.
"""

from datetime import datetime
from typing import Optional, Tuple
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from config.constants import UserRole
from database.models import User


# Поля, которые обновляются при каждом повторном входе
UPSERT_FIELDS = (
    "username",
    "avatar",
    "first_name",
    "last_name",
    "language_code",
    "is_premium",
)


class UserRepository:
    """Репозиторий для работы с пользователями."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, user_id: int) -> Optional[User]:
        """Получить пользователя по ID."""
        result = await self.session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_for_update(self, user_id: int) -> Optional[User]:
        """Получить пользователя с блокировкой строки до конца транзакции."""
        result = await self.session.execute(
            select(User).where(User.id == user_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def get_by_telegram_id(self, telegram_id: int) -> Optional[User]:
        """Получить пользователя по Telegram ID."""
        result = await self.session.execute(
            select(User).where(User.telegram_id == telegram_id)
        )
        return result.scalar_one_or_none()

    async def get_role(self, telegram_id: int) -> Optional[UserRole]:
        """Роль пользователя или None, если пользователь неизвестен."""
        result = await self.session.execute(
            select(User.role).where(User.telegram_id == telegram_id)
        )
        return result.scalar_one_or_none()

    async def upsert(self, telegram_id: int, **fields) -> Tuple[User, bool]:
        """
        Создать пользователя или обновить его данные.
        Возвращает (user, created).
        """
        user = await self.get_by_telegram_id(telegram_id)
        values = {
            key: fields[key] for key in UPSERT_FIELDS
            if fields.get(key) is not None
        }

        if user:
            for key, value in values.items():
                setattr(user, key, value)
            user.updated_at = datetime.now()
            await self.session.flush()
            return user, False

        user = User(telegram_id=telegram_id, **values)
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user, True
