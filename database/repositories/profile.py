"""
User Profile repository.
CRUD операции для анкет пользователей.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from loguru import logger

from database.models import User, UserProfile


class UserProfileRepository:
    """Репозиторий для работы с анкетами пользователей."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_user_id(self, user_id: int, with_user: bool = False) -> Optional[UserProfile]:
        """Получить анкету по внутреннему user_id."""
        query = select(UserProfile).where(UserProfile.user_id == user_id)
        if with_user:
            query = query.options(selectinload(UserProfile.user))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_by_telegram_id(self, telegram_id: int) -> Optional[UserProfile]:
        """Получить анкету по Telegram ID владельца."""
        result = await self.session.execute(
            select(UserProfile)
            .join(User, User.id == UserProfile.user_id)
            .where(User.telegram_id == telegram_id)
        )
        return result.scalar_one_or_none()

    async def upsert(
        self,
        user_id: int,
        nickname: str,
        age: int,
        telegram: str,
        skills: str,
    ) -> UserProfile:
        """
        Создать или перезаписать анкету.

        Любое сохранение сбрасывает одобрение: анкета снова уходит
        на модерацию.
        """
        profile = await self.get_by_user_id(user_id)

        if not profile:
            profile = UserProfile(user_id=user_id)
            self.session.add(profile)
            logger.info(f"Created new profile for user_id={user_id}")

        profile.nickname = nickname
        profile.age = age
        profile.telegram = telegram
        profile.skills = skills
        profile.is_approved = False
        profile.last_edited = datetime.now()

        await self.session.flush()
        return profile

    async def set_approved(self, profile: UserProfile, approved: bool) -> UserProfile:
        """Выставить флаг одобрения и отметку времени."""
        profile.is_approved = approved
        profile.last_edited = datetime.now()
        await self.session.flush()
        return profile
