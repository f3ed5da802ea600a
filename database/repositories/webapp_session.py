"""
WebAppSession repository.
Сессии Telegram Mini App.
"""

from datetime import datetime
from typing import Optional
from sqlalchemy import select, update, func
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import WebAppSession


class WebAppSessionRepository:
    """Репозиторий для сессий Mini App."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get(self, session_id: int) -> Optional[WebAppSession]:
        """Получить сессию по ID."""
        result = await self.session.execute(
            select(WebAppSession).where(WebAppSession.id == session_id)
        )
        return result.scalar_one_or_none()

    async def expire_active(self, user_id: int, now: datetime) -> int:
        """
        Завершить все действующие сессии пользователя.

        Returns:
            Количество завершённых сессий
        """
        result = await self.session.execute(
            update(WebAppSession)
            .where(
                WebAppSession.user_id == user_id,
                WebAppSession.expires_at > now,
            )
            .values(expires_at=now)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0

    async def create(
        self,
        user_id: int,
        expires_at: datetime,
        init_data: str = "",
    ) -> WebAppSession:
        """Создать новую сессию."""
        webapp_session = WebAppSession(
            user_id=user_id,
            init_data=init_data,
            expires_at=expires_at,
        )
        self.session.add(webapp_session)
        await self.session.flush()
        await self.session.refresh(webapp_session)
        return webapp_session

    async def count_active(self, user_id: int, now: datetime) -> int:
        """Количество действующих сессий пользователя."""
        result = await self.session.execute(
            select(func.count(WebAppSession.id)).where(
                WebAppSession.user_id == user_id,
                WebAppSession.expires_at > now,
            )
        )
        return result.scalar() or 0
