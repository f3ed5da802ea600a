"""
User service.
Регистрация пользователей Mini App и их сессии.
"""

from datetime import datetime, timedelta
from typing import Optional, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from database.models import User, WebAppSession
from database.repositories.user import UserRepository
from database.repositories.webapp_session import WebAppSessionRepository
from database.session import get_session_context
from services.avatar_service import AvatarService
from services.exceptions import NotFoundError


class UserService:
    """Пользователи и сессии Mini App."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        avatars: Optional[AvatarService] = None,
        session_ttl: timedelta = timedelta(hours=24),
    ):
        self._session_factory = session_factory
        self.avatars = avatars
        self.session_ttl = session_ttl

    async def add_user(
        self,
        telegram_id: int,
        username: Optional[str] = None,
        avatar: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        language_code: Optional[str] = None,
        is_premium: bool = False,
        init_data: str = "",
    ) -> Tuple[User, WebAppSession]:
        """
        Регистрирует пользователя (или обновляет его данные) и открывает
        новую сессию. Если аватарка не передана, она подтягивается из Telegram.

        Raises:
            NotFoundError: пользователь заблокирован
        """
        if not avatar and self.avatars is not None:
            avatar = await self.avatars.fetch_avatar(telegram_id)

        async with get_session_context(self._session_factory) as session:
            user, created = await UserRepository(session).upsert(
                telegram_id,
                username=username,
                avatar=avatar,
                first_name=first_name,
                last_name=last_name,
                language_code=language_code,
                is_premium=is_premium,
            )

        if created:
            logger.info(f"New user registered: {telegram_id} (id={user.id})")

        if not user.is_active:
            logger.warning(f"Blocked user {telegram_id} tried to open the app")
            raise NotFoundError("User blocked")

        webapp_session = await self.create_session(user.id, init_data=init_data)
        return user, webapp_session

    async def get_user(self, user_id: int) -> User:
        async with self._session_factory() as session:
            user = await UserRepository(session).get(user_id)

        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        return user

    async def create_session(self, user_id: int, init_data: str = "") -> WebAppSession:
        """
        Открывает новую сессию, завершая все действующие.

        Строка пользователя блокируется до конца транзакции, поэтому
        параллельные вызовы для одного пользователя выполняются по очереди
        и после каждого остаётся ровно одна действующая сессия.
        """
        now = datetime.now()

        async with get_session_context(self._session_factory) as session:
            user = await UserRepository(session).get_for_update(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")

            repo = WebAppSessionRepository(session)
            expired = await repo.expire_active(user_id, now)
            webapp_session = await repo.create(
                user_id=user_id,
                expires_at=now + self.session_ttl,
                init_data=init_data,
            )

        logger.info(
            f"WebApp session #{webapp_session.id} opened for user {user_id} "
            f"(expired {expired} previous)"
        )
        return webapp_session

    async def close_session(self, session_id: int) -> WebAppSession:
        """
        Завершает сессию, выставляя expires_at в текущее время.

        Raises:
            NotFoundError: сессии нет
        """
        async with get_session_context(self._session_factory) as session:
            webapp_session = await WebAppSessionRepository(session).get(session_id)
            if webapp_session is None:
                raise NotFoundError("sessionId not found")

            webapp_session.expires_at = datetime.now()
            await session.flush()

        logger.info(f"WebApp session #{session_id} closed")
        return webapp_session
