"""
Profile approval workflow.
Анкеты пользователей и их модерация.
"""

from typing import Optional, Tuple

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.constants import EntityType, ModerationAction
from database.models import User, UserProfile
from database.repositories.profile import UserProfileRepository
from database.repositories.user import UserRepository
from database.session import get_session_context
from services import messages
from services.access import AccessControl
from services.exceptions import NotFoundError, PermissionDeniedError, ValidationFailureError
from services.notifier import Notifier
from utils.sanitizer import sanitize_handle, sanitize_text, MAX_FIELD_LENGTH


class ProfileWorkflow:
    """
    Сервис анкет.

    Модерация адресует анкету по Telegram ID владельца: в сообщении
    модератору есть только он. Внутренний ID используется в RPC.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        notifier: Notifier,
        access: AccessControl,
    ):
        self._session_factory = session_factory
        self.notifier = notifier
        self.access = access

    async def upsert_profile(
        self,
        user_id: int,
        nickname: str,
        age: int,
        telegram: str,
        skills: str,
    ) -> Tuple[UserProfile, User]:
        """
        Создаёт или перезаписывает анкету и отправляет её на модерацию.
        После сохранения анкета всегда не одобрена.

        Returns:
            (profile, user)
        """
        nickname = sanitize_text(nickname or "", max_length=MAX_FIELD_LENGTH)
        telegram = sanitize_handle(telegram or "")
        skills = sanitize_text(skills or "")
        if not nickname or not telegram or not skills:
            raise ValidationFailureError("nickname, telegram and skills are required")
        if age is None or age <= 0:
            raise ValidationFailureError("age must be a positive number")

        async with get_session_context(self._session_factory) as session:
            user = await UserRepository(session).get(user_id)
            if user is None:
                raise NotFoundError(f"User {user_id} not found")

            profile = await UserProfileRepository(session).upsert(
                user_id=user.id,
                nickname=nickname,
                age=age,
                telegram=telegram,
                skills=skills,
            )

        logger.info(f"Profile of user {user_id} saved, awaiting moderation")

        await self.notifier.send_admin_alert(
            messages.profile_alert(user, nickname, age, telegram, skills),
            entity_type=EntityType.PROFILE,
            entity_id=user.telegram_id,
            actions=(ModerationAction.APPROVE, ModerationAction.REJECT),
        )
        return profile, user

    async def get_profile(self, user_id: int) -> Optional[UserProfile]:
        """Анкета пользователя вместе с владельцем или None."""
        async with self._session_factory() as session:
            return await UserProfileRepository(session).get_by_user_id(user_id, with_user=True)

    async def approve_profile(self, telegram_id: int, actor_telegram_id: int) -> UserProfile:
        """
        Одобряет анкету и уведомляет владельца.
        Несуществующая анкета не создаётся.

        Raises:
            NotFoundError: анкеты нет
            PermissionDeniedError: у актора нет прав
        """
        return await self._moderate(telegram_id, actor_telegram_id, approved=True)

    async def reject_profile(self, telegram_id: int, actor_telegram_id: int) -> UserProfile:
        """Отклоняет анкету: флаг не меняется, владелец получает уведомление."""
        return await self._moderate(telegram_id, actor_telegram_id, approved=False)

    async def _moderate(self, telegram_id: int, actor_telegram_id: int, approved: bool) -> UserProfile:
        async with self._session_factory() as session:
            if await UserProfileRepository(session).get_by_telegram_id(telegram_id) is None:
                raise NotFoundError(f"Profile of {telegram_id} not found")

        if not await self.access.check_access(actor_telegram_id):
            raise PermissionDeniedError("You don't have permission for this action")

        async with get_session_context(self._session_factory) as session:
            repo = UserProfileRepository(session)
            profile = await repo.get_by_telegram_id(telegram_id)
            if profile is None:
                raise NotFoundError(f"Profile of {telegram_id} not found")
            if approved:
                profile = await repo.set_approved(profile, True)

        verdict = "approved" if approved else "rejected"
        logger.info(f"Profile of {telegram_id} {verdict} by {actor_telegram_id}")

        text = messages.profile_approved() if approved else messages.profile_rejected()
        await self.notifier.send_alert(telegram_id, text)
        return profile
