"""
Service registry.
Сборка сервисов с общими зависимостями: одна фабрика сессий и один Bot.
"""

from dataclasses import dataclass
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from telegram import Bot

from config.settings import Settings
from services.access import AccessControl
from services.avatar_service import AvatarService
from services.notifier import Notifier
from services.payment_service import PaymentService
from services.profile_service import ProfileWorkflow
from services.question_service import QuestionWorkflow
from services.report_service import ReportWorkflow
from services.user_service import UserService


@dataclass
class ServiceRegistry:
    access: AccessControl
    notifier: Notifier
    questions: QuestionWorkflow
    reports: ReportWorkflow
    profiles: ProfileWorkflow
    users: UserService
    payments: PaymentService


def build_services(
    bot: Bot,
    session_factory: async_sessionmaker[AsyncSession],
    settings: Settings,
) -> ServiceRegistry:
    """Создаёт все сервисы приложения."""
    notifier = Notifier(bot, admin_chat_id=settings.ADMIN_CHAT_ID)
    access = AccessControl(session_factory, admin_chat_id=settings.ADMIN_CHAT_ID)

    return ServiceRegistry(
        access=access,
        notifier=notifier,
        questions=QuestionWorkflow(session_factory, notifier, access),
        reports=ReportWorkflow(session_factory, notifier, access),
        profiles=ProfileWorkflow(session_factory, notifier, access),
        users=UserService(
            session_factory,
            avatars=AvatarService(bot),
            session_ttl=timedelta(hours=settings.SESSION_TTL_HOURS),
        ),
        payments=PaymentService(session_factory, notifier),
    )
