"""
Pytest fixtures and configuration.
"""

import os

# Настройки читаются при импорте config.settings
os.environ.setdefault("TELEGRAM_BOT_TOKEN", "123456:TEST-TOKEN")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("ADMIN_CHAT_ID", "-100500")

from types import SimpleNamespace
from unittest.mock import Mock, AsyncMock

import pytest

from config.constants import UserRole
from database.models import Base, User
from database.session import build_engine, build_session_factory
from services.access import AccessControl
from services.notifier import Notifier
from services.payment_service import PaymentService
from services.profile_service import ProfileWorkflow
from services.question_service import QuestionWorkflow
from services.registry import ServiceRegistry
from services.report_service import ReportWorkflow
from services.user_service import UserService


ADMIN_CHAT_ID = -100500


@pytest.fixture
def mock_bot():
    """Mock Telegram Bot instance."""
    bot = AsyncMock()
    bot.send_message = AsyncMock()
    bot.send_chat_action = AsyncMock()
    return bot


@pytest.fixture
def outbox(mock_bot):
    """Отправленные сообщения: kwargs вызовов bot.send_message."""
    return lambda: [call.kwargs for call in mock_bot.send_message.await_args_list]


@pytest.fixture
def mock_update():
    """Mock Telegram Update."""
    update = Mock()
    update.effective_user = Mock()
    update.effective_user.id = 12345
    update.effective_user.username = "testuser"
    update.effective_user.first_name = "Test"
    update.message = Mock()
    update.message.text = "Test message"
    update.message.reply_text = AsyncMock()
    update.effective_chat = Mock()
    update.effective_chat.id = 12345
    return update


@pytest.fixture
def mock_context():
    """Mock Telegram Context."""
    context = Mock()
    context.bot = AsyncMock()
    context.bot_data = {}
    context.user_data = {}
    return context


@pytest.fixture
async def engine():
    """Отдельная in-memory БД на каждый тест."""
    engine = build_engine("sqlite+aiosqlite:///:memory:")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def users(session_factory):
    """
    Обычный пользователь (id=42), модератор и администратор.
    """
    async with session_factory() as session:
        normal = User(id=42, telegram_id=4242, username="ghost", first_name="Neo")
        moderator = User(telegram_id=5151, username="mod", role=UserRole.MODERATOR)
        admin = User(telegram_id=6161, username="root", role=UserRole.ADMIN)
        session.add_all([normal, moderator, admin])
        await session.commit()
        for user in (normal, moderator, admin):
            await session.refresh(user)

    return SimpleNamespace(normal=normal, moderator=moderator, admin=admin)


@pytest.fixture
def notifier(mock_bot):
    return Notifier(mock_bot, admin_chat_id=ADMIN_CHAT_ID)


@pytest.fixture
def access(session_factory):
    return AccessControl(session_factory, admin_chat_id=ADMIN_CHAT_ID)


@pytest.fixture
def questions(session_factory, notifier, access):
    return QuestionWorkflow(session_factory, notifier, access)


@pytest.fixture
def reports(session_factory, notifier, access):
    return ReportWorkflow(session_factory, notifier, access)


@pytest.fixture
def profiles(session_factory, notifier, access):
    return ProfileWorkflow(session_factory, notifier, access)


@pytest.fixture
def user_service(session_factory):
    return UserService(session_factory)


@pytest.fixture
def payments(session_factory, notifier):
    return PaymentService(session_factory, notifier)


@pytest.fixture
def services(access, notifier, questions, reports, profiles, user_service, payments):
    return ServiceRegistry(
        access=access,
        notifier=notifier,
        questions=questions,
        reports=reports,
        profiles=profiles,
        users=user_service,
        payments=payments,
    )
