"""
Database package.
Содержит модели, репозитории и сессии для работы с БД.
"""

from database.session import (
    async_session,
    engine,
    get_session_context,
    init_db,
    close_db,
)
from database.models import (
    Base,
    User,
    UserProfile,
    Report,
    ReportLog,
    PersonalQuestion,
    QuestionLog,
    Payment,
    WebAppSession,
)

__all__ = [
    # Session
    "async_session",
    "engine",
    "get_session_context",
    "init_db",
    "close_db",
    # Models
    "Base",
    "User",
    "UserProfile",
    "Report",
    "ReportLog",
    "PersonalQuestion",
    "QuestionLog",
    "Payment",
    "WebAppSession",
]
