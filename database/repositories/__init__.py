"""
Database repositories package.
"""

from database.repositories.user import UserRepository
from database.repositories.profile import UserProfileRepository
from database.repositories.question import QuestionRepository
from database.repositories.report import ReportRepository
from database.repositories.moderation_log import ModerationLogRepository
from database.repositories.webapp_session import WebAppSessionRepository
from database.repositories.payment import PaymentRepository

__all__ = [
    "UserRepository",
    "UserProfileRepository",
    "QuestionRepository",
    "ReportRepository",
    "ModerationLogRepository",
    "WebAppSessionRepository",
    "PaymentRepository",
]
