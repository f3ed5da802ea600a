"""
Константы приложения.
"""

from enum import Enum


# =====================================
# РОЛИ
# =====================================
class UserRole(str, Enum):
    NORMAL = "NORMAL"
    MODERATOR = "MODERATOR"
    ADMIN = "ADMIN"


PRIVILEGED_ROLES = frozenset({UserRole.ADMIN, UserRole.MODERATOR})


# =====================================
# СТАТУСЫ
# =====================================
class ReportStatus(str, Enum):
    PENDING = "PENDING"
    REVIEWED = "REVIEWED"
    RESOLVED = "RESOLVED"
    REJECTED = "REJECTED"


class QuestionStatus(str, Enum):
    PENDING = "PENDING"
    ANSWERED = "ANSWERED"
    REJECTED = "REJECTED"
    ARCHIVED = "ARCHIVED"


class PaymentStatus(str, Enum):
    PENDING = "PENDING"
    CONFIRM = "CONFIRM"


REPORT_TERMINAL_STATUSES = frozenset({ReportStatus.RESOLVED, ReportStatus.REJECTED})
QUESTION_TERMINAL_STATUSES = frozenset({
    QuestionStatus.ANSWERED,
    QuestionStatus.REJECTED,
    QuestionStatus.ARCHIVED,
})


# =====================================
# МОДЕРАЦИЯ
# =====================================
class EntityType(str, Enum):
    REPORT = "report"
    QUESTION = "question"
    PROFILE = "profile"


class ModerationAction(str, Enum):
    RESOLVE = "resolve"
    REJECT = "reject"
    ANSWER = "answer"
    ARCHIVE = "archive"
    APPROVE = "approve"


# Допустимые действия для каждого типа сущности
ENTITY_ACTIONS = {
    EntityType.REPORT: (ModerationAction.RESOLVE, ModerationAction.REJECT),
    EntityType.QUESTION: (
        ModerationAction.ANSWER,
        ModerationAction.REJECT,
        ModerationAction.ARCHIVE,
    ),
    EntityType.PROFILE: (ModerationAction.APPROVE, ModerationAction.REJECT),
}

# Действие -> итоговый статус
QUESTION_ACTION_STATUS = {
    ModerationAction.ANSWER: QuestionStatus.ANSWERED,
    ModerationAction.REJECT: QuestionStatus.REJECTED,
    ModerationAction.ARCHIVE: QuestionStatus.ARCHIVED,
}
REPORT_ACTION_STATUS = {
    ModerationAction.RESOLVE: ReportStatus.RESOLVED,
    ModerationAction.REJECT: ReportStatus.REJECTED,
}

# Кнопки клавиатуры модерации
ACTION_BUTTON_TEXT = {
    (EntityType.REPORT, ModerationAction.RESOLVE): "✅ Решить",
    (EntityType.REPORT, ModerationAction.REJECT): "❌ Отклонить",
    (EntityType.QUESTION, ModerationAction.ANSWER): "💬 Ответить",
    (EntityType.QUESTION, ModerationAction.REJECT): "❌ Отклонить",
    (EntityType.QUESTION, ModerationAction.ARCHIVE): "📦 В архив",
    (EntityType.PROFILE, ModerationAction.APPROVE): "✅ Одобрить",
    (EntityType.PROFILE, ModerationAction.REJECT): "❌ Отклонить",
}

# =====================================
# КЭШ КЛИЕНТА
# =====================================
USER_CACHE_KEY = "userStoreCache"
QUESTIONS_CACHE_KEY = "questionsStoreCache"
REPORTS_CACHE_KEY = "reportsStoreCache"

# =====================================
# ПАГИНАЦИЯ
# =====================================
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
