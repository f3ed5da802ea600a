"""
Audit service.
Журнал переходов статусов вопросов и жалоб.
"""

from typing import Optional
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import QuestionLog, ReportLog
from database.repositories.moderation_log import ModerationLogRepository


class AuditService:
    """
    Запись аудита модерации.

    Пишет в ту же сессию, что и смена статуса, поэтому запись журнала
    и переход фиксируются одним коммитом. Ошибка записи откатывает переход.
    """

    # Комментарии к действиям
    COMMENT_ANSWERED = "Answer provided"
    COMMENT_TEMPLATE = "{entity} {action}"

    async def log_question_transition(
        self,
        session: AsyncSession,
        question_id: int,
        action: str,
        admin_telegram_id: int,
        previous_status: str,
        new_status: str,
        admin_id: Optional[int] = None,
        comment: Optional[str] = None,
    ) -> QuestionLog:
        """
        Записывает переход статуса вопроса.

        Args:
            session: Сессия текущей транзакции
            question_id: ID вопроса
            action: Действие модератора (answer, reject, archive)
            admin_telegram_id: Telegram ID модератора
            previous_status: Статус до перехода
            new_status: Статус после перехода
            admin_id: Внутренний ID модератора, если он зарегистрирован
            comment: Комментарий
        """
        log = await ModerationLogRepository(session).add_question_log(
            question_id=question_id,
            action=action.upper(),
            admin_id=admin_id,
            admin_telegram_id=admin_telegram_id,
            previous_status=previous_status,
            new_status=new_status,
            comment=comment or self.COMMENT_TEMPLATE.format(entity="Question", action=new_status.lower()),
        )
        logger.info(
            f"Moderation audit: question #{question_id} {previous_status} -> {new_status} "
            f"by {admin_telegram_id}"
        )
        return log

    async def log_report_transition(
        self,
        session: AsyncSession,
        report_id: int,
        action: str,
        admin_telegram_id: int,
        previous_status: str,
        new_status: str,
        admin_id: Optional[int] = None,
        comment: Optional[str] = None,
    ) -> ReportLog:
        """Записывает переход статуса жалобы."""
        log = await ModerationLogRepository(session).add_report_log(
            report_id=report_id,
            action=action.upper(),
            admin_id=admin_id,
            admin_telegram_id=admin_telegram_id,
            previous_status=previous_status,
            new_status=new_status,
            comment=comment,
        )
        logger.info(
            f"Moderation audit: report #{report_id} {previous_status} -> {new_status} "
            f"by {admin_telegram_id}"
        )
        return log


# Глобальный экземпляр
audit_service = AuditService()
