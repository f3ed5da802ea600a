"""
Moderation log repository.
Журнал смены статусов вопросов и жалоб. Записи только добавляются.
"""

from typing import Optional, List
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from database.models import QuestionLog, ReportLog


class ModerationLogRepository:
    """Репозиторий для журнала модерации."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def add_question_log(
        self,
        question_id: int,
        action: str,
        admin_telegram_id: int,
        previous_status: str,
        new_status: str,
        admin_id: Optional[int] = None,
        comment: Optional[str] = None,
    ) -> QuestionLog:
        """Добавить запись о смене статуса вопроса."""
        log = QuestionLog(
            question_id=question_id,
            action=action,
            admin_id=admin_id,
            admin_telegram_id=admin_telegram_id,
            previous_status=previous_status,
            new_status=new_status,
            comment=comment,
        )
        self.session.add(log)
        await self.session.flush()
        return log

    async def add_report_log(
        self,
        report_id: int,
        action: str,
        admin_telegram_id: int,
        previous_status: str,
        new_status: str,
        admin_id: Optional[int] = None,
        comment: Optional[str] = None,
    ) -> ReportLog:
        """Добавить запись о смене статуса жалобы."""
        log = ReportLog(
            report_id=report_id,
            action=action,
            admin_id=admin_id,
            admin_telegram_id=admin_telegram_id,
            previous_status=previous_status,
            new_status=new_status,
            comment=comment,
        )
        self.session.add(log)
        await self.session.flush()
        return log

    async def list_question_logs(self, question_id: int) -> List[QuestionLog]:
        result = await self.session.execute(
            select(QuestionLog)
            .where(QuestionLog.question_id == question_id)
            .order_by(QuestionLog.id)
        )
        return list(result.scalars().all())

    async def list_report_logs(self, report_id: int) -> List[ReportLog]:
        result = await self.session.execute(
            select(ReportLog)
            .where(ReportLog.report_id == report_id)
            .order_by(ReportLog.id)
        )
        return list(result.scalars().all())
