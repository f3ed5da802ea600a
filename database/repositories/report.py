"""
Report repository.
CRUD операции для жалоб пользователей.
"""

from typing import Optional, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from config.constants import ReportStatus
from database.models import Report


class ReportRepository:
    """Репозиторий для работы с жалобами."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        message: str,
        user_id: Optional[int] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Report:
        """
        Создать жалобу.

        Args:
            message: Текст жалобы
            user_id: Внутренний ID автора (жалоба может быть анонимной)
            ip_address: IP адрес клиента
            user_agent: User Agent клиента

        Returns:
            Созданный Report в статусе PENDING
        """
        report = Report(
            message=message,
            user_id=user_id,
            status=ReportStatus.PENDING,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.session.add(report)
        await self.session.flush()
        await self.session.refresh(report)
        return report

    async def get(self, report_id: int, with_logs: bool = False) -> Optional[Report]:
        """Получить жалобу по ID."""
        query = select(Report).where(Report.id == report_id)
        if with_logs:
            query = query.options(selectinload(Report.logs))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_for_update(self, report_id: int) -> Optional[Report]:
        """Перечитать жалобу с блокировкой строки до конца транзакции."""
        result = await self.session.execute(
            select(Report).where(Report.id == report_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def list(
        self,
        status: Optional[ReportStatus] = None,
        user_id: Optional[int] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> List[Report]:
        """Список жалоб, новые первыми."""
        query = select(Report)

        if status is not None:
            query = query.where(Report.status == status)

        if user_id is not None:
            query = query.where(Report.user_id == user_id)

        query = query.order_by(Report.created_at.desc(), Report.id.desc())
        result = await self.session.execute(query.limit(limit).offset(offset))
        return list(result.scalars().all())

    async def count(
        self,
        status: Optional[ReportStatus] = None,
        user_id: Optional[int] = None,
    ) -> int:
        """Подсчитать количество жалоб."""
        query = select(func.count(Report.id))

        if status is not None:
            query = query.where(Report.status == status)

        if user_id is not None:
            query = query.where(Report.user_id == user_id)

        result = await self.session.execute(query)
        return result.scalar() or 0
