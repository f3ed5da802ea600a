"""
PersonalQuestion repository.
CRUD операции для вопросов пользователей.
"""

from typing import Optional, List
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from config.constants import QuestionStatus
from database.models import PersonalQuestion


class QuestionRepository:
    """Репозиторий для работы с вопросами."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(
        self,
        question: str,
        user_id: Optional[int],
        is_private: bool = False,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> PersonalQuestion:
        """Создать вопрос в статусе PENDING."""
        record = PersonalQuestion(
            question=question,
            user_id=user_id,
            is_private=is_private,
            status=QuestionStatus.PENDING,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        self.session.add(record)
        await self.session.flush()
        await self.session.refresh(record)
        return record

    async def get(self, question_id: int, with_logs: bool = False) -> Optional[PersonalQuestion]:
        """Получить вопрос по ID."""
        query = select(PersonalQuestion).where(PersonalQuestion.id == question_id)
        if with_logs:
            query = query.options(selectinload(PersonalQuestion.logs))
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_for_update(self, question_id: int) -> Optional[PersonalQuestion]:
        """Перечитать вопрос с блокировкой строки до конца транзакции."""
        result = await self.session.execute(
            select(PersonalQuestion)
            .where(PersonalQuestion.id == question_id)
            .with_for_update()
        )
        return result.scalar_one_or_none()

    def _filtered(self, query, status: Optional[QuestionStatus], user_id: Optional[int], public_only: bool):
        if status is not None:
            query = query.where(PersonalQuestion.status == status)
        if user_id is not None:
            query = query.where(PersonalQuestion.user_id == user_id)
        if public_only:
            query = query.where(PersonalQuestion.is_private.is_(False))
        return query

    async def list(
        self,
        status: Optional[QuestionStatus] = None,
        user_id: Optional[int] = None,
        public_only: bool = False,
        limit: int = 20,
        offset: int = 0,
    ) -> List[PersonalQuestion]:
        """Список вопросов, новые первыми."""
        query = self._filtered(select(PersonalQuestion), status, user_id, public_only)
        query = query.order_by(PersonalQuestion.created_at.desc(), PersonalQuestion.id.desc())
        result = await self.session.execute(query.limit(limit).offset(offset))
        return list(result.scalars().all())

    async def count(
        self,
        status: Optional[QuestionStatus] = None,
        user_id: Optional[int] = None,
        public_only: bool = False,
    ) -> int:
        """Количество вопросов с теми же фильтрами, что и list()."""
        query = self._filtered(select(func.count(PersonalQuestion.id)), status, user_id, public_only)
        result = await self.session.execute(query)
        return result.scalar() or 0
