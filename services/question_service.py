"""
Question workflow.
Вопросы пользователей: создание, модерация, выдача списков.

PENDING -> ANSWERED | REJECTED | ARCHIVED, все три конечные.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Union

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.constants import (
    EntityType,
    ModerationAction,
    QuestionStatus,
    QUESTION_ACTION_STATUS,
    QUESTION_TERMINAL_STATUSES,
    DEFAULT_PAGE_SIZE,
)
from database.models import PersonalQuestion
from database.repositories.question import QuestionRepository
from database.repositories.user import UserRepository
from database.session import get_session_context
from services import messages
from services.access import AccessControl
from services.audit import AuditService, audit_service
from services.common import paginate, pagination_info, parse_action
from services.exceptions import (
    AlreadyTerminalError,
    NotFoundError,
    PermissionDeniedError,
    UpstreamFailureError,
    ValidationFailureError,
)
from services.notifier import Notifier
from utils.sanitizer import validate_message


class QuestionWorkflow:
    """Сервис вопросов."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        notifier: Notifier,
        access: AccessControl,
        audit: AuditService = audit_service,
    ):
        self._session_factory = session_factory
        self.notifier = notifier
        self.access = access
        self.audit = audit

    async def submit_question(
        self,
        text: str,
        submitter_id: int,
        is_private: bool = False,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> PersonalQuestion:
        """
        Создаёт вопрос в статусе PENDING и отправляет его модераторам
        с кнопками «Ответить» / «Отклонить».

        Raises:
            ValidationFailureError: пустой текст
            NotFoundError: автор не найден
        """
        is_valid, text, error = validate_message(text)
        if not is_valid:
            raise ValidationFailureError(f"Question text is invalid: {error}")

        async with get_session_context(self._session_factory) as session:
            submitter = await UserRepository(session).get(submitter_id)
            if submitter is None:
                raise NotFoundError(f"User {submitter_id} not found")

            question = await QuestionRepository(session).create(
                question=text,
                user_id=submitter.id,
                is_private=bool(is_private),
                ip_address=ip_address,
                user_agent=user_agent,
            )

        logger.info(f"Question #{question.id} submitted by user {submitter_id}")

        await self.notifier.send_admin_alert(
            messages.question_alert(question.id, question.question, question.created_at, submitter),
            entity_type=EntityType.QUESTION,
            entity_id=question.id,
            actions=(ModerationAction.ANSWER, ModerationAction.REJECT),
        )
        return question

    async def process_question(
        self,
        question_id: int,
        actor_telegram_id: int,
        action: Union[str, ModerationAction],
        answer_text: Optional[str] = None,
    ) -> PersonalQuestion:
        """
        Применяет действие модератора к вопросу.

        Смена статуса и запись журнала выполняются в одной транзакции.
        Уведомление автору отправляется после коммита и не влияет на результат.

        Raises:
            ValidationFailureError: неизвестное действие
            NotFoundError: вопроса нет
            PermissionDeniedError: у актора нет прав
            AlreadyTerminalError: вопрос уже обработан
            UpstreamFailureError: ошибка базы данных
        """
        action = parse_action(action, QUESTION_ACTION_STATUS)
        new_status = QUESTION_ACTION_STATUS[action]

        async with self._session_factory() as session:
            if await QuestionRepository(session).get(question_id) is None:
                raise NotFoundError(f"Question with ID {question_id} not found")

        if not await self.access.check_access(actor_telegram_id):
            raise PermissionDeniedError("You don't have permission for this action")

        try:
            async with get_session_context(self._session_factory) as session:
                question = await QuestionRepository(session).get_for_update(question_id)
                if question is None:
                    raise NotFoundError(f"Question with ID {question_id} not found")

                previous_status = QuestionStatus(question.status)
                if previous_status in QUESTION_TERMINAL_STATUSES:
                    raise AlreadyTerminalError(
                        f"Question #{question_id} is already {previous_status.value}"
                    )

                moderator = await UserRepository(session).get_by_telegram_id(actor_telegram_id)

                question.status = new_status
                question.answered_by_id = moderator.id if moderator else None
                if action is ModerationAction.ANSWER and answer_text:
                    question.answer = answer_text
                question.updated_at = datetime.now()
                await session.flush()

                await self.audit.log_question_transition(
                    session,
                    question_id=question.id,
                    action=action.value,
                    admin_id=moderator.id if moderator else None,
                    admin_telegram_id=actor_telegram_id,
                    previous_status=previous_status.value,
                    new_status=new_status.value,
                    comment=self.audit.COMMENT_ANSWERED if action is ModerationAction.ANSWER else None,
                )

                submitter = question.user
        except SQLAlchemyError as e:
            logger.error(f"Database error while processing question #{question_id}: {e}")
            raise UpstreamFailureError("Database error, try again later") from e

        logger.info(f"Question #{question_id}: {previous_status.value} -> {new_status.value}")

        if submitter is not None:
            await self._notify_submitter(submitter.telegram_id, question)

        return question

    async def _notify_submitter(self, telegram_id: int, question: PersonalQuestion) -> None:
        if question.status == QuestionStatus.ANSWERED:
            text = messages.question_answered(question.id, question.question, question.answer)
        elif question.status == QuestionStatus.REJECTED:
            text = messages.question_rejected(question.id, question.question)
        else:
            return

        await self.notifier.send_alert(telegram_id, text)

    async def get_question(self, question_id: int, requester_id: Optional[int] = None) -> PersonalQuestion:
        """
        Вопрос вместе с журналом.
        Приватный вопрос виден только автору: для остальных его нет.

        Raises:
            NotFoundError: вопроса нет или он чужой приватный
        """
        async with self._session_factory() as session:
            question = await QuestionRepository(session).get(question_id, with_logs=True)

        if question is None or (question.is_private and question.user_id != requester_id):
            raise NotFoundError("Question not found")
        return question

    async def list_questions(
        self,
        status: Optional[QuestionStatus] = None,
        user_id: Optional[int] = None,
        page: Optional[int] = 1,
        limit: Optional[int] = DEFAULT_PAGE_SIZE,
    ) -> Dict[str, Any]:
        """
        Страница вопросов с пагинацией.
        Без user_id приватные вопросы не попадают в выдачу.
        """
        page, limit = paginate(page, limit)
        public_only = user_id is None

        async with self._session_factory() as session:
            repo = QuestionRepository(session)
            questions = await repo.list(
                status=status,
                user_id=user_id,
                public_only=public_only,
                limit=limit,
                offset=(page - 1) * limit,
            )
            total = await repo.count(status=status, user_id=user_id, public_only=public_only)

        return {"questions": questions, "pagination": pagination_info(total, page, limit)}
