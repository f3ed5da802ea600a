"""
Report workflow.
Жалобы пользователей: создание, модерация, выдача списков.

PENDING -> RESOLVED | REJECTED. REVIEWED зарезервирован и действием
модератора не выставляется.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Union

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from config.constants import (
    EntityType,
    ModerationAction,
    ReportStatus,
    REPORT_ACTION_STATUS,
    REPORT_TERMINAL_STATUSES,
    DEFAULT_PAGE_SIZE,
)
from database.models import Report
from database.repositories.report import ReportRepository
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


class ReportWorkflow:
    """Сервис жалоб."""

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

    async def submit_report(
        self,
        message: str,
        submitter_id: Optional[int] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> Report:
        """
        Создаёт жалобу в статусе PENDING и отправляет алерт модераторам.
        Жалоба может быть анонимной (submitter_id=None).

        Raises:
            ValidationFailureError: пустой текст
            NotFoundError: указан несуществующий автор
        """
        is_valid, message, error = validate_message(message)
        if not is_valid:
            raise ValidationFailureError(f"Report message is invalid: {error}")

        async with get_session_context(self._session_factory) as session:
            submitter = None
            if submitter_id is not None:
                submitter = await UserRepository(session).get(submitter_id)
                if submitter is None:
                    raise NotFoundError(f"User {submitter_id} not found")

            report = await ReportRepository(session).create(
                message=message,
                user_id=submitter.id if submitter else None,
                ip_address=ip_address,
                user_agent=user_agent,
            )

        logger.info(f"Report #{report.id} submitted by user {submitter_id or 'anonymous'}")

        await self.notifier.send_admin_alert(
            messages.report_alert(report.id, report.message, report.created_at, submitter, ip_address),
            entity_type=EntityType.REPORT,
            entity_id=report.id,
            actions=(ModerationAction.RESOLVE, ModerationAction.REJECT),
        )
        return report

    async def process_report(
        self,
        report_id: int,
        actor_telegram_id: int,
        action: Union[str, ModerationAction],
        admin_notes: Optional[str] = None,
    ) -> Report:
        """
        Применяет действие модератора к жалобе.

        Автор получает уведомление только при отклонении.

        Raises:
            ValidationFailureError: неизвестное действие
            NotFoundError: жалобы нет
            PermissionDeniedError: у актора нет прав
            AlreadyTerminalError: жалоба уже обработана
            UpstreamFailureError: ошибка базы данных
        """
        action = parse_action(action, REPORT_ACTION_STATUS)
        new_status = REPORT_ACTION_STATUS[action]

        async with self._session_factory() as session:
            if await ReportRepository(session).get(report_id) is None:
                raise NotFoundError(f"Report with ID {report_id} not found")

        if not await self.access.check_access(actor_telegram_id):
            raise PermissionDeniedError("You don't have permission for this action")

        try:
            async with get_session_context(self._session_factory) as session:
                report = await ReportRepository(session).get_for_update(report_id)
                if report is None:
                    raise NotFoundError(f"Report with ID {report_id} not found")

                previous_status = ReportStatus(report.status)
                if previous_status in REPORT_TERMINAL_STATUSES:
                    raise AlreadyTerminalError(
                        f"Report #{report_id} is already {previous_status.value}"
                    )

                moderator = await UserRepository(session).get_by_telegram_id(actor_telegram_id)
                now = datetime.now()

                report.status = new_status
                report.processed_at = now
                report.processed_by = moderator.id if moderator else None
                if admin_notes:
                    report.admin_notes = admin_notes
                report.updated_at = now
                await session.flush()

                await self.audit.log_report_transition(
                    session,
                    report_id=report.id,
                    action=action.value,
                    admin_id=moderator.id if moderator else None,
                    admin_telegram_id=actor_telegram_id,
                    previous_status=previous_status.value,
                    new_status=new_status.value,
                    comment=admin_notes,
                )

                submitter = report.user
        except SQLAlchemyError as e:
            logger.error(f"Database error while processing report #{report_id}: {e}")
            raise UpstreamFailureError("Database error, try again later") from e

        logger.info(f"Report #{report_id}: {previous_status.value} -> {new_status.value}")

        if submitter is not None and new_status is ReportStatus.REJECTED:
            await self.notifier.send_alert(submitter.telegram_id, messages.report_rejected(report.id))

        return report

    async def get_report(self, report_id: int) -> Report:
        """Жалоба вместе с журналом."""
        async with self._session_factory() as session:
            report = await ReportRepository(session).get(report_id, with_logs=True)

        if report is None:
            raise NotFoundError("Report not found")
        return report

    async def list_reports(
        self,
        status: Optional[ReportStatus] = None,
        user_id: Optional[int] = None,
        page: Optional[int] = 1,
        limit: Optional[int] = DEFAULT_PAGE_SIZE,
    ) -> Dict[str, Any]:
        page, limit = paginate(page, limit)

        async with self._session_factory() as session:
            repo = ReportRepository(session)
            reports = await repo.list(status=status, user_id=user_id, limit=limit, offset=(page - 1) * limit)
            total = await repo.count(status=status, user_id=user_id)

        return {"reports": reports, "pagination": pagination_info(total, page, limit)}
