"""
Tests for services.report_service module.
"""

import pytest
from sqlalchemy.exc import OperationalError

from config.constants import ReportStatus
from database.repositories.moderation_log import ModerationLogRepository
from database.repositories.report import ReportRepository
from services.exceptions import (
    AlreadyTerminalError,
    NotFoundError,
    PermissionDeniedError,
    UpstreamFailureError,
)


ADMIN_CHAT_ID = -100500


async def report_logs(session_factory, report_id: int):
    async with session_factory() as session:
        return await ModerationLogRepository(session).list_report_logs(report_id)


class TestSubmitReport:
    """Tests for ReportWorkflow.submit_report."""

    async def test_creates_pending_report_with_actions(self, reports, users, outbox):
        report = await reports.submit_report("server is down", submitter_id=42, ip_address="10.0.0.1")

        assert report.status == ReportStatus.PENDING
        alert = outbox()[0]
        assert alert["chat_id"] == ADMIN_CHAT_ID
        assert "10\\.0\\.0\\.1" in alert["text"]
        payloads = [b.callback_data for row in alert["reply_markup"].inline_keyboard for b in row]
        assert payloads == [f"report:resolve:{report.id}", f"report:reject:{report.id}"]

    async def test_anonymous_report(self, reports, outbox):
        report = await reports.submit_report("anon")

        assert report.user_id is None
        assert "Нет информации о пользователе" in outbox()[0]["text"]


class TestProcessReport:
    """Tests for ReportWorkflow.process_report."""

    async def test_normal_user_cannot_resolve(self, reports, users, session_factory):
        report = await reports.submit_report("spam", submitter_id=42)

        with pytest.raises(PermissionDeniedError):
            await reports.process_report(report.id, users.normal.telegram_id, "resolve")

        async with session_factory() as session:
            stored = await ReportRepository(session).get(report.id)
        assert stored.status == ReportStatus.PENDING
        assert await report_logs(session_factory, report.id) == []

    async def test_resolve_is_silent_for_submitter(self, reports, users, outbox, session_factory):
        report = await reports.submit_report("spam", submitter_id=42)

        processed = await reports.process_report(
            report.id, users.moderator.telegram_id, "resolve", admin_notes="banned"
        )

        assert processed.status == ReportStatus.RESOLVED
        assert processed.processed_by == users.moderator.id
        assert processed.processed_at is not None
        assert processed.admin_notes == "banned"
        assert all(m["chat_id"] != users.normal.telegram_id for m in outbox())

        logs = await report_logs(session_factory, report.id)
        assert len(logs) == 1
        assert (logs[0].previous_status, logs[0].new_status) == ("PENDING", "RESOLVED")
        assert logs[0].comment == "banned"

    async def test_reject_notifies_submitter(self, reports, users, outbox):
        report = await reports.submit_report("spam", submitter_id=42)

        await reports.process_report(report.id, users.admin.telegram_id, "reject")

        to_submitter = [m for m in outbox() if m["chat_id"] == users.normal.telegram_id]
        assert len(to_submitter) == 1
        assert f"\\#{report.id}" in to_submitter[0]["text"]

    async def test_terminal_report_is_not_reprocessed(self, reports, users, session_factory):
        report = await reports.submit_report("spam", submitter_id=42)
        await reports.process_report(report.id, users.admin.telegram_id, "resolve")

        with pytest.raises(AlreadyTerminalError):
            await reports.process_report(report.id, users.admin.telegram_id, "reject")

        assert len(await report_logs(session_factory, report.id)) == 1

    async def test_missing_report(self, reports, users):
        with pytest.raises(NotFoundError):
            await reports.process_report(404, users.admin.telegram_id, "resolve")

    async def test_database_error_is_upstream_failure(self, reports, users, outbox, monkeypatch):
        report = await reports.submit_report("spam", submitter_id=42)
        sent_before = len(outbox())

        async def broken(self, report_id):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(ReportRepository, "get_for_update", broken)

        with pytest.raises(UpstreamFailureError):
            await reports.process_report(report.id, users.admin.telegram_id, "reject")

        assert len(outbox()) == sent_before

    async def test_list_reports_by_status(self, reports, users):
        first = await reports.submit_report("one", submitter_id=42)
        await reports.submit_report("two", submitter_id=42)
        await reports.process_report(first.id, users.admin.telegram_id, "resolve")

        pending = await reports.list_reports(status=ReportStatus.PENDING)

        assert [r.message for r in pending["reports"]] == ["two"]
        assert pending["pagination"]["total"] == 1
