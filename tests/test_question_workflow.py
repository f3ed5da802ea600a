"""
Tests for services.question_service module.
"""

import pytest

from config.constants import QuestionStatus
from database.repositories.moderation_log import ModerationLogRepository
from database.repositories.question import QuestionRepository
from services.exceptions import (
    AlreadyTerminalError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailureError,
)


ADMIN_CHAT_ID = -100500


def callback_payloads(message: dict) -> list:
    markup = message["reply_markup"]
    return [button.callback_data for row in markup.inline_keyboard for button in row]


async def question_logs(session_factory, question_id: int):
    async with session_factory() as session:
        return await ModerationLogRepository(session).list_question_logs(question_id)


class TestSubmitQuestion:
    """Tests for QuestionWorkflow.submit_question."""

    async def test_creates_pending_question_and_alerts_admin(self, questions, users, outbox):
        question = await questions.submit_question("Q1", submitter_id=42)

        assert question.status == QuestionStatus.PENDING
        assert question.user_id == 42

        messages = outbox()
        assert len(messages) == 1
        assert messages[0]["chat_id"] == ADMIN_CHAT_ID
        assert callback_payloads(messages[0]) == [
            f"question:answer:{question.id}",
            f"question:reject:{question.id}",
        ]

    async def test_escapes_user_text_in_alert(self, questions, users, outbox):
        await questions.submit_question("1+1=2 (really?)", submitter_id=42)

        text = outbox()[0]["text"]
        assert "1\\+1\\=2 \\(really?\\)" in text

    async def test_empty_text_rejected(self, questions, users, outbox):
        with pytest.raises(ValidationFailureError):
            await questions.submit_question("   ", submitter_id=42)
        assert outbox() == []

    async def test_unknown_submitter(self, questions, users):
        with pytest.raises(NotFoundError):
            await questions.submit_question("Q1", submitter_id=999)

    async def test_alert_failure_does_not_fail_submission(self, questions, users, mock_bot, session_factory):
        mock_bot.send_message.side_effect = RuntimeError("telegram is down")

        question = await questions.submit_question("Q1", submitter_id=42)

        async with session_factory() as session:
            stored = await QuestionRepository(session).get(question.id)
        assert stored is not None
        assert stored.status == QuestionStatus.PENDING


class TestProcessQuestion:
    """Tests for QuestionWorkflow.process_question."""

    async def test_answer_scenario(self, questions, users, outbox, session_factory):
        question = await questions.submit_question("Q1", submitter_id=42)

        processed = await questions.process_question(
            question.id, users.admin.telegram_id, "answer", answer_text="A1"
        )

        assert processed.status == QuestionStatus.ANSWERED
        assert processed.answer == "A1"
        assert processed.answered_by_id == users.admin.id

        logs = await question_logs(session_factory, question.id)
        assert len(logs) == 1
        assert logs[0].previous_status == "PENDING"
        assert logs[0].new_status == "ANSWERED"
        assert logs[0].admin_id == users.admin.id
        assert logs[0].admin_telegram_id == users.admin.telegram_id

        to_submitter = [m for m in outbox() if m["chat_id"] == users.normal.telegram_id]
        assert len(to_submitter) == 1
        assert "A1" in to_submitter[0]["text"]

    @pytest.mark.parametrize("action,status", [
        ("reject", QuestionStatus.REJECTED),
        ("archive", QuestionStatus.ARCHIVED),
    ])
    async def test_terminal_statuses(self, questions, users, session_factory, action, status):
        question = await questions.submit_question("Q1", submitter_id=42)

        processed = await questions.process_question(question.id, users.moderator.telegram_id, action)

        assert processed.status == status
        logs = await question_logs(session_factory, question.id)
        assert [(log.previous_status, log.new_status) for log in logs] == [("PENDING", status.value)]

    async def test_archive_does_not_notify_submitter(self, questions, users, outbox):
        question = await questions.submit_question("Q1", submitter_id=42)
        await questions.process_question(question.id, users.admin.telegram_id, "archive")

        assert all(m["chat_id"] != users.normal.telegram_id for m in outbox())

    async def test_reject_notifies_submitter(self, questions, users, outbox):
        question = await questions.submit_question("Q1", submitter_id=42)
        await questions.process_question(question.id, users.admin.telegram_id, "reject")

        to_submitter = [m for m in outbox() if m["chat_id"] == users.normal.telegram_id]
        assert len(to_submitter) == 1
        assert "Rejected" in to_submitter[0]["text"]

    async def test_normal_user_denied_without_audit(self, questions, users, session_factory):
        question = await questions.submit_question("Q1", submitter_id=42)

        with pytest.raises(PermissionDeniedError):
            await questions.process_question(question.id, users.normal.telegram_id, "answer")

        async with session_factory() as session:
            stored = await QuestionRepository(session).get(question.id)
        assert stored.status == QuestionStatus.PENDING
        assert await question_logs(session_factory, question.id) == []

    async def test_privileged_chat_without_user_row(self, questions, users, session_factory):
        question = await questions.submit_question("Q1", submitter_id=42)

        processed = await questions.process_question(question.id, ADMIN_CHAT_ID, "reject")

        assert processed.status == QuestionStatus.REJECTED
        logs = await question_logs(session_factory, question.id)
        assert logs[0].admin_id is None
        assert logs[0].admin_telegram_id == ADMIN_CHAT_ID

    async def test_missing_question(self, questions, users):
        with pytest.raises(NotFoundError):
            await questions.process_question(12345, users.admin.telegram_id, "answer")

    async def test_unknown_action(self, questions, users):
        question = await questions.submit_question("Q1", submitter_id=42)

        with pytest.raises(ValidationFailureError):
            await questions.process_question(question.id, users.admin.telegram_id, "resolve")

    async def test_terminal_question_is_not_reprocessed(self, questions, users, session_factory):
        question = await questions.submit_question("Q1", submitter_id=42)
        await questions.process_question(question.id, users.admin.telegram_id, "archive")

        with pytest.raises(AlreadyTerminalError):
            await questions.process_question(question.id, users.admin.telegram_id, "answer", answer_text="late")

        async with session_factory() as session:
            stored = await QuestionRepository(session).get(question.id)
        assert stored.status == QuestionStatus.ARCHIVED
        assert stored.answer is None
        assert len(await question_logs(session_factory, question.id)) == 1


class TestListQuestions:
    """Tests for QuestionWorkflow.list_questions / get_question."""

    async def test_private_questions_hidden_from_public_feed(self, questions, users):
        await questions.submit_question("public", submitter_id=42)
        await questions.submit_question("secret", submitter_id=42, is_private=True)

        feed = await questions.list_questions()
        own = await questions.list_questions(user_id=42)

        assert [q.question for q in feed["questions"]] == ["public"]
        assert feed["pagination"]["total"] == 1
        assert {q.question for q in own["questions"]} == {"public", "secret"}

    async def test_pagination(self, questions, users):
        for i in range(5):
            await questions.submit_question(f"Q{i}", submitter_id=42)

        page = await questions.list_questions(page=2, limit=2)

        assert len(page["questions"]) == 2
        assert page["pagination"] == {"total": 5, "page": 2, "limit": 2, "totalPages": 3}

    async def test_get_question_with_logs(self, questions, users):
        question = await questions.submit_question("Q1", submitter_id=42)
        await questions.process_question(question.id, users.admin.telegram_id, "reject")

        loaded = await questions.get_question(question.id)

        assert loaded.status == QuestionStatus.REJECTED
        assert len(loaded.logs) == 1

    async def test_private_question_visible_to_owner_only(self, questions, users):
        question = await questions.submit_question("my secret", submitter_id=42, is_private=True)

        owned = await questions.get_question(question.id, requester_id=42)
        assert owned.question == "my secret"

        with pytest.raises(NotFoundError):
            await questions.get_question(question.id)
        with pytest.raises(NotFoundError):
            await questions.get_question(question.id, requester_id=users.admin.id)

    async def test_get_missing_question(self, questions):
        with pytest.raises(NotFoundError):
            await questions.get_question(777)
