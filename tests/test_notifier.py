"""
Tests for services.notifier and services.messages modules.
"""

from datetime import datetime
from types import SimpleNamespace

from telegram.constants import ParseMode
from telegram.error import NetworkError

from config.constants import EntityType, ModerationAction
from services import messages
from services.notifier import Notifier


class TestNotifier:
    """Tests for Notifier.send_alert."""

    async def test_sends_markdown_with_keyboard(self, mock_bot):
        notifier = Notifier(mock_bot, admin_chat_id=1)

        ok = await notifier.send_admin_alert("text", entity_type=EntityType.QUESTION, entity_id=5)

        assert ok is True
        kwargs = mock_bot.send_message.await_args.kwargs
        assert kwargs["chat_id"] == 1
        assert kwargs["parse_mode"] == ParseMode.MARKDOWN_V2
        labels = [b.callback_data for row in kwargs["reply_markup"].inline_keyboard for b in row]
        assert labels == ["question:answer:5", "question:reject:5"]

    async def test_custom_actions(self, mock_bot):
        notifier = Notifier(mock_bot)

        await notifier.send_alert(
            10, "text",
            entity_type=EntityType.QUESTION,
            entity_id=5,
            actions=[ModerationAction.ARCHIVE],
        )

        markup = mock_bot.send_message.await_args.kwargs["reply_markup"]
        assert [b.callback_data for row in markup.inline_keyboard for b in row] == ["question:archive:5"]

    async def test_plain_message_has_no_keyboard(self, mock_bot):
        await Notifier(mock_bot).send_alert(10, "hello")

        assert mock_bot.send_message.await_args.kwargs["reply_markup"] is None

    async def test_telegram_error_is_swallowed(self, mock_bot):
        mock_bot.send_message.side_effect = NetworkError("timeout")

        assert await Notifier(mock_bot).send_alert(10, "hello") is False

    async def test_missing_admin_chat(self, mock_bot):
        assert await Notifier(mock_bot, admin_chat_id=None).send_admin_alert("hello") is False
        mock_bot.send_message.assert_not_awaited()


class TestMessages:
    """Tests for MarkdownV2 formatters."""

    def test_user_values_are_escaped(self):
        user = SimpleNamespace(username="evil_*user*", first_name=None, last_name=None, telegram_id=1)

        text = messages.question_alert(3, "[link](http://x.y)", datetime(2024, 1, 2, 3, 4), user)

        assert "\\[link\\]\\(http://x\\.y\\)" in text
        assert "@evil\\_\\*user\\*" in text
        assert "02\\.01\\.2024 03:04" in text

    def test_describe_user_fallbacks(self):
        assert messages.describe_user(None) == "Аноним"
        assert messages.describe_user(
            SimpleNamespace(username=None, first_name="Neo", last_name="A", telegram_id=1)
        ) == "Neo A"
        assert messages.describe_user(
            SimpleNamespace(username=None, first_name=None, last_name=None, telegram_id=7)
        ) == "ID: 7"

    def test_moderation_result_appends_answer(self):
        text = messages.moderation_result(
            "original.", "ANSWERED", "mod", answer="42!", processed_at=datetime(2024, 5, 6, 7, 8)
        )

        assert text.startswith("original\\.")
        assert "ANSWERED" in text
        assert "@mod" in text
        assert "42\\!" in text

    def test_profile_result_unknown_moderator(self):
        text = messages.profile_moderation_result("card", approved=False, moderator=None)

        assert "ОТКЛОНЕНО" in text
        assert "@unknown" in text
