"""
Tests for bot.handlers.start module.
"""

from telegram.constants import ParseMode

from bot.handlers.start import help_command, render_welcome, start_command
from config.settings import settings


class TestRenderWelcome:
    """Tests for render_welcome function."""

    def test_uses_first_name(self):
        assert "TARGET ACQUIRED</b>: NEO" in render_welcome("Neo", "ghost")

    def test_falls_back_to_username(self):
        assert "GHOST" in render_welcome(None, "ghost")

    def test_anonymous(self):
        assert "ANONYMOUS_GHOST" in render_welcome()

    def test_html_is_escaped(self):
        text = render_welcome("<b>x</b>")
        assert "&lt;B&gt;X&lt;/B&gt;" in text


async def test_start_replies_with_webapp_button(mock_update, mock_context, monkeypatch):
    monkeypatch.setattr(settings, "WEBAPP_URL", "https://app.example.com")

    await start_command(mock_update, mock_context)

    mock_context.bot.send_chat_action.assert_awaited_once()
    _, kwargs = mock_update.message.reply_text.await_args
    assert kwargs["parse_mode"] == ParseMode.HTML
    button = kwargs["reply_markup"].inline_keyboard[0][0]
    assert button.web_app.url == "https://app.example.com"


async def test_start_without_webapp_url(mock_update, mock_context, monkeypatch):
    monkeypatch.setattr(settings, "WEBAPP_URL", "")

    await start_command(mock_update, mock_context)

    _, kwargs = mock_update.message.reply_text.await_args
    assert kwargs["reply_markup"] is None


async def test_help_has_support_links(mock_update, mock_context):
    await help_command(mock_update, mock_context)

    args, kwargs = mock_update.message.reply_text.await_args
    assert "BLACKNET MANUAL" in args[0]
    assert kwargs["disable_web_page_preview"] is True
    urls = [row[0].url for row in kwargs["reply_markup"].inline_keyboard]
    assert urls == ["https://t.me/deadddos_support", "https://t.me/deadddos_news"]
