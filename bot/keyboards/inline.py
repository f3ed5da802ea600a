"""
Inline keyboards.
Инлайн-клавиатуры для бота.
"""

from typing import Optional, Sequence
from telegram import InlineKeyboardButton, InlineKeyboardMarkup, WebAppInfo

from config.constants import EntityType, ModerationAction, ACTION_BUTTON_TEXT
from services.callback_data import build_callback


SUPPORT_URL = "https://t.me/deadddos_support"
NEWS_URL = "https://t.me/deadddos_news"


def get_moderation_keyboard(
    entity_type: EntityType,
    entity_id: int,
    actions: Sequence[ModerationAction],
) -> InlineKeyboardMarkup:
    """
    Клавиатура модерации: одна строка кнопок.

    Args:
        entity_type: Тип сущности (report, question, profile)
        entity_id: ID записи (для анкеты Telegram ID владельца)
        actions: Разрешённые действия

    Returns:
        InlineKeyboardMarkup
    """
    buttons = [
        InlineKeyboardButton(
            ACTION_BUTTON_TEXT[(entity_type, action)],
            callback_data=build_callback(entity_type, action, entity_id),
        )
        for action in actions
    ]
    return InlineKeyboardMarkup([buttons])


def get_webapp_keyboard(webapp_url: str) -> Optional[InlineKeyboardMarkup]:
    """Кнопка запуска Mini App. None, если URL не настроен."""
    if not webapp_url:
        return None

    keyboard = [
        [InlineKeyboardButton("💀 ENTER KILLZONE 💀", web_app=WebAppInfo(url=webapp_url))],
    ]
    return InlineKeyboardMarkup(keyboard)


def get_help_keyboard() -> InlineKeyboardMarkup:
    """Ссылки на поддержку и новости."""
    keyboard = [
        [InlineKeyboardButton("💀 EMERGENCY REQUEST", url=SUPPORT_URL)],
        [InlineKeyboardButton("📡 LIVE DATABREACHES", url=NEWS_URL)],
    ]
    return InlineKeyboardMarkup(keyboard)
