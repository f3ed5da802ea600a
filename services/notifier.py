"""
Notification gateway.
Отправка уведомлений в Telegram с кнопками модерации.
Доставка best-effort: ошибка логируется и не пробрасывается.
"""

from typing import Optional, Sequence, Union

from loguru import logger
from telegram import Bot
from telegram.constants import ParseMode
from telegram.error import TelegramError

from bot.keyboards.inline import get_moderation_keyboard
from config.constants import EntityType, ModerationAction, ENTITY_ACTIONS


DEFAULT_ACTIONS = {
    EntityType.REPORT: (ModerationAction.RESOLVE, ModerationAction.REJECT),
    EntityType.QUESTION: (ModerationAction.ANSWER, ModerationAction.REJECT),
    EntityType.PROFILE: ENTITY_ACTIONS[EntityType.PROFILE],
}


class Notifier:
    """
    Обёртка над Bot API для уведомлений.

    Текст должен быть уже отформатирован (см. services.messages):
    пользовательские данные в нём экранированы под parse_mode.
    """

    def __init__(self, bot: Bot, admin_chat_id: Optional[int] = None):
        self.bot = bot
        self.admin_chat_id = admin_chat_id

    async def send_alert(
        self,
        chat_id: Union[int, str, None],
        text: str,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[int] = None,
        actions: Optional[Sequence[ModerationAction]] = None,
        parse_mode: str = ParseMode.MARKDOWN_V2,
        disable_notification: bool = False,
    ) -> bool:
        """
        Отправляет сообщение, при наличии entity_id с клавиатурой действий.

        Returns:
            True если сообщение доставлено
        """
        if chat_id is None:
            logger.warning("Alert skipped: chat_id is not configured")
            return False

        reply_markup = None
        if entity_id is not None:
            entity_type = entity_type or EntityType.REPORT
            reply_markup = get_moderation_keyboard(
                entity_type,
                entity_id,
                actions or DEFAULT_ACTIONS[entity_type],
            )

        try:
            await self.bot.send_message(
                chat_id=chat_id,
                text=text,
                parse_mode=parse_mode,
                disable_notification=disable_notification,
                reply_markup=reply_markup,
            )
            return True
        except TelegramError as e:
            logger.error(f"Failed to send Telegram alert to {chat_id}: {e}")
            return False
        except Exception as e:
            logger.exception(f"Unexpected error sending Telegram alert to {chat_id}: {e}")
            return False

    async def send_admin_alert(
        self,
        text: str,
        entity_type: Optional[EntityType] = None,
        entity_id: Optional[int] = None,
        actions: Optional[Sequence[ModerationAction]] = None,
    ) -> bool:
        """Алерт в чат администратора."""
        return await self.send_alert(
            self.admin_chat_id,
            text,
            entity_type=entity_type,
            entity_id=entity_id,
            actions=actions,
        )
