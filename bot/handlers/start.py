"""
Start command handler.
Приветствие и справка.
"""

import html
from telegram import Update
from telegram.constants import ChatAction, ParseMode
from telegram.ext import ContextTypes
from loguru import logger

from bot.keyboards.inline import get_help_keyboard, get_webapp_keyboard
from config.settings import settings


WELCOME_TEMPLATE = """🔻 <b>ENCRYPTED TRANSMISSION</b> 🔻
<pre>
   █▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀▀█
   █  D E A D D D O S  █
   █▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄▄█
</pre>
<b>TARGET ACQUIRED</b>: {player}
<b>STATUS</b>: TRACKED

⚠️ <b>WARNING</b>: HIGH-RISK ENVIRONMENT
• All connections monitored
• Countermeasures active

☠️ DESTROY corrupt nodes
💾 EXFILTRATE classified data
🔥 OVERLOAD mainframes

<i>"The infrastructure will burn. No logs. No witnesses."</i>"""

HELP_TEXT = """<b>D E A D D D O S</b>
<b>📜 BLACKNET MANUAL v3.1.4</b>

▌│█║ <b>CORE COMMANDS</b> ║█│▌
☠️ <code>/start</code> - Initiate system breach

▌│█║ <b>SECURE CHANNELS</b> ║█│▌
🛡️ <a href="https://t.me/deadddos_support">TECH SUPPORT</a> - 24/7/365
🌐 <a href="https://t.me/deadddos_news">INTEL FEED</a> - Zero-day alerts

<b>⚠️ WARNING: All connections logged and encrypted</b>"""


def render_welcome(first_name: str = None, username: str = None) -> str:
    """Приветствие с именем игрока (экранировано под HTML)."""
    player = first_name or username or "ANONYMOUS_GHOST"
    return WELCOME_TEMPLATE.format(player=html.escape(player.upper()))


async def start_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """
    Обработчик команды /start.
    Приветствие и кнопка запуска Mini App.
    """
    user_tg = update.effective_user

    await context.bot.send_chat_action(update.effective_chat.id, ChatAction.TYPING)
    await update.message.reply_text(
        render_welcome(user_tg.first_name, user_tg.username),
        parse_mode=ParseMode.HTML,
        reply_markup=get_webapp_keyboard(settings.WEBAPP_URL),
    )

    logger.info(f"User {user_tg.id} started bot")


async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Обработчик команды /help."""
    await update.message.reply_text(
        HELP_TEXT,
        parse_mode=ParseMode.HTML,
        reply_markup=get_help_keyboard(),
        disable_web_page_preview=True,
    )
