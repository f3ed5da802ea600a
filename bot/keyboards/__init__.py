"""
Keyboards package.
"""

from bot.keyboards.inline import (
    get_moderation_keyboard,
    get_webapp_keyboard,
    get_help_keyboard,
)

__all__ = [
    "get_moderation_keyboard",
    "get_webapp_keyboard",
    "get_help_keyboard",
]
