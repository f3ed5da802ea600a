"""
Avatar Service.
Загрузка аватарок пользователей из Telegram.
"""

import base64
from typing import Optional
from loguru import logger
from telegram import Bot
from telegram.error import TelegramError


# Подходящий размер превью (около 160px)
PREFERRED_WIDTH = 160


class AvatarService:
    """
    Сервис для работы с аватарками пользователей.

    Загружает фото профиля из Telegram и возвращает его как data URL,
    который хранится в users.avatar.
    """

    def __init__(self, bot: Bot):
        self.bot = bot

    async def fetch_avatar(self, telegram_id: int) -> Optional[str]:
        """
        Загружает аватарку пользователя.

        Args:
            telegram_id: Telegram ID пользователя

        Returns:
            data:image/jpeg;base64,... или None
        """
        try:
            photos = await self.bot.get_user_profile_photos(telegram_id, limit=1)

            if not photos or not photos.photos:
                logger.debug(f"No profile photo for user {telegram_id}")
                return None

            # photos.photos[0] - массив размеров одного фото
            photo_sizes = photos.photos[0]

            photo = None
            for size in photo_sizes:
                if size.width >= PREFERRED_WIDTH:
                    photo = size
                    break

            if not photo:
                photo = photo_sizes[-1]

            file = await self.bot.get_file(photo.file_id)
            photo_bytes = await file.download_as_bytearray()

            encoded = base64.b64encode(bytes(photo_bytes)).decode("ascii")
            logger.info(f"Fetched avatar for user {telegram_id}")
            return f"data:image/jpeg;base64,{encoded}"

        except TelegramError as e:
            logger.warning(f"Failed to fetch avatar for user {telegram_id}: {e}")
            return None
