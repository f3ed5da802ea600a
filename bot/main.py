"""
Main bot entry point.
Запуск и конфигурация Telegram бота (polling).
"""

from telegram import BotCommand, Update
from telegram.ext import (
    Application,
    CommandHandler,
    CallbackQueryHandler,
)
from loguru import logger

from config.settings import settings
from database import init_db, close_db, async_session
from bot.handlers.start import start_command, help_command
from bot.handlers.moderation import handle_moderation_callback
from services.registry import build_services


def attach_services(app: Application) -> None:
    """Кладёт сервисы в bot_data: обработчики берут их оттуда."""
    app.bot_data["services"] = build_services(app.bot, async_session, settings)


async def post_init(app: Application) -> None:
    """Инициализация после запуска бота."""
    logger.info("Initializing bot...")

    try:
        await app.bot.set_my_commands([
            BotCommand("start", "Initiate system breach"),
            BotCommand("help", "Blacknet manual"),
        ])
    except Exception as e:
        logger.warning(f"Failed to set bot commands: {e}")

    await init_db()
    attach_services(app)

    logger.info("Bot initialized successfully")


async def post_shutdown(app: Application) -> None:
    """Очистка при остановке бота."""
    logger.info("Shutting down bot...")
    await close_db()
    logger.info("Bot shutdown complete")


def register_handlers(app: Application) -> None:
    app.add_handler(CommandHandler("start", start_command))
    app.add_handler(CommandHandler("help", help_command))
    # Все callback-кнопки бота относятся к модерации
    app.add_handler(CallbackQueryHandler(handle_moderation_callback))


def create_application(with_lifecycle: bool = True) -> Application:
    """
    Создаёт и конфигурирует приложение бота.

    Args:
        with_lifecycle: подключить post_init/post_shutdown (режим polling).
            В режиме вебхука жизненным циклом управляет API сервер.
    """
    builder = Application.builder().token(settings.TELEGRAM_BOT_TOKEN)
    if with_lifecycle:
        builder = builder.post_init(post_init).post_shutdown(post_shutdown)

    application = builder.build()
    register_handlers(application)
    return application


def main() -> None:
    """Точка входа."""
    logger.add(
        "logs/bot_{time}.log",
        rotation="1 day",
        retention="30 days",
        level=settings.LOG_LEVEL,
    )

    logger.info("Starting DeadDDoS bot...")

    app = create_application()

    try:
        app.run_polling(
            allowed_updates=Update.ALL_TYPES,
            drop_pending_updates=True,
        )
    except KeyboardInterrupt:
        logger.info("KeyboardInterrupt received, shutting down...")
    finally:
        logger.info("Bot stopped")


if __name__ == "__main__":
    main()
