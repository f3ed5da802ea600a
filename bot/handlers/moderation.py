"""
Moderation callback handlers.
Кнопки модерации в чате администратора.
"""

from typing import Awaitable, Callable, Dict, Optional, Tuple

from telegram import CallbackQuery, Update
from telegram.constants import ParseMode
from telegram.error import TelegramError
from telegram.ext import ContextTypes
from loguru import logger

from config.constants import EntityType, ModerationAction, QuestionStatus, ENTITY_ACTIONS
from services import messages
from services.callback_data import ModerationCallback, parse_callback
from services.exceptions import (
    AlreadyTerminalError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailureError,
)
from services.registry import ServiceRegistry


# (текст для правки сообщения, текст ответа на callback)
ModerationResult = Tuple[str, str]
ModerationHandler = Callable[[ServiceRegistry, ModerationCallback, CallbackQuery], Awaitable[ModerationResult]]

PAST_TENSE = {
    ModerationAction.RESOLVE: "resolved",
    ModerationAction.REJECT: "rejected",
    ModerationAction.ANSWER: "answered",
    ModerationAction.ARCHIVE: "archived",
    ModerationAction.APPROVE: "approved",
}


def _message_text(query: CallbackQuery) -> Optional[str]:
    return getattr(query.message, "text", None)


def _reply_text(query: CallbackQuery) -> Optional[str]:
    """Текст сообщения, на которое ответил модератор (ответ на вопрос)."""
    reply = getattr(query.message, "reply_to_message", None)
    return getattr(reply, "text", None)


async def _process_question(
    services: ServiceRegistry,
    callback: ModerationCallback,
    query: CallbackQuery,
) -> ModerationResult:
    question = await services.questions.process_question(
        callback.entity_id,
        query.from_user.id,
        callback.action,
        answer_text=_reply_text(query),
    )
    text = messages.moderation_result(
        _message_text(query),
        question.status.value,
        query.from_user.username,
        answer=question.answer if question.status == QuestionStatus.ANSWERED else None,
        processed_at=question.updated_at,
    )
    return text, f"Question {PAST_TENSE[callback.action]}"


async def _process_report(
    services: ServiceRegistry,
    callback: ModerationCallback,
    query: CallbackQuery,
) -> ModerationResult:
    report = await services.reports.process_report(
        callback.entity_id,
        query.from_user.id,
        callback.action,
    )
    text = messages.moderation_result(
        _message_text(query),
        report.status.value,
        query.from_user.username,
        processed_at=report.processed_at,
    )
    return text, f"Report {PAST_TENSE[callback.action]}"


async def _process_profile(
    services: ServiceRegistry,
    callback: ModerationCallback,
    query: CallbackQuery,
) -> ModerationResult:
    approved = callback.action is ModerationAction.APPROVE
    if approved:
        await services.profiles.approve_profile(callback.entity_id, query.from_user.id)
    else:
        await services.profiles.reject_profile(callback.entity_id, query.from_user.id)

    text = messages.profile_moderation_result(_message_text(query), approved, query.from_user.username)
    return text, f"Profile {PAST_TENSE[callback.action]}"


ENTITY_HANDLERS: Dict[EntityType, ModerationHandler] = {
    EntityType.QUESTION: _process_question,
    EntityType.REPORT: _process_report,
    EntityType.PROFILE: _process_profile,
}

# Полная таблица: каждая допустимая пара (сущность, действие) имеет обработчик
MODERATION_HANDLERS: Dict[Tuple[EntityType, ModerationAction], ModerationHandler] = {
    (entity_type, action): ENTITY_HANDLERS[entity_type]
    for entity_type, actions in ENTITY_ACTIONS.items()
    for action in actions
}


async def handle_moderation_callback(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    """Главный обработчик кнопок модерации."""
    query = update.callback_query
    actor = query.from_user

    try:
        callback = parse_callback(query.data)
    except ValueError:
        logger.warning(f"Unknown callback from {actor.id}: {query.data}")
        await query.answer("Unknown action", show_alert=True)
        return

    logger.debug(f"Moderation callback from {actor.id}: {query.data}")

    services: ServiceRegistry = context.bot_data["services"]
    handler = MODERATION_HANDLERS[(callback.entity_type, callback.action)]

    try:
        text, answer = await handler(services, callback, query)
    except PermissionDeniedError as e:
        await query.answer(f"❌ {e.message}", show_alert=True)
        return
    except (NotFoundError, AlreadyTerminalError, ValidationFailureError) as e:
        await query.answer(f"⚠️ {e.message}", show_alert=True)
        return
    except Exception as e:
        logger.exception(f"Error processing {query.data}: {e}")
        await query.answer("⚠️ An error occurred while processing")
        if callback.entity_type is not EntityType.PROFILE:
            await services.notifier.send_admin_alert(
                messages.processing_error_alert(
                    callback.entity_type.value,
                    callback.entity_id,
                    callback.action.value,
                    actor.username,
                    str(e),
                )
            )
        return

    try:
        await query.edit_message_text(text, parse_mode=ParseMode.MARKDOWN_V2, reply_markup=None)
    except TelegramError as e:
        logger.error(f"Failed to edit moderation message for {query.data}: {e}")

    await query.answer(answer)
