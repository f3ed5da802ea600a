"""
Message formatters.
Тексты уведомлений в MarkdownV2. Всё, что ввёл пользователь,
экранируется перед подстановкой.
"""

from datetime import datetime
from typing import Any, Optional

from telegram.helpers import escape_markdown

from database.models import User


def esc(value: Any) -> str:
    """Экранирует значение для MarkdownV2. None превращается в пустую строку."""
    if value is None:
        return ""
    return escape_markdown(str(value), version=2)


def format_date(dt: Optional[datetime]) -> str:
    """
    Форматирует дату для отображения.

    Returns:
        str: Отформатированная дата (DD.MM.YYYY HH:MM)
    """
    if dt is None:
        dt = datetime.now()
    return dt.strftime("%d.%m.%Y %H:%M")


def describe_user(user: Optional[User]) -> str:
    """Короткое описание автора: @username, имя или «Аноним». Не экранировано."""
    if user is None:
        return "Аноним"
    if user.username:
        return f"@{user.username}"
    full_name = f"{user.first_name or ''} {user.last_name or ''}".strip()
    return full_name or f"ID: {user.telegram_id}"


# =====================================
# АЛЕРТЫ ДЛЯ МОДЕРАТОРОВ
# =====================================

def question_alert(question_id: int, text: str, created_at: datetime, user: Optional[User]) -> str:
    return (
        f"❓ *НОВЫЙ ВОПРОС* \\#{question_id}\n\n"
        f"📝 Вопрос:\n{esc(text)}\n\n"
        f"👤 Пользователь: {esc(describe_user(user))}\n"
        f"⏱ Дата: {esc(format_date(created_at))}"
    )


def report_alert(
    report_id: int,
    message: str,
    created_at: datetime,
    user: Optional[User],
    ip_address: Optional[str] = None,
) -> str:
    if user is not None:
        user_info = f"{describe_user(user)} (ID: {user.telegram_id})"
    else:
        user_info = "Нет информации о пользователе"

    text = (
        f"🚨 *НОВЫЙ ОТЧЕТ* \\#{report_id}\n\n"
        f"📝 {esc(message)}\n\n"
        f"👤 {esc(user_info)}\n"
        f"⏱️ {esc(format_date(created_at))}"
    )
    if ip_address:
        text += f"\n🌐 IP: {esc(ip_address)}"
    return text


def profile_alert(user: User, nickname: str, age: int, telegram: str, skills: str) -> str:
    return (
        f"🆕 *НОВЫЙ ПРОФИЛЬ НА МОДЕРАЦИЮ*\n\n"
        f"👤 Пользователь: {esc(describe_user(user))}\n"
        f"🆔 ID: {user.telegram_id}\n\n"
        f"📛 *Никнейм*: {esc(nickname)}\n"
        f"🔢 *Возраст*: {esc(age)}\n"
        f"📱 *Telegram*: @{esc(telegram.lstrip('@'))}\n"
        f"🛠 *Навыки*: {esc(skills)}"
    )


def payment_alert(payment_id: str, title: str, price: Any, currency: str, user: User) -> str:
    full_name = f"{user.first_name or ''} {user.last_name or ''}".strip()
    handle = f"@{user.username}" if user.username else f"ID: {user.id}"
    return (
        f"💰 *НОВЫЙ ПЛАТЕЖ* \\#{esc(payment_id)}\n\n"
        f"🏷️ План: *{esc(title)}*\n"
        f"💵 Сумма: *{esc(currency)}{esc(price)}*\n"
        f"👤 Пользователь: {esc(full_name)} \\({esc(handle)}\\)\n"
        f"🆔 Telegram ID: {user.telegram_id}"
    )


def payment_error_alert(payment_id: str, error: str) -> str:
    return f"❌ Ошибка при обработке платежа \\#{esc(payment_id)}\n\n{esc(error)}"


def processing_error_alert(
    entity_type: str,
    entity_id: int,
    action: str,
    moderator: Optional[str],
    error: str,
) -> str:
    return esc(
        f"🚨 Ошибка обработки ({entity_type}) #{entity_id}\n\n"
        f"Действие: {action}\n"
        f"Модератор: @{moderator or 'unknown'}\n"
        f"Ошибка: {error}"
    )


# =====================================
# УВЕДОМЛЕНИЯ АВТОРАМ
# =====================================

def question_answered(question_id: int, question: str, answer: Optional[str]) -> str:
    return (
        f"📬 *Your question \\#{question_id} has been answered*\n\n"
        f"❓ Question: {esc(question)}\n"
        f"💬 Answer: {esc(answer or 'No answer provided')}\n\n"
        f"Thank you for your question\\!"
    )


def question_rejected(question_id: int, question: str) -> str:
    return (
        f"⚠️ *Your question \\#{question_id} has been reviewed*\n\n"
        f"❓ Question: {esc(question)}\n"
        f"Status: Rejected\n\n"
        f"Please review our guidelines and try again\\."
    )


def report_rejected(report_id: int) -> str:
    return esc(f"Your report #{report_id} was reviewed and rejected")


def profile_approved() -> str:
    return esc("🎉 Your profile has been approved by the admin!")


def profile_rejected() -> str:
    return esc(
        "❌ Your profile has been rejected by an admin. "
        "Please update your information and submit for re-check."
    )


# =====================================
# РЕЗУЛЬТАТ МОДЕРАЦИИ (правка исходного сообщения)
# =====================================

def moderation_result(
    original_text: Optional[str],
    status: str,
    moderator: Optional[str],
    answer: Optional[str] = None,
    processed_at: Optional[datetime] = None,
) -> str:
    text = (
        f"{esc(original_text)}\n\n"
        f"✅ *Status*: {esc(status)}\n"
        f"👮 Moderator: @{esc(moderator or 'unknown')}\n"
        f"⏱ Time: {esc(format_date(processed_at))}"
    )
    if answer:
        text += f"\n\n💬 Answer: {esc(answer)}"
    return text


def profile_moderation_result(original_text: Optional[str], approved: bool, moderator: Optional[str]) -> str:
    verdict = "✅ *ОДОБРЕНО*" if approved else "❌ *ОТКЛОНЕНО*"
    return f"{esc(original_text)}\n\n{verdict} модератором @{esc(moderator or 'unknown')}"
