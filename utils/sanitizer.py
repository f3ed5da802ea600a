"""
Input sanitizer.
Валидация и санитизация пользовательского ввода из Mini App.
"""

import re
from typing import Optional
from loguru import logger


# Максимальные длины
MAX_MESSAGE_LENGTH = 4096  # Telegram limit
MAX_FIELD_LENGTH = 100
MAX_HANDLE_LENGTH = 32

# Опасные HTML/JS фрагменты
DANGEROUS_TAGS = [
    "<script", "</script>", "<iframe", "</iframe>",
    "javascript:", "onerror=", "onclick=", "onload=",
]

# Символы для удаления (контрольные символы кроме пробелов и переносов)
CONTROL_CHARS_PATTERN = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
HANDLE_PATTERN = re.compile(r"[^A-Za-z0-9_]")


def sanitize_text(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> str:
    """
    Санитизирует текст.

    - Удаляет контрольные символы
    - Сжимает длинные серии пробелов
    - Обрезает по максимальной длине

    Args:
        text: Исходный текст
        max_length: Максимальная длина

    Returns:
        Очищенный текст
    """
    if not text:
        return ""

    text = CONTROL_CHARS_PATTERN.sub("", text)
    text = re.sub(r" {3,}", "  ", text)
    text = text.strip()

    if len(text) > max_length:
        text = text[:max_length]
        logger.warning(f"Text truncated to {max_length} chars")

    return text


def sanitize_handle(handle: str) -> str:
    """
    Telegram handle без «@» и посторонних символов.
    """
    if not handle:
        return ""
    handle = HANDLE_PATTERN.sub("", handle.strip().lstrip("@"))
    return handle[:MAX_HANDLE_LENGTH]


def check_xss(text: str) -> bool:
    """
    Проверяет текст на признаки XSS-атаки.

    Returns:
        True если обнаружены подозрительные паттерны
    """
    if not text:
        return False

    text_lower = text.lower()

    for tag in DANGEROUS_TAGS:
        if tag in text_lower:
            logger.warning(f"Potential XSS detected: {text[:100]}")
            return True

    return False


def validate_message(text: str, max_length: int = MAX_MESSAGE_LENGTH) -> tuple[bool, str, Optional[str]]:
    """
    Полная валидация текста вопроса или жалобы.

    Returns:
        (is_valid, sanitized_text, error_message)
    """
    if not text or not text.strip():
        return False, "", "Empty message"

    if len(text) > max_length:
        return False, "", f"Message is too long (max {max_length} chars)"

    sanitized = sanitize_text(text, max_length)

    # Логируем, но не блокируем: текст уходит в Telegram экранированным
    check_xss(sanitized)

    return True, sanitized, None
