"""
Shared helpers for workflow services.
"""

from typing import Iterable, Optional, Union

from config.constants import ModerationAction, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from services.exceptions import ValidationFailureError


def parse_action(action: Union[str, ModerationAction], allowed: Iterable[ModerationAction]) -> ModerationAction:
    """Приводит действие к ModerationAction и проверяет, что оно допустимо."""
    try:
        action = ModerationAction(action)
    except ValueError:
        raise ValidationFailureError(f"Unknown action: {action}") from None
    if action not in allowed:
        raise ValidationFailureError(f"Action {action.value} is not allowed here")
    return action


def paginate(page: Optional[int], limit: Optional[int]) -> tuple[int, int]:
    """Нормализует номер страницы и размер (1..MAX_PAGE_SIZE)."""
    page = max(page or 1, 1)
    limit = min(max(limit or DEFAULT_PAGE_SIZE, 1), MAX_PAGE_SIZE)
    return page, limit


def pagination_info(total: int, page: int, limit: int) -> dict:
    return {
        "total": total,
        "page": page,
        "limit": limit,
        "totalPages": -(-total // limit),
    }
