"""
Callback payloads of moderation buttons.

Grammar:
    report:(resolve|reject):<id>
    question:(answer|reject|archive):<id>
    approve_profile:<telegram_id>
    reject_profile:<telegram_id>

Reports and questions are addressed by internal row id, profiles by the
owner's Telegram ID (the moderation message only carries that one).
"""

import re
from dataclasses import dataclass

from config.constants import EntityType, ModerationAction, ENTITY_ACTIONS


_ENTITY_RE = re.compile(r"(report|question):([a-z]+):([0-9]+)")
_PROFILE_RE = re.compile(r"(approve|reject)_profile:([0-9]+)")


@dataclass(frozen=True)
class ModerationCallback:
    entity_type: EntityType
    action: ModerationAction
    entity_id: int


def build_callback(entity_type: EntityType, action: ModerationAction, entity_id: int) -> str:
    """Собирает callback_data для кнопки модерации."""
    if action not in ENTITY_ACTIONS[entity_type]:
        raise ValueError(f"Action {action.value} is not allowed for {entity_type.value}")

    if entity_type is EntityType.PROFILE:
        return f"{action.value}_profile:{entity_id}"
    return f"{entity_type.value}:{action.value}:{entity_id}"


def parse_callback(data: str) -> ModerationCallback:
    """
    Разбирает callback_data кнопки модерации.

    Raises:
        ValueError: если строка не соответствует грамматике
    """
    match = _PROFILE_RE.fullmatch(data or "")
    if match:
        return ModerationCallback(
            entity_type=EntityType.PROFILE,
            action=ModerationAction(match.group(1)),
            entity_id=int(match.group(2)),
        )

    match = _ENTITY_RE.fullmatch(data or "")
    if not match:
        raise ValueError(f"Unknown callback payload: {data!r}")

    entity_type = EntityType(match.group(1))
    try:
        action = ModerationAction(match.group(2))
    except ValueError:
        raise ValueError(f"Unknown action in callback payload: {data!r}") from None

    if action not in ENTITY_ACTIONS[entity_type]:
        raise ValueError(f"Action {action.value} is not allowed for {entity_type.value}")

    return ModerationCallback(entity_type=entity_type, action=action, entity_id=int(match.group(3)))
