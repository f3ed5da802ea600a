"""
Tests for services.callback_data module.
"""

import pytest

from config.constants import EntityType, ModerationAction, ENTITY_ACTIONS
from services.callback_data import (
    ModerationCallback,
    build_callback,
    parse_callback,
)


class TestParseCallback:
    """Tests for parse_callback."""

    @pytest.mark.parametrize("data,expected", [
        ("report:resolve:7", ModerationCallback(EntityType.REPORT, ModerationAction.RESOLVE, 7)),
        ("report:reject:7", ModerationCallback(EntityType.REPORT, ModerationAction.REJECT, 7)),
        ("question:answer:12", ModerationCallback(EntityType.QUESTION, ModerationAction.ANSWER, 12)),
        ("question:archive:12", ModerationCallback(EntityType.QUESTION, ModerationAction.ARCHIVE, 12)),
        ("approve_profile:4242", ModerationCallback(EntityType.PROFILE, ModerationAction.APPROVE, 4242)),
        ("reject_profile:4242", ModerationCallback(EntityType.PROFILE, ModerationAction.REJECT, 4242)),
    ])
    def test_valid_payloads(self, data, expected):
        assert parse_callback(data) == expected

    @pytest.mark.parametrize("data", [
        "",
        "report:answer:1",
        "question:resolve:1",
        "question:answer:",
        "question:answer:abc",
        "profile:approve:1",
        "archive_profile:1",
        "report:resolve:1:extra",
        "user:delete:1",
        "report:resolve:7\n",
        "approve_profile:4242\n",
        " question:answer:1",
        "report:resolve:٣",
    ])
    def test_invalid_payloads(self, data):
        with pytest.raises(ValueError):
            parse_callback(data)


class TestBuildCallback:
    """Tests for build_callback."""

    def test_every_allowed_pair_round_trips(self):
        for entity_type, actions in ENTITY_ACTIONS.items():
            for action in actions:
                data = build_callback(entity_type, action, 99)
                assert parse_callback(data) == ModerationCallback(entity_type, action, 99)

    def test_fits_telegram_limit(self):
        assert len(build_callback(EntityType.QUESTION, ModerationAction.ARCHIVE, 2**63)) <= 64

    def test_disallowed_pair(self):
        with pytest.raises(ValueError):
            build_callback(EntityType.REPORT, ModerationAction.ANSWER, 1)
