"""
Tests for services.profile_service module.
"""

import pytest

from database.repositories.profile import UserProfileRepository
from services.exceptions import NotFoundError, PermissionDeniedError, ValidationFailureError


ADMIN_CHAT_ID = -100500

PROFILE = dict(nickname="z3r0", age=25, telegram="@z3r0_cool", skills="pentest")


async def load_profile(session_factory, user_id: int):
    async with session_factory() as session:
        return await UserProfileRepository(session).get_by_user_id(user_id)


class TestUpsertProfile:
    """Tests for ProfileWorkflow.upsert_profile."""

    async def test_new_profile_is_unapproved_and_sent_to_moderation(self, profiles, users, outbox):
        profile, user = await profiles.upsert_profile(user_id=42, **PROFILE)

        assert profile.is_approved is False
        assert profile.telegram == "z3r0_cool"
        assert user.telegram_id == users.normal.telegram_id

        alert = outbox()[0]
        assert alert["chat_id"] == ADMIN_CHAT_ID
        payloads = [b.callback_data for row in alert["reply_markup"].inline_keyboard for b in row]
        assert payloads == [
            f"approve_profile:{users.normal.telegram_id}",
            f"reject_profile:{users.normal.telegram_id}",
        ]

    async def test_edit_resets_approval(self, profiles, users, session_factory):
        await profiles.upsert_profile(user_id=42, **PROFILE)
        await profiles.approve_profile(users.normal.telegram_id, users.admin.telegram_id)
        assert (await load_profile(session_factory, 42)).is_approved is True

        await profiles.upsert_profile(user_id=42, **{**PROFILE, "skills": "osint"})

        stored = await load_profile(session_factory, 42)
        assert stored.is_approved is False
        assert stored.skills == "osint"

    async def test_unknown_user(self, profiles):
        with pytest.raises(NotFoundError):
            await profiles.upsert_profile(user_id=999, **PROFILE)

    async def test_invalid_age(self, profiles, users):
        with pytest.raises(ValidationFailureError):
            await profiles.upsert_profile(user_id=42, **{**PROFILE, "age": 0})


class TestModerateProfile:
    """Tests for approve_profile / reject_profile."""

    async def test_approve_missing_profile_does_not_create_it(self, profiles, users, session_factory):
        with pytest.raises(NotFoundError):
            await profiles.approve_profile(users.normal.telegram_id, users.admin.telegram_id)

        assert await load_profile(session_factory, 42) is None

    async def test_approve_notifies_owner(self, profiles, users, outbox):
        await profiles.upsert_profile(user_id=42, **PROFILE)

        profile = await profiles.approve_profile(users.normal.telegram_id, users.moderator.telegram_id)

        assert profile.is_approved is True
        to_owner = [m for m in outbox() if m["chat_id"] == users.normal.telegram_id]
        assert len(to_owner) == 1
        assert "approved" in to_owner[0]["text"]

    async def test_reject_keeps_flag_and_notifies_owner(self, profiles, users, outbox, session_factory):
        await profiles.upsert_profile(user_id=42, **PROFILE)

        await profiles.reject_profile(users.normal.telegram_id, users.admin.telegram_id)

        assert (await load_profile(session_factory, 42)).is_approved is False
        to_owner = [m for m in outbox() if m["chat_id"] == users.normal.telegram_id]
        assert "rejected" in to_owner[0]["text"]

    async def test_normal_user_cannot_approve(self, profiles, users, session_factory):
        await profiles.upsert_profile(user_id=42, **PROFILE)

        with pytest.raises(PermissionDeniedError):
            await profiles.approve_profile(users.normal.telegram_id, users.normal.telegram_id)

        assert (await load_profile(session_factory, 42)).is_approved is False
