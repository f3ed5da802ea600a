"""
Tests for services.access module.
"""

ADMIN_CHAT_ID = -100500


class TestAccessControl:
    """Tests for AccessControl.check_access."""

    async def test_privileged_roles_allowed(self, access, users):
        assert await access.check_access(users.admin.telegram_id) is True
        assert await access.check_access(users.moderator.telegram_id) is True

    async def test_normal_user_denied(self, access, users):
        assert await access.check_access(users.normal.telegram_id) is False

    async def test_unknown_actor_denied(self, access, users):
        assert await access.check_access(111) is False

    async def test_privileged_chat_always_allowed(self, access):
        assert await access.check_access(ADMIN_CHAT_ID) is True
