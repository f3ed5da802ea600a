"""
Tests for services.user_service module.
"""

from datetime import datetime
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import update

from database.models import User
from database.repositories.webapp_session import WebAppSessionRepository
from services.exceptions import NotFoundError
from services.user_service import UserService


async def active_sessions(session_factory, user_id: int) -> int:
    async with session_factory() as session:
        return await WebAppSessionRepository(session).count_active(user_id, datetime.now())


class TestAddUser:
    """Tests for UserService.add_user."""

    async def test_registers_user_and_opens_session(self, user_service, session_factory):
        user, webapp_session = await user_service.add_user(777, username="trinity", first_name="T")

        assert user.telegram_id == 777
        assert user.username == "trinity"
        assert webapp_session.user_id == user.id
        assert webapp_session.expires_at > datetime.now()
        assert await active_sessions(session_factory, user.id) == 1

    async def test_repeat_login_updates_fields_and_keeps_one_session(self, user_service, session_factory):
        first, _ = await user_service.add_user(777, username="trinity")
        second, _ = await user_service.add_user(777, username="trinity2")

        assert second.id == first.id
        assert second.username == "trinity2"
        assert await active_sessions(session_factory, first.id) == 1

    async def test_omitted_fields_are_kept(self, user_service):
        await user_service.add_user(777, username="trinity", last_name="Smith")
        user, _ = await user_service.add_user(777)

        assert user.username == "trinity"
        assert user.last_name == "Smith"

    async def test_blocked_user(self, user_service, session_factory):
        user, _ = await user_service.add_user(777)
        async with session_factory() as session:
            await session.execute(update(User).where(User.id == user.id).values(is_active=False))
            await session.commit()

        with pytest.raises(NotFoundError, match="User blocked"):
            await user_service.add_user(777)

    async def test_avatar_fetched_when_missing(self, session_factory):
        avatars = AsyncMock()
        avatars.fetch_avatar.return_value = "data:image/jpeg;base64,AAAA"
        service = UserService(session_factory, avatars=avatars)

        user, _ = await service.add_user(777)

        avatars.fetch_avatar.assert_awaited_once_with(777)
        assert user.avatar == "data:image/jpeg;base64,AAAA"

    async def test_given_avatar_skips_fetch(self, session_factory):
        avatars = AsyncMock()
        service = UserService(session_factory, avatars=avatars)

        user, _ = await service.add_user(777, avatar="data:image/png;base64,BBBB")

        avatars.fetch_avatar.assert_not_awaited()
        assert user.avatar == "data:image/png;base64,BBBB"


class TestSessions:
    """Tests for create_session / close_session."""

    async def test_new_session_expires_previous(self, user_service, users, session_factory):
        first = await user_service.create_session(42)
        second = await user_service.create_session(42)

        assert second.id != first.id
        assert await active_sessions(session_factory, 42) == 1

    async def test_session_for_unknown_user(self, user_service):
        with pytest.raises(NotFoundError):
            await user_service.create_session(999)

    async def test_close_session(self, user_service, users, session_factory):
        webapp_session = await user_service.create_session(42)

        closed = await user_service.close_session(webapp_session.id)

        assert closed.expires_at <= datetime.now()
        assert await active_sessions(session_factory, 42) == 0

    async def test_close_missing_session(self, user_service):
        with pytest.raises(NotFoundError, match="sessionId not found"):
            await user_service.close_session(31337)
