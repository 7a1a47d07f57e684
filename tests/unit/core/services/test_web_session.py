"""Tests for the web session service."""

import pytest

from src.signin.core.models import LoginMethod, SessionRecord
from src.signin.core.services import WebSessionService
from src.signin.core.storage.session_storage import InMemorySessionStorage


class TestWebSessionService:
    """Test session management functionality."""

    @pytest.mark.asyncio
    async def test_start_creates_guest_session(self, web_session_service: WebSessionService):
        record = await web_session_service.start(intended_url="/books")

        stored = await web_session_service.get(record.id)
        assert stored is not None
        assert stored.user_id is None
        assert stored.intended_url == "/books"
        assert not stored.is_authenticated

    @pytest.mark.asyncio
    async def test_login_rotates_session_id(self, web_session_service: WebSessionService):
        guest = await web_session_service.start(intended_url="/books")
        guest.flash("notice", "hello")

        record = await web_session_service.login(guest, "user-1", LoginMethod.LDAP)

        assert record.id != guest.id
        assert record.user_id == "user-1"
        assert record.last_login_method is LoginMethod.LDAP
        assert record.intended_url == "/books"
        assert record.flashed == {"notice": "hello"}
        assert await web_session_service.get(guest.id) is None

    @pytest.mark.asyncio
    async def test_logout_keeps_guest_session(self, web_session_service: WebSessionService):
        record = await web_session_service.login(
            await web_session_service.start(), "user-1", LoginMethod.STANDARD
        )

        guest = await web_session_service.logout(record)

        assert guest.id != record.id
        assert guest.user_id is None
        assert guest.last_login_method is None
        assert await web_session_service.get(record.id) is None
        assert await web_session_service.get(guest.id) is not None

    @pytest.mark.asyncio
    async def test_logout_of_guest_is_noop(self, web_session_service: WebSessionService):
        guest = await web_session_service.start()

        assert await web_session_service.logout(guest) is guest

    @pytest.mark.asyncio
    async def test_invalidate_removes_session(self, web_session_service: WebSessionService):
        record = await web_session_service.start()

        await web_session_service.invalidate(record)

        assert await web_session_service.get(record.id) is None

    @pytest.mark.asyncio
    async def test_expired_session_is_dropped(
        self, web_session_service: WebSessionService, session_storage: InMemorySessionStorage
    ):
        record = await web_session_service.start()
        record.expires_at = 0
        await web_session_service.save(record)

        assert await web_session_service.get(record.id) is None
        assert not await session_storage.exists(f"session:{record.id}")

    @pytest.mark.asyncio
    async def test_pull_intended_url_is_single_use(
        self, web_session_service: WebSessionService
    ):
        record = await web_session_service.start(intended_url="/shelves")

        assert await web_session_service.pull_intended_url(record) == "/shelves"
        assert await web_session_service.pull_intended_url(record) is None
        assert (await web_session_service.get(record.id)).intended_url is None


class TestSessionRecord:
    def test_login_method_cannot_change(self):
        record = SessionRecord.create("s1")
        record.set_login_method(LoginMethod.SAML)
        record.set_login_method(LoginMethod.SAML)

        with pytest.raises(ValueError, match="saml"):
            record.set_login_method(LoginMethod.STANDARD)

    def test_pull_flashed_clears(self):
        record = SessionRecord.create("s1")
        record.flash("request_email", True)

        assert record.pull_flashed() == {"request_email": True}
        assert record.flashed == {}

    def test_json_round_trip_keeps_login_method(self):
        record = SessionRecord.create("s1")
        record.set_login_method(LoginMethod.SOCIAL)

        restored = SessionRecord.model_validate_json(record.model_dump_json())

        assert restored.last_login_method is LoginMethod.SOCIAL
