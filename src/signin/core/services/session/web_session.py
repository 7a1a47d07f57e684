from loguru import logger

from src.signin.core.models.identity import LoginMethod
from src.signin.core.models.session import SessionRecord
from src.signin.core.security import generate_session_id
from src.signin.core.storage.session_storage import SessionStorage
from src.signin.runtime.context import get_config


def _key(session_id: str) -> str:
    return f"session:{session_id}"


class WebSessionService:
    """Service for managing web sessions."""

    def __init__(self, session_storage: SessionStorage) -> None:
        self._storage = session_storage

    async def save(self, record: SessionRecord) -> None:
        await self._storage.set(_key(record.id), record, get_config().app.session_max_age)

    async def start(self, intended_url: str | None = None) -> SessionRecord:
        """Create and store a new guest session."""
        record = SessionRecord.create(
            session_id=generate_session_id(),
            session_max_age=get_config().app.session_max_age,
        )
        record.intended_url = intended_url
        await self.save(record)
        return record

    async def get(self, session_id: str) -> SessionRecord | None:
        """Get a session by ID.

        Returns:
            The session, or None if not found or expired
        """
        record = await self._storage.get(_key(session_id), SessionRecord)
        if record is None:
            return None

        if record.is_expired():
            await self._storage.delete(_key(session_id))
            return None

        record.update_access()
        await self.save(record)
        return record

    async def login(
        self, record: SessionRecord, user_id: str, method: LoginMethod
    ) -> SessionRecord:
        """Bind a user to the session, rotating its ID.

        The previous identifier is discarded so a session fixed before login
        cannot be reused. Flashed data and the intended URL carry over.
        """
        await self._storage.delete(_key(record.id))
        rotated = SessionRecord.create(
            session_id=generate_session_id(),
            session_max_age=get_config().app.session_max_age,
        )
        rotated.user_id = user_id
        rotated.set_login_method(method)
        rotated.intended_url = record.intended_url
        rotated.flashed = record.flashed
        await self.save(rotated)
        logger.debug("User {} logged in via {}", user_id, method.value)
        return rotated

    async def logout(self, record: SessionRecord) -> SessionRecord:
        """Drop the authenticated user but keep a guest session.

        Guest sessions are returned unchanged.
        """
        if not record.is_authenticated:
            return record

        logger.debug("Logging out user {} from session", record.user_id)
        await self._storage.delete(_key(record.id))
        guest = await self.start(intended_url=record.intended_url)
        guest.flashed = record.flashed
        await self.save(guest)
        return guest

    async def invalidate(self, record: SessionRecord) -> None:
        """Destroy the session entirely."""
        await self._storage.delete(_key(record.id))

    async def pull_intended_url(self, record: SessionRecord) -> str | None:
        intended, record.intended_url = record.intended_url, None
        if intended is not None:
            await self.save(record)
        return intended

    async def purge_expired(self) -> int:
        return await self._storage.cleanup_expired()
