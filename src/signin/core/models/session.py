"""Web session model."""

import time
from typing import Any

from pydantic import BaseModel, Field

from src.signin.core.models.identity import LoginMethod


class SessionRecord(BaseModel):
    """Server-side web session, for guests and authenticated users alike."""

    id: str = Field(description="Session identifier")
    user_id: str | None = Field(default=None, description="Authenticated user ID")
    last_login_method: LoginMethod | None = Field(
        default=None, description="Backend that established the login"
    )
    intended_url: str | None = Field(
        default=None, description="Where to go once logged in"
    )
    flashed: dict[str, Any] = Field(
        default_factory=dict, description="Data kept for the next request only"
    )
    created_at: int = Field(description="Creation timestamp")
    last_accessed_at: int = Field(description="Last access timestamp")
    expires_at: int = Field(description="Session expiration timestamp")

    @classmethod
    def create(cls, session_id: str, session_max_age: int = 7200) -> "SessionRecord":
        """Create a new guest session with timestamps."""
        now = int(time.time())
        return cls(
            id=session_id,
            created_at=now,
            last_accessed_at=now,
            expires_at=now + session_max_age,
        )

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    def is_expired(self) -> bool:
        return time.time() > self.expires_at

    def update_access(self) -> None:
        self.last_accessed_at = int(time.time())

    def set_login_method(self, method: LoginMethod) -> None:
        """Record how this session was authenticated.

        Raises:
            ValueError: a different method was already recorded
        """
        if self.last_login_method is not None and self.last_login_method != method:
            raise ValueError(
                f"Session already authenticated via {self.last_login_method.value}"
            )
        self.last_login_method = method

    def flash(self, key: str, value: Any) -> None:
        self.flashed[key] = value

    def pull_flashed(self) -> dict[str, Any]:
        """Return and clear the flashed data."""
        flashed, self.flashed = self.flashed, {}
        return flashed
