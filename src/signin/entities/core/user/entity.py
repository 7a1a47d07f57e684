"""User domain entity."""

from typing import Any

from pydantic import Field, field_validator

from src.signin.entities.core._base import Entity


def normalize_email(email: str | None) -> str | None:
    """Canonical form used for storage and lookups; blank becomes None."""
    if email is None:
        return None
    return email.strip().lower() or None


class User(Entity):
    """A local account that external identities are reconciled onto.

    Instances built by an authentication backend for a first-time identity are
    tentative: they carry the claimed attributes but have not been saved yet.
    """

    name: str = Field(default="", description="Display name")
    email: str | None = Field(default=None, description="Unique email address, lower-cased")
    username: str | None = Field(
        default=None, description="Directory or social login name"
    )
    external_auth_id: str | None = Field(
        default=None, description="Identifier assigned by the external backend"
    )
    avatar_url: str | None = Field(default=None, description="Resolved avatar image")

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, value: str | None) -> str | None:
        return normalize_email(value)

    def __eq__(self, other: Any) -> bool:
        """Compare users by business attributes, ignoring timestamps."""
        if not isinstance(other, User):
            return False

        return (
            self.id == other.id
            and self.name == other.name
            and self.email == other.email
            and self.username == other.username
            and self.external_auth_id == other.external_auth_id
        )

    def __hash__(self) -> int:
        return hash((self.id, self.email, self.username, self.external_auth_id))
