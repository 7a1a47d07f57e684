"""User database table model."""

from sqlmodel import Field

from src.signin.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    ``email`` carries a unique index, so two accounts can never share an
    address even when concurrent logins pass the lookup in the reconciler.
    """

    __tablename__ = "users"

    name: str = ""
    email: str | None = Field(default=None, unique=True, index=True)
    username: str | None = Field(default=None, index=True)
    external_auth_id: str | None = None
    avatar_url: str | None = None
