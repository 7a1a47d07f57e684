"""Role database table models."""

from sqlmodel import Field, SQLModel

from src.signin.entities.core._base import EntityTable


class RoleTable(EntityTable, table=True):
    """Database persistence model for roles."""

    __tablename__ = "roles"

    name: str = Field(unique=True, index=True)
    display_name: str = ""
    external_auth_id: str | None = None


class UserRoleTable(SQLModel, table=True):
    """Link table attaching users to roles."""

    __tablename__ = "role_user"

    user_id: str = Field(foreign_key="users.id", primary_key=True)
    role_id: str = Field(foreign_key="roles.id", primary_key=True)
