"""Shared base classes for domain entities and their tables."""

import uuid
from datetime import UTC, datetime

from pydantic import BaseModel
from pydantic import Field as PydanticField
from sqlmodel import Field, SQLModel


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class Entity(BaseModel):
    """Base entity class with auto-generated UUID identifier."""

    id: str = PydanticField(
        default_factory=_new_id, description="Unique identifier for the entity"
    )
    created_at: datetime = PydanticField(default_factory=_utcnow)
    updated_at: datetime = PydanticField(default_factory=_utcnow)

    def touch(self) -> None:
        """Bump ``updated_at`` before persisting a modification."""
        self.updated_at = _utcnow()


class EntityTable(SQLModel, table=False):
    """Base table with a UUID primary key and audit timestamps."""

    id: str = Field(primary_key=True, default_factory=_new_id)
    created_at: datetime = Field(default_factory=_utcnow, nullable=False)
    updated_at: datetime = Field(default_factory=_utcnow, nullable=False)
