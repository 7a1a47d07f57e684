"""User data access layer."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from src.signin.core.exceptions import DuplicateIdentityError, SigninError, StorageError
from src.signin.entities.core.user.entity import User, normalize_email
from src.signin.entities.core.user.table import UserTable


class UserRepository:
    """Data-access layer for users."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def get(self, user_id: str) -> User | None:
        row = self._session.get(UserTable, user_id)
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def exists(self, user_id: str) -> bool:
        return self._session.get(UserTable, user_id) is not None

    def find_by_email(self, email: str) -> User | None:
        email = normalize_email(email)
        if email is None:
            return None
        statement = select(UserTable).where(UserTable.email == email)
        row = self._session.exec(statement).first()
        if row is None:
            return None
        return User.model_validate(row, from_attributes=True)

    def save(self, user: User) -> User:
        """Insert ``user`` and flush so constraint violations surface immediately.

        Raises:
            DuplicateIdentityError: another row already owns ``user.email``
        """
        user.email = normalize_email(user.email)
        self._session.add(UserTable(**user.model_dump()))
        try:
            self._session.flush()
        except IntegrityError as exc:
            if user.email is not None:
                raise DuplicateIdentityError(user.email) from exc
            raise
        return user

    def update(self, user: User) -> User:
        row = self._session.get(UserTable, user.id)
        if row is None:
            raise ValueError(f"User {user.id} not found")
        user.touch()
        user.email = normalize_email(user.email)
        for field, value in user.model_dump(exclude={"id", "created_at"}).items():
            setattr(row, field, value)
        self._session.add(row)
        self._session.commit()
        return user

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Commit everything written in the block at once, or nothing.

        Raises:
            StorageError: the database rejected the write for any reason other
                than a sign-in rule, which propagates unchanged
        """
        try:
            yield self._session
            self._session.commit()
        except SigninError:
            self._session.rollback()
            raise
        except SQLAlchemyError as exc:
            self._session.rollback()
            logger.error("User transaction failed: {}", exc)
            raise StorageError(f"Could not persist user: {exc}") from exc
