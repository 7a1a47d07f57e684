"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import make_url, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from src.signin.runtime.config.config_data import ConfigData
from src.signin.runtime.context import get_config


class DbSessionService:
    def __init__(self, config: ConfigData | None = None):
        """Initialize the shared database engine and session factory."""
        config = config or get_config()
        db_config = config.database

        logger.info("Configuring database engine for environment: {}", config.app.environment)
        if db_config.url.startswith("sqlite"):
            engine_kwargs: dict = {"connect_args": {"check_same_thread": False}}
            if make_url(db_config.url).database in (None, "", ":memory:"):
                engine_kwargs["poolclass"] = StaticPool
            if config.app.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )
        else:
            engine_kwargs = {
                "pool_size": db_config.pool_size,
                "max_overflow": db_config.max_overflow,
                "pool_timeout": db_config.pool_timeout,
                "pool_recycle": db_config.pool_recycle,
                "pool_pre_ping": True,
            }

        self._engine = create_engine(db_config.url, echo=False, **engine_kwargs)

    def create_all(self) -> None:
        """Create the user and role tables if they do not exist."""
        from src.signin.entities.core.role import RoleTable, UserRoleTable  # noqa: F401
        from src.signin.entities.core.user import UserTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(self._engine, expire_on_commit=False, autoflush=True)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session that is closed when the block exits."""
        db = self.get_session()
        try:
            yield db
        except Exception as e:
            db.rollback()
            logger.error(
                "Database session failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.error("Database health check failed: {}", e)
            return False

    def dispose(self) -> None:
        self._engine.dispose()
