"""Tests for the database session service."""

from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy.pool import StaticPool

from src.signin.core.services import DbSessionService
from src.signin.entities.core.user import User, UserRepository
from src.signin.runtime.config.config_data import ConfigData, DatabaseConfig


def _service(url: str) -> DbSessionService:
    return DbSessionService(ConfigData(database=DatabaseConfig(url=url)))


class TestDbSessionService:
    @pytest.mark.parametrize("url", ["sqlite://", "sqlite:///:memory:"])
    def test_in_memory_urls_share_one_connection(self, url: str):
        service = _service(url)

        assert isinstance(service._engine.pool, StaticPool)
        service.dispose()

    def test_file_database_uses_regular_pool(self, tmp_path):
        service = _service(f"sqlite:///{tmp_path / 'signin.db'}")

        assert not isinstance(service._engine.pool, StaticPool)
        service.dispose()

    def test_tables_visible_from_worker_threads(self):
        service = _service("sqlite://")
        service.create_all()
        with service.session_scope() as db:
            with UserRepository(db).transaction():
                UserRepository(db).save(User(email="a@x.com"))

        def lookup() -> User | None:
            with service.session_scope() as db:
                return UserRepository(db).find_by_email("a@x.com")

        with ThreadPoolExecutor(max_workers=1) as pool:
            found = pool.submit(lookup).result()

        assert found is not None
        service.dispose()

    def test_health_check(self):
        service = _service("sqlite://")

        assert service.health_check() is True
        service.dispose()
