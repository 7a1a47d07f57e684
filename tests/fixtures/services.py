"""Service fixtures for testing."""

import httpx
import pytest
from sqlmodel import Session

from src.signin.core.services import (
    InMemorySessionStorage,
    LdapGroupSyncService,
    LogoutDispatcher,
    ProvisioningService,
    ReconciliationService,
    WebSessionService,
)
from src.signin.entities.core.role import RoleRepository
from src.signin.entities.core.user import UserRepository
from tests.fixtures.dummies import FakeDirectory


@pytest.fixture
def session_storage() -> InMemorySessionStorage:
    """Get an in-memory session storage instance for testing."""
    return InMemorySessionStorage()


@pytest.fixture
def web_session_service(session_storage: InMemorySessionStorage) -> WebSessionService:
    return WebSessionService(session_storage)


@pytest.fixture
def user_repository(session: Session) -> UserRepository:
    return UserRepository(session)


@pytest.fixture
def role_repository(session: Session) -> RoleRepository:
    return RoleRepository(session)


@pytest.fixture
def avatar_requests() -> list[httpx.Request]:
    return []


@pytest.fixture
def avatar_transport(avatar_requests: list[httpx.Request]) -> httpx.MockTransport:
    """Avatar server answering every request with a tiny PNG."""

    def handler(request: httpx.Request) -> httpx.Response:
        avatar_requests.append(request)
        return httpx.Response(
            200, content=b"\x89PNG\r\n", headers={"content-type": "image/png"}
        )

    return httpx.MockTransport(handler)


@pytest.fixture
def provisioning_service(
    user_repository: UserRepository,
    role_repository: RoleRepository,
    avatar_transport: httpx.MockTransport,
) -> ProvisioningService:
    return ProvisioningService(user_repository, role_repository, transport=avatar_transport)


@pytest.fixture
def fake_directory() -> FakeDirectory:
    return FakeDirectory({"jdoe": ["Editors", "Staff Members"]})


@pytest.fixture
def group_sync_service(
    fake_directory: FakeDirectory, role_repository: RoleRepository
) -> LdapGroupSyncService:
    return LdapGroupSyncService(fake_directory, role_repository)


@pytest.fixture
def reconciliation_service(
    user_repository: UserRepository,
    provisioning_service: ProvisioningService,
    web_session_service: WebSessionService,
    group_sync_service: LdapGroupSyncService,
) -> ReconciliationService:
    return ReconciliationService(
        user_repository,
        provisioning_service,
        web_session_service,
        group_syncer=group_sync_service,
    )


@pytest.fixture
def logout_dispatcher(web_session_service: WebSessionService) -> LogoutDispatcher:
    return LogoutDispatcher(web_session_service)
