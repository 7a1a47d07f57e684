"""FastAPI dependency implementations."""

from __future__ import annotations

from collections.abc import Iterator

from fastapi import Depends, Request
from sqlmodel import Session

from src.signin.api.http.app_data import ApplicationDependencies
from src.signin.core.models import SessionRecord
from src.signin.core.services import (
    BackendRegistry,
    DirectoryClient,
    LdapGroupSyncService,
    LogoutDispatcher,
    ProvisioningService,
    ReconciliationService,
    WebSessionService,
)
from src.signin.entities.core.role import RoleRepository
from src.signin.entities.core.user import UserRepository
from src.signin.runtime.context import get_config


def _app_deps(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_db_session(request: Request) -> Iterator[Session]:
    """Get a database session that is closed after the request."""
    with _app_deps(request).database_service.session_scope() as db:
        yield db


def get_web_session_service(request: Request) -> WebSessionService:
    """Get the web session service instance."""
    return _app_deps(request).web_session_service


def get_backend_registry(request: Request) -> BackendRegistry:
    """Get the registry of authentication backends."""
    return _app_deps(request).backends


def get_directory_client(request: Request) -> DirectoryClient:
    """Get the LDAP directory client."""
    return _app_deps(request).directory_client


async def get_current_session(
    request: Request,
    sessions: WebSessionService = Depends(get_web_session_service),
) -> SessionRecord | None:
    """Load the web session named by the session cookie, if it is still live."""
    session_id = request.cookies.get(get_config().security.session_cookie_name)
    if not session_id:
        return None
    return await sessions.get(session_id)


def get_user_repository(db: Session = Depends(get_db_session)) -> UserRepository:
    return UserRepository(db)


def get_role_repository(db: Session = Depends(get_db_session)) -> RoleRepository:
    return RoleRepository(db)


def get_reconciliation_service(
    users: UserRepository = Depends(get_user_repository),
    roles: RoleRepository = Depends(get_role_repository),
    sessions: WebSessionService = Depends(get_web_session_service),
    directory: DirectoryClient = Depends(get_directory_client),
) -> ReconciliationService:
    """Build the reconciler for one request, bound to its database session."""
    return ReconciliationService(
        users,
        ProvisioningService(users, roles),
        sessions,
        group_syncer=LdapGroupSyncService(directory, roles),
    )


def get_logout_dispatcher(
    sessions: WebSessionService = Depends(get_web_session_service),
) -> LogoutDispatcher:
    return LogoutDispatcher(sessions)
