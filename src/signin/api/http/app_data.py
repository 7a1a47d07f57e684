from dataclasses import dataclass

from src.signin.core.services import (
    BackendRegistry,
    DbSessionService,
    DirectoryClient,
    WebSessionService,
)
from src.signin.core.storage.session_storage import SessionStorage


@dataclass
class ApplicationDependencies:
    database_service: DbSessionService
    session_storage: SessionStorage
    web_session_service: WebSessionService
    backends: BackendRegistry
    directory_client: DirectoryClient
