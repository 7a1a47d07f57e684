"""Core services exports."""

from src.signin.core.storage.session_storage import (
    InMemorySessionStorage,
    RedisSessionStorage,
)

from .auth.backends import AuthenticationBackend, BackendRegistry
from .auth.identifier import login_identifier_field
from .auth.logout import LogoutDispatcher
from .auth.reconciler import Decision, ReconciliationService, decide
from .database.db_session import DbSessionService
from .ldap.directory import DirectoryClient, Ldap3DirectoryClient
from .ldap.group_sync import LdapGroupSyncService
from .session.web_session import WebSessionService
from .user.provisioning import ProvisioningService

__all__ = [
    # Auth
    "AuthenticationBackend",
    "BackendRegistry",
    "Decision",
    "LogoutDispatcher",
    "ReconciliationService",
    "decide",
    "login_identifier_field",
    # Directory
    "DirectoryClient",
    "Ldap3DirectoryClient",
    "LdapGroupSyncService",
    # Sessions
    "WebSessionService",
    "InMemorySessionStorage",
    "RedisSessionStorage",
    # Users
    "ProvisioningService",
    # Database
    "DbSessionService",
]
