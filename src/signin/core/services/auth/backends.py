"""Contract between credential backends and the reconciler.

Backends (local password store, LDAP bind, SAML, OAuth providers) verify
credentials on their own and report the result as an IdentityAssertion.
"""

from collections.abc import Mapping
from typing import Protocol, runtime_checkable

from src.signin.core.models.identity import IdentityAssertion, LoginMethod


@runtime_checkable
class AuthenticationBackend(Protocol):
    """Verifies credentials and describes the caller's identity."""

    login_method: LoginMethod

    async def authenticate(
        self, credentials: Mapping[str, str]
    ) -> IdentityAssertion | None:
        """Return the verified identity, or None when credentials are rejected."""
        ...


class BackendRegistry:
    """Backends indexed by the login method they implement."""

    def __init__(self, backends: list[AuthenticationBackend] | None = None) -> None:
        self._backends: dict[LoginMethod, AuthenticationBackend] = {}
        for backend in backends or []:
            self.register(backend)

    def register(self, backend: AuthenticationBackend) -> None:
        self._backends[backend.login_method] = backend

    def get(self, method: LoginMethod) -> AuthenticationBackend | None:
        return self._backends.get(method)
