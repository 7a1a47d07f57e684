from __future__ import annotations

from collections.abc import Mapping

from src.signin.core.exceptions import SyncError
from src.signin.core.models import IdentityAssertion, LoginMethod


class StaticBackend:
    """Authentication backend answering with a fixed assertion."""

    def __init__(self, login_method: LoginMethod, assertion: IdentityAssertion | None):
        self.login_method = login_method
        self._assertion = assertion
        self.calls: list[dict[str, str]] = []

    async def authenticate(self, credentials: Mapping[str, str]) -> IdentityAssertion | None:
        self.calls.append(dict(credentials))
        return self._assertion


class FakeDirectory:
    """Directory client backed by a dict of identifier -> group names."""

    def __init__(self, groups: dict[str, list[str]] | None = None, fail: bool = False):
        self._groups = groups or {}
        self._fail = fail
        self.lookups: list[str] = []

    async def get_user_groups(self, identifier: str) -> list[str]:
        self.lookups.append(identifier)
        if self._fail:
            raise SyncError(f"Directory unavailable for {identifier}")
        return list(self._groups.get(identifier, []))
