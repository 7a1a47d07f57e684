"""Directory lookups used to sync group membership."""

import asyncio
from typing import Any, Protocol

import ldap3
from ldap3.core.exceptions import LDAPException
from ldap3.utils.conv import escape_filter_chars
from ldap3.utils.dn import parse_dn
from loguru import logger

from src.signin.core.exceptions import SyncError
from src.signin.runtime.config.config_data import LdapConfig


class DirectoryClient(Protocol):
    async def get_user_groups(self, identifier: str) -> list[str]:
        """Return the names of the groups ``identifier`` belongs to."""
        ...


def _ensure_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def group_name_from_dn(dn: str) -> str:
    """``cn=Editors,ou=groups,dc=example,dc=com`` -> ``Editors``."""
    attribute, value, _ = parse_dn(dn)[0]
    return value if attribute.lower() == "cn" else dn


class Ldap3DirectoryClient:
    """Looks up a user's groups through the ``memberOf``-style attribute."""

    def __init__(self, ldap_config: LdapConfig) -> None:
        self._config = ldap_config
        self._server = ldap3.Server(ldap_config.server, get_info=ldap3.NONE)

    def _connect(self) -> ldap3.Connection:
        return ldap3.Connection(
            self._server,
            user=self._config.bind_dn,
            password=self._config.bind_password,
            auto_bind=True,
            receive_timeout=self._config.timeout_seconds,
        )

    def _lookup_groups(self, identifier: str) -> list[str]:
        conn = self._connect()
        try:
            conn.search(
                search_base=self._config.base_dn,
                search_filter=self._config.user_filter.format(
                    identifier=escape_filter_chars(identifier)
                ),
                search_scope=ldap3.SUBTREE,
                attributes=[self._config.group_attribute],
            )
            entries = [
                entry for entry in conn.response or []
                if entry.get("type") == "searchResEntry"
            ]
            if not entries:
                logger.warning("No directory entry found for {}", identifier)
                return []
            attributes = entries[0].get("attributes") or {}
            group_dns = _ensure_list(attributes.get(self._config.group_attribute))
            return [group_name_from_dn(str(dn)) for dn in group_dns]
        finally:
            conn.unbind()

    async def get_user_groups(self, identifier: str) -> list[str]:
        try:
            return await asyncio.to_thread(self._lookup_groups, identifier)
        except LDAPException as exc:
            raise SyncError(f"Directory lookup failed for {identifier}: {exc}") from exc
