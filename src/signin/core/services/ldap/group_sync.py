from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from src.signin.core.exceptions import SyncError
from src.signin.core.services.ldap.directory import DirectoryClient
from src.signin.entities.core.role import RoleRepository
from src.signin.entities.core.user import User
from src.signin.runtime.context import get_config


class LdapGroupSyncService:
    """Keeps local roles in line with a user's directory groups."""

    def __init__(self, directory: DirectoryClient, role_repo: RoleRepository) -> None:
        self._directory = directory
        self._roles = role_repo

    def should_sync(self) -> bool:
        config = get_config()
        return config.auth.method == "ldap" and config.ldap.user_to_groups

    async def sync(self, user: User, identifier: str | None) -> set[str]:
        """Match directory groups to roles and apply them to ``user``.

        Returns:
            Names of the roles matched by the user's directory groups.

        Raises:
            SyncError: directory lookup or role update failed
        """
        if not identifier:
            raise SyncError(f"No directory identifier available for user {user.id}")

        groups = await self._directory.get_user_groups(identifier)

        try:
            matched = [role for role in self._roles.all() if role.matches_any(groups)]
            attached, detached = self._roles.sync_user_roles(
                user.id,
                [role.id for role in matched],
                detach_others=get_config().ldap.remove_from_groups,
            )
        except SQLAlchemyError as exc:
            self._roles.rollback()
            raise SyncError(f"Could not update roles for user {user.id}: {exc}") from exc

        logger.info(
            "Synced directory groups for {}: {} attached, {} detached",
            identifier,
            len(attached),
            len(detached),
        )
        return {role.name for role in matched}
