import hashlib

import httpx
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from src.signin.core.exceptions import AvatarFetchError
from src.signin.entities.core.role import Role, RoleRepository
from src.signin.entities.core.user import User, UserRepository
from src.signin.runtime.config.config_data import AvatarConfig
from src.signin.runtime.context import get_config


def avatar_url_for(email: str, avatar_config: AvatarConfig) -> str:
    email_hash = hashlib.md5(email.strip().lower().encode("utf-8")).hexdigest()
    return avatar_config.url_template.format(hash=email_hash, size=avatar_config.size)


class ProvisioningService:
    """Initial setup applied to users created from a first-time identity."""

    def __init__(
        self,
        user_repo: UserRepository,
        role_repo: RoleRepository,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._users = user_repo
        self._roles = role_repo
        self._transport = transport

    def attach_default_role(self, user: User) -> Role | None:
        """Attach the configured registration role to ``user``.

        Runs inside the caller's transaction; nothing is committed here.
        The role is created on first use.
        """
        role_name = get_config().auth.registration_role
        if not role_name:
            return None

        role = self._roles.get_or_create(role_name)
        self._roles.attach(user.id, role.id)
        logger.info("Attached default role {} to user {}", role.name, user.id)
        return role

    async def fetch_and_assign_avatar(self, user: User) -> str | None:
        """Resolve an avatar for ``user`` and store its URL.

        Returns:
            The stored URL, or None when avatars are disabled or the user has
            no email

        Raises:
            AvatarFetchError: the image could not be fetched or saved
        """
        avatar_config = get_config().avatar
        if not avatar_config.enabled or not user.email:
            return None

        try:
            url = avatar_url_for(user.email, avatar_config)
            async with httpx.AsyncClient(
                timeout=avatar_config.timeout_seconds, transport=self._transport
            ) as client:
                response = await client.get(url, follow_redirects=True)
                response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, KeyError, IndexError, ValueError) as exc:
            raise AvatarFetchError(f"Avatar fetch failed for {user.id}: {exc}") from exc

        content_type = response.headers.get("content-type", "")
        if not content_type.startswith("image/"):
            raise AvatarFetchError(f"Avatar response is not an image: {content_type!r}")

        user.avatar_url = url
        try:
            self._users.update(user)
        except (SQLAlchemyError, ValueError) as exc:
            raise AvatarFetchError(f"Could not store avatar for {user.id}: {exc}") from exc
        return url
