"""Role domain entity."""

from collections.abc import Iterable

from pydantic import Field

from src.signin.entities.core._base import Entity


def slugify_group(name: str) -> str:
    """Normalise a directory group or role name for comparison."""
    return "-".join(name.strip().lower().split())


class Role(Entity):
    """A local permission group users are attached to."""

    name: str = Field(description="Unique system name")
    display_name: str = Field(default="", description="User-visible name")
    external_auth_id: str | None = Field(
        default=None,
        description="Comma-separated directory groups mapped onto this role",
    )

    def external_group_keys(self) -> set[str]:
        """Directory group names this role answers to.

        Explicit ``external_auth_id`` entries win; without them the slugged
        display name is used.
        """
        if self.external_auth_id:
            return {
                slugify_group(part)
                for part in self.external_auth_id.split(",")
                if part.strip()
            }
        return {slugify_group(self.display_name or self.name)}

    def matches_any(self, group_names: Iterable[str]) -> bool:
        wanted = self.external_group_keys()
        return any(slugify_group(group) in wanted for group in group_names)
