"""Role data access layer."""

from collections.abc import Iterable

from sqlmodel import Session, select

from src.signin.entities.core.role.entity import Role
from src.signin.entities.core.role.table import RoleTable, UserRoleTable


class RoleRepository:
    """Data-access layer for roles and user-role links.

    Writes are flushed, not committed: callers decide the transaction
    boundary, either through ``UserRepository.transaction`` or ``commit``.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def get_by_name(self, name: str) -> Role | None:
        row = self._session.exec(select(RoleTable).where(RoleTable.name == name)).first()
        if row is None:
            return None
        return Role.model_validate(row, from_attributes=True)

    def create(self, role: Role) -> Role:
        self._session.add(RoleTable(**role.model_dump()))
        self._session.flush()
        return role

    def get_or_create(self, name: str) -> Role:
        role = self.get_by_name(name)
        if role is None:
            role = self.create(Role(name=name, display_name=name.replace("-", " ").title()))
        return role

    def all(self) -> list[Role]:
        rows = self._session.exec(select(RoleTable)).all()
        return [Role.model_validate(row, from_attributes=True) for row in rows]

    def roles_for_user(self, user_id: str) -> list[Role]:
        statement = (
            select(RoleTable)
            .join(UserRoleTable, UserRoleTable.role_id == RoleTable.id)
            .where(UserRoleTable.user_id == user_id)
        )
        rows = self._session.exec(statement).all()
        return [Role.model_validate(row, from_attributes=True) for row in rows]

    def attach(self, user_id: str, role_id: str) -> bool:
        """Link a role to a user. Returns False when the link already exists."""
        if self._session.get(UserRoleTable, (user_id, role_id)) is not None:
            return False
        self._session.add(UserRoleTable(user_id=user_id, role_id=role_id))
        self._session.flush()
        return True

    def detach(self, user_id: str, role_id: str) -> None:
        link = self._session.get(UserRoleTable, (user_id, role_id))
        if link is not None:
            self._session.delete(link)
            self._session.flush()

    def sync_user_roles(
        self, user_id: str, role_ids: Iterable[str], *, detach_others: bool
    ) -> tuple[set[str], set[str]]:
        """Attach ``role_ids`` and optionally detach every other role.

        Returns:
            The sets of attached and detached role ids.
        """
        wanted = set(role_ids)
        current = {role.id for role in self.roles_for_user(user_id)}

        attached = wanted - current
        for role_id in attached:
            self.attach(user_id, role_id)

        detached = (current - wanted) if detach_others else set()
        for role_id in detached:
            self.detach(user_id, role_id)

        self._session.commit()
        return attached, detached

    def rollback(self) -> None:
        """Discard writes not yet committed on the shared session."""
        self._session.rollback()
