"""Role entity module."""

from .entity import Role, slugify_group
from .repository import RoleRepository
from .table import RoleTable, UserRoleTable

__all__ = ["Role", "RoleTable", "UserRoleTable", "RoleRepository", "slugify_group"]
