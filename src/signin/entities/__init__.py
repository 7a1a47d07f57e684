"""Entities grouped by business concept.

Each entity package holds its domain model (entity.py), its table (table.py)
and its repository (repository.py).
"""

from .core.role import Role, RoleRepository, RoleTable, UserRoleTable
from .core.user import User, UserRepository, UserTable

__all__ = [
    "User",
    "UserTable",
    "UserRepository",
    "Role",
    "RoleTable",
    "UserRoleTable",
    "RoleRepository",
]
