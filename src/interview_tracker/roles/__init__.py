"""Interview role definitions."""

from .service import DEFAULT_ROLES, RoleService

__all__ = ["DEFAULT_ROLES", "RoleService"]
