"""Role-based access control.

Each role maps to a fixed matrix of four resources by six actions. The
matrix is built once at import time and exposed read-only; every check
goes through :func:`has_permission`.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping

from loan_origination.exceptions import PermissionDeniedError
from loan_origination.models.enums import Action, Resource, UserRole


@dataclass(frozen=True)
class Permission:
    """Allowed actions on one resource."""

    create: bool = False
    read: bool = False
    update: bool = False
    delete: bool = False
    approve: bool = False
    manage: bool = False

    @classmethod
    def all(cls) -> "Permission":
        return cls(True, True, True, True, True, True)


@dataclass(frozen=True)
class RolePermissions:
    """Permission matrix of one role."""

    loans: Permission
    users: Permission
    reports: Permission
    settings: Permission


ROLE_PERMISSIONS: Mapping[UserRole, RolePermissions] = MappingProxyType({
    UserRole.ADMIN: RolePermissions(
        loans=Permission.all(),
        users=Permission.all(),
        reports=Permission.all(),
        settings=Permission.all(),
    ),
    UserRole.MANAGER: RolePermissions(
        loans=Permission(create=True, read=True, update=True, delete=False, approve=True, manage=True),
        users=Permission(read=True),
        reports=Permission(create=True, read=True),
        settings=Permission(read=True),
    ),
    UserRole.AGENT: RolePermissions(
        loans=Permission(create=True, read=True),
        users=Permission(),
        reports=Permission(),
        settings=Permission(),
    ),
})


def permissions_for_role(role: UserRole | str) -> RolePermissions:
    """Return the permission matrix of ``role``."""
    return ROLE_PERMISSIONS[UserRole(role)]


def has_permission(
    permissions: RolePermissions | None,
    resource: Resource | str,
    action: Action | str,
) -> bool:
    """Check whether ``permissions`` grants ``action`` on ``resource``.

    Returns False for a missing matrix (unauthenticated) and for unknown
    resource or action names.
    """
    if permissions is None:
        return False
    try:
        resource = Resource(resource)
        action = Action(action)
    except ValueError:
        return False
    return bool(getattr(getattr(permissions, resource.value), action.value))


def require_permission(
    permissions: RolePermissions | None,
    resource: Resource | str,
    action: Action | str,
) -> None:
    """Raise PermissionDeniedError unless the action is allowed."""
    if not has_permission(permissions, resource, action):
        action_name = getattr(action, "value", action)
        resource_name = getattr(resource, "value", resource)
        raise PermissionDeniedError(f"Not allowed to {action_name} {resource_name}")
