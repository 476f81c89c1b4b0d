"""
Role definitions and permission matrix.

Roles are strictly nested: admin ⊇ manager ⊇ staff. The table is checked
when this module is imported and again at application start, so adding a
tag to a lower role without its superiors is caught immediately.
"""

from enum import Enum
from typing import Mapping, Optional

from shopdesk.utils.exceptions import ConfigurationError
from .permissions import Permission, parse_permission

P = Permission


class Role(str, Enum):
    ADMIN = "admin"
    MANAGER = "manager"
    STAFF = "staff"


# Highest role first.
ROLE_HIERARCHY: tuple[Role, ...] = (Role.ADMIN, Role.MANAGER, Role.STAFF)

_STAFF = frozenset({
    P.VIEW_DASHBOARD,
    P.VIEW_INVENTORY,
    P.VIEW_CATEGORIES,
    P.VIEW_BRANDS,
    P.VIEW_ORDERS,
    P.VIEW_ANALYTICS,
    P.VIEW_CUSTOMERS,
})

_MANAGER = _STAFF | {
    P.VIEW_SETTINGS,
    P.MANAGE_INVENTORY,
    P.MANAGE_CATEGORIES,
    P.MANAGE_BRANDS,
    P.MANAGE_ORDERS,
    P.MANAGE_CUSTOMERS,
}

ROLE_PERMISSIONS: Mapping[Role, frozenset[Permission]] = {
    Role.ADMIN: frozenset(Permission),
    Role.MANAGER: frozenset(_MANAGER),
    Role.STAFF: _STAFF,
}


def validate_role_permissions(
    table: Mapping[Role, frozenset[Permission]] = ROLE_PERMISSIONS,
) -> None:
    """
    Check that every role is defined and each role's tags are a subset of
    the role above it. Raises ConfigurationError listing what is missing.
    """
    missing_roles = [r.value for r in ROLE_HIERARCHY if r not in table]
    if missing_roles:
        raise ConfigurationError(f"Role table missing roles: {', '.join(missing_roles)}")

    for higher, lower in zip(ROLE_HIERARCHY, ROLE_HIERARCHY[1:]):
        leaked = table[lower] - table[higher]
        if leaked:
            tags = ", ".join(sorted(p.value for p in leaked))
            raise ConfigurationError(
                f"Role '{lower.value}' grants [{tags}] which '{higher.value}' lacks"
            )


def parse_role(value: "str | Role | None") -> Optional[Role]:
    if isinstance(value, Role):
        return value
    try:
        return Role(value)
    except ValueError:
        return None


def permissions_for(role: "str | Role | None") -> frozenset[Permission]:
    """Return the permission set for a role name (empty for unknown roles)."""
    parsed = parse_role(role)
    if parsed is None:
        return frozenset()
    return ROLE_PERMISSIONS[parsed]


def has_permission(principal, tag: "str | Permission | None") -> bool:
    """
    True iff `tag` belongs to the principal's role. Unknown tags, unknown
    roles and a missing principal are all denied.
    """
    if principal is None:
        return False
    permission = parse_permission(tag)
    if permission is None:
        return False
    return permission in permissions_for(getattr(principal, "role", None))


validate_role_permissions()
