from .permissions import Permission, parse_permission
from .roles import (
    ROLE_HIERARCHY,
    ROLE_PERMISSIONS,
    Role,
    has_permission,
    parse_role,
    permissions_for,
    validate_role_permissions,
)
from .decorators import require_permission

__all__ = [
    "Permission",
    "parse_permission",
    "Role",
    "ROLE_HIERARCHY",
    "ROLE_PERMISSIONS",
    "has_permission",
    "parse_role",
    "permissions_for",
    "validate_role_permissions",
    "require_permission",
]
