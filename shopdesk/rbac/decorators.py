"""
Declarative permission decorators for route handlers.

Usage:
    @router.get("/")
    @require_permission(Permission.VIEW_BRANDS)
    async def list_brands(request: Request):
        ...
"""

from functools import wraps

from starlette.requests import Request

from shopdesk.utils.exceptions import AuthenticationError, PermissionDeniedError
from .permissions import Permission
from .roles import has_permission


def require_permission(permission: Permission):
    """
    Decorator that checks the principal set by the auth middleware on
    request.state holds `permission`.

    Must be applied AFTER the route decorator.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            request: Request | None = kwargs.get("request")
            if request is None:
                for arg in args:
                    if isinstance(arg, Request):
                        request = arg
                        break

            if request is None:
                raise RuntimeError("Request object not found in handler")

            principal = getattr(request.state, "principal", None)
            if principal is None:
                raise AuthenticationError("Not authenticated")

            if not has_permission(principal, permission):
                raise PermissionDeniedError(
                    f"Permission denied. Requires: {permission.value}"
                )

            return await func(*args, **kwargs)

        return wrapper

    return decorator
