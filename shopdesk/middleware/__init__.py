"""
Authentication middleware.

Runs on every request (except PUBLIC_ROUTES):
  1. Require a `Bearer` JWT and decode it into a Principal
  2. Set request.state.principal

Per-route permission checks are done by @require_permission on the handler.
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

from shopdesk.auth.helpers import decode_access_token
from shopdesk.config import settings
from shopdesk.utils import Logger, error_response
from shopdesk.utils.exceptions import AuthenticationError

logger = Logger("auth-middleware")

# Exact paths that skip authentication
PUBLIC_ROUTES = {
    "/health",
    "/openapi.json",
    "/api/docs",
    "/redoc",
}

# Paths ending with these segments skip authentication
PUBLIC_SUFFIXES = ("/auth/login",)

# Paths under these prefixes skip authentication
PUBLIC_PREFIXES = ("/api/docs", f"/api/{settings.api_version}/upload/files/")


def is_public(path: str) -> bool:
    return (
        path in PUBLIC_ROUTES
        or path.rstrip("/").endswith(PUBLIC_SUFFIXES)
        or path.startswith(PUBLIC_PREFIXES)
    )


class AuthMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        request.state.principal = None

        if request.method == "OPTIONS" or is_public(request.url.path):
            return await call_next(request)

        auth_header = request.headers.get("Authorization")
        if not auth_header:
            return error_response("Missing Authorization header", code=401)

        if not auth_header.startswith("Bearer "):
            return error_response("Invalid token format. Expected 'Bearer <token>'", code=401)

        token = auth_header.split(" ", 1)[1].strip()
        try:
            principal = decode_access_token(token)
        except AuthenticationError as e:
            logger.warning(f"Rejected token on {request.method} {request.url.path}: {e.message}")
            return error_response(e.message, code=401)

        request.state.principal = principal
        return await call_next(request)
