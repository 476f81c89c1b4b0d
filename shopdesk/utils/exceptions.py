"""
Error taxonomy shared by services, dashboard controllers and HTTP handlers.

Each error carries the HTTP status it maps to; the app registers a single
handler for ShopdeskError that renders the standard error envelope.
"""

from typing import Optional


class ShopdeskError(Exception):
    status_code: int = 500
    default_message: str = "Unexpected error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ShopdeskError):
    """Local, field-scoped rejection raised before any remote call."""

    status_code = 422
    default_message = "Validation failed"

    def __init__(self, message: Optional[str] = None, fields: Optional[dict[str, str]] = None):
        self.fields = dict(fields or {})
        if message is None and self.fields:
            message = "; ".join(f"{k}: {v}" for k, v in self.fields.items())
        super().__init__(message)


class ConflictError(ShopdeskError):
    """Uniqueness or referential-integrity violation reported by the store."""

    status_code = 409
    default_message = "Resource conflict"


class NotFoundError(ShopdeskError):
    status_code = 404
    default_message = "Resource not found"


class TransportError(ShopdeskError):
    """Database or upstream service unavailable."""

    status_code = 503
    default_message = "Backend unavailable"


class ConfigurationError(ShopdeskError):
    status_code = 500
    default_message = "Server configuration error"


class AuthenticationError(ShopdeskError):
    status_code = 401
    default_message = "Authentication failed"


class PermissionDeniedError(ShopdeskError):
    status_code = 403
    default_message = "Permission denied"
