from .helpers import (
    serialize_mongo_doc,
    success_response,
    error_response,
    parse_object_id,
)
from .logger import Logger
from .exceptions import (
    ShopdeskError,
    ValidationError,
    ConflictError,
    NotFoundError,
    TransportError,
    ConfigurationError,
    AuthenticationError,
    PermissionDeniedError,
)

__all__ = [
    "serialize_mongo_doc",
    "success_response",
    "error_response",
    "parse_object_id",
    "Logger",
    "ShopdeskError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "TransportError",
    "ConfigurationError",
    "AuthenticationError",
    "PermissionDeniedError",
]
