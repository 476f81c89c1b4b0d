from .schemas import Principal, LoginRequest, TokenResponse
from .helpers import create_access_token, decode_access_token, hash_password, verify_password
from .service import AuthService
from .routes import auth_router

__all__ = [
    "Principal",
    "LoginRequest",
    "TokenResponse",
    "create_access_token",
    "decode_access_token",
    "hash_password",
    "verify_password",
    "AuthService",
    "auth_router",
]
