"""Low-level auth helpers: password hashing + JWT encode/decode."""

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError as PydanticValidationError

from shopdesk.config import settings
from shopdesk.utils.exceptions import AuthenticationError
from .schemas import Principal

# ── Password hashing ────────────────────────────────────────────
_pwd_ctx = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(plain: str) -> str:
    return _pwd_ctx.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    if not hashed:
        return False
    return _pwd_ctx.verify(plain, hashed)


# ── JWT ──────────────────────────────────────────────────────────
def create_access_token(principal: Principal, expires_delta: timedelta | None = None) -> str:
    """Encode the principal as `sub` (email), `name` and `role` claims."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode = {
        "sub": principal.email,
        "name": principal.name,
        "role": principal.role.value,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> Principal:
    """Decode and verify a JWT back into a Principal."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except JWTError as e:
        raise AuthenticationError("Invalid or expired token") from e

    try:
        return Principal(
            email=payload.get("sub"),
            name=payload.get("name"),
            role=payload.get("role"),
        )
    except PydanticValidationError as e:
        raise AuthenticationError("Token does not describe a valid principal") from e
