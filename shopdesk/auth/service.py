"""Authentication service — credential check against the users collection."""

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from shopdesk.rbac import parse_role
from shopdesk.utils import Logger
from shopdesk.utils.exceptions import AuthenticationError, TransportError
from .helpers import create_access_token, hash_password, verify_password
from .schemas import Principal, TokenResponse

logger = Logger("auth")


class AuthService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.users = db["users"]

    async def authenticate(self, email: str, password: str, role: str | None = None) -> dict:
        """
        1. Look up the user by email.
        2. Verify it is active, the password matches, and the role (if given) matches.
        3. Return a JWT + the principal.
        """
        try:
            user = await self.users.find_one({"email": email.lower()})
        except PyMongoError as e:
            raise TransportError(str(e)) from e

        if not user or not verify_password(password, user.get("password", "")):
            logger.warning(f"Failed login for {email}")
            raise AuthenticationError("Invalid credentials or role selection")

        if not user.get("is_active", True):
            raise AuthenticationError("Account is deactivated")

        stored_role = parse_role(user.get("role"))
        if stored_role is None or (role is not None and parse_role(role) != stored_role):
            logger.warning(f"Role mismatch on login for {email}")
            raise AuthenticationError("Invalid credentials or role selection")

        principal = Principal(email=user["email"], name=user.get("name") or user["email"], role=stored_role)
        logger.info(f"Login: {principal.email} ({principal.role.value})")
        token = TokenResponse(access_token=create_access_token(principal), user=principal)
        return token.model_dump(mode="json")

    async def create_user(self, email: str, name: str, password: str, role: str) -> Principal:
        """Insert a staff account. Used for seeding and by admins."""
        principal = Principal(email=email.lower(), name=name, role=role)
        await self.users.insert_one({
            "email": principal.email,
            "name": principal.name,
            "role": principal.role.value,
            "password": hash_password(password),
            "is_active": True,
        })
        return principal
