from pydantic import BaseModel, ConfigDict, EmailStr, Field

from shopdesk.rbac import Role


class Principal(BaseModel):
    """The authenticated staff member. Immutable for the session's lifetime."""

    model_config = ConfigDict(frozen=True)

    email: EmailStr
    name: str = Field(..., min_length=1)
    role: Role


class LoginRequest(BaseModel):
    """POST /auth/login"""
    email: EmailStr
    password: str = Field(..., min_length=1)
    role: Role | None = None     # optional: must match the stored role when given


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: Principal
