from fastapi import APIRouter, Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from shopdesk.config import get_database
from shopdesk.rbac import permissions_for
from shopdesk.utils import success_response
from shopdesk.utils.exceptions import AuthenticationError
from .schemas import LoginRequest
from .service import AuthService

auth_router = APIRouter()


@auth_router.post("/login")
async def login(
    body: LoginRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Authenticate a staff member and return JWT + principal."""
    svc = AuthService(db)
    result = await svc.authenticate(
        email=body.email,
        password=body.password,
        role=body.role.value if body.role else None,
    )
    return success_response(data=result, message="Login successful")


@auth_router.get("/me")
async def me(request: Request):
    """Return the current principal and the permission tags its role grants."""
    principal = getattr(request.state, "principal", None)
    if principal is None:
        raise AuthenticationError("Not authenticated")
    data = principal.model_dump(mode="json")
    data["permissions"] = sorted(p.value for p in permissions_for(principal.role))
    return success_response(data=data)
