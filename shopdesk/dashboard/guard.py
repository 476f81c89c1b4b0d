"""
Route guard for dashboard pages.

    LOADING          session not rehydrated yet: show a spinner, never redirect
    UNAUTHENTICATED  no principal: redirect to login, once per transition
    FORBIDDEN        principal lacks the page permission: access-denied view
    AUTHORIZED       render the page
"""

from enum import Enum
from typing import Callable, Optional

from pydantic import BaseModel, ConfigDict

from shopdesk.auth.schemas import Principal
from shopdesk.rbac import Permission, has_permission
from shopdesk.session import SessionStore
from shopdesk.utils import Logger

logger = Logger("guard")


class AccessState(str, Enum):
    LOADING = "loading"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    AUTHORIZED = "authorized"


class GuardDecision(BaseModel):
    model_config = ConfigDict(frozen=True)

    state: AccessState
    redirect_to: Optional[str] = None


def resolve_access(
    principal: Optional[Principal],
    required_permission: "Permission | str | None",
    is_ready: bool,
) -> AccessState:
    if not is_ready:
        return AccessState.LOADING
    if principal is None:
        return AccessState.UNAUTHENTICATED
    if required_permission is not None and not has_permission(principal, required_permission):
        return AccessState.FORBIDDEN
    return AccessState.AUTHORIZED


class RouteGuard:
    def __init__(
        self,
        session: SessionStore,
        redirect: Callable[[str], None],
        login_path: str = "/login",
    ):
        self.session = session
        self.login_path = login_path
        self._redirect = redirect
        self._last_state: Optional[AccessState] = None

    def check(self, required_permission: "Permission | str | None" = None) -> GuardDecision:
        state = resolve_access(
            self.session.current_principal(), required_permission, self.session.is_ready
        )
        redirect_to = None
        if state is AccessState.UNAUTHENTICATED and self._last_state is not AccessState.UNAUTHENTICATED:
            redirect_to = self.login_path
            logger.info(f"Redirecting to {self.login_path}")
            self._redirect(self.login_path)
        self._last_state = state
        return GuardDecision(state=state, redirect_to=redirect_to)
