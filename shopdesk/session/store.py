"""
Session store — the authenticated principal of a dashboard instance.

A store is created unready. `rehydrate()` loads the persisted principal and
flips it to ready; until then permission checks answer None (unknown), so
callers render a neutral state instead of briefly showing or hiding content.
"""

from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from shopdesk.auth.schemas import Principal
from shopdesk.rbac import Permission, has_permission
from shopdesk.utils import Logger
from .storage import SessionStorage

logger = Logger("session")


class SessionStore:
    def __init__(self, storage: SessionStorage):
        self._storage = storage
        self._principal: Optional[Principal] = None
        self._ready = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    def rehydrate(self) -> Optional[Principal]:
        """Load the persisted principal; corrupt data means logged out."""
        principal = None
        try:
            raw = self._storage.read()
        except UnicodeDecodeError as e:
            logger.warning(f"Discarding undecodable session data: {e.reason}")
            self._storage.clear()
            raw = None
        if raw:
            try:
                principal = Principal.model_validate_json(raw)
            except PydanticValidationError as e:
                logger.warning(f"Discarding corrupt session data: {e.error_count()} error(s)")
                self._storage.clear()
        self._principal = principal
        self._ready = True
        return principal

    def login(self, principal: Principal) -> None:
        """Replace any existing session with `principal`."""
        self._principal = principal
        self._storage.write(principal.model_dump_json())
        self._ready = True
        logger.info(f"Session started for {principal.email}")

    def logout(self) -> None:
        if self._principal is not None:
            logger.info(f"Session ended for {self._principal.email}")
        self._principal = None
        self._storage.clear()

    def current_principal(self) -> Optional[Principal]:
        return self._principal

    def check(self, tag: "str | Permission") -> Optional[bool]:
        """Permission check for UI gating: None while the store is not ready."""
        if not self._ready:
            return None
        return has_permission(self._principal, tag)
