"""
Mutation-refresh protocol.

    IDLE -> VALIDATING -> SUBMITTING -> SUCCEEDED | CONFLICT | FAILED -> IDLE

Validation runs the entity schema locally and never reaches the store.
Conflicts (duplicates, referenced rows, already-deleted ids) are reported
separately from generic failures. Only SUCCEEDED runs the refresh callback;
every other outcome leaves the caller's state untouched.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Optional

from pydantic import BaseModel, Field

from shopdesk.query import RecordService
from shopdesk.utils import Logger
from shopdesk.utils.exceptions import (
    ConflictError,
    NotFoundError,
    ShopdeskError,
    ValidationError,
)

logger = Logger("mutation")


class MutationKind(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


class MutationState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    CONFLICT = "conflict"
    FAILED = "failed"


class MutationOutcome(BaseModel):
    kind: MutationKind
    state: MutationState
    message: str = ""
    field_errors: dict[str, str] = Field(default_factory=dict)
    record: Optional[dict[str, Any]] = None
    trail: list[MutationState] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.state is MutationState.SUCCEEDED


_SUCCESS_MESSAGES = {
    MutationKind.CREATE: "{label} added successfully",
    MutationKind.UPDATE: "{label} updated successfully",
    MutationKind.DELETE: "{label} deleted successfully",
}


class MutationRefresh:
    def __init__(self, service: RecordService, on_success: Callable[[], Awaitable[None]]):
        self.service = service
        self._on_success = on_success
        self.state = MutationState.IDLE

    async def run(
        self,
        kind: MutationKind,
        data: Optional[dict] = None,
        record_id: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> MutationOutcome:
        trail = [MutationState.IDLE]

        def enter(state: MutationState) -> None:
            self.state = state
            trail.append(state)

        record = None
        field_errors: dict[str, str] = {}
        try:
            enter(MutationState.VALIDATING)
            payload = self._validate(kind, data, record_id)

            enter(MutationState.SUBMITTING)
            if kind is MutationKind.CREATE:
                record = await self.service.create(payload, created_by=created_by)
            elif kind is MutationKind.UPDATE:
                record = await self.service.update(record_id, payload)
            else:
                record = await self.service.delete(record_id)
        except ValidationError as e:
            enter(MutationState.FAILED)
            message, field_errors = e.message, e.fields
        except (ConflictError, NotFoundError) as e:
            enter(MutationState.CONFLICT)
            message = e.message
            logger.warning(f"{kind.value} {self.service.label.lower()} conflict: {message}")
        except ShopdeskError as e:
            enter(MutationState.FAILED)
            message = e.message
            logger.error(f"{kind.value} {self.service.label.lower()} failed: {message}")
        else:
            enter(MutationState.SUCCEEDED)
            message = _SUCCESS_MESSAGES[kind].format(label=self.service.label)
            await self._on_success()

        outcome = MutationOutcome(
            kind=kind,
            state=self.state,
            message=message,
            field_errors=field_errors,
            record=record,
            trail=trail + [MutationState.IDLE],
        )
        self.state = MutationState.IDLE
        return outcome

    def _validate(self, kind: MutationKind, data: Optional[dict], record_id: Optional[str]) -> Optional[dict]:
        if kind is not MutationKind.CREATE and not record_id:
            raise ValidationError(fields={"id": f"No {self.service.label.lower()} selected"})
        if kind is MutationKind.DELETE:
            return None
        return self.service.validate(data or {}, partial=kind is MutationKind.UPDATE)
