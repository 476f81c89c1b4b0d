"""
Management screen controller.

Holds the state a list screen shows (current page rows, page count, search
box, the create/edit dialog and its draft) without rendering any of it.

Fetches are tagged with the (page, search) pair and a sequence number. A
result is applied only if the screen still shows those parameters when it
arrives and no later fetch has been applied, so a slow response can never
overwrite newer state. In-flight requests are not cancelled.
"""

import itertools
from typing import Any, Optional

from shopdesk.query import RecordService
from shopdesk.rbac import Permission
from shopdesk.session import SessionStore
from shopdesk.store import ChangeFeed
from shopdesk.utils import Logger
from shopdesk.utils.exceptions import ShopdeskError
from .debounce import Debouncer
from .mutation import MutationKind, MutationOutcome, MutationRefresh, MutationState
from .references import ReferenceList

logger = Logger("screen")


class ListScreen:
    def __init__(
        self,
        service: RecordService,
        session: Optional[SessionStore] = None,
        manage_permission: Optional[Permission] = None,
        delete_permission: Optional[Permission] = None,
        references: Optional[dict[str, ReferenceList]] = None,
        feed: Optional[ChangeFeed] = None,
        debounce_delay: Optional[float] = None,
    ):
        self.service = service
        self.session = session
        self.manage_permission = manage_permission
        self.delete_permission = delete_permission
        self.references = dict(references or {})
        self.feed = feed

        # ── Table state ──────────────────────────────────────
        self.page = 1
        self.search_input = ""
        self.search = ""
        self.rows: list[dict[str, Any]] = []
        self.total = 0
        self.total_pages = 1
        self.loading = False
        self.error: Optional[str] = None

        # ── Dialog state ─────────────────────────────────────
        self.dialog_open = False
        self.editing_id: Optional[str] = None
        self.draft: dict[str, Any] = {}

        self._seq = itertools.count(1)
        self._applied_seq = 0
        self._debouncer: Debouncer[str] = Debouncer(self._apply_search, delay=debounce_delay)
        self._mutations = MutationRefresh(service, on_success=self._after_mutation)

    # ── Lifecycle ────────────────────────────────────────────

    async def open(self) -> "ListScreen":
        for ref in self.references.values():
            await ref.load()
            if self.feed is not None:
                ref.attach(self.feed)
        await self.refresh()
        return self

    async def close(self) -> None:
        self._debouncer.cancel()
        await self._debouncer.drain()
        for ref in self.references.values():
            await ref.detach()

    async def __aenter__(self) -> "ListScreen":
        return await self.open()

    async def __aexit__(self, *exc) -> None:
        await self.close()

    # ── Permissions ──────────────────────────────────────────

    def _allowed(self, permission: Optional[Permission]) -> bool:
        if self.session is None or permission is None:
            return True
        return self.session.check(permission) is True

    @property
    def can_manage(self) -> bool:
        return self._allowed(self.manage_permission)

    @property
    def can_delete(self) -> bool:
        return self._allowed(self.delete_permission)

    # ── Fetching ─────────────────────────────────────────────

    async def refresh(self) -> bool:
        """Fetch the current page. Returns False if the result was discarded."""
        seq = next(self._seq)
        params = (self.page, self.search)
        self.loading = True
        try:
            result = await self.service.list_page(page=params[0], search=params[1])
        except ShopdeskError as e:
            if (self.page, self.search) == params and seq > self._applied_seq:
                self.error = e.message
                self.loading = False
            return False

        if (self.page, self.search) != params or seq < self._applied_seq:
            logger.debug(f"Discarded stale {self.service.collection_name} page for {params}")
            return False

        self._applied_seq = seq
        self.rows = result.rows
        self.total = result.total
        self.total_pages = result.total_pages
        self.error = None
        self.loading = False
        return True

    def set_search(self, text: str) -> None:
        """Feed a keystroke; the query runs once typing pauses."""
        self.search_input = text
        self._debouncer.observe(text)

    async def _apply_search(self, text: str) -> None:
        term = (text or "").strip()
        if term == self.search:
            return
        self.search = term
        self.page = 1
        await self.refresh()

    async def go_to_page(self, page: int) -> bool:
        if page < 1 or page > self.total_pages or page == self.page:
            return False
        self.page = page
        return await self.refresh()

    async def next_page(self) -> bool:
        return await self.go_to_page(self.page + 1)

    async def previous_page(self) -> bool:
        return await self.go_to_page(self.page - 1)

    # ── Dialogs ──────────────────────────────────────────────

    def open_create_dialog(self) -> None:
        self.editing_id = None
        self.draft = {}
        self.dialog_open = True

    def open_edit_dialog(self, row: dict[str, Any]) -> None:
        editable = self.service.update_schema.model_fields
        self.editing_id = row["_id"]
        self.draft = {k: v for k, v in row.items() if k in editable}
        self.dialog_open = True

    def update_draft(self, **fields: Any) -> None:
        self.draft.update(fields)

    def close_dialog(self) -> None:
        self.dialog_open = False
        self.editing_id = None
        self.draft = {}

    # ── Mutations ────────────────────────────────────────────

    async def submit(self) -> MutationOutcome:
        """Create or update from the open dialog's draft."""
        kind = MutationKind.CREATE if self.editing_id is None else MutationKind.UPDATE
        if not self.can_manage:
            return self._denied(kind)
        return await self._mutations.run(
            kind,
            data=dict(self.draft),
            record_id=self.editing_id,
            created_by=self._actor(),
        )

    async def delete(self, record_id: str) -> MutationOutcome:
        if not self.can_delete:
            return self._denied(MutationKind.DELETE)
        return await self._mutations.run(MutationKind.DELETE, record_id=record_id)

    async def _after_mutation(self) -> None:
        self.close_dialog()
        self.page = 1
        await self.refresh()

    def _actor(self) -> Optional[str]:
        principal = self.session.current_principal() if self.session else None
        return principal.email if principal else None

    def _denied(self, kind: MutationKind) -> MutationOutcome:
        return MutationOutcome(
            kind=kind,
            state=MutationState.FAILED,
            message="You don't have permission to perform this action",
            trail=[MutationState.IDLE, MutationState.FAILED, MutationState.IDLE],
        )
