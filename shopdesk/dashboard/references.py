"""
Reference lists — the brand/category options behind product form dropdowns.

Loaded once, then kept current by change events. Merging only touches the
option list; drafts being edited live on the screen and are never modified.
"""

from typing import Optional

from shopdesk.query import RecordService
from shopdesk.store import ChangeEvent, ChangeFeed, Subscription


class ReferenceList:
    def __init__(self, service: RecordService):
        self.service = service
        self.options: list[dict] = []
        self._subscription: Optional[Subscription] = None

    @property
    def collection(self) -> str:
        return self.service.collection_name

    async def load(self) -> list[dict]:
        self.options = await self.service.list_options()
        return self.options

    def attach(self, feed: ChangeFeed) -> Subscription:
        self._subscription = feed.subscribe(self.collection, self.apply)
        return self._subscription

    async def detach(self) -> None:
        if self._subscription is not None:
            await self._subscription.close()
            self._subscription = None

    def apply(self, event: ChangeEvent) -> None:
        # An update whose lookup came back empty carries no name; the delete event follows.
        if event.operation != "delete" and not event.document:
            return
        remaining = [o for o in self.options if o["_id"] != event.document_id]
        if event.operation != "delete":
            remaining.append({"_id": event.document_id, "name": event.document.get("name", "")})
        remaining.sort(key=lambda o: (o.get("name", ""), o["_id"]))
        self.options = remaining

    def name_of(self, record_id: str) -> Optional[str]:
        for option in self.options:
            if option["_id"] == record_id:
                return option.get("name")
        return None
