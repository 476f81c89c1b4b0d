"""
Live change notifications.

A ChangeFeed hands out Subscription objects; each one owns a background task
reading a MongoDB change stream and calling the handler with ChangeEvents.
Subscriptions must be closed explicitly (or used as async context managers)
so a screen tears its streams down when it goes away.
"""

import asyncio
import inspect
from typing import Any, Awaitable, Callable, Optional, Union

from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel
from pymongo.errors import PyMongoError

from shopdesk.utils import Logger, serialize_mongo_doc
from shopdesk.utils.exceptions import TransportError

logger = Logger("changes")

Handler = Callable[["ChangeEvent"], Union[None, Awaitable[None]]]

_OPERATIONS = {"insert": "insert", "update": "update", "replace": "update", "delete": "delete"}


class ChangeEvent(BaseModel):
    collection: str
    operation: str              # insert | update | delete
    document_id: str
    document: Optional[dict[str, Any]] = None

    @classmethod
    def from_change(cls, collection: str, change: dict) -> Optional["ChangeEvent"]:
        """Translate a raw change-stream document; None for operations we ignore."""
        operation = _OPERATIONS.get(change.get("operationType"))
        key = (change.get("documentKey") or {}).get("_id")
        if operation is None or key is None:
            return None
        document = change.get("fullDocument")
        return cls(
            collection=collection,
            operation=operation,
            document_id=str(key),
            document=serialize_mongo_doc(document) if document else None,
        )


class Subscription:
    def __init__(self, db: AsyncIOMotorDatabase, collection: str, handler: Handler):
        self.collection = collection
        self._source = db[collection]
        self._handler = handler
        self._task: Optional[asyncio.Task] = None
        self.error: Optional[TransportError] = None
        self.failed_events = 0

    @property
    def active(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> "Subscription":
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run())
            logger.debug(f"Subscribed to {self.collection} changes")
        return self

    async def close(self) -> None:
        if self._task is None:
            return
        task, self._task = self._task, None
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.debug(f"Unsubscribed from {self.collection} changes")

    async def _run(self) -> None:
        try:
            async with self._source.watch(full_document="updateLookup") as stream:
                async for change in stream:
                    event = ChangeEvent.from_change(self.collection, change)
                    if event is None:
                        continue
                    await self._deliver(event)
        except PyMongoError as e:
            logger.error(f"Change stream on {self.collection} stopped: {e}")
            self.error = TransportError(str(e))

    async def _deliver(self, event: ChangeEvent) -> None:
        """Run the handler for one event; a failing handler does not end the stream."""
        try:
            result = self._handler(event)
            if inspect.isawaitable(result):
                await result
        except Exception:
            self.failed_events += 1
            logger.exception(
                f"Handler for {self.collection} {event.operation} of {event.document_id} failed"
            )

    async def __aenter__(self) -> "Subscription":
        return self.start()

    async def __aexit__(self, *exc) -> None:
        await self.close()


class ChangeFeed:
    """Factory for per-collection subscriptions on one database."""

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    def subscribe(self, collection: str, handler: Handler) -> Subscription:
        return Subscription(self.db, collection, handler).start()
