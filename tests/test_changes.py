import asyncio

import pytest
from bson import ObjectId
from pymongo.errors import PyMongoError

from shopdesk.store import ChangeEvent, ChangeFeed, Subscription
from shopdesk.utils.exceptions import TransportError


class ScriptedStream:
    """Change stream that yields a fixed list of changes, then blocks."""

    def __init__(self, changes):
        self._changes = list(changes)
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.closed = True

    def __aiter__(self):
        return self

    async def __anext__(self):
        if self._changes:
            return self._changes.pop(0)
        await asyncio.Event().wait()


class FailingStream(ScriptedStream):
    async def __aenter__(self):
        raise PyMongoError("change streams need a replica set")


class FakeDatabase:
    def __init__(self, stream):
        self.stream = stream
        self.watch_kwargs = None

    def __getitem__(self, name):
        outer = self

        class _Collection:
            def watch(self, **kwargs):
                outer.watch_kwargs = kwargs
                return outer.stream

        return _Collection()


async def settle():
    for _ in range(5):
        await asyncio.sleep(0)


class TestChangeEvent:
    def test_insert_serializes_document(self):
        oid = ObjectId()
        event = ChangeEvent.from_change("brands", {
            "operationType": "insert",
            "documentKey": {"_id": oid},
            "fullDocument": {"_id": oid, "name": "Acme"},
        })
        assert event.operation == "insert"
        assert event.document_id == str(oid)
        assert event.document == {"_id": str(oid), "name": "Acme"}

    def test_replace_is_reported_as_update(self):
        event = ChangeEvent.from_change("brands", {
            "operationType": "replace",
            "documentKey": {"_id": "x"},
            "fullDocument": {"_id": "x", "name": "Bolt"},
        })
        assert event.operation == "update"

    def test_delete_has_no_document(self):
        event = ChangeEvent.from_change("brands", {
            "operationType": "delete",
            "documentKey": {"_id": "x"},
        })
        assert event.operation == "delete"
        assert event.document is None

    @pytest.mark.parametrize("change", [
        {"operationType": "invalidate"},
        {"operationType": "drop", "documentKey": {"_id": "x"}},
        {"operationType": "insert"},
    ])
    def test_ignored_changes(self, change):
        assert ChangeEvent.from_change("brands", change) is None


class TestSubscription:
    async def test_handler_receives_events_in_order(self):
        stream = ScriptedStream([
            {"operationType": "insert", "documentKey": {"_id": "a"}, "fullDocument": {"_id": "a"}},
            {"operationType": "invalidate"},
            {"operationType": "delete", "documentKey": {"_id": "a"}},
        ])
        db = FakeDatabase(stream)
        received = []

        sub = ChangeFeed(db).subscribe("brands", received.append)
        await settle()

        assert [e.operation for e in received] == ["insert", "delete"]
        assert db.watch_kwargs == {"full_document": "updateLookup"}
        assert sub.active
        await sub.close()

    async def test_async_handler_is_awaited(self):
        stream = ScriptedStream([
            {"operationType": "update", "documentKey": {"_id": "a"}, "fullDocument": {"_id": "a"}},
        ])
        received = []

        async def handler(event):
            received.append(event.document_id)

        async with Subscription(FakeDatabase(stream), "categories", handler):
            await settle()

        assert received == ["a"]

    async def test_close_tears_down_stream(self):
        stream = ScriptedStream([])
        sub = ChangeFeed(FakeDatabase(stream)).subscribe("brands", lambda e: None)
        await settle()

        await sub.close()

        assert stream.closed
        assert not sub.active

    async def test_close_twice_is_harmless(self):
        sub = ChangeFeed(FakeDatabase(ScriptedStream([]))).subscribe("brands", lambda e: None)
        await sub.close()
        await sub.close()
        assert not sub.active

    async def test_stream_failure_is_recorded(self):
        sub = ChangeFeed(FakeDatabase(FailingStream([]))).subscribe("brands", lambda e: None)
        await settle()

        assert not sub.active
        assert isinstance(sub.error, TransportError)
        await sub.close()

    async def test_failing_handler_does_not_end_stream(self):
        stream = ScriptedStream([
            {"operationType": "insert", "documentKey": {"_id": "1"}, "fullDocument": {"_id": "1"}},
            {"operationType": "insert", "documentKey": {"_id": "2"}, "fullDocument": {"_id": "2"}},
        ])
        seen = []

        def handler(event):
            seen.append(event.document_id)
            if event.document_id == "1":
                raise KeyError("name")

        sub = ChangeFeed(FakeDatabase(stream)).subscribe("brands", handler)
        await settle()

        assert seen == ["1", "2"]
        assert sub.active
        assert sub.failed_events == 1
        assert sub.error is None
        await sub.close()
