import asyncio
from unittest.mock import AsyncMock

from shopdesk.brands import BrandService
from shopdesk.dashboard import (
    ListScreen,
    MutationState,
    ReferenceList,
    brands_screen,
    categories_screen,
    inventory_screen,
    orders_screen,
)
from shopdesk.store import ChangeEvent
from shopdesk.utils.exceptions import TransportError
from tests.conftest import seed_brand, seed_category, seed_product

DELAY = 0.1

FULL_TRAIL = [
    MutationState.IDLE,
    MutationState.VALIDATING,
    MutationState.SUBMITTING,
    MutationState.SUCCEEDED,
    MutationState.IDLE,
]


def spy_list_page(service):
    calls = []
    real = service.list_page

    async def spy(page=1, search=""):
        calls.append((page, search))
        return await real(page=page, search=search)

    service.list_page = spy
    return calls


async def seed_many_brands(db, count):
    await db["brands"].insert_many([{"name": f"Brand {i:02d}"} for i in range(1, count + 1)])


class TestPaging:
    async def test_open_loads_first_page(self, db, admin_session):
        await seed_many_brands(db, 25)
        async with brands_screen(db, admin_session) as screen:
            assert screen.page == 1
            assert screen.total == 25
            assert screen.total_pages == 3
            assert len(screen.rows) == 10

    async def test_page_navigation_is_bounded(self, db, admin_session):
        await seed_many_brands(db, 25)
        async with brands_screen(db, admin_session) as screen:
            assert await screen.go_to_page(3)
            assert screen.rows[0]["name"] == "Brand 21"
            assert not await screen.next_page()
            assert not await screen.go_to_page(0)
            assert await screen.previous_page()
            assert screen.page == 2

    async def test_fetch_error_is_kept_on_screen(self, db, admin_session):
        screen = brands_screen(db, admin_session)
        screen.service.list_page = AsyncMock(side_effect=TransportError("connection refused"))

        assert await screen.refresh() is False
        assert screen.error == "connection refused"
        assert screen.rows == []


class TestDebouncedSearch:
    async def test_rapid_typing_issues_one_fetch(self, db, admin_session):
        await seed_brand(db, "abc corp")
        await seed_brand(db, "zeta")
        screen = await brands_screen(db, admin_session, debounce_delay=DELAY).open()
        calls = spy_list_page(screen.service)

        for text in ("a", "ab", "abc"):
            screen.set_search(text)
            await asyncio.sleep(DELAY * 0.4)
        await asyncio.sleep(DELAY * 1.5)
        await screen.close()

        assert calls == [(1, "abc")]
        assert [r["name"] for r in screen.rows] == ["abc corp"]

    async def test_new_search_returns_to_page_one(self, db, admin_session):
        await seed_many_brands(db, 25)
        screen = await brands_screen(db, admin_session, debounce_delay=DELAY).open()
        await screen.go_to_page(3)

        screen.set_search("Brand 1")
        await asyncio.sleep(DELAY * 1.5)
        await screen.close()

        assert screen.page == 1
        assert screen.total == 10

    async def test_whitespace_only_change_does_not_refetch(self, db, admin_session):
        screen = await brands_screen(db, admin_session, debounce_delay=DELAY).open()
        calls = spy_list_page(screen.service)

        screen.set_search("   ")
        await asyncio.sleep(DELAY * 1.5)
        await screen.close()

        assert calls == []


class TestStaleResponses:
    async def test_older_search_result_cannot_overwrite_newer(self, db):
        await seed_brand(db, "Alpha")
        await seed_brand(db, "Bolt")
        service = BrandService(db)
        gates = {"a": asyncio.Event(), "b": asyncio.Event()}
        real = service.list_page

        async def gated(page=1, search=""):
            result = await real(page=page, search=search)
            await gates[search].wait()
            return result

        service.list_page = gated
        screen = ListScreen(service)

        screen.search = "a"
        first = asyncio.create_task(screen.refresh())
        await asyncio.sleep(0)
        screen.search = "b"
        second = asyncio.create_task(screen.refresh())
        await asyncio.sleep(0)

        gates["b"].set()
        assert await second is True
        gates["a"].set()
        assert await first is False

        assert [r["name"] for r in screen.rows] == ["Bolt"]

    async def test_earlier_request_with_same_parameters_loses(self, db):
        await seed_brand(db, "Alpha")
        service = BrandService(db)
        gate = asyncio.Event()
        real = service.list_page
        calls = 0

        async def slow_first(page=1, search=""):
            nonlocal calls
            calls += 1
            mine = calls
            result = await real(page=page, search=search)
            if mine == 1:
                await gate.wait()
            return result

        service.list_page = slow_first
        screen = ListScreen(service)

        first = asyncio.create_task(screen.refresh())
        await asyncio.sleep(0)
        await seed_brand(db, "Bolt")
        assert await screen.refresh() is True
        gate.set()
        assert await first is False

        assert screen.total == 2


class TestMutations:
    async def test_create_resets_to_page_one_and_shows_row(self, db, admin_session):
        await seed_many_brands(db, 15)
        async with brands_screen(db, admin_session) as screen:
            await screen.go_to_page(2)
            screen.open_create_dialog()
            screen.update_draft(name="  Aardvark ")

            outcome = await screen.submit()

            assert outcome.ok
            assert outcome.trail == FULL_TRAIL
            assert outcome.message == "Brand added successfully"
            assert screen.page == 1
            assert screen.rows[0]["name"] == "Aardvark"
            assert screen.total == 16
            assert screen.dialog_open is False
            assert screen.draft == {}

    async def test_blank_name_fails_without_remote_call(self, db, admin_session):
        async with brands_screen(db, admin_session) as screen:
            screen.service.create = AsyncMock()
            screen.open_create_dialog()
            screen.update_draft(name="   ")

            outcome = await screen.submit()

            assert outcome.state is MutationState.FAILED
            assert "name" in outcome.field_errors
            assert MutationState.SUBMITTING not in outcome.trail
            screen.service.create.assert_not_awaited()
            assert screen.dialog_open is True
            assert screen.draft == {"name": "   "}

    async def test_duplicate_name_is_conflict_and_keeps_state(self, db, admin_session):
        await seed_brand(db, "Acme")
        async with brands_screen(db, admin_session) as screen:
            screen.open_create_dialog()
            screen.update_draft(name="Acme")

            outcome = await screen.submit()

            assert outcome.state is MutationState.CONFLICT
            assert outcome.message == "Brand name already exists"
            assert screen.dialog_open is True
            assert screen.total == 1

    async def test_delete_referenced_brand_keeps_count(self, db, admin_session):
        acme = await seed_brand(db, "Acme")
        category = await seed_category(db, "Tools")
        for i in range(3):
            await seed_product(db, f"Tool {i}", f"T-{i}", acme, category)

        async with brands_screen(db, admin_session) as screen:
            before = screen.total
            outcome = await screen.delete(acme)

            assert outcome.state is MutationState.CONFLICT
            assert "associated with products" in outcome.message
            assert screen.total == before
            assert await db["brands"].count_documents({}) == before

    async def test_delete_removes_row_and_second_delete_conflicts(self, db, admin_session):
        gone = await seed_brand(db, "Gone")
        await seed_brand(db, "Kept")
        async with brands_screen(db, admin_session) as screen:
            first = await screen.delete(gone)
            assert first.ok
            assert [r["name"] for r in screen.rows] == ["Kept"]

            second = await screen.delete(gone)
            assert second.state is MutationState.CONFLICT
            assert screen.total == 1

    async def test_edit_updates_row(self, db, admin_session):
        brand_id = await seed_brand(db, "Acme")
        async with brands_screen(db, admin_session) as screen:
            screen.open_edit_dialog(screen.rows[0])
            assert screen.draft == {"name": "Acme"}
            screen.update_draft(name="Acme Tools")

            outcome = await screen.submit()

            assert outcome.ok
            assert outcome.record["_id"] == brand_id
            assert screen.rows[0]["name"] == "Acme Tools"

    async def test_backend_failure_surfaces_raw_message(self, db, admin_session):
        async with brands_screen(db, admin_session) as screen:
            screen.service.create = AsyncMock(side_effect=TransportError("socket closed"))
            screen.open_create_dialog()
            screen.update_draft(name="Acme")

            outcome = await screen.submit()

            assert outcome.state is MutationState.FAILED
            assert outcome.message == "socket closed"
            assert screen.dialog_open is True

    async def test_staff_cannot_mutate(self, db, staff_session):
        async with brands_screen(db, staff_session) as screen:
            assert screen.can_manage is False
            screen.open_create_dialog()
            screen.update_draft(name="Acme")

            outcome = await screen.submit()

            assert outcome.state is MutationState.FAILED
            assert await db["brands"].count_documents({}) == 0


class FakeChangeStream:
    def __init__(self):
        self.queue: asyncio.Queue = asyncio.Queue()
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.closed = True

    def __aiter__(self):
        return self

    async def __anext__(self):
        return await self.queue.get()


class FakeWatchedDatabase:
    def __init__(self):
        self.streams: dict[str, FakeChangeStream] = {}

    def __getitem__(self, name):
        db = self

        class _Collection:
            def watch(self, **kwargs):
                return db.streams.setdefault(name, FakeChangeStream())

        return _Collection()


async def settle():
    for _ in range(5):
        await asyncio.sleep(0)


class TestLiveReferences:
    async def test_events_merge_without_touching_draft(self, db, admin_session):
        from shopdesk.store import ChangeFeed

        acme = await seed_brand(db, "Acme")
        await seed_category(db, "Tools")
        watched = FakeWatchedDatabase()
        screen = await inventory_screen(db, admin_session, feed=ChangeFeed(watched)).open()
        brands = screen.references["brands"]
        await settle()

        screen.open_create_dialog()
        screen.update_draft(name="Hammer", brand_id=acme)

        await watched.streams["brands"].queue.put({
            "operationType": "insert",
            "documentKey": {"_id": "b2"},
            "fullDocument": {"_id": "b2", "name": "Bolt"},
        })
        await settle()
        assert [o["name"] for o in brands.options] == ["Acme", "Bolt"]

        await watched.streams["brands"].queue.put({
            "operationType": "delete",
            "documentKey": {"_id": acme},
        })
        await settle()
        assert [o["name"] for o in brands.options] == ["Bolt"]
        assert screen.draft == {"name": "Hammer", "brand_id": acme}
        assert screen.dialog_open is True

        await screen.close()
        assert watched.streams["brands"].closed
        assert watched.streams["categories"].closed

    async def test_reference_list_apply_and_lookup(self, db):
        acme = await seed_brand(db, "Acme")
        brands = ReferenceList(BrandService(db))
        await brands.load()

        brands.apply(ChangeEvent(
            collection="brands", operation="update", document_id=acme, document={"_id": acme, "name": "Zenith"},
        ))
        brands.apply(ChangeEvent(
            collection="brands", operation="insert", document_id="b2", document={"_id": "b2", "name": "Bolt"},
        ))

        assert [o["name"] for o in brands.options] == ["Bolt", "Zenith"]
        assert brands.name_of(acme) == "Zenith"
        assert brands.name_of("missing") is None


class TestOtherScreens:
    async def test_categories_screen_searches_description(self, db, admin_session):
        await seed_category(db, "Tools", "Hand tools and hardware")
        await seed_category(db, "Garden", "Plants")
        screen = await categories_screen(db, admin_session, debounce_delay=DELAY).open()

        screen.set_search("hardware")
        await asyncio.sleep(DELAY * 1.5)
        await screen.close()

        assert [r["name"] for r in screen.rows] == ["Tools"]

    async def test_orders_screen_staff_is_read_only(self, db, staff_session):
        await db["orders"].insert_many([
            {"order_number": "ORD-2", "customer_name": "Bea", "items": [], "total": 0},
            {"order_number": "ORD-1", "customer_name": "Al", "items": [], "total": 0},
        ])
        async with orders_screen(db, staff_session) as screen:
            assert [r["order_number"] for r in screen.rows] == ["ORD-1", "ORD-2"]
            assert screen.can_manage is False
            assert screen.can_delete is False


class TestReferenceListEvents:
    async def test_update_without_document_keeps_option(self, db):
        brands = ReferenceList(BrandService(db))
        brands.options = [{"_id": "1", "name": "Acme"}]

        brands.apply(ChangeEvent(collection="brands", operation="update", document_id="1", document=None))

        assert brands.options == [{"_id": "1", "name": "Acme"}]

    async def test_delete_removes_option(self, db):
        brands = ReferenceList(BrandService(db))
        brands.options = [{"_id": "1", "name": "Acme"}, {"_id": "2", "name": "Bolt"}]

        brands.apply(ChangeEvent(collection="brands", operation="delete", document_id="1"))

        assert brands.options == [{"_id": "2", "name": "Bolt"}]
