"""
Shared fixtures: an in-memory motor database, principals for each role,
and an HTTP client bound to the app with the database dependency overridden.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from mongomock_motor import AsyncMongoMockClient

from shopdesk.app import create_app
from shopdesk.auth import Principal, create_access_token
from shopdesk.config import get_database
from shopdesk.config.database import ensure_indexes
from shopdesk.rbac import Role
from shopdesk.session import MemorySessionStorage, SessionStore


@pytest.fixture
async def db():
    client = AsyncMongoMockClient()
    database = client["shopdesk_test"]
    await ensure_indexes(database)
    return database


@pytest.fixture
def admin():
    return Principal(email="admin@store.com", name="Admin User", role=Role.ADMIN)


@pytest.fixture
def manager():
    return Principal(email="manager@store.com", name="Store Manager", role=Role.MANAGER)


@pytest.fixture
def staff():
    return Principal(email="staff@store.com", name="Staff Member", role=Role.STAFF)


def make_session(principal=None) -> SessionStore:
    session = SessionStore(MemorySessionStorage())
    session.rehydrate()
    if principal is not None:
        session.login(principal)
    return session


@pytest.fixture
def admin_session(admin):
    return make_session(admin)


@pytest.fixture
def staff_session(staff):
    return make_session(staff)


def auth_headers(principal) -> dict:
    return {"Authorization": f"Bearer {create_access_token(principal)}"}


@pytest.fixture
def app(db):
    application = create_app()
    application.dependency_overrides[get_database] = lambda: db
    return application


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        yield c


# ── Seed helpers ─────────────────────────────────────────────────


async def seed_brand(db, name: str) -> str:
    result = await db["brands"].insert_one({"name": name})
    return str(result.inserted_id)


async def seed_category(db, name: str, description: str = "") -> str:
    result = await db["categories"].insert_one({"name": name, "description": description})
    return str(result.inserted_id)


async def seed_product(db, name: str, sku: str, brand_id: str, category_id: str, stock: int = 20, price: float = 10.0) -> str:
    result = await db["products"].insert_one({
        "name": name,
        "sku": sku,
        "brand_id": brand_id,
        "category_id": category_id,
        "stock": stock,
        "price": price,
    })
    return str(result.inserted_id)
