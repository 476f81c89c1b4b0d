from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from shopdesk.utils.exceptions import ConfigurationError, TransportError
from shopdesk.utils.logger import Logger
from .settings import settings

logger = Logger("database")

# collection -> unique single-field indexes
UNIQUE_INDEXES: dict[str, list[str]] = {
    "users": ["email"],
    "brands": ["name"],
    "categories": ["name"],
    "products": ["sku"],
    "orders": ["order_number"],
}

# collection -> plain indexes backing sort keys and reference lookups
SORT_INDEXES: dict[str, list[str]] = {
    "products": ["name", "brand_id", "category_id"],
    "orders": ["items.product_id"],
}


async def ensure_indexes(db: AsyncIOMotorDatabase) -> None:
    """Create the unique and lookup indexes the services rely on."""
    for collection, fields in UNIQUE_INDEXES.items():
        for field in fields:
            await db[collection].create_index([(field, ASCENDING)], unique=True)
    for collection, fields in SORT_INDEXES.items():
        for field in fields:
            await db[collection].create_index([(field, ASCENDING)])


class DatabaseManager:
    """MongoDB connection manager, one per process."""

    _instance = None
    _client: AsyncIOMotorClient | None = None
    _database: AsyncIOMotorDatabase | None = None
    _connected: bool = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    async def connect(self) -> None:
        if self._connected:
            return
        if not settings.mongodb_atlas_uri:
            raise ConfigurationError("MONGODB_ATLAS_URI is not configured")
        try:
            self._client = AsyncIOMotorClient(settings.mongodb_atlas_uri)
            self._database = self._client[settings.database_name]
            await self._client.admin.command("ping")
            await ensure_indexes(self._database)
            self._connected = True
            logger.info(f"Connected to MongoDB [{settings.database_name}]")
        except PyMongoError as e:
            self._connected = False
            logger.error(f"Failed to connect to MongoDB: {e}")
            raise TransportError(f"Database unavailable: {e}") from e

    def close(self) -> None:
        if self._client:
            self._client.close()
            self._connected = False
            self._client = None
            self._database = None
            logger.info("MongoDB connection closed")

    @property
    def database(self) -> AsyncIOMotorDatabase:
        if self._database is None:
            raise RuntimeError("Database not connected. Call connect() first.")
        return self._database

    @property
    def is_connected(self) -> bool:
        return self._connected


# ── Module-level singleton ──────────────────────────────────────
db_manager = DatabaseManager()


async def get_database() -> AsyncIOMotorDatabase:
    """FastAPI dependency — returns the database instance."""
    if not db_manager.is_connected:
        await db_manager.connect()
    return db_manager.database
