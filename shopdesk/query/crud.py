"""
Shared CRUD service for the management collections.

Subclasses declare their collection, search fields, unique fields and the
collections that reference them. The base class turns store-level failures
into the error taxonomy:

    duplicate unique field / DuplicateKeyError  -> ConflictError
    delete while still referenced               -> ConflictError
    target id absent (incl. already deleted)    -> NotFoundError
    any other PyMongoError                      -> TransportError
"""

from datetime import datetime, timezone
from typing import Any, ClassVar, Optional, Type

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pymongo import ASCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError, PyMongoError

from shopdesk.utils import Logger, parse_object_id, serialize_mongo_doc
from shopdesk.utils.exceptions import (
    ConflictError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from .engine import PageResult, PaginatedQueryEngine


def validation_error_from_pydantic(exc: PydanticValidationError) -> ValidationError:
    """Flatten pydantic errors into {field: message}."""
    fields: dict[str, str] = {}
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
        fields.setdefault(loc, err.get("msg", "Invalid value"))
    return ValidationError(fields=fields)


class RecordService:
    collection_name: ClassVar[str]
    label: ClassVar[str]
    search_fields: ClassVar[list[str]]
    sort_key: ClassVar[str] = "name"
    create_schema: ClassVar[Type[BaseModel]]
    update_schema: ClassVar[Type[BaseModel]]
    # field -> conflict message
    unique_fields: ClassVar[dict[str, str]] = {}
    # (collection, field holding our id, conflict message)
    referenced_by: ClassVar[list[tuple[str, str, str]]] = []

    def __init__(self, db: AsyncIOMotorDatabase, page_size: Optional[int] = None):
        self.db = db
        self.collection = db[self.collection_name]
        self.engine = PaginatedQueryEngine(
            self.collection,
            search_fields=self.search_fields,
            sort_key=self.sort_key,
            page_size=page_size,
        )
        self.logger = Logger(self.collection_name)

    # ── Validation ───────────────────────────────────────────

    def validate(self, data: dict, partial: bool = False) -> dict:
        """Validate a draft against the create (or update) schema."""
        schema = self.update_schema if partial else self.create_schema
        try:
            model = schema.model_validate(data)
        except PydanticValidationError as e:
            raise validation_error_from_pydantic(e) from e
        return model.model_dump(mode="json", exclude_unset=partial)

    async def prepare(self, data: dict, existing: Optional[dict] = None) -> dict:
        """Hook for derived fields and reference checks before writing."""
        return data

    # ── Reads ────────────────────────────────────────────────

    async def list_page(self, page: int = 1, search: str = "") -> PageResult[dict[str, Any]]:
        return await self.engine.fetch(page=page, search=search)

    async def get(self, record_id: str) -> dict:
        oid = parse_object_id(record_id)
        doc = await self._call(self.collection.find_one({"_id": oid}))
        if not doc:
            raise NotFoundError(f"{self.label} not found")
        return serialize_mongo_doc(doc)

    async def list_options(self) -> list[dict]:
        """All rows as {_id, name}, for dropdowns in other screens' forms."""
        cursor = self.collection.find({}, {"name": 1}).sort([(self.sort_key, ASCENDING), ("_id", ASCENDING)])
        try:
            return [serialize_mongo_doc(doc) async for doc in cursor]
        except PyMongoError as e:
            raise TransportError(str(e)) from e

    async def exists(self, record_id: str) -> bool:
        if not record_id or not ObjectId.is_valid(record_id):
            return False
        return await self._call(self.collection.count_documents({"_id": ObjectId(record_id)})) > 0

    # ── Writes ───────────────────────────────────────────────

    async def create(self, data: dict, created_by: Optional[str] = None) -> dict:
        doc = await self.prepare(dict(data))
        await self._check_unique(doc)

        now = datetime.now(timezone.utc)
        doc.update({"created_by": created_by, "created_at": now, "updated_at": now})
        try:
            result = await self.collection.insert_one(doc)
        except DuplicateKeyError as e:
            raise ConflictError(self._duplicate_message(e)) from e
        except PyMongoError as e:
            raise TransportError(str(e)) from e

        doc["_id"] = result.inserted_id
        self.logger.info(f"Created {self.label.lower()} {doc['_id']}")
        return serialize_mongo_doc(doc)

    async def update(self, record_id: str, data: dict) -> dict:
        oid = parse_object_id(record_id)
        existing = await self._call(self.collection.find_one({"_id": oid}))
        if not existing:
            raise NotFoundError(f"{self.label} not found")

        clean = {k: v for k, v in data.items() if v is not None}
        clean = await self.prepare(clean, existing=existing)
        await self._check_unique(clean, exclude_id=oid)
        clean["updated_at"] = datetime.now(timezone.utc)

        try:
            result = await self.collection.find_one_and_update(
                {"_id": oid},
                {"$set": clean},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise ConflictError(self._duplicate_message(e)) from e
        except PyMongoError as e:
            raise TransportError(str(e)) from e

        if not result:
            raise NotFoundError(f"{self.label} not found")
        self.logger.info(f"Updated {self.label.lower()} {record_id}")
        return serialize_mongo_doc(result)

    async def delete(self, record_id: str) -> dict:
        """Hard delete. Refused while other records still reference the row."""
        oid = parse_object_id(record_id)
        for collection, field, message in self.referenced_by:
            in_use = await self._call(self.db[collection].count_documents({field: record_id}))
            if in_use:
                self.logger.warning(
                    f"Refused delete of {self.label.lower()} {record_id}: {in_use} {collection} reference it"
                )
                raise ConflictError(message)

        result = await self._call(self.collection.delete_one({"_id": oid}))
        if result.deleted_count == 0:
            raise NotFoundError(f"{self.label} not found or already deleted")
        self.logger.info(f"Deleted {self.label.lower()} {record_id}")
        return {"_id": record_id, "deleted": True}

    # ── Internals ────────────────────────────────────────────

    async def _check_unique(self, doc: dict, exclude_id=None) -> None:
        for field, message in self.unique_fields.items():
            if doc.get(field) is None:
                continue
            query: dict = {field: doc[field]}
            if exclude_id is not None:
                query["_id"] = {"$ne": exclude_id}
            if await self._call(self.collection.find_one(query, {"_id": 1})):
                raise ConflictError(message)

    def _duplicate_message(self, exc: DuplicateKeyError) -> str:
        details = getattr(exc, "details", None) or {}
        key = details.get("keyPattern") or details.get("keyValue") or {}
        for field in key:
            if field in self.unique_fields:
                return self.unique_fields[field]
        return f"{self.label} already exists"

    async def _call(self, awaitable):
        try:
            return await awaitable
        except PyMongoError as e:
            self.logger.error(f"{self.collection_name} operation failed: {e}")
            raise TransportError(str(e)) from e
