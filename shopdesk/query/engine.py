"""
Paginated query engine.

One engine per collection. A fetch applies an optional case-insensitive
substring search across the configured fields, orders by a stable key with
`_id` as tie-break, and reads exactly one page window plus the exact count
of matching rows.
"""

import math
import re
from typing import Any, Generic, Optional, TypeVar

from motor.motor_asyncio import AsyncIOMotorCollection
from pydantic import BaseModel, Field, computed_field, field_validator
from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from shopdesk.config import settings
from shopdesk.utils import Logger, serialize_mongo_doc
from shopdesk.utils.exceptions import TransportError, ValidationError

T = TypeVar("T")

logger = Logger("query")


def total_pages(total: int, page_size: int) -> int:
    """Number of pages needed for `total` rows; never less than 1."""
    return max(1, math.ceil(total / page_size))


class PageQuery(BaseModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1)
    search: str = ""

    @field_validator("search", mode="before")
    @classmethod
    def trim_search(cls, v):
        return (v or "").strip()

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.page_size


class PageResult(BaseModel, Generic[T]):
    rows: list[T]
    total: int
    page: int
    page_size: int

    @computed_field
    @property
    def total_pages(self) -> int:
        return total_pages(self.total, self.page_size)


def build_search_filter(fields: list[str], search: str) -> dict:
    """`$or` of escaped, case-insensitive regexes; empty dict for blank search."""
    term = (search or "").strip()
    if not term or not fields:
        return {}
    pattern = re.escape(term)
    return {"$or": [{f: {"$regex": pattern, "$options": "i"}} for f in fields]}


class PaginatedQueryEngine:
    def __init__(
        self,
        collection: AsyncIOMotorCollection,
        search_fields: list[str],
        sort_key: str = "name",
        page_size: Optional[int] = None,
        base_filter: Optional[dict] = None,
    ):
        self.collection = collection
        self.search_fields = list(search_fields)
        self.sort_key = sort_key
        self.page_size = page_size or settings.page_size
        self.base_filter = dict(base_filter or {})

    def build_filter(self, search: str) -> dict:
        search_filter = build_search_filter(self.search_fields, search)
        if self.base_filter and search_filter:
            return {"$and": [self.base_filter, search_filter]}
        return search_filter or dict(self.base_filter)

    async def fetch(
        self,
        page: int = 1,
        search: str = "",
        page_size: Optional[int] = None,
    ) -> PageResult[dict[str, Any]]:
        """Read one page. Raises TransportError on backend failure; no retry."""
        if page < 1 or (page_size is not None and page_size < 1):
            raise ValidationError(fields={"page": "Page and page size must be >= 1"})
        query = PageQuery(page=page, page_size=page_size or self.page_size, search=search)
        filters = self.build_filter(query.search)

        try:
            total = await self.collection.count_documents(filters)
            cursor = (
                self.collection.find(filters)
                .sort([(self.sort_key, ASCENDING), ("_id", ASCENDING)])
                .skip(query.skip)
                .limit(query.page_size)
            )
            rows = [serialize_mongo_doc(doc) async for doc in cursor]
        except PyMongoError as e:
            logger.error(f"Fetch from '{self.collection.name}' failed: {e}")
            raise TransportError(f"Failed to load {self.collection.name}: {e}") from e

        return PageResult[dict[str, Any]](
            rows=rows, total=total, page=query.page, page_size=query.page_size
        )
