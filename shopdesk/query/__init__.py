from .engine import (
    PageQuery,
    PageResult,
    PaginatedQueryEngine,
    build_search_filter,
    total_pages,
)
from .crud import RecordService, validation_error_from_pydantic

__all__ = [
    "PageQuery",
    "PageResult",
    "PaginatedQueryEngine",
    "build_search_filter",
    "total_pages",
    "RecordService",
    "validation_error_from_pydantic",
]
