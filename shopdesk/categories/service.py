"""Category service — searchable by name and description."""

from shopdesk.query import RecordService
from .schemas import CreateCategoryRequest, UpdateCategoryRequest


class CategoryService(RecordService):
    collection_name = "categories"
    label = "Category"
    search_fields = ["name", "description"]
    sort_key = "name"
    create_schema = CreateCategoryRequest
    update_schema = UpdateCategoryRequest
    unique_fields = {"name": "Category name already exists"}
    referenced_by = [
        ("products", "category_id", "Cannot delete category because it is associated with products"),
    ]
