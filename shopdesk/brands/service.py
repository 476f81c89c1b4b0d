"""Brand service — name-only records referenced by products."""

from shopdesk.query import RecordService
from .schemas import CreateBrandRequest, UpdateBrandRequest


class BrandService(RecordService):
    collection_name = "brands"
    label = "Brand"
    search_fields = ["name"]
    sort_key = "name"
    create_schema = CreateBrandRequest
    update_schema = UpdateBrandRequest
    unique_fields = {"name": "Brand name already exists"}
    referenced_by = [
        ("products", "brand_id", "Cannot delete brand because it is associated with products"),
    ]
