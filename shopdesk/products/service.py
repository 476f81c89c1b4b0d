"""Product service — catalog rows with category/brand references."""

from typing import Optional

from shopdesk.brands.service import BrandService
from shopdesk.categories.service import CategoryService
from shopdesk.config import settings
from shopdesk.query import RecordService
from shopdesk.utils.exceptions import ConflictError
from .schemas import CreateProductRequest, StockStatus, UpdateProductRequest


def stock_status(stock: int, low_threshold: Optional[int] = None) -> StockStatus:
    threshold = settings.low_stock_threshold if low_threshold is None else low_threshold
    if stock <= 0:
        return StockStatus.OUT_OF_STOCK
    if stock < threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.IN_STOCK


class ProductService(RecordService):
    collection_name = "products"
    label = "Product"
    search_fields = ["name", "sku"]
    sort_key = "name"
    create_schema = CreateProductRequest
    update_schema = UpdateProductRequest
    unique_fields = {"sku": "Product SKU already exists"}
    referenced_by = [
        ("orders", "items.product_id", "Cannot delete product because it appears in orders"),
    ]

    async def prepare(self, data: dict, existing: Optional[dict] = None) -> dict:
        """Reject dangling category/brand ids and derive stock_status."""
        if data.get("category_id") and not await CategoryService(self.db).exists(data["category_id"]):
            raise ConflictError("Selected category no longer exists")
        if data.get("brand_id") and not await BrandService(self.db).exists(data["brand_id"]):
            raise ConflictError("Selected brand no longer exists")

        stock = data.get("stock")
        if stock is None and existing is not None:
            stock = existing.get("stock", 0)
        data["stock_status"] = stock_status(stock or 0).value
        return data
