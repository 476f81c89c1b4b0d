"""Order service — totals are computed server-side from line items."""

from typing import Optional

from shopdesk.query import RecordService
from .schemas import CreateOrderRequest, UpdateOrderRequest


def order_total(items: list[dict]) -> float:
    return round(sum(i["quantity"] * i["unit_price"] for i in items), 2)


class OrderService(RecordService):
    collection_name = "orders"
    label = "Order"
    search_fields = ["order_number", "customer_name", "customer_email"]
    sort_key = "order_number"
    create_schema = CreateOrderRequest
    update_schema = UpdateOrderRequest
    unique_fields = {"order_number": "Order number already exists"}

    async def prepare(self, data: dict, existing: Optional[dict] = None) -> dict:
        if "items" in data:
            data["total"] = order_total(data["items"])
        return data
