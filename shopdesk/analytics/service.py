"""
Analytics service — read-only aggregation over orders and the catalog.

Revenue figures exclude cancelled orders. An optional [start, end) window
filters orders by `created_at`.
"""

from datetime import datetime
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from shopdesk.config import settings
from shopdesk.utils import Logger
from shopdesk.utils.exceptions import TransportError, ValidationError

logger = Logger("analytics")


class AnalyticsService:
    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db
        self.orders = db["orders"]
        self.products = db["products"]

    async def summary(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        top: int = 5,
    ) -> dict:
        if start and end and start >= end:
            raise ValidationError(fields={"start": "Start must be before end"})

        match: dict = {"status": {"$ne": "cancelled"}}
        window: dict = {}
        if start:
            window["$gte"] = start
        if end:
            window["$lt"] = end
        if window:
            match["created_at"] = window

        totals_pipeline = [
            {"$match": match},
            {"$group": {"_id": None, "orders": {"$sum": 1}, "revenue": {"$sum": "$total"}}},
        ]
        status_pipeline = [
            {"$match": {k: v for k, v in match.items() if k != "status"}},
            {"$group": {"_id": "$status", "count": {"$sum": 1}}},
            {"$sort": {"_id": 1}},
        ]
        top_pipeline = [
            {"$match": match},
            {"$unwind": "$items"},
            {"$group": {
                "_id": "$items.product_id",
                "name": {"$first": "$items.name"},
                "quantity": {"$sum": "$items.quantity"},
                "revenue": {"$sum": {"$multiply": ["$items.quantity", "$items.unit_price"]}},
            }},
            {"$sort": {"quantity": -1, "_id": 1}},
            {"$limit": top},
        ]

        try:
            totals = await self.orders.aggregate(totals_pipeline).to_list(1)
            by_status = await self.orders.aggregate(status_pipeline).to_list(None)
            top_products = await self.orders.aggregate(top_pipeline).to_list(top)
            low_stock = await self.products.count_documents(
                {"stock": {"$lt": settings.low_stock_threshold}}
            )
            product_count = await self.products.count_documents({})
        except PyMongoError as e:
            logger.error(f"Analytics aggregation failed: {e}")
            raise TransportError(f"Failed to load analytics: {e}") from e

        order_count = totals[0]["orders"] if totals else 0
        revenue = round(totals[0]["revenue"], 2) if totals else 0.0
        return {
            "orders": order_count,
            "revenue": revenue,
            "average_order_value": round(revenue / order_count, 2) if order_count else 0.0,
            "orders_by_status": {row["_id"]: row["count"] for row in by_status},
            "top_products": [
                {
                    "product_id": row["_id"],
                    "name": row["name"],
                    "quantity": row["quantity"],
                    "revenue": round(row["revenue"], 2),
                }
                for row in top_products
            ],
            "products": product_count,
            "low_stock_products": low_stock,
        }
