from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from shopdesk.config import get_database
from shopdesk.rbac import Permission, require_permission
from shopdesk.utils import success_response
from .service import AnalyticsService

analytics_router = APIRouter()


@analytics_router.get("/summary")
@require_permission(Permission.VIEW_ANALYTICS)
async def analytics_summary(
    request: Request,
    start: Optional[datetime] = Query(None, description="Window start (inclusive)"),
    end: Optional[datetime] = Query(None, description="Window end (exclusive)"),
    top: int = Query(5, ge=1, le=50),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    """Order count, revenue, status breakdown, best sellers and low-stock count."""
    data = await AnalyticsService(db).summary(start=start, end=end, top=top)
    return success_response(data=data)
