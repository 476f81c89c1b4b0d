"""
Orders Routes.

Endpoints:
    GET    /            List orders (?page, ?q over number, customer name, email)
    GET    /{id}        Get single order
    POST   /            Create order
    PUT    /{id}        Update status / customer details
    DELETE /{id}        Delete order
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from shopdesk.config import get_database
from shopdesk.rbac import Permission, require_permission
from shopdesk.utils import success_response
from .schemas import CreateOrderRequest, UpdateOrderRequest
from .service import OrderService

orders_router = APIRouter()


@orders_router.get("/")
@require_permission(Permission.VIEW_ORDERS)
async def list_orders(
    request: Request,
    page: int = Query(1, ge=1),
    q: Optional[str] = Query(None, description="Search by order number, customer name or email"),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    result = await OrderService(db).list_page(page=page, search=q or "")
    return success_response(data=result.model_dump(mode="json"))


@orders_router.get("/{order_id}")
@require_permission(Permission.VIEW_ORDERS)
async def get_order(
    request: Request,
    order_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return success_response(data=await OrderService(db).get(order_id))


@orders_router.post("/")
@require_permission(Permission.MANAGE_ORDERS)
async def create_order(
    request: Request,
    body: CreateOrderRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    order = await OrderService(db).create(
        body.model_dump(mode="json"), created_by=request.state.principal.email
    )
    return success_response(data=order, message="Order created successfully", code=201)


@orders_router.put("/{order_id}")
@require_permission(Permission.MANAGE_ORDERS)
async def update_order(
    request: Request,
    order_id: str,
    body: UpdateOrderRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    order = await OrderService(db).update(order_id, body.model_dump(mode="json", exclude_unset=True))
    return success_response(data=order, message="Order updated successfully")


@orders_router.delete("/{order_id}")
@require_permission(Permission.DELETE_ORDERS)
async def delete_order(
    request: Request,
    order_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    result = await OrderService(db).delete(order_id)
    return success_response(data=result, message="Order deleted successfully")
