"""
Products Routes (the inventory screen).

Endpoints:
    GET    /            List products (?page, ?q over name + SKU)
    GET    /{id}        Get single product
    POST   /            Create product
    PUT    /{id}        Update product
    DELETE /{id}        Delete product (refused while orders reference it)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from shopdesk.config import get_database
from shopdesk.rbac import Permission, require_permission
from shopdesk.utils import success_response
from .schemas import CreateProductRequest, UpdateProductRequest
from .service import ProductService

products_router = APIRouter()


@products_router.get("/")
@require_permission(Permission.VIEW_INVENTORY)
async def list_products(
    request: Request,
    page: int = Query(1, ge=1),
    q: Optional[str] = Query(None, description="Search by name or SKU"),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    result = await ProductService(db).list_page(page=page, search=q or "")
    return success_response(data=result.model_dump(mode="json"))


@products_router.get("/{product_id}")
@require_permission(Permission.VIEW_INVENTORY)
async def get_product(
    request: Request,
    product_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return success_response(data=await ProductService(db).get(product_id))


@products_router.post("/")
@require_permission(Permission.MANAGE_INVENTORY)
async def create_product(
    request: Request,
    body: CreateProductRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    product = await ProductService(db).create(
        body.model_dump(mode="json"), created_by=request.state.principal.email
    )
    return success_response(data=product, message="Product added successfully", code=201)


@products_router.put("/{product_id}")
@require_permission(Permission.MANAGE_INVENTORY)
async def update_product(
    request: Request,
    product_id: str,
    body: UpdateProductRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    product = await ProductService(db).update(
        product_id, body.model_dump(mode="json", exclude_unset=True)
    )
    return success_response(data=product, message="Product updated successfully")


@products_router.delete("/{product_id}")
@require_permission(Permission.DELETE_PRODUCTS)
async def delete_product(
    request: Request,
    product_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    result = await ProductService(db).delete(product_id)
    return success_response(data=result, message="Product deleted successfully")
