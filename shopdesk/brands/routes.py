"""
Brands Routes.

Endpoints:
    GET    /            List brands (?page, ?q), ordered by name
    GET    /options     All brands as {_id, name}
    GET    /{id}        Get single brand
    POST   /            Create brand (unique name)
    PUT    /{id}        Rename brand
    DELETE /{id}        Delete brand (refused while products use it)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from shopdesk.config import get_database
from shopdesk.rbac import Permission, require_permission
from shopdesk.utils import success_response
from .schemas import CreateBrandRequest, UpdateBrandRequest
from .service import BrandService

brands_router = APIRouter()


@brands_router.get("/")
@require_permission(Permission.VIEW_BRANDS)
async def list_brands(
    request: Request,
    page: int = Query(1, ge=1),
    q: Optional[str] = Query(None, description="Search by brand name"),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    result = await BrandService(db).list_page(page=page, search=q or "")
    return success_response(data=result.model_dump(mode="json"))


@brands_router.get("/options")
@require_permission(Permission.VIEW_BRANDS)
async def brand_options(
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return success_response(data=await BrandService(db).list_options())


@brands_router.get("/{brand_id}")
@require_permission(Permission.VIEW_BRANDS)
async def get_brand(
    request: Request,
    brand_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return success_response(data=await BrandService(db).get(brand_id))


@brands_router.post("/")
@require_permission(Permission.MANAGE_BRANDS)
async def create_brand(
    request: Request,
    body: CreateBrandRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    brand = await BrandService(db).create(
        body.model_dump(mode="json"), created_by=request.state.principal.email
    )
    return success_response(data=brand, message="Brand added successfully", code=201)


@brands_router.put("/{brand_id}")
@require_permission(Permission.MANAGE_BRANDS)
async def update_brand(
    request: Request,
    brand_id: str,
    body: UpdateBrandRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    brand = await BrandService(db).update(brand_id, body.model_dump(mode="json", exclude_unset=True))
    return success_response(data=brand, message="Brand updated successfully")


@brands_router.delete("/{brand_id}")
@require_permission(Permission.DELETE_BRANDS)
async def delete_brand(
    request: Request,
    brand_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    result = await BrandService(db).delete(brand_id)
    return success_response(data=result, message="Brand deleted successfully")
