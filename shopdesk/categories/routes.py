"""
Categories Routes.

Endpoints:
    GET    /            List categories (?page, ?q over name + description)
    GET    /options     All categories as {_id, name}
    GET    /{id}        Get single category
    POST   /            Create category
    PUT    /{id}        Update category
    DELETE /{id}        Delete category (refused while products use it)
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from shopdesk.config import get_database
from shopdesk.rbac import Permission, require_permission
from shopdesk.utils import success_response
from .schemas import CreateCategoryRequest, UpdateCategoryRequest
from .service import CategoryService

categories_router = APIRouter()


@categories_router.get("/")
@require_permission(Permission.VIEW_CATEGORIES)
async def list_categories(
    request: Request,
    page: int = Query(1, ge=1),
    q: Optional[str] = Query(None, description="Search by name or description"),
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    result = await CategoryService(db).list_page(page=page, search=q or "")
    return success_response(data=result.model_dump(mode="json"))


@categories_router.get("/options")
@require_permission(Permission.VIEW_CATEGORIES)
async def category_options(
    request: Request,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return success_response(data=await CategoryService(db).list_options())


@categories_router.get("/{category_id}")
@require_permission(Permission.VIEW_CATEGORIES)
async def get_category(
    request: Request,
    category_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    return success_response(data=await CategoryService(db).get(category_id))


@categories_router.post("/")
@require_permission(Permission.MANAGE_CATEGORIES)
async def create_category(
    request: Request,
    body: CreateCategoryRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    category = await CategoryService(db).create(
        body.model_dump(mode="json"), created_by=request.state.principal.email
    )
    return success_response(data=category, message="Category added successfully", code=201)


@categories_router.put("/{category_id}")
@require_permission(Permission.MANAGE_CATEGORIES)
async def update_category(
    request: Request,
    category_id: str,
    body: UpdateCategoryRequest,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    category = await CategoryService(db).update(
        category_id, body.model_dump(mode="json", exclude_unset=True)
    )
    return success_response(data=category, message="Category updated successfully")


@categories_router.delete("/{category_id}")
@require_permission(Permission.DELETE_CATEGORIES)
async def delete_category(
    request: Request,
    category_id: str,
    db: AsyncIOMotorDatabase = Depends(get_database),
):
    result = await CategoryService(db).delete(category_id)
    return success_response(data=result, message="Category deleted successfully")
