"""
Upload Routes.

Endpoints:
    POST   /              Upload a product image (multipart: file, oldKey)
    GET    /files/{key}   Serve a stored image (public)

The POST endpoint answers with its own envelope:
    {code, status, data: {publicUrl, key} | null, message}
"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse, Response
from motor.motor_asyncio import AsyncIOMotorDatabase

from shopdesk.config import get_database, settings
from shopdesk.rbac import Permission, require_permission
from shopdesk.utils.exceptions import ShopdeskError, ValidationError
from .service import GridFSBlobStore, UploadService

upload_router = APIRouter()


async def get_upload_service(
    db: AsyncIOMotorDatabase = Depends(get_database),
) -> UploadService:
    return UploadService(GridFSBlobStore(db, settings.upload_bucket))


def _upload_response(code: int, message: str, data: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=code,
        content={"code": code, "status": code == 200, "data": data, "message": message},
    )


@upload_router.post("/")
@require_permission(Permission.MANAGE_INVENTORY)
async def upload_image(
    request: Request,
    file: Optional[UploadFile] = File(None),
    oldKey: Optional[str] = Form(None),
    svc: UploadService = Depends(get_upload_service),
):
    if file is None or not file.filename:
        return _upload_response(400, "No file provided")

    # limit + 1 bytes is enough to tell an oversize file apart
    data = await file.read(settings.upload_max_bytes + 1)
    try:
        result = await svc.upload(file.filename, data, file.content_type, old_key=oldKey)
    except ValidationError as e:
        return _upload_response(400, e.message)
    except ShopdeskError as e:
        return _upload_response(500, e.message)
    return _upload_response(200, "Image uploaded successfully", result)


@upload_router.get("/files/{key}")
async def get_image(
    key: str,
    svc: UploadService = Depends(get_upload_service),
):
    data, content_type = await svc.download(key)
    return Response(content=data, media_type=content_type or "application/octet-stream")
