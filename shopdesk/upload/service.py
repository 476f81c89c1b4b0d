"""
Image upload proxy.

Validates an uploaded product image (extension and size), stores it in blob
storage under a fresh `product-<uuid>.<ext>` key, and optionally removes the
object it replaces. Blob storage is GridFS on the application database.
"""

import uuid
from typing import Optional, Protocol

from gridfs.errors import NoFile
from motor.motor_asyncio import AsyncIOMotorDatabase, AsyncIOMotorGridFSBucket
from pymongo.errors import PyMongoError

from shopdesk.config import Settings, settings as default_settings
from shopdesk.utils import Logger
from shopdesk.utils.exceptions import (
    ConfigurationError,
    NotFoundError,
    TransportError,
    ValidationError,
)

logger = Logger("upload")


class BlobStore(Protocol):
    async def put(self, key: str, data: bytes, content_type: Optional[str]) -> None: ...

    async def get(self, key: str) -> tuple[bytes, Optional[str]]: ...

    async def delete(self, key: str) -> bool: ...


class GridFSBlobStore:
    def __init__(self, db: AsyncIOMotorDatabase, bucket_name: str):
        self.bucket = AsyncIOMotorGridFSBucket(db, bucket_name=bucket_name)

    async def put(self, key: str, data: bytes, content_type: Optional[str]) -> None:
        await self.bucket.upload_from_stream(key, data, metadata={"contentType": content_type})

    async def get(self, key: str) -> tuple[bytes, Optional[str]]:
        try:
            stream = await self.bucket.open_download_stream_by_name(key)
        except NoFile as e:
            raise NotFoundError(f"No stored object '{key}'") from e
        data = await stream.read()
        metadata = stream.metadata or {}
        return data, metadata.get("contentType")

    async def delete(self, key: str) -> bool:
        deleted = False
        async for grid_file in self.bucket.find({"filename": key}):
            await self.bucket.delete(grid_file._id)
            deleted = True
        return deleted


def file_extension(filename: Optional[str]) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


class UploadService:
    def __init__(self, store: BlobStore, settings: Settings = default_settings):
        self.store = store
        self.settings = settings

    def validate(self, filename: Optional[str], size: int) -> str:
        """Return the normalized extension or raise ValidationError."""
        if not filename:
            raise ValidationError("No file provided")
        ext = file_extension(filename)
        allowed = [e.lower() for e in self.settings.upload_allowed_extensions]
        if ext not in allowed:
            raise ValidationError("Invalid file type. Only JPG and PNG are allowed")
        if size > self.settings.upload_max_bytes:
            limit_mb = self.settings.upload_max_bytes // (1024 * 1024)
            raise ValidationError(f"Image size must be less than {limit_mb}MB")
        return ext

    def public_url(self, key: str) -> str:
        base = self.settings.upload_public_base_url
        if not base:
            raise ConfigurationError(
                "Server configuration error: Missing UPLOAD_PUBLIC_BASE_URL"
            )
        return f"{base.rstrip('/')}/{key}"

    async def upload(
        self,
        filename: Optional[str],
        data: bytes,
        content_type: Optional[str] = None,
        old_key: Optional[str] = None,
    ) -> dict:
        ext = self.validate(filename, len(data))
        key = f"product-{uuid.uuid4()}.{ext}"
        url = self.public_url(key)

        try:
            await self.store.put(key, data, content_type)
        except PyMongoError as e:
            logger.error(f"Upload of {filename} failed: {e}")
            raise TransportError(f"Failed to upload image: {e}") from e
        logger.info(f"Stored {key} ({len(data)} bytes)")

        if old_key and old_key != key:
            try:
                removed = await self.store.delete(old_key)
            except PyMongoError as e:
                logger.warning(f"Could not remove replaced object {old_key}: {e}")
            else:
                if removed:
                    logger.info(f"Removed replaced object {old_key}")

        return {"publicUrl": url, "key": key}

    async def download(self, key: str) -> tuple[bytes, Optional[str]]:
        try:
            return await self.store.get(key)
        except PyMongoError as e:
            raise TransportError(str(e)) from e
