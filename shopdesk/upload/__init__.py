from .service import BlobStore, GridFSBlobStore, UploadService, file_extension
from .routes import get_upload_service, upload_router

__all__ = [
    "BlobStore",
    "GridFSBlobStore",
    "UploadService",
    "file_extension",
    "get_upload_service",
    "upload_router",
]
