"""
Shopdesk back office — main application.

Assembles config, middleware, auth and the management modules.
"""

import time
import traceback
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from shopdesk.config import db_manager, settings
from shopdesk.middleware import AuthMiddleware
from shopdesk.rbac import validate_role_permissions
from shopdesk.utils import Logger, error_response
from shopdesk.utils.exceptions import ShopdeskError

# ── Route imports ────────────────────────────────────────────────
from shopdesk.auth import auth_router
from shopdesk.brands import brands_router
from shopdesk.categories import categories_router
from shopdesk.products import products_router
from shopdesk.orders import orders_router
from shopdesk.analytics import analytics_router
from shopdesk.upload import upload_router

logger = Logger("request")


# ── Request Logging Middleware ───────────────────────────────────
class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Logs every request: method, path, status code, and duration."""

    async def dispatch(self, request: Request, call_next):
        start = time.time()
        method = request.method
        path = request.url.path

        try:
            response = await call_next(request)
        except Exception:
            duration = round((time.time() - start) * 1000, 2)
            logger.error(f"<-- {method} {path} | 500 | {duration}ms")
            raise

        duration = round((time.time() - start) * 1000, 2)
        status = response.status_code

        if status >= 500:
            logger.error(f"<-- {method} {path} | {status} | {duration}ms")
        elif status >= 400:
            logger.warning(f"<-- {method} {path} | {status} | {duration}ms")
        else:
            logger.info(f"<-- {method} {path} | {status} | {duration}ms")

        return response


# ── Lifespan ─────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(app: FastAPI):
    validate_role_permissions()
    await db_manager.connect()
    yield
    db_manager.close()


# ── App factory ──────────────────────────────────────────────────
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="E-commerce back office with role-based access control",
        docs_url="/api/docs",
        lifespan=lifespan,
    )

    # Last added runs first: CORS -> logging -> auth.
    app.add_middleware(AuthMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.cors_allowed_methods,
        allow_headers=settings.cors_allowed_headers,
    )

    # ── Exception handlers ───────────────────────────────────
    @app.exception_handler(ShopdeskError)
    async def shopdesk_error_handler(request: Request, exc: ShopdeskError):
        if exc.status_code >= 500:
            logger.error(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        else:
            logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
        return error_response(exc.message, code=exc.status_code, fields=getattr(exc, "fields", None))

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        logger.error(f"Unhandled exception on {request.method} {request.url.path}:")
        logger.error(traceback.format_exc())
        return JSONResponse(
            status_code=500,
            content={
                "success": False,
                "error": {
                    "code": 500,
                    "message": str(exc) if settings.debug else "Internal server error",
                },
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
        )

    # ── Routes ───────────────────────────────────────────────
    v = settings.api_version

    app.include_router(auth_router, prefix=f"/api/{v}/auth", tags=["Authentication"])
    app.include_router(brands_router, prefix=f"/api/{v}/brands", tags=["Brands"])
    app.include_router(categories_router, prefix=f"/api/{v}/categories", tags=["Categories"])
    app.include_router(products_router, prefix=f"/api/{v}/products", tags=["Products / Inventory"])
    app.include_router(orders_router, prefix=f"/api/{v}/orders", tags=["Orders"])
    app.include_router(analytics_router, prefix=f"/api/{v}/analytics", tags=["Analytics"])
    app.include_router(upload_router, prefix=f"/api/{v}/upload", tags=["Uploads"])

    # ── Health check ─────────────────────────────────────────
    @app.get("/health")
    async def health():
        return {
            "status": "healthy",
            "app": settings.app_name,
            "version": settings.app_version,
            "database": db_manager.is_connected,
        }

    return app


# ── Create the app instance ──────────────────────────────────────
app = create_app()
