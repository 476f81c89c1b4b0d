from .service import BrandService
from .routes import brands_router

__all__ = ["BrandService", "brands_router"]
