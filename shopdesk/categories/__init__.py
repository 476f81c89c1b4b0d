from .service import CategoryService
from .routes import categories_router

__all__ = ["CategoryService", "categories_router"]
