from .schemas import StockStatus
from .service import ProductService, stock_status
from .routes import products_router

__all__ = ["ProductService", "StockStatus", "stock_status", "products_router"]
