from .schemas import OrderStatus
from .service import OrderService, order_total
from .routes import orders_router

__all__ = ["OrderService", "OrderStatus", "order_total", "orders_router"]
