from .service import AnalyticsService
from .routes import analytics_router

__all__ = ["AnalyticsService", "analytics_router"]
