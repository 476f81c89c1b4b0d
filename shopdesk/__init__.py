"""Shopdesk — e-commerce back office: RBAC, paginated management screens, image uploads."""

__version__ = "1.0.0"
