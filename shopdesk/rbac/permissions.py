"""
Closed set of permission tags.

Tags are plain strings on the wire (JWT claims, persisted sessions) but are
only ever compared through the Permission enum, so a typo in a route or page
definition fails at import instead of silently denying access.
"""

from enum import Enum
from typing import Optional


class Permission(str, Enum):
    VIEW_DASHBOARD = "view_dashboard"

    VIEW_INVENTORY = "view_inventory"
    MANAGE_INVENTORY = "manage_inventory"
    DELETE_PRODUCTS = "delete_products"

    VIEW_CATEGORIES = "view_categories"
    MANAGE_CATEGORIES = "manage_categories"
    DELETE_CATEGORIES = "delete_categories"

    VIEW_BRANDS = "view_brands"
    MANAGE_BRANDS = "manage_brands"
    DELETE_BRANDS = "delete_brands"

    VIEW_ORDERS = "view_orders"
    MANAGE_ORDERS = "manage_orders"
    DELETE_ORDERS = "delete_orders"

    VIEW_ANALYTICS = "view_analytics"

    VIEW_CUSTOMERS = "view_customers"
    MANAGE_CUSTOMERS = "manage_customers"

    VIEW_SETTINGS = "view_settings"
    MANAGE_SETTINGS = "manage_settings"

    MANAGE_USERS = "manage_users"


def parse_permission(tag: "str | Permission | None") -> Optional[Permission]:
    """Return the Permission for `tag`, or None if it is not a known tag."""
    if isinstance(tag, Permission):
        return tag
    if not isinstance(tag, str):
        return None
    try:
        return Permission(tag)
    except ValueError:
        return None
