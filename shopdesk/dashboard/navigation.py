"""Dashboard pages, their required permissions, and the permission-filtered sidebar."""

from typing import Optional

from pydantic import BaseModel, ConfigDict

from shopdesk.rbac import Permission
from shopdesk.session import SessionStore


class NavItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    path: str
    permission: Permission


PAGES: tuple[NavItem, ...] = (
    NavItem(title="Dashboard", path="/", permission=Permission.VIEW_DASHBOARD),
    NavItem(title="Inventory", path="/inventory", permission=Permission.VIEW_INVENTORY),
    NavItem(title="Categories", path="/categories", permission=Permission.VIEW_CATEGORIES),
    NavItem(title="Brands", path="/brands", permission=Permission.VIEW_BRANDS),
    NavItem(title="Orders", path="/orders", permission=Permission.VIEW_ORDERS),
    NavItem(title="Analytics", path="/analytics", permission=Permission.VIEW_ANALYTICS),
    NavItem(title="Customers", path="/customers", permission=Permission.VIEW_CUSTOMERS),
    NavItem(title="Settings", path="/settings", permission=Permission.VIEW_SETTINGS),
)


def required_permission(path: str) -> Optional[Permission]:
    for item in PAGES:
        if item.path == path:
            return item.permission
    return None


def visible_navigation(session: SessionStore) -> list[NavItem]:
    """Sidebar entries; empty while the session is still loading."""
    return [item for item in PAGES if session.check(item.permission) is True]
