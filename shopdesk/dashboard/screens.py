"""Factories for the four management screens."""

from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from shopdesk.brands import BrandService
from shopdesk.categories import CategoryService
from shopdesk.orders import OrderService
from shopdesk.products import ProductService
from shopdesk.rbac import Permission
from shopdesk.session import SessionStore
from shopdesk.store import ChangeFeed
from .references import ReferenceList
from .screen import ListScreen


def brands_screen(
    db: AsyncIOMotorDatabase,
    session: SessionStore,
    debounce_delay: Optional[float] = None,
) -> ListScreen:
    return ListScreen(
        BrandService(db),
        session=session,
        manage_permission=Permission.MANAGE_BRANDS,
        delete_permission=Permission.DELETE_BRANDS,
        debounce_delay=debounce_delay,
    )


def categories_screen(
    db: AsyncIOMotorDatabase,
    session: SessionStore,
    debounce_delay: Optional[float] = None,
) -> ListScreen:
    return ListScreen(
        CategoryService(db),
        session=session,
        manage_permission=Permission.MANAGE_CATEGORIES,
        delete_permission=Permission.DELETE_CATEGORIES,
        debounce_delay=debounce_delay,
    )


def inventory_screen(
    db: AsyncIOMotorDatabase,
    session: SessionStore,
    feed: Optional[ChangeFeed] = None,
    debounce_delay: Optional[float] = None,
) -> ListScreen:
    """Products table plus live brand/category dropdown options."""
    return ListScreen(
        ProductService(db),
        session=session,
        manage_permission=Permission.MANAGE_INVENTORY,
        delete_permission=Permission.DELETE_PRODUCTS,
        references={
            "brands": ReferenceList(BrandService(db)),
            "categories": ReferenceList(CategoryService(db)),
        },
        feed=feed,
        debounce_delay=debounce_delay,
    )


def orders_screen(
    db: AsyncIOMotorDatabase,
    session: SessionStore,
    debounce_delay: Optional[float] = None,
) -> ListScreen:
    return ListScreen(
        OrderService(db),
        session=session,
        manage_permission=Permission.MANAGE_ORDERS,
        delete_permission=Permission.DELETE_ORDERS,
        debounce_delay=debounce_delay,
    )
