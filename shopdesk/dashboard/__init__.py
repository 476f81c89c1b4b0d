"""
Headless dashboard layer: session-aware page guards, navigation and the
state machines behind each management screen.
"""

from .debounce import Debouncer
from .guard import AccessState, GuardDecision, RouteGuard, resolve_access
from .mutation import MutationKind, MutationOutcome, MutationRefresh, MutationState
from .navigation import PAGES, NavItem, required_permission, visible_navigation
from .references import ReferenceList
from .screen import ListScreen
from .screens import brands_screen, categories_screen, inventory_screen, orders_screen

__all__ = [
    "Debouncer",
    "AccessState",
    "GuardDecision",
    "RouteGuard",
    "resolve_access",
    "MutationKind",
    "MutationOutcome",
    "MutationRefresh",
    "MutationState",
    "PAGES",
    "NavItem",
    "required_permission",
    "visible_navigation",
    "ReferenceList",
    "ListScreen",
    "brands_screen",
    "categories_screen",
    "inventory_screen",
    "orders_screen",
]
