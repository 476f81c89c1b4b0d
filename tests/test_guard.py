from shopdesk.dashboard import (
    AccessState,
    RouteGuard,
    required_permission,
    resolve_access,
    visible_navigation,
)
from shopdesk.rbac import Permission
from shopdesk.session import MemorySessionStorage, SessionStore


class TestResolveAccess:
    def test_loading_before_ready(self, admin):
        assert resolve_access(admin, Permission.VIEW_DASHBOARD, is_ready=False) is AccessState.LOADING

    def test_unauthenticated_without_principal(self):
        assert resolve_access(None, Permission.VIEW_DASHBOARD, is_ready=True) is AccessState.UNAUTHENTICATED

    def test_forbidden_without_permission(self, staff):
        assert resolve_access(staff, Permission.VIEW_SETTINGS, is_ready=True) is AccessState.FORBIDDEN

    def test_authorized(self, staff):
        assert resolve_access(staff, Permission.VIEW_ORDERS, is_ready=True) is AccessState.AUTHORIZED

    def test_no_required_permission_only_needs_login(self, staff):
        assert resolve_access(staff, None, is_ready=True) is AccessState.AUTHORIZED


class TestRouteGuard:
    def test_loading_never_redirects(self):
        redirects = []
        guard = RouteGuard(SessionStore(MemorySessionStorage()), redirects.append)

        decision = guard.check(Permission.VIEW_DASHBOARD)

        assert decision.state is AccessState.LOADING
        assert decision.redirect_to is None
        assert redirects == []

    def test_redirects_once_per_transition(self, admin):
        redirects = []
        session = SessionStore(MemorySessionStorage())
        session.rehydrate()
        guard = RouteGuard(session, redirects.append)

        for _ in range(3):
            assert guard.check(Permission.VIEW_DASHBOARD).state is AccessState.UNAUTHENTICATED
        assert redirects == ["/login"]

        session.login(admin)
        assert guard.check(Permission.VIEW_DASHBOARD).state is AccessState.AUTHORIZED

        session.logout()
        decision = guard.check(Permission.VIEW_DASHBOARD)
        assert decision.redirect_to == "/login"
        assert redirects == ["/login", "/login"]

    def test_forbidden_renders_without_redirect(self, staff_session):
        redirects = []
        guard = RouteGuard(staff_session, redirects.append)

        decision = guard.check(Permission.VIEW_SETTINGS)

        assert decision.state is AccessState.FORBIDDEN
        assert redirects == []


class TestNavigation:
    def test_staff_sidebar_hides_settings(self, staff_session):
        paths = [item.path for item in visible_navigation(staff_session)]
        assert "/settings" not in paths
        assert paths[0] == "/"
        assert "/brands" in paths

    def test_admin_sees_everything(self, admin_session):
        assert len(visible_navigation(admin_session)) == 8

    def test_nothing_visible_while_loading(self):
        assert visible_navigation(SessionStore(MemorySessionStorage())) == []

    def test_page_permissions(self):
        assert required_permission("/brands") is Permission.VIEW_BRANDS
        assert required_permission("/inventory") is Permission.VIEW_INVENTORY
        assert required_permission("/nowhere") is None
