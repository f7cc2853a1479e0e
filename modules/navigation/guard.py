"""
Route guard.

Decides whether a navigation target may render given the current auth
state. While the session check is unresolved the guard never redirects;
it asks for a neutral loading view instead.
"""

from typing import Iterable, Optional

from shared.config import Settings, get_settings
from modules.auth.models import AuthState, SessionPresence

from .models import GuardAction, GuardDecision, HistoryMode, RouteAccess, RouteSpec

ALLOW = GuardDecision(action=GuardAction.ALLOW)
LOADING = GuardDecision(action=GuardAction.LOADING)


def _redirect(target: str) -> GuardDecision:
    return GuardDecision(
        action=GuardAction.REDIRECT,
        target=target,
        history=HistoryMode.REPLACE,
    )


def decide(
    state: AuthState,
    route: RouteSpec,
    auth_route: str,
    landing_route: str,
) -> GuardDecision:
    """
    Decide what to do with a request for `route`.

    Args:
        state: Current auth state snapshot
        route: The requested route
        auth_route: Where signed-out users are sent
        landing_route: Where signed-in users are sent

    Returns:
        allow, loading, or a history-replacing redirect
    """
    if route.access == RouteAccess.PUBLIC:
        return ALLOW

    if state.presence == SessionPresence.PENDING:
        return LOADING

    present = state.presence == SessionPresence.PRESENT

    if route.access == RouteAccess.AUTH_ONLY:
        return _redirect(landing_route) if present else ALLOW

    # Protected from here on
    if not present:
        return _redirect(auth_route)
    if route.roles is None:
        return ALLOW
    if state.role is None:
        return LOADING if state.is_loading_profile else _redirect(landing_route)
    if state.role not in route.roles:
        return _redirect(landing_route)
    return ALLOW


class RouteTable:
    """Known routes plus the two special targets."""

    def __init__(
        self,
        routes: Iterable[RouteSpec],
        auth_route: str,
        landing_route: str,
    ):
        self._routes = {route.path: route for route in routes}
        self.auth_route = auth_route
        self.landing_route = landing_route

    @classmethod
    def default(cls, settings: Optional[Settings] = None) -> "RouteTable":
        """Index, Auth and Dashboard screens of the web app."""
        settings = settings or get_settings()
        return cls(
            [
                RouteSpec(path="/", access=RouteAccess.PUBLIC),
                RouteSpec(path=settings.auth_route, access=RouteAccess.AUTH_ONLY),
                RouteSpec(path=settings.landing_route, access=RouteAccess.PROTECTED),
            ],
            auth_route=settings.auth_route,
            landing_route=settings.landing_route,
        )

    def classify(self, path: str) -> RouteSpec:
        """Look up a path; unknown paths are public (the not-found page)."""
        return self._routes.get(path) or RouteSpec(path=path)


class RouteGuard:
    """Route guard bound to a route table."""

    def __init__(self, table: Optional[RouteTable] = None):
        self._table = table or RouteTable.default()

    @property
    def table(self) -> RouteTable:
        return self._table

    def check(self, state: AuthState, path: str) -> GuardDecision:
        return decide(
            state,
            self._table.classify(path),
            auth_route=self._table.auth_route,
            landing_route=self._table.landing_route,
        )
