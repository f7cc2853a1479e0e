"""
Navigation module.

Gates navigation on authentication and role state.

Public API:
- RouteGuard / RouteTable: Route lookup and guard checks
- decide: The guard decision function
- Models: RouteAccess, RouteSpec, GuardAction, GuardDecision, HistoryMode
"""

from .models import GuardAction, GuardDecision, HistoryMode, RouteAccess, RouteSpec
from .guard import RouteGuard, RouteTable, decide

__all__ = [
    # Models
    "GuardAction",
    "GuardDecision",
    "HistoryMode",
    "RouteAccess",
    "RouteSpec",
    # Guard
    "RouteGuard",
    "RouteTable",
    "decide",
]
