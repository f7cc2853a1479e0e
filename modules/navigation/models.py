"""
Navigation module data models.
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from modules.auth.models import Role


class RouteAccess(str, Enum):
    """Who may see a route."""

    PUBLIC = "public"
    AUTH_ONLY = "auth_only"  # only while signed out, e.g. the login screen
    PROTECTED = "protected"


class GuardAction(str, Enum):
    ALLOW = "allow"
    REDIRECT = "redirect"
    LOADING = "loading"


class HistoryMode(str, Enum):
    """How a redirect touches browser-style history."""

    PUSH = "push"
    REPLACE = "replace"


class RouteSpec(BaseModel):
    """
    A navigable route.

    `roles` restricts a protected route to some roles; None means any
    signed-in user.
    """

    path: str = Field(..., description="Route path, e.g. /dashboard")
    access: RouteAccess = Field(default=RouteAccess.PUBLIC)
    roles: Optional[frozenset[Role]] = Field(None, description="Allowed roles")

    model_config = {"frozen": True}


class GuardDecision(BaseModel):
    """Outcome of a route guard check."""

    action: GuardAction
    target: Optional[str] = Field(None, description="Redirect target path")
    history: HistoryMode = Field(default=HistoryMode.PUSH)

    model_config = {"frozen": True}

    @property
    def allowed(self) -> bool:
        return self.action == GuardAction.ALLOW
