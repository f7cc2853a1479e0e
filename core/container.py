"""
Dependency wiring for the terminal front end.

This module provides the "container" that wires the identity provider,
the session manager and the route guard together. Everything else
depends on the interfaces, so tests can hand in a fake provider.
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.interfaces import IIdentityProvider
    from modules.auth.session import SessionManager
    from modules.navigation.guard import RouteGuard


class ServiceContainer:
    """
    Container for all service instances.

    Services are created lazily on first access and cached. The identity
    provider needs the async Supabase client, so its accessors are async.
    Use reset() to clear all cached services for testing.
    """

    def __init__(self, provider: "IIdentityProvider | None" = None) -> None:
        self._provider: "IIdentityProvider | None" = provider
        self._session_manager: "SessionManager | None" = None
        self._route_guard: "RouteGuard | None" = None

    async def identity_provider(self) -> "IIdentityProvider":
        """Get the identity provider instance."""
        if self._provider is None:
            from modules.auth.provider import SupabaseIdentityProvider
            self._provider = await SupabaseIdentityProvider.create()
        return self._provider

    async def session_manager(self) -> "SessionManager":
        """Get the session manager instance (not started)."""
        if self._session_manager is None:
            from modules.auth.session import SessionManager
            self._session_manager = SessionManager(await self.identity_provider())
        return self._session_manager

    @property
    def route_guard(self) -> "RouteGuard":
        """Get the route guard instance."""
        if self._route_guard is None:
            from modules.navigation.guard import RouteGuard
            self._route_guard = RouteGuard()
        return self._route_guard

    def reset(self) -> None:
        """
        Reset all cached services.

        Closes the session manager's provider subscription first.
        """
        if self._session_manager is not None:
            self._session_manager.close()
        self._provider = None
        self._session_manager = None
        self._route_guard = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    The next call to get_container() creates a fresh container.
    Primarily used for testing.
    """
    global _container
    if _container is not None:
        _container.reset()
    _container = None
