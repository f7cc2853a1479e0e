import pytest
from unittest.mock import AsyncMock, patch

from core.container import ServiceContainer, get_container, reset_container
from modules.auth.session import SessionManager
from modules.navigation.guard import RouteGuard
from tests.modules.auth.conftest import FakeIdentityProvider


class TestServiceContainer:
    @pytest.mark.asyncio
    async def test_uses_injected_provider(self):
        """A provider handed in is used as-is."""
        provider = FakeIdentityProvider()
        container = ServiceContainer(provider=provider)
        assert await container.identity_provider() is provider

    @pytest.mark.asyncio
    @patch("modules.auth.provider.SupabaseIdentityProvider.create", new_callable=AsyncMock)
    async def test_builds_supabase_provider_lazily(self, mock_create):
        """Without injection the Supabase provider is created once."""
        container = ServiceContainer()
        first = await container.identity_provider()
        second = await container.identity_provider()
        assert first is second
        mock_create.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_session_manager_is_cached(self):
        """The session manager is a per-container singleton."""
        container = ServiceContainer(provider=FakeIdentityProvider())
        manager = await container.session_manager()
        assert isinstance(manager, SessionManager)
        assert await container.session_manager() is manager

    def test_route_guard(self):
        """The route guard is created on first access."""
        container = ServiceContainer()
        assert isinstance(container.route_guard, RouteGuard)
        assert container.route_guard is container.route_guard

    @pytest.mark.asyncio
    async def test_reset_closes_session_manager(self):
        """reset() drops the provider subscription."""
        provider = FakeIdentityProvider()
        container = ServiceContainer(provider=provider)
        manager = await container.session_manager()
        await manager.start()
        assert provider.callbacks

        container.reset()
        assert provider.callbacks == []


class TestGetContainer:
    def test_singleton(self):
        """get_container returns the same instance until reset."""
        container = get_container()
        assert get_container() is container
        reset_container()
        assert get_container() is not container
