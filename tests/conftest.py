"""
Shared test fixtures and utilities.

This module provides common test infrastructure used across all test modules.
"""

import pytest
from datetime import datetime, timezone, timedelta
from types import SimpleNamespace
import jwt  # PyJWT

from core.container import reset_container
from shared.config import get_settings
from shared.database import reset_client_cache


# Test JWT secret (only for testing)
TEST_JWT_SECRET = "test-secret-key-for-testing-only"


def create_test_token(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    issued_at: datetime | None = None,
) -> str:
    """
    Create a Supabase-shaped access token.

    Args:
        user_id: User ID to include in the token
        email: Email to include in the token
        issued_at: Value of the iat claim (defaults to now)

    Returns:
        JWT token string
    """
    now = issued_at or datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "exp": int((now + timedelta(hours=1)).timestamp()),
        "iat": int(now.timestamp()),
    }
    return jwt.encode(payload, TEST_JWT_SECRET, algorithm="HS256")


def create_supabase_session(
    user_id: str = "test-user-123",
    email: str = "test@example.com",
    issued_at: datetime | None = None,
) -> SimpleNamespace:
    """Build an object shaped like a Supabase auth Session."""
    token = create_test_token(user_id=user_id, email=email, issued_at=issued_at)
    return SimpleNamespace(
        access_token=token,
        refresh_token="refresh-" + user_id,
        expires_at=int((datetime.now(timezone.utc) + timedelta(hours=1)).timestamp()),
        user=SimpleNamespace(id=user_id, email=email, identities=[{"id": user_id}]),
    )


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset cached settings, client and container around each test."""
    get_settings.cache_clear()
    reset_client_cache()
    reset_container()
    yield
    get_settings.cache_clear()
    reset_client_cache()
    reset_container()


@pytest.fixture
def test_user_id() -> str:
    """Provide a consistent test user ID."""
    return "test-user-123"


@pytest.fixture
def test_user_email() -> str:
    """Provide a consistent test user email."""
    return "test@example.com"
