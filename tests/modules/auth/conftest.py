"""
Pytest fixtures for auth module tests.

FakeIdentityProvider stands in for Supabase: it keeps users in memory,
records calls, and lets a test hold a profile fetch open until it decides
to release it.
"""

import asyncio
from datetime import datetime, timezone
from typing import Optional

import pytest

from modules.auth.exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    ProviderError,
    UnknownProviderError,
)
from modules.auth.models import (
    PendingConfirmation,
    Profile,
    Role,
    Session,
    SessionEvent,
    SessionEventKind,
)


class FakeIdentityProvider:
    """In-memory IIdentityProvider."""

    def __init__(self) -> None:
        self.users: dict[str, tuple[str, str]] = {}  # email -> (password, user_id)
        self.profiles: dict[str, Profile] = {}
        self.current: Optional[Session] = None
        self.calls: list[str] = []
        self.callbacks: list = []
        self.require_confirmation = False
        self.sign_in_error: Optional[ProviderError] = None
        self.sign_out_error: Optional[ProviderError] = None
        self.restore_error: Optional[ProviderError] = None
        self.profile_gates: dict[str, asyncio.Event] = {}
        self.restore_gate: Optional[asyncio.Event] = None
        self._tokens = 0

    def register(
        self,
        email: str,
        password: str,
        user_id: str,
        full_name: str = "Jo Doe",
        role: Role = Role.CLIENT,
    ) -> None:
        self.users[email] = (password, user_id)
        self.profiles[user_id] = Profile(user_id=user_id, full_name=full_name, role=role)

    def make_session(self, user_id: str) -> Session:
        self._tokens += 1
        return Session(
            user_id=user_id,
            issued_at=datetime.now(timezone.utc),
            access_token=f"token-{user_id}-{self._tokens}",
        )

    def hold_profile(self, user_id: str) -> asyncio.Event:
        """Block fetch_profile(user_id) until the returned event is set."""
        gate = asyncio.Event()
        self.profile_gates[user_id] = gate
        return gate

    def push(self, event: object) -> None:
        for callback in list(self.callbacks):
            callback(event)

    def push_session(self, session: Session) -> None:
        self.push(SessionEvent(kind=SessionEventKind.SESSION, session=session, source="SIGNED_IN"))

    def push_cleared(self) -> None:
        self.push(SessionEvent(kind=SessionEventKind.CLEARED, source="SIGNED_OUT"))

    async def sign_in(self, email: str, password: str) -> Session:
        self.calls.append("sign_in")
        if self.sign_in_error is not None:
            raise self.sign_in_error
        stored = self.users.get(email)
        if stored is None or stored[0] != password:
            raise InvalidCredentialsError("Invalid login credentials")
        self.current = self.make_session(stored[1])
        return self.current

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        role: Role,
    ) -> Session | PendingConfirmation:
        self.calls.append("sign_up")
        if email in self.users:
            raise EmailAlreadyRegisteredError("User already registered")
        user_id = f"user-{len(self.users) + 1}"
        self.register(email, password, user_id, full_name, role)
        if self.require_confirmation:
            return PendingConfirmation(email=email)
        self.current = self.make_session(user_id)
        return self.current

    async def sign_out(self) -> None:
        self.calls.append("sign_out")
        if self.sign_out_error is not None:
            raise self.sign_out_error
        self.current = None

    async def get_session(self) -> Optional[Session]:
        self.calls.append("get_session")
        if self.restore_gate is not None:
            await self.restore_gate.wait()
        if self.restore_error is not None:
            raise self.restore_error
        return self.current

    async def fetch_profile(self, user_id: str) -> Profile:
        self.calls.append(f"fetch_profile:{user_id}")
        gate = self.profile_gates.get(user_id)
        if gate is not None:
            await gate.wait()
        if user_id not in self.profiles:
            raise UnknownProviderError(f"No profile for {user_id}")
        return self.profiles[user_id]

    def subscribe_session_changes(self, callback):
        self.callbacks.append(callback)

        def _unsubscribe() -> None:
            if callback in self.callbacks:
                self.callbacks.remove(callback)

        return _unsubscribe


async def settle(rounds: int = 10) -> None:
    """Let background tasks run a few loop iterations."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def provider() -> FakeIdentityProvider:
    """Fake provider with one registered client and one developer."""
    fake = FakeIdentityProvider()
    fake.register("jo@example.com", "secret1", "user-jo", "Jo Doe", Role.CLIENT)
    fake.register("dev@example.com", "secret2", "user-dev", "Dee Veloper", Role.DEVELOPER)
    return fake
