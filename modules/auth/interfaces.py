"""
Authentication module interface.

The session manager depends on IIdentityProvider, not on Supabase. This
keeps the state machine testable with an in-memory provider and lets the
remote service be swapped without touching session logic.
"""

from typing import Callable, Protocol, Optional, runtime_checkable

from .models import PendingConfirmation, Profile, Role, Session, SessionEvent

SessionChangeCallback = Callable[[SessionEvent], None]
Unsubscribe = Callable[[], None]


@runtime_checkable
class IIdentityProvider(Protocol):
    """
    Interface for the remote identity provider.

    Every failure is raised as a ProviderError subclass; implementations
    must not let provider-specific exceptions or wording escape.
    """

    async def sign_in(self, email: str, password: str) -> Session:
        """
        Authenticate with email and password.

        Returns:
            The newly issued session

        Raises:
            InvalidCredentialsError: Wrong password or unknown email
            ProviderError: Any other normalized failure
        """
        ...

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        role: Role,
    ) -> Session | PendingConfirmation:
        """
        Create an identity.

        Returns:
            A usable session, or PendingConfirmation when the email has to
            be confirmed first (not an error)

        Raises:
            EmailAlreadyRegisteredError: The identity already exists
            ProviderError: Any other normalized failure
        """
        ...

    async def sign_out(self) -> None:
        """
        End the current session.

        Idempotent: succeeds as a no-op when there is no session.
        """
        ...

    async def get_session(self) -> Optional[Session]:
        """
        Ask the provider whether a session already exists.

        Used once at startup to restore a session from a previous run.
        """
        ...

    async def fetch_profile(self, user_id: str) -> Profile:
        """
        Fetch the application profile and role for an identity.

        Raises:
            ProviderError: If the profile cannot be loaded or has no valid role
        """
        ...

    def subscribe_session_changes(
        self, callback: SessionChangeCallback
    ) -> Unsubscribe:
        """
        Register a callback for provider-detected session transitions.

        The callback fires for changes not made through this adapter too
        (another tab, token refresh, expiry).

        Returns:
            A callable that stops further deliveries
        """
        ...
