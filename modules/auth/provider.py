"""
Supabase implementation of the identity provider adapter.

Wraps the async Supabase client's auth API and the two tables holding the
application profile. Every failure leaves this module as a normalized
ProviderError; Supabase exceptions and wording stop here.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Optional

import httpx
import jwt
from supabase import AsyncClient, AuthRetryableError

from shared.config import Settings, get_settings
from shared.database import get_supabase_client

from .exceptions import (
    EmailAlreadyRegisteredError,
    InvalidCredentialsError,
    ProviderError,
    ProviderUnavailableError,
    UnknownProviderError,
)
from .interfaces import SessionChangeCallback, Unsubscribe
from .models import (
    PendingConfirmation,
    Profile,
    Role,
    Session,
    SessionEvent,
    SessionEventKind,
)

logger = logging.getLogger(__name__)


# Substrings of Supabase error codes/messages, checked in order
PROVIDER_ERROR_MAP: dict[str, type[ProviderError]] = {
    "invalid_credentials": InvalidCredentialsError,
    "invalid_grant": InvalidCredentialsError,
    "invalid login": InvalidCredentialsError,
    "user_already_exists": EmailAlreadyRegisteredError,
    "email_exists": EmailAlreadyRegisteredError,
    "already registered": EmailAlreadyRegisteredError,
}

TRANSPORT_ERRORS = (AuthRetryableError, httpx.TransportError, ConnectionError, TimeoutError)

# Gateway statuses mean the service is down, not that the request was wrong
UNAVAILABLE_STATUSES = {502, 503, 504}

# Auth events that always mean "no session any more"
CLEARING_EVENTS = {"SIGNED_OUT", "USER_DELETED"}


def normalize_provider_error(exc: BaseException) -> ProviderError:
    """
    Map any exception raised while talking to Supabase to a ProviderError.

    Transport failures become ProviderUnavailableError. Known error codes
    and message fragments map to their specific kinds. Anything else is
    UnknownProviderError carrying the raw text for logging.
    """
    if isinstance(exc, ProviderError):
        return exc

    raw_message = getattr(exc, "message", None) or str(exc)

    if isinstance(exc, TRANSPORT_ERRORS):
        return ProviderUnavailableError(raw_message)
    if getattr(exc, "status", None) in UNAVAILABLE_STATUSES:
        return ProviderUnavailableError(raw_message)

    haystack = f"{getattr(exc, 'code', None) or ''} {raw_message}".lower()
    for fragment, error_class in PROVIDER_ERROR_MAP.items():
        if fragment in haystack:
            return error_class(raw_message)

    return UnknownProviderError(raw_message)


def _is_missing_session(exc: BaseException) -> bool:
    message = (getattr(exc, "message", None) or str(exc)).lower()
    return "session missing" in message or "session_not_found" in message


def token_issued_at(access_token: str) -> datetime:
    """
    Read the `iat` claim from an access token.

    The token is only inspected, not verified; verification is the
    provider's job. Falls back to the current time.
    """
    try:
        claims = jwt.decode(access_token, options={"verify_signature": False})
    except jwt.PyJWTError:
        return datetime.now(timezone.utc)

    iat = claims.get("iat")
    if isinstance(iat, (int, float)):
        return datetime.fromtimestamp(iat, tz=timezone.utc)
    return datetime.now(timezone.utc)


def session_from_supabase(raw: Any) -> Session:
    """
    Convert a Supabase auth session into a Session.

    Raises:
        AttributeError, TypeError, ValueError: If the payload is malformed
    """
    user = raw.user
    expires_at = (
        datetime.fromtimestamp(raw.expires_at, tz=timezone.utc)
        if raw.expires_at
        else None
    )
    return Session(
        user_id=user.id,
        issued_at=token_issued_at(raw.access_token),
        access_token=raw.access_token,
        refresh_token=raw.refresh_token,
        expires_at=expires_at,
        email=user.email,
    )


class SupabaseIdentityProvider:
    """
    Identity provider backed by Supabase Auth.

    Profiles live in `profiles` (id, full_name) and roles in `user_roles`
    (user_id, role); table names come from settings.
    """

    def __init__(self, client: AsyncClient, settings: Optional[Settings] = None):
        self._client = client
        self._settings = settings or get_settings()

    @classmethod
    async def create(cls) -> "SupabaseIdentityProvider":
        """Build a provider on the shared Supabase client."""
        return cls(await get_supabase_client())

    def _to_session(self, raw: Any) -> Session:
        try:
            return session_from_supabase(raw)
        except (AttributeError, TypeError, ValueError) as e:
            raise UnknownProviderError(f"Malformed session payload: {e}") from e

    async def sign_in(self, email: str, password: str) -> Session:
        """Authenticate with email and password."""
        try:
            response = await self._client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as e:
            error = normalize_provider_error(e)
            logger.info("Sign-in rejected (%s)", error.kind.value)
            raise error from e

        if response.session is None:
            raise UnknownProviderError("Sign-in returned no session")

        session = self._to_session(response.session)
        logger.info("Signed in user %s", session.user_id)
        return session

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        role: Role,
    ) -> Session | PendingConfirmation:
        """
        Create an identity, passing name and role as user metadata.

        A database trigger on the Supabase side copies the metadata into
        the profile and role tables.
        """
        try:
            response = await self._client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {
                        "data": {"full_name": full_name, "role": role.value},
                        "email_redirect_to": self._settings.email_redirect_url,
                    },
                }
            )
        except Exception as e:
            error = normalize_provider_error(e)
            logger.info("Sign-up rejected (%s)", error.kind.value)
            raise error from e

        # With confirmations on, Supabase answers an existing email with a
        # user that has no identities instead of an error
        user = response.user
        if user is not None and getattr(user, "identities", None) == []:
            raise EmailAlreadyRegisteredError("User has no identities")

        if response.session is None:
            logger.info("Sign-up awaiting email confirmation")
            return PendingConfirmation(email=email)

        session = self._to_session(response.session)
        logger.info("Signed up user %s", session.user_id)
        return session

    async def sign_out(self) -> None:
        """
        End the current session; no session is a no-op.

        If the logout request fails the client's stored session is removed
        anyway before the normalized error is raised, so neither a later
        get_session() nor the refresh timer brings it back.
        """
        try:
            await self._client.auth.sign_out()
        except Exception as e:
            if _is_missing_session(e):
                logger.debug("Sign-out with no active session")
                return
            error = normalize_provider_error(e)
            logger.warning(
                "Logout request failed (%s), dropping the stored session",
                error.kind.value,
            )
            await self._drop_stored_session()
            raise error from e

    async def _drop_stored_session(self) -> None:
        # supabase-py only clears storage after a successful logout request,
        # and has no public local-only sign-out
        auth = self._client.auth
        await auth._remove_session()
        auth._notify_all_subscribers("SIGNED_OUT", None)

    async def get_session(self) -> Optional[Session]:
        """Return the session the Supabase client already holds, if any."""
        try:
            raw = await self._client.auth.get_session()
        except Exception as e:
            raise normalize_provider_error(e) from e

        if raw is None:
            return None
        return self._to_session(raw)

    async def fetch_profile(self, user_id: str) -> Profile:
        """Load the profile row and the self-service role for a user."""
        try:
            profile_result = (
                await self._client.table(self._settings.profiles_table)
                .select("id, full_name")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
            role_result = (
                await self._client.table(self._settings.roles_table)
                .select("role")
                .eq("user_id", user_id)
                .execute()
            )
        except Exception as e:
            raise normalize_provider_error(e) from e

        full_name = None
        if profile_result.data:
            full_name = profile_result.data[0].get("full_name")

        role = _resolve_role(row.get("role") for row in role_result.data or [])
        if role is None:
            raise UnknownProviderError(f"No self-service role assigned to {user_id}")

        return Profile(user_id=user_id, full_name=full_name, role=role)

    def subscribe_session_changes(
        self, callback: SessionChangeCallback
    ) -> Unsubscribe:
        """Forward Supabase auth state changes as SessionEvents."""

        def _listener(event: Any, raw_session: Any) -> None:
            callback(self._to_event(event, raw_session))

        subscription = self._client.auth.on_auth_state_change(_listener)
        return subscription.unsubscribe

    def _to_event(self, event: Any, raw_session: Any) -> SessionEvent:
        source = str(event)
        if source in CLEARING_EVENTS or raw_session is None:
            return SessionEvent(kind=SessionEventKind.CLEARED, source=source)

        try:
            session = session_from_supabase(raw_session)
        except (AttributeError, TypeError, ValueError) as e:
            logger.warning("Malformed session payload on %s: %s", source, e)
            return SessionEvent(kind=SessionEventKind.CLEARED, source=source)

        return SessionEvent(
            kind=SessionEventKind.SESSION,
            session=session,
            source=source,
        )


def _resolve_role(values: Any) -> Optional[Role]:
    """Pick the first value that is a self-service role."""
    for value in values:
        try:
            return Role(value)
        except ValueError:
            continue
    return None
