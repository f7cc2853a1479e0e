"""
Session state machine.

SessionManager is the single writer of the process-wide AuthState. It
restores a prior session on start, adopts sessions from sign-in/sign-up
and from provider push events, loads the profile in the background, and
notifies subscribers after every transition.

Every session adoption (and every clear) bumps the state generation.
Profile fetches are tagged with the generation that started them, and a
result that arrives after the generation moved on is dropped.
"""

import asyncio
import logging
from typing import Callable, Optional

from .exceptions import ProviderError
from .interfaces import IIdentityProvider, Unsubscribe
from .models import (
    AuthOutcome,
    AuthResult,
    AuthState,
    Profile,
    Role,
    Session,
    SessionEvent,
    SessionEventKind,
    SessionPresence,
)

logger = logging.getLogger(__name__)

StateListener = Callable[[AuthState], None]


class SessionManager:
    """
    Owns the authentication state for one running client.

    State starts as `pending` and stays there until start() has asked the
    provider whether a session exists, so readers never see a premature
    "signed out".

    Usage:
        async with SessionManager(provider) as sessions:
            result = await sessions.sign_in(credentials.email, credentials.password)
            profile = await sessions.wait_for_profile()
    """

    def __init__(self, provider: IIdentityProvider):
        self._provider = provider
        self._state = AuthState()
        self._listeners: list[StateListener] = []
        self._unsubscribe_provider: Optional[Unsubscribe] = None
        self._started = False
        self._profile_task: Optional[asyncio.Task] = None
        # Strong refs so running fetches are not garbage collected
        self._tasks: set[asyncio.Task] = set()
        # Tokens of sessions signed out here; never adopted again
        self._revoked_tokens: set[str] = set()

    async def __aenter__(self) -> "SessionManager":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        self.close()

    @property
    def state(self) -> AuthState:
        """Current immutable state snapshot."""
        return self._state

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """
        Call `listener` with the new state after every transition.

        Safe to call from inside a notification.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def start(self) -> AuthState:
        """
        Subscribe to provider events and restore any existing session.

        Runs once; later calls return the current state.
        """
        if self._started:
            return self._state
        self._started = True

        self._unsubscribe_provider = self._provider.subscribe_session_changes(
            self._on_session_change
        )

        generation = self._state.generation
        try:
            session = await self._provider.get_session()
        except ProviderError as e:
            logger.warning("Session restore failed (%s)", e.kind.value)
            session = None

        if self._state.generation != generation:
            logger.debug("Session changed during restore, keeping pushed state")
            return self._state

        if session is None:
            logger.debug("No session to restore")
            self._clear()
        else:
            logger.info("Restored session for user %s", session.user_id)
            self._adopt(session)
        return self._state

    def close(self) -> None:
        """Stop receiving provider events. In-flight calls keep running."""
        if self._unsubscribe_provider is not None:
            self._unsubscribe_provider()
            self._unsubscribe_provider = None

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def sign_in(self, email: str, password: str) -> AuthResult:
        """
        Sign in and adopt the new session.

        Returns as soon as the session is adopted; the profile keeps
        loading in the background (see wait_for_profile).
        """
        previous = self._state
        entered_pending = previous.presence == SessionPresence.NONE
        if entered_pending:
            self._set_state(
                AuthState(
                    presence=SessionPresence.PENDING,
                    generation=previous.generation,
                )
            )

        try:
            session = await self._provider.sign_in(email, password)
        except ProviderError as e:
            current = self._state
            if (
                entered_pending
                and current.presence == SessionPresence.PENDING
                and current.generation == previous.generation
            ):
                self._set_state(
                    AuthState(
                        presence=SessionPresence.NONE,
                        generation=current.generation,
                    )
                )
            return AuthResult.failed(e)

        self._adopt(session)
        return AuthResult(outcome=AuthOutcome.SIGNED_IN, session=session)

    async def sign_up(
        self,
        email: str,
        password: str,
        full_name: str,
        role: Role,
    ) -> AuthResult:
        """
        Register a new identity.

        When the provider asks for email confirmation the state is left
        alone and the result outcome is PENDING_CONFIRMATION.
        """
        try:
            outcome = await self._provider.sign_up(email, password, full_name, role)
        except ProviderError as e:
            return AuthResult.failed(e)

        if isinstance(outcome, Session):
            self._adopt(outcome)
            return AuthResult(outcome=AuthOutcome.SIGNED_IN, session=outcome)

        return AuthResult(
            outcome=AuthOutcome.PENDING_CONFIRMATION,
            pending=outcome,
        )

    async def sign_out(self) -> AuthResult:
        """
        Sign out with the provider, then clear the local session.

        The local session is cleared even if the provider call fails; that
        failure is returned as the result's warning.
        """
        signed_out = self._state.session
        if signed_out is not None:
            self._revoked_tokens.add(signed_out.access_token)
            if signed_out.refresh_token:
                self._revoked_tokens.add(signed_out.refresh_token)

        warning = None
        try:
            await self._provider.sign_out()
        except ProviderError as e:
            logger.warning(
                "Provider sign-out failed (%s), clearing local session anyway",
                e.kind.value,
            )
            warning = e
        finally:
            self._clear()

        return AuthResult(outcome=AuthOutcome.SIGNED_OUT, warning=warning)

    async def refresh_profile(self) -> Optional[Profile]:
        """
        Fetch the profile again for the current session and wait for it.

        Clears a recorded fetch failure first, so readers see the profile
        as loading until the new result lands.
        """
        current = self._state
        if current.session is None:
            return None
        if current.profile_error is not None:
            self._set_state(
                AuthState(
                    presence=current.presence,
                    session=current.session,
                    profile=current.profile,
                    generation=current.generation,
                )
            )
        self._start_profile_fetch(current.session.user_id, current.generation)
        return await self.wait_for_profile()

    async def wait_for_profile(self) -> Optional[Profile]:
        """Wait for the outstanding profile fetch, then return the profile."""
        while self._profile_task is not None and not self._profile_task.done():
            await self._profile_task
        return self._state.profile

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _on_session_change(self, event: object) -> None:
        """Handle a provider push event."""
        if not isinstance(event, SessionEvent):
            logger.warning(
                "Uninterpretable session event %r, treating as signed out",
                type(event).__name__,
            )
            self._clear()
            return

        if event.kind == SessionEventKind.SESSION:
            if event.session is None:
                logger.warning(
                    "Session event %s carried no session, treating as signed out",
                    event.source,
                )
                self._clear()
                return
            logger.debug("Session event %s for user %s", event.source, event.session.user_id)
            self._adopt(event.session)
        else:
            logger.debug("Session cleared by provider (%s)", event.source)
            self._clear()

    def _adopt(self, session: Session) -> None:
        current = self._state
        if (
            current.session is not None
            and current.session.access_token == session.access_token
        ):
            return
        if (
            session.access_token in self._revoked_tokens
            or session.refresh_token in self._revoked_tokens
        ):
            logger.warning(
                "Ignoring session for user %s that was signed out on this device",
                session.user_id,
            )
            return

        # A refresh for the same user keeps the cached profile until the
        # new fetch lands; another user never sees it
        profile = current.profile
        if profile is not None and profile.user_id != session.user_id:
            profile = None

        generation = current.generation + 1
        self._set_state(
            AuthState(
                presence=SessionPresence.PRESENT,
                session=session,
                profile=profile,
                generation=generation,
            )
        )
        self._start_profile_fetch(session.user_id, generation)

    def _clear(self) -> None:
        current = self._state
        if current.presence == SessionPresence.NONE:
            return
        self._set_state(
            AuthState(
                presence=SessionPresence.NONE,
                generation=current.generation + 1,
            )
        )

    def _start_profile_fetch(self, user_id: str, generation: int) -> None:
        task = asyncio.get_running_loop().create_task(
            self._load_profile(user_id, generation)
        )
        self._profile_task = task
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _load_profile(self, user_id: str, generation: int) -> None:
        try:
            profile = await self._provider.fetch_profile(user_id)
        except ProviderError as e:
            current = self._state
            if generation != current.generation or current.session is None:
                return
            logger.warning(
                "Profile fetch for user %s failed (%s)", user_id, e.kind.value
            )
            # A cached profile from before a refresh stays usable
            if current.profile is None:
                self._set_state(
                    AuthState(
                        presence=current.presence,
                        session=current.session,
                        profile_error=e.kind,
                        generation=current.generation,
                    )
                )
            return

        current = self._state
        if generation != current.generation or current.session is None:
            logger.debug(
                "Discarding profile from generation %d (current %d)",
                generation,
                current.generation,
            )
            return
        if profile.user_id != current.session.user_id:
            logger.warning("Profile for user %s does not match the session", profile.user_id)
            return

        self._set_state(
            AuthState(
                presence=current.presence,
                session=current.session,
                profile=profile,
                generation=current.generation,
            )
        )

    def _set_state(self, state: AuthState) -> None:
        self._state = state
        for listener in list(self._listeners):
            try:
                listener(state)
            except Exception:
                logger.exception("Auth state listener failed")
