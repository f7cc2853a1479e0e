"""
Authentication module.

Validates login and sign-up input, talks to the identity provider, and
owns the session state machine.

Public API:
- IIdentityProvider: Interface for the remote identity provider
- SupabaseIdentityProvider: Supabase implementation
- SessionManager: Session state machine and state observable
- validate_login / validate_registration: Input validation
- Models: Credentials, RegistrationRequest, Role, Session, Profile, AuthState, ...
- Exceptions: ValidationFailedError and the ProviderError family
"""

from .interfaces import IIdentityProvider
from .models import (
    AuthOutcome,
    AuthResult,
    AuthState,
    Credentials,
    PendingConfirmation,
    Profile,
    RegistrationRequest,
    Role,
    Session,
    SessionEvent,
    SessionEventKind,
    SessionPresence,
)
from .exceptions import (
    ProviderErrorKind,
    ValidationFailedError,
    ProviderError,
    InvalidCredentialsError,
    EmailAlreadyRegisteredError,
    ProviderUnavailableError,
    UnknownProviderError,
)
from .validation import validate_login, validate_registration
from .provider import SupabaseIdentityProvider, normalize_provider_error
from .session import SessionManager
from .messages import Notice, user_message

__all__ = [
    # Interface
    "IIdentityProvider",
    # Models
    "AuthOutcome",
    "AuthResult",
    "AuthState",
    "Credentials",
    "PendingConfirmation",
    "Profile",
    "RegistrationRequest",
    "Role",
    "Session",
    "SessionEvent",
    "SessionEventKind",
    "SessionPresence",
    # Exceptions
    "ProviderErrorKind",
    "ValidationFailedError",
    "ProviderError",
    "InvalidCredentialsError",
    "EmailAlreadyRegisteredError",
    "ProviderUnavailableError",
    "UnknownProviderError",
    # Validation
    "validate_login",
    "validate_registration",
    # Provider
    "SupabaseIdentityProvider",
    "normalize_provider_error",
    # Session
    "SessionManager",
    # Messages
    "Notice",
    "user_message",
]
