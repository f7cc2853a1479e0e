"""
Authentication module exceptions.

Provider failures are normalized into a small closed set of kinds so that
nothing past the identity provider adapter ever sees the provider's own
wording. Local input problems are reported separately and never reach
the network.
"""

from enum import Enum
from typing import Optional

from shared.exceptions import ExternalServiceError, ValidationError


class ProviderErrorKind(str, Enum):
    """Normalized identity provider failure kinds."""

    INVALID_CREDENTIALS = "invalid_credentials"
    EMAIL_ALREADY_REGISTERED = "email_already_registered"
    PROVIDER_UNAVAILABLE = "provider_unavailable"
    UNKNOWN = "unknown"


class ValidationFailedError(ValidationError):
    """Raised when login or registration input fails local validation."""

    def __init__(self, field: str, message: str):
        super().__init__(
            message,
            code="VALIDATION_FAILED",
            details={"field": field},
        )
        self.field = field


class ProviderError(ExternalServiceError):
    """Base exception for normalized identity provider failures."""

    kind: ProviderErrorKind = ProviderErrorKind.UNKNOWN

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        raw_message: Optional[str] = None,
    ):
        super().__init__(
            message,
            service="supabase",
            code=code,
            details={"kind": self.kind.value},
        )
        # Kept for logs only; display layers format from `kind`
        self.raw_message = raw_message


class InvalidCredentialsError(ProviderError):
    """Raised when the provider rejects an email/password pair."""

    kind = ProviderErrorKind.INVALID_CREDENTIALS

    def __init__(self, raw_message: Optional[str] = None):
        super().__init__(
            "Invalid email or password",
            code="INVALID_CREDENTIALS",
            raw_message=raw_message,
        )


class EmailAlreadyRegisteredError(ProviderError):
    """Raised when sign-up targets an identity that already exists."""

    kind = ProviderErrorKind.EMAIL_ALREADY_REGISTERED

    def __init__(self, raw_message: Optional[str] = None):
        super().__init__(
            "Email is already registered",
            code="EMAIL_ALREADY_REGISTERED",
            raw_message=raw_message,
        )


class ProviderUnavailableError(ProviderError):
    """Raised on network or transport failure talking to the provider."""

    kind = ProviderErrorKind.PROVIDER_UNAVAILABLE

    def __init__(self, raw_message: Optional[str] = None):
        super().__init__(
            "Identity provider is unavailable",
            code="PROVIDER_UNAVAILABLE",
            raw_message=raw_message,
        )


class UnknownProviderError(ProviderError):
    """Raised when a provider failure cannot be classified."""

    kind = ProviderErrorKind.UNKNOWN

    def __init__(self, raw_message: str = ""):
        super().__init__(
            "Unexpected identity provider error",
            code="UNKNOWN_PROVIDER_ERROR",
            raw_message=raw_message,
        )
