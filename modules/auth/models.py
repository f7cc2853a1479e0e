"""
Authentication module data models.

These models define the data structures used by the auth module and
exposed to the UI layer. Everything handed to readers is immutable; the
session manager replaces its state snapshot instead of mutating it.
"""

import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic_core import PydanticCustomError

from .exceptions import ProviderError, ProviderErrorKind

# One "@", non-empty local part, dotted domain with non-empty labels
EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s.]+(?:\.[^@\s.]+)+$")

MIN_PASSWORD_LENGTH = 6
MIN_FULL_NAME_LENGTH = 2
MAX_FULL_NAME_LENGTH = 100


class Role(str, Enum):
    """Roles a user can pick when signing up."""

    CLIENT = "client"
    DEVELOPER = "developer"


class SessionPresence(str, Enum):
    """Whether a session exists, as far as the session manager knows."""

    NONE = "none"
    PENDING = "pending"
    PRESENT = "present"


class Credentials(BaseModel):
    """
    Validated login input.

    The email is trimmed but keeps its case; the password is never touched.
    Never persisted beyond the request that uses it.
    """

    email: str = Field(..., description="Trimmed email address")
    password: str = Field(..., repr=False, description="Raw password")

    model_config = {"frozen": True}

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        value = value.strip()
        if not EMAIL_PATTERN.match(value):
            raise PydanticCustomError("email", "Invalid email address")
        return value

    @field_validator("password")
    @classmethod
    def _check_password(cls, value: str) -> str:
        if len(value) < MIN_PASSWORD_LENGTH:
            raise PydanticCustomError(
                "password_too_short",
                "Password must be at least {min_length} characters",
                {"min_length": MIN_PASSWORD_LENGTH},
            )
        return value


class RegistrationRequest(Credentials):
    """Validated sign-up input."""

    full_name: str = Field(..., description="Trimmed display name")
    role: Role = Field(..., description="Self-service role")

    @field_validator("full_name")
    @classmethod
    def _check_full_name(cls, value: str) -> str:
        value = value.strip()
        if len(value) < MIN_FULL_NAME_LENGTH:
            raise PydanticCustomError(
                "full_name_too_short",
                "Name must be at least {min_length} characters",
                {"min_length": MIN_FULL_NAME_LENGTH},
            )
        if len(value) > MAX_FULL_NAME_LENGTH:
            raise PydanticCustomError(
                "full_name_too_long",
                "Name must be at most {max_length} characters",
                {"max_length": MAX_FULL_NAME_LENGTH},
            )
        return value

    @field_validator("role", mode="before")
    @classmethod
    def _check_role(cls, value: object) -> Role:
        if isinstance(value, Role):
            return value
        if isinstance(value, str):
            try:
                return Role(value.strip().lower())
            except ValueError:
                pass
        raise PydanticCustomError(
            "role", "Role must be either client or developer"
        )


class Session(BaseModel):
    """
    Provider-issued proof of an authenticated identity.

    Opaque beyond the user id and issue time; the raw tokens are carried
    along so the provider client can be handed them back.
    """

    user_id: str = Field(..., min_length=1, description="Provider user ID")
    issued_at: datetime = Field(..., description="When the token was issued")
    access_token: str = Field(..., min_length=1, repr=False)
    refresh_token: Optional[str] = Field(None, repr=False)
    expires_at: Optional[datetime] = Field(None, description="Token expiry")
    email: Optional[str] = Field(None, description="Email on the identity")

    model_config = {"frozen": True}


class PendingConfirmation(BaseModel):
    """Sign-up succeeded but the email must be confirmed before login."""

    email: str

    model_config = {"frozen": True}


class Profile(BaseModel):
    """Application record associated with an identity."""

    user_id: str = Field(..., description="Provider user ID")
    full_name: Optional[str] = Field(None, description="Display name")
    role: Role = Field(..., description="Role assigned at registration")

    model_config = {"frozen": True}


class SessionEventKind(str, Enum):
    """Normalized provider push event kinds."""

    SESSION = "session"
    CLEARED = "cleared"


class SessionEvent(BaseModel):
    """A session change pushed by the identity provider."""

    kind: SessionEventKind
    session: Optional[Session] = None
    source: str = Field("", description="Provider event name")

    model_config = {"frozen": True}


class AuthState(BaseModel):
    """
    Immutable snapshot of the session manager's state.

    `profile` (and therefore `role`) can only be set while a session is
    present, but may be briefly missing right after a session is adopted.
    `profile_error` records why the last fetch for this session failed; it
    is dropped by the next adoption or refresh.
    """

    presence: SessionPresence = SessionPresence.PENDING
    session: Optional[Session] = None
    profile: Optional[Profile] = None
    profile_error: Optional[ProviderErrorKind] = None
    generation: int = 0

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_consistency(self) -> "AuthState":
        if (self.presence == SessionPresence.PRESENT) != (self.session is not None):
            raise ValueError("session must be set exactly when presence is 'present'")
        if self.profile is not None:
            if self.session is None:
                raise ValueError("profile requires a session")
            if self.profile.user_id != self.session.user_id:
                raise ValueError("profile belongs to a different user")
        if self.profile_error is not None and self.session is None:
            raise ValueError("profile_error requires a session")
        return self

    @property
    def role(self) -> Optional[Role]:
        """Role of the signed-in user, read from the cached profile."""
        return self.profile.role if self.profile else None

    @property
    def is_authenticated(self) -> bool:
        return self.presence == SessionPresence.PRESENT

    @property
    def is_loading_profile(self) -> bool:
        return (
            self.is_authenticated
            and self.profile is None
            and self.profile_error is None
        )


class AuthOutcome(str, Enum):
    """What a session manager operation ended in."""

    SIGNED_IN = "signed_in"
    PENDING_CONFIRMATION = "pending_confirmation"
    SIGNED_OUT = "signed_out"
    FAILED = "failed"


@dataclass(frozen=True)
class AuthResult:
    """
    Result of sign_in, sign_up and sign_out.

    Provider errors are returned here instead of raised. `warning` is only
    used by sign_out, which always ends signed out locally.
    """

    outcome: AuthOutcome
    session: Optional[Session] = None
    pending: Optional[PendingConfirmation] = None
    error: Optional[ProviderError] = None
    warning: Optional[ProviderError] = None

    @property
    def ok(self) -> bool:
        return self.outcome != AuthOutcome.FAILED

    @classmethod
    def failed(cls, error: ProviderError) -> "AuthResult":
        return cls(outcome=AuthOutcome.FAILED, error=error)
