"""
User-facing wording for auth outcomes.

Display layers format from error kinds only. Raw provider text never gets
here; unclassified failures get a generic message.
"""

from dataclasses import dataclass

from shared.exceptions import TicketAIError

from .exceptions import ProviderError, ProviderErrorKind, ValidationFailedError
from .models import AuthOutcome, AuthResult

PROVIDER_MESSAGES: dict[ProviderErrorKind, str] = {
    ProviderErrorKind.INVALID_CREDENTIALS: "Invalid email or password",
    ProviderErrorKind.EMAIL_ALREADY_REGISTERED: (
        "This email is already registered. Try logging in."
    ),
    ProviderErrorKind.PROVIDER_UNAVAILABLE: (
        "Cannot reach the server. Check your connection and try again."
    ),
    ProviderErrorKind.UNKNOWN: "Something went wrong. Please try again later.",
}

GENERIC_MESSAGE = PROVIDER_MESSAGES[ProviderErrorKind.UNKNOWN]


@dataclass(frozen=True)
class Notice:
    """A toast-style message: title, description and whether it is an error."""

    title: str
    description: str
    destructive: bool = False


def user_message(error: TicketAIError) -> str:
    """Short message for an error, safe to show to the user."""
    if isinstance(error, ValidationFailedError):
        return error.message
    if isinstance(error, ProviderError):
        return PROVIDER_MESSAGES.get(error.kind, GENERIC_MESSAGE)
    return GENERIC_MESSAGE


def validation_notice(error: ValidationFailedError) -> Notice:
    return Notice("Validation Error", user_message(error), destructive=True)


def sign_in_notice(result: AuthResult) -> Notice | None:
    """Notice for a finished sign-in, or None when there is nothing to say."""
    if result.error is not None:
        return Notice("Login Failed", user_message(result.error), destructive=True)
    return None


def sign_up_notice(result: AuthResult) -> Notice | None:
    """Notice for a finished sign-up."""
    if result.error is not None:
        return Notice("Signup Failed", user_message(result.error), destructive=True)
    if result.outcome == AuthOutcome.PENDING_CONFIRMATION:
        return Notice(
            "Check your email",
            "We sent you a confirmation link. Please verify your email to continue.",
        )
    return None


def sign_out_notice(result: AuthResult) -> Notice | None:
    """Notice for a sign-out; only a provider warning is worth showing."""
    if result.warning is not None:
        return Notice(
            "Signed out on this device",
            f"{user_message(result.warning)} You are signed out here.",
        )
    return None
