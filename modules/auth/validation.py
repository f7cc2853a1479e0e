"""
Login and registration input validation.

Pure functions: no I/O, input is never mutated, trimming only shows up in
the returned model. When several fields are invalid the first one in
declaration order (email, password, full_name, role) is reported, so the
message a user sees is the same on every run.
"""

from typing import Any, Mapping

from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationFailedError
from .models import (
    MIN_FULL_NAME_LENGTH,
    MIN_PASSWORD_LENGTH,
    Credentials,
    RegistrationRequest,
)

FIELD_LABELS = {
    "email": "Email",
    "password": "Password",
    "full_name": "Name",
    "role": "Role",
}

# Shown when pydantic rejects a value before the field validators run
FIELD_MESSAGES = {
    "email": "Invalid email address",
    "password": f"Password must be at least {MIN_PASSWORD_LENGTH} characters",
    "full_name": f"Name must be at least {MIN_FULL_NAME_LENGTH} characters",
    "role": "Role must be either client or developer",
}

# Error types raised by the model validators, whose text is already ours
OWN_ERROR_TYPES = {
    "email",
    "password_too_short",
    "full_name_too_short",
    "full_name_too_long",
    "role",
}


def _first_failure(exc: PydanticValidationError) -> ValidationFailedError:
    """Convert the first pydantic error into a ValidationFailedError."""
    error = exc.errors(include_url=False)[0]
    field = str(error["loc"][0]) if error["loc"] else "input"
    if error["type"] == "missing" or error.get("input", "") is None:
        message = f"{FIELD_LABELS.get(field, field)} is required"
    elif error["type"] in OWN_ERROR_TYPES:
        message = error["msg"]
    else:
        message = FIELD_MESSAGES.get(field, error["msg"])
    return ValidationFailedError(field, message)


def validate_login(data: Mapping[str, Any]) -> Credentials:
    """
    Validate login form input.

    Args:
        data: Raw form values with "email" and "password"

    Returns:
        Credentials with the email trimmed

    Raises:
        ValidationFailedError: For the first invalid field
    """
    fields = ("email", "password")
    try:
        return Credentials.model_validate(
            {key: data[key] for key in fields if key in data}
        )
    except PydanticValidationError as e:
        raise _first_failure(e) from e


def validate_registration(data: Mapping[str, Any]) -> RegistrationRequest:
    """
    Validate sign-up form input.

    Args:
        data: Raw form values with "email", "password", "full_name" and "role"

    Returns:
        RegistrationRequest with email and name trimmed and role resolved

    Raises:
        ValidationFailedError: For the first invalid field
    """
    fields = ("email", "password", "full_name", "role")
    try:
        return RegistrationRequest.model_validate(
            {key: data[key] for key in fields if key in data}
        )
    except PydanticValidationError as e:
        raise _first_failure(e) from e
