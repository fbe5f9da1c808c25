"""
Registration payload validation.

Runs the format checks for each known field, reports unexpected keys,
and, when the username and email are well formed, asks the injected
availability checker whether either is already registered. All findings
are merged into one error list; an empty list means the payload is valid.
"""

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from email_validator import EmailNotValidError, validate_email

from .ports import AvailabilityChecker

KNOWN_FIELDS = ("username", "password", "email")

USERNAME_MIN_LENGTH = 3
USERNAME_MAX_LENGTH = 30
PASSWORD_MIN_LENGTH = 6

_ALPHANUMERIC = re.compile(r"[A-Za-z0-9]+")
_QUOTED_FIELD = re.compile(r'"(\w+)"')


@dataclass(frozen=True)
class FieldError:
    """A single validation finding. ``path`` is None for payload-level errors."""

    message: str
    path: str | None = None

    def to_dict(self) -> dict[str, str]:
        if self.path is None:
            return {"message": self.message}
        return {"path": self.path, "message": self.message}


def check_username(value: Any) -> str | None:
    """Return an error message for an invalid username, else None."""
    if not isinstance(value, str):
        return '"username" must be a string'
    if len(value) < USERNAME_MIN_LENGTH:
        return f'"username" length must be at least {USERNAME_MIN_LENGTH} characters long'
    if len(value) > USERNAME_MAX_LENGTH:
        return (
            f'"username" length must be less than or equal to '
            f"{USERNAME_MAX_LENGTH} characters long"
        )
    if not _ALPHANUMERIC.fullmatch(value):
        return '"username" must only contain alpha-numeric characters'
    return None


def check_password(value: Any) -> str | None:
    """Return an error message for an invalid password, else None."""
    if not isinstance(value, str):
        return '"password" must be a string'
    if len(value) < PASSWORD_MIN_LENGTH:
        return f'"password" length must be at least {PASSWORD_MIN_LENGTH} characters long'
    return None


def check_email(value: Any) -> str | None:
    """Return an error message for an invalid email, else None."""
    if not isinstance(value, str):
        return '"email" must be a string'
    if not value:
        return '"email" is not allowed to be empty'
    # test_environment admits .test domains and a bare "test"; the dot check rejects the latter.
    try:
        result = validate_email(value, check_deliverability=False, test_environment=True)
    except EmailNotValidError:
        return '"email" must be a valid email'
    if "." not in result.ascii_domain:
        return '"email" must be a valid email'
    return None


_FIELD_CHECKS = {
    "username": check_username,
    "password": check_password,
    "email": check_email,
}


def _path_for(message: str) -> str | None:
    """Pick the known field a free-text message refers to, if any."""
    for name in _QUOTED_FIELD.findall(message):
        if name in KNOWN_FIELDS:
            return name
    return None


@dataclass
class UserValidator:
    """
    Validates registration payloads.

    The availability checker is injected so tests and alternative
    stores can substitute their own lookup.
    """

    availability: AvailabilityChecker

    def check_format(self, payload: Mapping[str, Any]) -> list[FieldError]:
        """
        Run the synchronous checks only.

        Produces at most one error per known field, plus a single
        aggregate error when the payload carries unexpected keys.
        """
        errors: list[FieldError] = []
        for field, check in _FIELD_CHECKS.items():
            if field not in payload:
                errors.append(FieldError(f'"{field}" is required', path=field))
                continue
            message = check(payload[field])
            if message is not None:
                errors.append(FieldError(message, path=field))

        unknown = [key for key in payload if key not in KNOWN_FIELDS]
        if unknown:
            names = ", ".join(f'"{key}"' for key in unknown)
            errors.append(FieldError(f"unexpected field(s) present: {names}"))
        return errors

    async def validate_body(self, payload: Mapping[str, Any]) -> list[FieldError]:
        """
        Validate a registration payload.

        Format errors come first. The availability lookup runs only when
        both username and email are well formed, so malformed input never
        produces "taken" noise. Errors raised by the lookup propagate.

        Args:
            payload: Submitted fields; not modified

        Returns:
            Every applicable error; empty when the payload is valid
        """
        errors = self.check_format(payload)

        failed = {error.path for error in errors}
        if "username" in failed or "email" in failed:
            return errors

        conflicts = await self.availability.check_availability(
            payload["username"], payload["email"]
        )
        errors.extend(FieldError(message, path=_path_for(message)) for message in conflicts)
        return errors
