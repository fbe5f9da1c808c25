"""
Domain exceptions - Semantic error types for user registration.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .validation import FieldError


class RegistrationError(Exception):
    """Base class for registration domain errors."""

    pass


class RegistrationRejected(RegistrationError):
    """Registration payload failed validation."""

    def __init__(self, errors: list[FieldError]) -> None:
        super().__init__(f"{len(errors)} validation error(s)")
        self.errors = errors


class UserAlreadyExists(RegistrationError):
    """Username or email was claimed by a concurrent registration."""

    pass
