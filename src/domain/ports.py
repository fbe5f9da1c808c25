"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the plain records that cross them.
Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol


@dataclass(frozen=True)
class NewUser:
    """User record submitted for creation (password in plaintext)."""

    username: str
    password: str
    email: str


@dataclass(frozen=True)
class User:
    """Persisted user. The password hash never leaves the repository."""

    id: int
    username: str
    email: str
    created_at: datetime


class AvailabilityChecker(Protocol):
    """Port interface for username/email availability lookups."""

    async def check_availability(self, username: str, email: str) -> list[str]:
        """
        Report conflicts with already registered users.

        Args:
            username: Candidate username (format already validated)
            email: Candidate email (format already validated)

        Returns:
            One message per conflicting field, e.g. '"username" is taken'.
            An empty list means both values are free.
        """
        ...


class UserRepository(AvailabilityChecker, Protocol):
    """Port interface for user persistence."""

    async def create_user(self, user: NewUser) -> User:
        """
        Persist a new user, hashing the password.

        Raises:
            UserAlreadyExists: If username or email is already stored
        """
        ...

    async def authenticate(self, username: str, password: str) -> bool:
        """Return True when the username exists and the password matches."""
        ...

    async def find_by_username(self, username: str) -> User | None:
        """Look up a user by exact username."""
        ...


class TokenSigner(Protocol):
    """Port interface for session token issuance."""

    def sign(self, subject: str) -> str:
        """Return a signed token identifying ``subject``."""
        ...
