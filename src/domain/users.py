"""
User domain service - registration and authentication.

This module orchestrates the two user flows:

Registration
============
    payload -> UserValidator.validate_body -> errors?  -> RegistrationRejected
                                           -> none     -> repository.create_user

Authentication
==============
    (username, password) -> repository.authenticate -> True  -> signed token
                                                    -> False -> None

Password hashing and verification are delegated to the repository;
the service never sees a hash.
"""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .exceptions import RegistrationRejected
from .ports import NewUser, TokenSigner, User, UserRepository
from .validation import UserValidator

logger = logging.getLogger(__name__)


@dataclass
class UserService:
    """
    Domain service for user registration and login.

    Collaborators are injected; none of them is looked up globally.
    """

    repository: UserRepository
    validator: UserValidator
    token_signer: TokenSigner

    async def register(self, payload: Mapping[str, Any]) -> User:
        """
        Validate a registration payload and persist the new user.

        Args:
            payload: Submitted fields (username, password, email)

        Returns:
            The stored user

        Raises:
            RegistrationRejected: If the payload has validation errors
            UserAlreadyExists: If a concurrent registration won the race
        """
        errors = await self.validator.validate_body(payload)
        if errors:
            logger.info("Registration rejected with %d error(s)", len(errors))
            raise RegistrationRejected(errors)

        record = NewUser(
            username=payload["username"],
            password=payload["password"],
            email=payload["email"],
        )
        return await self.repository.create_user(record)

    async def authenticate(self, username: str, password: str) -> str | None:
        """
        Check credentials and issue a session token.

        Returns:
            A signed token embedding the username, or None when the
            credentials do not match
        """
        if not await self.repository.authenticate(username, password):
            logger.info("Failed login for username %s", username)
            return None
        return self.token_signer.sign(username)
