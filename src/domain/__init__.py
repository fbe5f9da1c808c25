"""
Domain layer - Pure business logic with zero framework imports.

This package contains the validation and orchestration logic for user
registration and authentication. It defines its own port interfaces for
infrastructure abstraction, ensuring true hexagonal architecture decoupling.
"""

from .exceptions import RegistrationError, RegistrationRejected, UserAlreadyExists
from .ports import AvailabilityChecker, NewUser, TokenSigner, User, UserRepository
from .users import UserService
from .validation import FieldError, UserValidator

__all__ = [
    "AvailabilityChecker",
    "FieldError",
    "NewUser",
    "RegistrationError",
    "RegistrationRejected",
    "TokenSigner",
    "User",
    "UserAlreadyExists",
    "UserRepository",
    "UserService",
    "UserValidator",
]
