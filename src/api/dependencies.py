"""
FastAPI dependencies - Dependency injection factories.

This module provides Depends() factories for injecting
domain services and infrastructure adapters into routes.
"""

from fastapi import Request
from psycopg_pool import AsyncConnectionPool

from src.adapters.repository.postgres import PostgresUserRepository
from src.adapters.tokens.jwt import JwtTokenSigner
from src.config.settings import get_settings
from src.domain.users import UserService
from src.domain.validation import UserValidator


def get_pool(request: Request) -> AsyncConnectionPool:
    """
    Get connection pool from app state.

    The pool is created during app lifespan startup and stored in app.state.
    """
    return request.app.state.pool


def get_repository(request: Request) -> PostgresUserRepository:
    """Create repository with connection pool from app state."""
    pool = get_pool(request)
    return PostgresUserRepository(pool, bcrypt_cost=get_settings().bcrypt_cost)


def get_token_signer() -> JwtTokenSigner:
    """Create JWT signer from settings."""
    settings = get_settings()
    return JwtTokenSigner(settings.token_secret, settings.token_algorithm)


def get_user_service(request: Request) -> UserService:
    """
    Create user service with injected dependencies.

    The repository doubles as the validator's availability checker.
    """
    repository = get_repository(request)
    return UserService(
        repository=repository,
        validator=UserValidator(availability=repository),
        token_signer=get_token_signer(),
    )
