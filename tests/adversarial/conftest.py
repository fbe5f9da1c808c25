"""
Shared fixtures for adversarial tests.

Provides common test infrastructure for race condition tests.
"""

import pytest
from psycopg_pool import AsyncConnectionPool

from src.adapters.repository.postgres import PostgresUserRepository

# Module-level marker for all adversarial tests
pytestmark = pytest.mark.adversarial


@pytest.fixture
def repository(pool: AsyncConnectionPool) -> PostgresUserRepository:
    """Create repository instance for each test (low bcrypt cost for speed)."""
    return PostgresUserRepository(pool, bcrypt_cost=4)
