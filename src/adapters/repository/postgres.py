"""
PostgreSQL repository adapter - Implements UserRepository protocol.

This module provides the PostgreSQL implementation of the domain's
repository port using psycopg3 (async pool) with raw SQL.

Security Design
---------------
1. **bcrypt.hashpw()**: Passwords are hashed here, in the data layer,
   with the configured cost factor. Plaintext never reaches the table.

2. **dummy_hash()**: When a username doesn't exist, authenticate()
   still runs bcrypt against a dummy hash made with the same cost factor
   as real hashes, so response time does not reveal whether the account
   exists. The hash is computed once per cost and cached.

3. **bcrypt_input()**: bcrypt reads at most 72 bytes. Passwords are
   UTF-8 encoded and truncated to that limit identically when hashing
   and when checking, so long passwords register and log in normally.

4. **UNIQUE constraints**: The availability check is advisory. Two
   registrations racing past it are settled by the database; the loser
   gets UserAlreadyExists.
"""

import logging
from functools import lru_cache
from pathlib import Path

import bcrypt
from psycopg import errors
from psycopg_pool import AsyncConnectionPool

from src.domain.exceptions import UserAlreadyExists
from src.domain.ports import NewUser, User

logger = logging.getLogger(__name__)

# bcrypt only reads the first 72 bytes; bcrypt >= 5 raises on anything longer.
BCRYPT_MAX_BYTES = 72


def bcrypt_input(password: str) -> bytes:
    """Encode a password and truncate it to bcrypt's 72-byte limit."""
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


@lru_cache
def dummy_hash(cost: int) -> str:
    """Hash of a throwaway password at ``cost``, computed once per cost factor."""
    return bcrypt.hashpw(b"dummy_password_for_timing_safety", bcrypt.gensalt(cost)).decode()


class PostgresUserRepository:
    """
    Implements UserRepository protocol via psycopg3.

    Uses structural subtyping - no explicit inheritance from Protocol.
    All SQL uses parameterized queries for security.
    """

    def __init__(self, pool: AsyncConnectionPool, bcrypt_cost: int = 10) -> None:
        """
        Initialize repository with connection pool.

        Args:
            pool: psycopg3 AsyncConnectionPool for database connections
            bcrypt_cost: bcrypt work factor for new password hashes
        """
        self._pool = pool
        self._bcrypt_cost = bcrypt_cost
        # Warm the dummy hash so the first unknown-user login is not slower
        dummy_hash(bcrypt_cost)

    async def check_availability(self, username: str, email: str) -> list[str]:
        """
        Report which of username/email are already registered.

        Returns:
            '"username" is taken' and/or '"email" is taken', in that order
        """
        sql = """
            SELECT username, email
            FROM users
            WHERE username = %s OR email = %s
        """

        async with self._pool.connection() as conn, conn.cursor() as cursor:
            await cursor.execute(sql, (username, email))
            rows = await cursor.fetchall()

        messages = []
        if any(row[0] == username for row in rows):
            messages.append('"username" is taken')
        if any(row[1] == email for row in rows):
            messages.append('"email" is taken')
        return messages

    async def create_user(self, user: NewUser) -> User:
        """
        Insert a new user with a bcrypt-hashed password.

        Args:
            user: Validated registration record

        Returns:
            The stored user

        Raises:
            UserAlreadyExists: If username or email violates a UNIQUE constraint
        """
        sql = """
            INSERT INTO users (username, email, password_hash, created_at)
            VALUES (%s, %s, %s, NOW())
            RETURNING id, username, email, created_at
        """
        password_hash = bcrypt.hashpw(
            bcrypt_input(user.password), bcrypt.gensalt(rounds=self._bcrypt_cost)
        ).decode()

        try:
            async with self._pool.connection() as conn, conn.cursor() as cursor:
                await cursor.execute(sql, (user.username, user.email, password_hash))
                row = await cursor.fetchone()
                await conn.commit()
        except errors.UniqueViolation as e:
            logger.warning("Duplicate registration for username %s", user.username)
            raise UserAlreadyExists(user.username) from e

        logger.info("Created user %s (id=%s)", row[1], row[0])
        return User(id=row[0], username=row[1], email=row[2], created_at=row[3])

    async def authenticate(self, username: str, password: str) -> bool:
        """
        Verify a username/password pair.

        bcrypt always runs, against a dummy hash when the user is unknown.
        """
        sql = "SELECT password_hash FROM users WHERE username = %s"

        async with self._pool.connection() as conn, conn.cursor() as cursor:
            await cursor.execute(sql, (username,))
            row = await cursor.fetchone()

        stored_hash = row[0] if row is not None else dummy_hash(self._bcrypt_cost)
        password_valid = bcrypt.checkpw(bcrypt_input(password), stored_hash.encode())
        return row is not None and password_valid

    async def find_by_username(self, username: str) -> User | None:
        """Look up a user by exact username."""
        sql = """
            SELECT id, username, email, created_at
            FROM users
            WHERE username = %s
        """

        async with self._pool.connection() as conn, conn.cursor() as cursor:
            await cursor.execute(sql, (username,))
            row = await cursor.fetchone()

        if row is None:
            return None
        return User(id=row[0], username=row[1], email=row[2], created_at=row[3])


async def run_migrations(pool: AsyncConnectionPool) -> None:
    """
    Execute all SQL migration files from the migrations directory.

    Migrations are executed in sorted order (alphabetically by filename).
    Each migration should be idempotent (use IF NOT EXISTS, etc.).

    Args:
        pool: psycopg3 AsyncConnectionPool instance
    """
    # Structure: src/adapters/repository/postgres.py -> migrations/
    migrations_dir = Path(__file__).parent.parent.parent.parent / "migrations"

    if not migrations_dir.exists():
        logger.warning(f"Migrations directory not found: {migrations_dir}")
        return

    sql_files = sorted(migrations_dir.glob("*.sql"))

    if not sql_files:
        logger.info("No migration files found")
        return

    logger.info(f"Running {len(sql_files)} migration(s)")

    for sql_file in sql_files:
        logger.info(f"Executing migration: {sql_file.name}")
        try:
            sql_content = sql_file.read_text()

            async with pool.connection() as conn:
                await conn.execute(sql_content)

            logger.info(f"Migration complete: {sql_file.name}")
        except Exception as e:
            logger.error(f"Migration failed: {sql_file.name} - {e}")
            raise RuntimeError(f"Database migration failed: {sql_file.name}") from e
