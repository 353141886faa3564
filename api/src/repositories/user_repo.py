"""
User repository for database operations.

Provides async CRUD operations for users using asyncpg with PostgreSQL.
"""

import asyncpg
import structlog
from typing import Optional

from api.src.models.user import UserDB

logger = structlog.get_logger(__name__)

USER_COLUMNS = "username, password, name, token"


def _row_to_user(row: asyncpg.Record) -> UserDB:
    return UserDB(
        username=row["username"],
        password=row["password"],
        name=row["name"],
        token=row["token"]
    )


class UserRepository:
    """Repository for user database operations."""

    def __init__(self, pool: asyncpg.Pool):
        """
        Initialize user repository.

        Args:
            pool: asyncpg connection pool
        """
        self.pool = pool

    async def create_user(self, username: str, password_hash: str, name: str) -> UserDB:
        """
        Create a new user.

        Args:
            username: Username (primary key)
            password_hash: Hashed password
            name: Display name

        Returns:
            Created user

        Raises:
            ValueError: If username already exists
            asyncpg.PostgresError: On database error
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO users (username, password, name)
                    VALUES ($1, $2, $3)
                    RETURNING {USER_COLUMNS}
                    """,
                    username,
                    password_hash,
                    name
                )

            logger.info("user_created", username=username)
            return _row_to_user(row)

        except asyncpg.UniqueViolationError:
            logger.warning("username_already_exists", username=username)
            raise ValueError(f"Username '{username}' already exists")
        except Exception as e:
            logger.error("user_create_failed", error=str(e), username=username)
            raise

    async def get_user_by_username(self, username: str) -> Optional[UserDB]:
        """
        Get user by username.

        Args:
            username: Username

        Returns:
            User or None if not found
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {USER_COLUMNS}
                    FROM users
                    WHERE username = $1
                    """,
                    username
                )

            if not row:
                logger.debug("user_not_found", username=username)
                return None

            return _row_to_user(row)

        except Exception as e:
            logger.error("user_get_by_username_failed", error=str(e), username=username)
            raise

    async def get_user_by_token(self, token: str) -> Optional[UserDB]:
        """
        Get the user holding an API token.

        Args:
            token: API token

        Returns:
            User or None if no user holds the token
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {USER_COLUMNS}
                    FROM users
                    WHERE token = $1
                    """,
                    token
                )

            return _row_to_user(row) if row else None

        except Exception as e:
            logger.error("user_get_by_token_failed", error=str(e))
            raise

    async def update_user(
        self,
        username: str,
        name: Optional[str] = None,
        password_hash: Optional[str] = None
    ) -> Optional[UserDB]:
        """
        Update profile fields. Fields left as None are not changed.

        Args:
            username: Username
            name: New display name (optional)
            password_hash: New password hash (optional)

        Returns:
            Updated user or None if not found
        """
        updates = []
        params = []
        param_count = 1

        if name is not None:
            updates.append(f"name = ${param_count}")
            params.append(name)
            param_count += 1

        if password_hash is not None:
            updates.append(f"password = ${param_count}")
            params.append(password_hash)
            param_count += 1

        if not updates:
            return await self.get_user_by_username(username)

        params.append(username)

        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE users
                    SET {', '.join(updates)}
                    WHERE username = ${param_count}
                    RETURNING {USER_COLUMNS}
                    """,
                    *params
                )

            if not row:
                logger.debug("user_not_found", username=username)
                return None

            logger.info(
                "user_updated",
                username=username,
                name_changed=name is not None,
                password_changed=password_hash is not None
            )
            return _row_to_user(row)

        except Exception as e:
            logger.error("user_update_failed", error=str(e), username=username)
            raise

    async def set_token(self, username: str, token: Optional[str]) -> Optional[UserDB]:
        """
        Store or clear (token=None) the user's API token.

        Args:
            username: Username
            token: New token, or None to revoke

        Returns:
            Updated user or None if not found
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE users
                    SET token = $1
                    WHERE username = $2
                    RETURNING {USER_COLUMNS}
                    """,
                    token,
                    username
                )

            if not row:
                logger.debug("user_not_found", username=username)
                return None

            logger.info("user_token_updated", username=username, revoked=token is None)
            return _row_to_user(row)

        except Exception as e:
            logger.error("user_set_token_failed", error=str(e), username=username)
            raise
