"""
Contact repository for database operations.

Every query is scoped by the owning username, so a contact outside the
caller's ownership chain behaves exactly like a missing one.
"""

import asyncpg
import structlog
from typing import Any, List, Optional, Tuple

from api.src.models.contact import ContactDB

logger = structlog.get_logger(__name__)

CONTACT_COLUMNS = "id, first_name, last_name, email, phone, username"

# contacts.id and addresses.id are SERIAL (int4)
MAX_SERIAL_ID = 2_147_483_647

# LIMIT/OFFSET are bound as int8
MAX_OFFSET = 2**63 - 1


def is_valid_id(value: int) -> bool:
    """Return True if ``value`` can be a SERIAL primary key."""
    return 0 < value <= MAX_SERIAL_ID


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so ``value`` matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def build_search_filter(
    username: str,
    name: Optional[str] = None,
    email: Optional[str] = None,
    phone: Optional[str] = None
) -> Tuple[str, List[Any]]:
    """
    Build the WHERE clause for a contact search.

    Filter kinds are ANDed together. ``name`` matches first_name OR
    last_name, case-insensitively; ``email`` is case-insensitive; ``phone``
    is a plain substring match. Empty filters are ignored.

    Args:
        username: Owner of the contacts
        name: Name substring (optional)
        email: E-mail substring (optional)
        phone: Phone substring (optional)

    Returns:
        Tuple of (where clause without the WHERE keyword, positional params)
    """
    conditions = ["username = $1"]
    params: List[Any] = [username]
    param_count = 2

    if name:
        conditions.append(
            f"(first_name ILIKE ${param_count} OR last_name ILIKE ${param_count})"
        )
        params.append(f"%{escape_like(name)}%")
        param_count += 1

    if email:
        conditions.append(f"email ILIKE ${param_count}")
        params.append(f"%{escape_like(email)}%")
        param_count += 1

    if phone:
        conditions.append(f"phone LIKE ${param_count}")
        params.append(f"%{escape_like(phone)}%")
        param_count += 1

    return " AND ".join(conditions), params


def _row_to_contact(row: asyncpg.Record) -> ContactDB:
    return ContactDB(
        id=row["id"],
        first_name=row["first_name"],
        last_name=row["last_name"],
        email=row["email"],
        phone=row["phone"],
        username=row["username"]
    )


class ContactRepository:
    """Repository for contact database operations."""

    def __init__(self, pool: asyncpg.Pool):
        """
        Initialize contact repository.

        Args:
            pool: asyncpg connection pool
        """
        self.pool = pool

    async def create_contact(
        self,
        username: str,
        first_name: str,
        last_name: str,
        email: Optional[str] = None,
        phone: Optional[str] = None
    ) -> ContactDB:
        """
        Create a new contact for a user.

        Returns:
            Created contact
        """
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO contacts (first_name, last_name, email, phone, username)
                    VALUES ($1, $2, $3, $4, $5)
                    RETURNING {CONTACT_COLUMNS}
                    """,
                    first_name,
                    last_name,
                    email,
                    phone,
                    username
                )

            logger.info("contact_created", contact_id=row["id"], username=username)
            return _row_to_contact(row)

        except Exception as e:
            logger.error("contact_create_failed", error=str(e), username=username)
            raise

    async def get_contact(self, username: str, contact_id: int) -> Optional[ContactDB]:
        """
        Get a contact owned by ``username``.

        Returns:
            Contact or None if missing or owned by someone else
        """
        if not is_valid_id(contact_id):
            return None

        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {CONTACT_COLUMNS}
                    FROM contacts
                    WHERE id = $1 AND username = $2
                    """,
                    contact_id,
                    username
                )

            if not row:
                logger.debug("contact_not_found", contact_id=contact_id, username=username)
                return None

            return _row_to_contact(row)

        except Exception as e:
            logger.error("contact_get_failed", error=str(e), contact_id=contact_id)
            raise

    async def update_contact(
        self,
        username: str,
        contact_id: int,
        first_name: str,
        last_name: str,
        email: Optional[str],
        phone: Optional[str]
    ) -> Optional[ContactDB]:
        """
        Replace all mutable fields of a contact in one statement.

        Returns:
            Updated contact or None if missing or owned by someone else
        """
        if not is_valid_id(contact_id):
            return None

        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE contacts
                    SET first_name = $1, last_name = $2, email = $3, phone = $4
                    WHERE id = $5 AND username = $6
                    RETURNING {CONTACT_COLUMNS}
                    """,
                    first_name,
                    last_name,
                    email,
                    phone,
                    contact_id,
                    username
                )

            if not row:
                logger.debug("contact_not_found", contact_id=contact_id, username=username)
                return None

            logger.info("contact_updated", contact_id=contact_id, username=username)
            return _row_to_contact(row)

        except Exception as e:
            logger.error("contact_update_failed", error=str(e), contact_id=contact_id)
            raise

    async def delete_contact(self, username: str, contact_id: int) -> bool:
        """
        Hard-delete a contact. Its addresses go with it (ON DELETE CASCADE).

        Returns:
            True if deleted, False if not found
        """
        if not is_valid_id(contact_id):
            return False

        try:
            async with self.pool.acquire() as conn:
                result = await conn.execute(
                    """
                    DELETE FROM contacts
                    WHERE id = $1 AND username = $2
                    """,
                    contact_id,
                    username
                )

            deleted = result.split()[-1] == "1"

            if deleted:
                logger.info("contact_deleted", contact_id=contact_id, username=username)
            else:
                logger.debug("contact_not_found", contact_id=contact_id, username=username)

            return deleted

        except Exception as e:
            logger.error("contact_delete_failed", error=str(e), contact_id=contact_id)
            raise

    async def search_contacts(
        self,
        username: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None,
        limit: int = 10,
        offset: int = 0
    ) -> List[ContactDB]:
        """
        Fetch one page of matching contacts, ordered by id.

        An offset past the int8 range cannot match any row and returns an
        empty page without querying.

        Returns:
            List of contacts (possibly empty)
        """
        if offset > MAX_OFFSET:
            return []

        where, params = build_search_filter(username, name=name, email=email, phone=phone)
        limit_param = len(params) + 1
        params.extend([limit, offset])

        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {CONTACT_COLUMNS}
                    FROM contacts
                    WHERE {where}
                    ORDER BY id
                    LIMIT ${limit_param} OFFSET ${limit_param + 1}
                    """,
                    *params
                )

            return [_row_to_contact(row) for row in rows]

        except Exception as e:
            logger.error("contact_search_failed", error=str(e), username=username)
            raise

    async def count_contacts(
        self,
        username: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        phone: Optional[str] = None
    ) -> int:
        """
        Count contacts matching the search filters.

        Returns:
            Total matching contacts
        """
        where, params = build_search_filter(username, name=name, email=email, phone=phone)

        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT COUNT(*) AS count
                    FROM contacts
                    WHERE {where}
                    """,
                    *params
                )

            return row["count"]

        except Exception as e:
            logger.error("contact_count_failed", error=str(e), username=username)
            raise
