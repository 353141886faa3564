"""
Address repository for database operations.

Queries are scoped by contact id; callers verify the contact belongs to
the requesting user before reaching this layer.
"""

import asyncpg
import structlog
from typing import List, Optional

from api.src.models.address import AddressDB
from api.src.repositories.contact_repo import is_valid_id

logger = structlog.get_logger(__name__)

ADDRESS_COLUMNS = "id, street, city, province, country, postal_code, contact_id"


def _row_to_address(row: asyncpg.Record) -> AddressDB:
    return AddressDB(
        id=row["id"],
        street=row["street"],
        city=row["city"],
        province=row["province"],
        country=row["country"],
        postal_code=row["postal_code"],
        contact_id=row["contact_id"]
    )


class AddressRepository:
    """Repository for address database operations."""

    def __init__(self, pool: asyncpg.Pool):
        self.pool = pool

    async def create_address(
        self,
        contact_id: int,
        street: str,
        city: str,
        province: str,
        country: str,
        postal_code: str
    ) -> AddressDB:
        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    INSERT INTO addresses (street, city, province, country, postal_code, contact_id)
                    VALUES ($1, $2, $3, $4, $5, $6)
                    RETURNING {ADDRESS_COLUMNS}
                    """,
                    street,
                    city,
                    province,
                    country,
                    postal_code,
                    contact_id
                )

            logger.info("address_created", address_id=row["id"], contact_id=contact_id)
            return _row_to_address(row)

        except Exception as e:
            logger.error("address_create_failed", error=str(e), contact_id=contact_id)
            raise

    async def get_address(self, contact_id: int, address_id: int) -> Optional[AddressDB]:
        if not is_valid_id(address_id):
            return None

        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    SELECT {ADDRESS_COLUMNS}
                    FROM addresses
                    WHERE id = $1 AND contact_id = $2
                    """,
                    address_id,
                    contact_id
                )

            if not row:
                logger.debug("address_not_found", address_id=address_id, contact_id=contact_id)
                return None

            return _row_to_address(row)

        except Exception as e:
            logger.error("address_get_failed", error=str(e), address_id=address_id)
            raise

    async def update_address(
        self,
        contact_id: int,
        address_id: int,
        street: str,
        city: str,
        province: str,
        country: str,
        postal_code: str
    ) -> Optional[AddressDB]:
        """Replace all mutable fields of an address in one statement."""
        if not is_valid_id(address_id):
            return None

        try:
            async with self.pool.acquire() as conn:
                row = await conn.fetchrow(
                    f"""
                    UPDATE addresses
                    SET street = $1, city = $2, province = $3, country = $4, postal_code = $5
                    WHERE id = $6 AND contact_id = $7
                    RETURNING {ADDRESS_COLUMNS}
                    """,
                    street,
                    city,
                    province,
                    country,
                    postal_code,
                    address_id,
                    contact_id
                )

            if not row:
                logger.debug("address_not_found", address_id=address_id, contact_id=contact_id)
                return None

            logger.info("address_updated", address_id=address_id, contact_id=contact_id)
            return _row_to_address(row)

        except Exception as e:
            logger.error("address_update_failed", error=str(e), address_id=address_id)
            raise

    async def delete_address(self, contact_id: int, address_id: int) -> bool:
        if not is_valid_id(address_id):
            return False

        try:
            async with self.pool.acquire() as conn:
                result = await conn.execute(
                    """
                    DELETE FROM addresses
                    WHERE id = $1 AND contact_id = $2
                    """,
                    address_id,
                    contact_id
                )

            deleted = result.split()[-1] == "1"

            if deleted:
                logger.info("address_deleted", address_id=address_id, contact_id=contact_id)
            else:
                logger.debug("address_not_found", address_id=address_id, contact_id=contact_id)

            return deleted

        except Exception as e:
            logger.error("address_delete_failed", error=str(e), address_id=address_id)
            raise

    async def list_addresses(self, contact_id: int) -> List[AddressDB]:
        try:
            async with self.pool.acquire() as conn:
                rows = await conn.fetch(
                    f"""
                    SELECT {ADDRESS_COLUMNS}
                    FROM addresses
                    WHERE contact_id = $1
                    ORDER BY id
                    """,
                    contact_id
                )

            return [_row_to_address(row) for row in rows]

        except Exception as e:
            logger.error("address_list_failed", error=str(e), contact_id=contact_id)
            raise
