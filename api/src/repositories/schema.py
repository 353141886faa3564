"""
Schema bootstrap.

Compiles ``CREATE TABLE/INDEX IF NOT EXISTS`` statements for the PostgreSQL
dialect from the SQLAlchemy metadata and applies them through asyncpg.
"""

from typing import List

import asyncpg
import structlog
from sqlalchemy.dialects import postgresql
from sqlalchemy.schema import CreateIndex, CreateTable

from api.src.models.db import Base

logger = structlog.get_logger(__name__)


def schema_statements() -> List[str]:
    """
    Render the DDL for every table in dependency order.

    Returns:
        SQL statements, tables before the indexes that reference them
    """
    dialect = postgresql.dialect()
    statements = []

    for table in Base.metadata.sorted_tables:
        statements.append(
            str(CreateTable(table, if_not_exists=True).compile(dialect=dialect)).strip()
        )
        for index in sorted(table.indexes, key=lambda i: i.name):
            statements.append(
                str(CreateIndex(index, if_not_exists=True).compile(dialect=dialect)).strip()
            )

    return statements


async def create_schema(pool: asyncpg.Pool) -> None:
    """
    Create missing tables and indexes in a single transaction.

    Args:
        pool: asyncpg connection pool
    """
    statements = schema_statements()

    async with pool.acquire() as conn:
        async with conn.transaction():
            for statement in statements:
                await conn.execute(statement)

    logger.info(
        "database_schema_ready",
        tables=[table.name for table in Base.metadata.sorted_tables]
    )
