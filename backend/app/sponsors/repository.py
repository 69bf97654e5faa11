"""PostgreSQL persistence for sponsor records and player lookups."""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, List, Mapping, Optional, Union
from uuid import UUID

import asyncpg

from .models import SponsorRecord

LOGGER = logging.getLogger("sponsors.repository")


UPSERT_SQL = """
    INSERT INTO sponsors (account_id, tier, expiry_date)
    VALUES ($1, $2, $3)
    ON CONFLICT (account_id) DO UPDATE SET
        tier = EXCLUDED.tier,
        expiry_date = EXCLUDED.expiry_date,
        updated_at = NOW()
    RETURNING account_id, tier, expiry_date
"""

DELETE_SQL = """
    DELETE FROM sponsors
    WHERE account_id = $1
"""

SELECT_ONE_SQL = """
    SELECT account_id, tier, expiry_date
    FROM sponsors
    WHERE account_id = $1
    LIMIT 1
"""

SELECT_ALL_SQL = """
    SELECT account_id, tier, expiry_date
    FROM sponsors
    ORDER BY created_at, account_id
"""

FIND_ACCOUNT_SQL = """
    SELECT account_id
    FROM player_accounts
    WHERE LOWER(display_name) = LOWER($1)
    LIMIT 1
"""


PoolSource = Union[asyncpg.Pool, Callable[[], asyncpg.Pool]]


def _row_to_record(row: Mapping[str, Any]) -> SponsorRecord:
    return SponsorRecord(
        account_id=row["account_id"],
        tier=row["tier"],
        expiry_date=row["expiry_date"],
    )


def _deleted_rows(status: str) -> int:
    # asyncpg returns the command tag, e.g. "DELETE 1".
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return 0


async def create_sponsor_pool(
    db_config: Mapping[str, Any],
    *,
    min_size: int = 1,
    max_size: int = 5,
    command_timeout: float = 10,
    connect_timeout: float = 5,
) -> asyncpg.Pool:
    return await asyncpg.create_pool(
        min_size=min_size,
        max_size=max_size,
        command_timeout=command_timeout,
        timeout=connect_timeout,
        **db_config,
    )


class _PoolBacked:
    def __init__(self, pool: PoolSource) -> None:
        self._pool_source = pool

    @property
    def _pool(self) -> asyncpg.Pool:
        if callable(self._pool_source):
            return self._pool_source()
        return self._pool_source


class PostgresSponsorRepository(_PoolBacked):
    """Concrete store persisting sponsor records in PostgreSQL."""

    async def upsert(
        self,
        account_id: UUID,
        tier: str,
        expiry_date: Optional[datetime],
    ) -> SponsorRecord:
        row = await self._pool.fetchrow(UPSERT_SQL, account_id, tier, expiry_date)
        if not row:
            raise RuntimeError("Failed to persist sponsor record")
        return _row_to_record(row)

    async def delete(self, account_id: UUID) -> bool:
        status = await self._pool.execute(DELETE_SQL, account_id)
        return _deleted_rows(status) > 0

    async def get(self, account_id: UUID) -> Optional[SponsorRecord]:
        row = await self._pool.fetchrow(SELECT_ONE_SQL, account_id)
        return _row_to_record(row) if row else None

    async def list_all(self) -> List[SponsorRecord]:
        rows = await self._pool.fetch(SELECT_ALL_SQL)
        return [_row_to_record(row) for row in rows or []]


class PostgresAccountDirectory(_PoolBacked):
    """Resolves player display names through the ``player_accounts`` table."""

    async def find_account_id(self, display_name: str) -> Optional[UUID]:
        account_id = await self._pool.fetchval(FIND_ACCOUNT_SQL, display_name)
        if account_id is None:
            LOGGER.debug("No player account named %s", display_name)
        return account_id


__all__ = [
    "PostgresAccountDirectory",
    "PostgresSponsorRepository",
    "create_sponsor_pool",
]
