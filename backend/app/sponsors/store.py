"""Persistence protocol for sponsor records and an in-memory implementation."""
from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional, Protocol, Sequence
from uuid import UUID

from .models import SponsorRecord


class SponsorStore(Protocol):
    """Durable keyed store for sponsor records.

    Implementations must raise on persistence faults and reserve ``None`` /
    ``False`` for "not found".
    """

    async def upsert(
        self,
        account_id: UUID,
        tier: str,
        expiry_date: Optional[datetime],
    ) -> SponsorRecord:
        ...

    async def delete(self, account_id: UUID) -> bool:
        ...

    async def get(self, account_id: UUID) -> Optional[SponsorRecord]:
        ...

    async def list_all(self) -> Sequence[SponsorRecord]:
        ...


class InMemorySponsorStore:
    """Simple in-memory store suitable for tests and local development.

    Records keep the position of their first grant across later updates.
    """

    def __init__(self) -> None:
        self._records: Dict[UUID, SponsorRecord] = {}

    async def upsert(
        self,
        account_id: UUID,
        tier: str,
        expiry_date: Optional[datetime],
    ) -> SponsorRecord:
        record = SponsorRecord(account_id=account_id, tier=tier, expiry_date=expiry_date)
        self._records[account_id] = record
        return record

    async def delete(self, account_id: UUID) -> bool:
        return self._records.pop(account_id, None) is not None

    async def get(self, account_id: UUID) -> Optional[SponsorRecord]:
        return self._records.get(account_id)

    async def list_all(self) -> Sequence[SponsorRecord]:
        return list(self._records.values())

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


__all__ = ["InMemorySponsorStore", "SponsorStore"]
