"""Domain models for sponsor entitlements."""
from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .catalog import TierCatalog


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def is_active_at(expiry_date: Optional[datetime], now: datetime) -> bool:
    """Return whether a grant expiring at ``expiry_date`` is active at ``now``.

    Permanent grants (no expiry) are always active; timed grants stay active
    until the clock passes their expiry.
    """

    if expiry_date is None:
        return True
    # Inclusive: a grant is still active at its expiry instant, so zero-day grants start active.
    return _as_utc(now) <= _as_utc(expiry_date)


class SponsorRecord(BaseModel):
    """Persisted sponsor entitlement keyed by account."""

    account_id: UUID
    tier: str = Field(min_length=1)
    expiry_date: Optional[datetime] = None

    model_config = ConfigDict(frozen=True)

    @field_validator("expiry_date")
    @classmethod
    def _normalize_expiry(cls, value: Optional[datetime]) -> Optional[datetime]:
        return _as_utc(value)

    @property
    def is_permanent(self) -> bool:
        return self.expiry_date is None

    def is_active_at(self, now: datetime) -> bool:
        return is_active_at(self.expiry_date, now)


class SponsorSnapshot(BaseModel):
    """A sponsor record evaluated against the catalog and clock at read time."""

    account_id: UUID
    tier: str
    expiry_date: Optional[datetime] = None
    is_active: bool
    tier_recognized: bool = True
    is_private_tier: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def evaluate(cls, record: SponsorRecord, catalog: TierCatalog, now: datetime) -> "SponsorSnapshot":
        return cls(
            account_id=record.account_id,
            tier=record.tier,
            expiry_date=record.expiry_date,
            is_active=record.is_active_at(now),
            tier_recognized=catalog.is_valid_tier(record.tier),
            is_private_tier=catalog.is_private_tier(record.tier),
        )

    @property
    def is_permanent(self) -> bool:
        return self.expiry_date is None


class GrantResult(BaseModel):
    """Outcome of a grant, including the private-tier acknowledgment."""

    sponsor: SponsorSnapshot
    disclosed_session_id: Optional[UUID] = None

    model_config = ConfigDict(frozen=True)


class SponsorQueryResult(BaseModel):
    """Sponsor flag for an account plus its record, when one exists."""

    is_sponsor: bool
    sponsor: Optional[SponsorSnapshot] = None

    model_config = ConfigDict(frozen=True)


class SponsorAuditEventType(str, Enum):
    """Audit event categories emitted by the sponsor ledger."""

    GRANTED = "sponsor_granted"
    REVOKED = "sponsor_revoked"


class SponsorAuditEvent(BaseModel):
    """Structured audit event describing a ledger write."""

    event_type: SponsorAuditEventType
    account_id: UUID
    tier: Optional[str] = None
    expiry_date: Optional[datetime] = None
    actor_id: Optional[UUID] = None
    metadata: Dict[str, str] = Field(default_factory=dict)
    occurred_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(frozen=True)


__all__ = [
    "GrantResult",
    "SponsorAuditEvent",
    "SponsorAuditEventType",
    "SponsorQueryResult",
    "SponsorRecord",
    "SponsorSnapshot",
    "is_active_at",
]
