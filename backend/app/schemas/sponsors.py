"""API schemas for sponsor administration endpoints."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from ..sponsors import GrantResult, SponsorQueryResult, SponsorSnapshot, TierCatalog


class SponsorOut(BaseModel):
    account_id: UUID = Field(alias="accountId")
    tier: str
    expiry_date: Optional[datetime] = Field(alias="expiryDate", default=None)
    is_active: bool = Field(alias="isActive")
    tier_recognized: bool = Field(alias="tierRecognized", default=True)
    is_private_tier: bool = Field(alias="isPrivateTier", default=False)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_snapshot(cls, snapshot: SponsorSnapshot) -> "SponsorOut":
        return cls(
            account_id=snapshot.account_id,
            tier=snapshot.tier,
            expiry_date=snapshot.expiry_date,
            is_active=snapshot.is_active,
            tier_recognized=snapshot.tier_recognized,
            is_private_tier=snapshot.is_private_tier,
        )


class GrantSponsorRequest(BaseModel):
    account: str = Field(min_length=1, description="Player display name or account id")
    tier: str
    duration_days: Optional[int] = Field(alias="durationDays", default=None)

    model_config = ConfigDict(populate_by_name=True)


class GrantSponsorResponse(BaseModel):
    sponsor: SponsorOut
    disclosed_session_id: Optional[UUID] = Field(alias="disclosedSessionId", default=None)

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: GrantResult) -> "GrantSponsorResponse":
        return cls(
            sponsor=SponsorOut.from_snapshot(result.sponsor),
            disclosed_session_id=result.disclosed_session_id,
        )


class SponsorStatusResponse(BaseModel):
    is_sponsor: bool = Field(alias="isSponsor")
    sponsor: Optional[SponsorOut] = None

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_result(cls, result: SponsorQueryResult) -> "SponsorStatusResponse":
        return cls(
            is_sponsor=result.is_sponsor,
            sponsor=SponsorOut.from_snapshot(result.sponsor) if result.sponsor else None,
        )


class SponsorListResponse(BaseModel):
    sponsors: List[SponsorOut]
    total: int

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def from_snapshots(cls, snapshots: List[SponsorSnapshot]) -> "SponsorListResponse":
        return cls(
            sponsors=[SponsorOut.from_snapshot(snapshot) for snapshot in snapshots],
            total=len(snapshots),
        )


class TierOut(BaseModel):
    key: str
    description: str = ""
    private: bool = False


class TierListResponse(BaseModel):
    tiers: List[TierOut]

    @classmethod
    def from_catalog(cls, catalog: TierCatalog) -> "TierListResponse":
        return cls(
            tiers=[
                TierOut(key=definition.key, description=definition.description, private=definition.private)
                for definition in catalog.definitions
            ]
        )
