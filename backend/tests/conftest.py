from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import List
from uuid import UUID

import pytest

from backend.app.sponsors import (
    DEFAULT_TIER_CATALOG,
    AccountResolver,
    InMemoryAccountDirectory,
    InMemorySponsorStore,
    SponsorAuditEvent,
    SponsorService,
)

ALICE_ID = UUID("6f1c2f4e-58c0-4b7e-9d43-3f0d1a2b9c11")
BOB_ID = UUID("0b8f4c3a-2d7e-4f19-8a55-7c6e1d2f3a44")
ADMIN_ID = UUID("c3d2e1f0-1a2b-4c3d-8e9f-0a1b2c3d4e5f")


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


class RecordingEventLogger:
    def __init__(self) -> None:
        self.events: List[SponsorAuditEvent] = []

    def log(self, event: SponsorAuditEvent) -> None:
        self.events.append(event)


class FailingSponsorStore:
    def __init__(self, error: Exception) -> None:
        self.error = error
        self.calls: List[str] = []

    async def upsert(self, account_id, tier, expiry_date):
        self.calls.append("upsert")
        raise self.error

    async def delete(self, account_id):
        self.calls.append("delete")
        raise self.error

    async def get(self, account_id):
        self.calls.append("get")
        raise self.error

    async def list_all(self):
        self.calls.append("list_all")
        raise self.error


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2024, 8, 1, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def store() -> InMemorySponsorStore:
    return InMemorySponsorStore()


@pytest.fixture
def event_logger() -> RecordingEventLogger:
    return RecordingEventLogger()


@pytest.fixture
def sponsor_service(store, event_logger, clock) -> SponsorService:
    return SponsorService(
        store=store,
        catalog=DEFAULT_TIER_CATALOG,
        event_logger=event_logger,
        clock=clock,
    )


@pytest.fixture
def directory() -> InMemoryAccountDirectory:
    return InMemoryAccountDirectory({"Alice": ALICE_ID, "Bob": BOB_ID})


@pytest.fixture
def resolver(directory) -> AccountResolver:
    return AccountResolver(directory)
