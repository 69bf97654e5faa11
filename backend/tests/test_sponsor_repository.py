import asyncio
from datetime import datetime, timezone
from typing import Any, List, Tuple

import pytest

from backend.app.sponsors import (
    DEFAULT_TIER_CATALOG,
    AccountId,
    ActorContext,
    SponsorService,
    StoreUnavailable,
)
from backend.app.sponsors.repository import (
    DELETE_SQL,
    FIND_ACCOUNT_SQL,
    SELECT_ALL_SQL,
    SELECT_ONE_SQL,
    UPSERT_SQL,
    PostgresAccountDirectory,
    PostgresSponsorRepository,
)

from conftest import ALICE_ID, BOB_ID, RecordingEventLogger


class FakePool:
    def __init__(self, *, row=None, rows=None, status="DELETE 0", value=None):
        self.row = row
        self.rows = rows or []
        self.status = status
        self.value = value
        self.calls: List[Tuple[str, str, Tuple[Any, ...]]] = []

    async def fetchrow(self, query, *args):
        self.calls.append(("fetchrow", query, args))
        return self.row

    async def fetch(self, query, *args):
        self.calls.append(("fetch", query, args))
        return self.rows

    async def execute(self, query, *args):
        self.calls.append(("execute", query, args))
        return self.status

    async def fetchval(self, query, *args):
        self.calls.append(("fetchval", query, args))
        return self.value


def test_upsert_writes_and_returns_record():
    expiry = datetime(2024, 9, 1, tzinfo=timezone.utc)
    pool = FakePool(row={"account_id": ALICE_ID, "tier": "soldier", "expiry_date": expiry})
    repository = PostgresSponsorRepository(pool)

    record = asyncio.run(repository.upsert(ALICE_ID, "soldier", expiry))

    assert record.account_id == ALICE_ID
    assert record.expiry_date == expiry
    assert pool.calls == [("fetchrow", UPSERT_SQL, (ALICE_ID, "soldier", expiry))]


def test_delete_reports_whether_a_row_was_removed():
    assert asyncio.run(PostgresSponsorRepository(FakePool(status="DELETE 1")).delete(ALICE_ID)) is True
    assert asyncio.run(PostgresSponsorRepository(FakePool(status="DELETE 0")).delete(ALICE_ID)) is False


def test_get_returns_none_for_missing_row():
    pool = FakePool(row=None)

    assert asyncio.run(PostgresSponsorRepository(pool).get(BOB_ID)) is None
    assert pool.calls[0][1] == SELECT_ONE_SQL


def test_list_all_preserves_row_order():
    pool = FakePool(
        rows=[
            {"account_id": BOB_ID, "tier": "colonel", "expiry_date": None},
            {"account_id": ALICE_ID, "tier": "soldier", "expiry_date": None},
        ]
    )

    records = asyncio.run(PostgresSponsorRepository(pool).list_all())

    assert [record.account_id for record in records] == [BOB_ID, ALICE_ID]
    assert pool.calls[0][1] == SELECT_ALL_SQL


def test_repository_accepts_pool_factory():
    pool = FakePool(status="DELETE 1")
    repository = PostgresSponsorRepository(lambda: pool)

    asyncio.run(repository.delete(ALICE_ID))

    assert pool.calls == [("execute", DELETE_SQL, (ALICE_ID,))]


def test_account_directory_looks_up_display_name():
    pool = FakePool(value=ALICE_ID)

    found = asyncio.run(PostgresAccountDirectory(pool).find_account_id("Alice"))

    assert found == ALICE_ID
    assert pool.calls == [("fetchval", FIND_ACCOUNT_SQL, ("Alice",))]


def test_service_over_repository_surfaces_pool_errors(clock):
    class BrokenPool(FakePool):
        async def fetchrow(self, query, *args):
            raise OSError("connection reset")

    service = SponsorService(
        store=PostgresSponsorRepository(BrokenPool()),
        catalog=DEFAULT_TIER_CATALOG,
        event_logger=RecordingEventLogger(),
        clock=clock,
    )

    with pytest.raises(StoreUnavailable) as excinfo:
        asyncio.run(service.grant(AccountId(ALICE_ID), "soldier", actor=ActorContext.console()))

    assert isinstance(excinfo.value.cause, OSError)
