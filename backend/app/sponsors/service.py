"""Service coordinating sponsor grants, revocations and lookups."""
from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Awaitable, Callable, List, Optional, Protocol, TypeVar

from .accounts import AccountId, ActorContext
from .catalog import TierCatalog
from .errors import InteractiveActorRequired, InvalidDuration, InvalidTier, StoreUnavailable
from .models import (
    GrantResult,
    SponsorAuditEvent,
    SponsorAuditEventType,
    SponsorQueryResult,
    SponsorSnapshot,
)
from .result import Err, Ok, StoreResult
from .store import SponsorStore

logger = logging.getLogger("sponsors")

T = TypeVar("T")


class SponsorEventLogger(Protocol):
    """Captures structured sponsor audit events."""

    def log(self, event: SponsorAuditEvent) -> None:
        ...


def _require_account_id(account_id: AccountId) -> AccountId:
    if not isinstance(account_id, AccountId):
        raise TypeError(f"account_id must be a resolved AccountId, got {type(account_id).__name__}")
    return account_id


def compute_expiry(now: datetime, duration_days: Optional[int]) -> Optional[datetime]:
    """Return the expiry for a grant made at ``now`` lasting ``duration_days``."""

    if duration_days is None:
        return None
    if isinstance(duration_days, bool) or not isinstance(duration_days, int) or duration_days < 0:
        raise InvalidDuration(duration_days)
    try:
        return now + timedelta(days=duration_days)
    except OverflowError as exc:
        raise InvalidDuration(duration_days) from exc


class SponsorService:
    """Operation surface over the sponsor store.

    Every operation takes an already resolved :class:`AccountId`; display
    names are resolved by :class:`~.accounts.AccountResolver` before they
    reach this class.
    """

    def __init__(
        self,
        store: SponsorStore,
        catalog: TierCatalog,
        event_logger: SponsorEventLogger,
        *,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self._store = store
        self._catalog = catalog
        self._event_logger = event_logger
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    @property
    def catalog(self) -> TierCatalog:
        return self._catalog

    async def grant(
        self,
        account_id: AccountId,
        tier: str,
        duration_days: Optional[int] = None,
        *,
        actor: ActorContext,
    ) -> GrantResult:
        """Create or replace the sponsor record for ``account_id``."""

        account_id = _require_account_id(account_id)
        if not self._catalog.is_valid_tier(tier):
            raise InvalidTier(tier)

        now = self._clock()
        expiry_date = compute_expiry(now, duration_days)

        disclosed_session_id = None
        if self._catalog.is_private_tier(tier):
            if not actor.is_interactive:
                raise InteractiveActorRequired(tier)
            disclosed_session_id = actor.session_id

        record = self._unwrap(
            "grant",
            await self._call_store(lambda: self._store.upsert(account_id.value, tier, expiry_date)),
        )
        if disclosed_session_id is not None:
            logger.info(
                "Private tier %s granted to %s; disclosed session %s to invoker",
                tier,
                account_id,
                disclosed_session_id,
            )

        self._event_logger.log(
            SponsorAuditEvent(
                event_type=SponsorAuditEventType.GRANTED,
                account_id=record.account_id,
                tier=record.tier,
                expiry_date=record.expiry_date,
                actor_id=actor.session_id,
                occurred_at=now,
            )
        )
        return GrantResult(
            sponsor=SponsorSnapshot.evaluate(record, self._catalog, now),
            disclosed_session_id=disclosed_session_id,
        )

    async def revoke(self, account_id: AccountId, *, actor: Optional[ActorContext] = None) -> None:
        """Delete the sponsor record; revoking a non-sponsor is a no-op."""

        account_id = _require_account_id(account_id)
        removed = self._unwrap(
            "revoke",
            await self._call_store(lambda: self._store.delete(account_id.value)),
        )
        if not removed:
            logger.debug("Revoke for %s found no sponsor record", account_id)
            return

        self._event_logger.log(
            SponsorAuditEvent(
                event_type=SponsorAuditEventType.REVOKED,
                account_id=account_id.value,
                actor_id=actor.session_id if actor else None,
                occurred_at=self._clock(),
            )
        )

    async def query(self, account_id: AccountId) -> SponsorQueryResult:
        """Return the sponsor flag and record for ``account_id``."""

        account_id = _require_account_id(account_id)
        record = self._unwrap(
            "query",
            await self._call_store(lambda: self._store.get(account_id.value)),
        )
        if record is None:
            return SponsorQueryResult(is_sponsor=False, sponsor=None)
        return SponsorQueryResult(
            is_sponsor=True,
            sponsor=SponsorSnapshot.evaluate(record, self._catalog, self._clock()),
        )

    async def enumerate(self) -> List[SponsorSnapshot]:
        """Return every sponsor record, expired ones included."""

        records = self._unwrap(
            "enumerate",
            await self._call_store(self._store.list_all),
        )
        now = self._clock()
        return [SponsorSnapshot.evaluate(record, self._catalog, now) for record in records]

    async def _call_store(self, call: Callable[[], Awaitable[T]]) -> StoreResult[T]:
        try:
            return Ok(await call())
        except Exception as exc:
            return Err(kind="store_unavailable", cause=exc)

    def _unwrap(self, operation: str, result: StoreResult[T]) -> T:
        if isinstance(result, Err):
            logger.warning(
                "Sponsor store failed during %s: %s",
                operation,
                result.cause,
                exc_info=result.cause,
            )
            raise StoreUnavailable(operation, result.cause) from result.cause
        return result.value


__all__ = ["SponsorEventLogger", "SponsorService", "compute_expiry"]
