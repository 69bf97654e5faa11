"""Application wiring for the sponsor ledger."""
from __future__ import annotations

import logging
from functools import lru_cache

from ... import app_context
from ..sponsors import (
    AccountResolver,
    InMemoryAccountDirectory,
    InMemorySponsorStore,
    SponsorAuditEvent,
    SponsorEventLogger,
    SponsorService,
)
from ..sponsors.commands import SponsorCommandDispatcher
from ..sponsors.config import SponsorConfig
from ..sponsors.repository import PostgresAccountDirectory, PostgresSponsorRepository


logger = logging.getLogger("sponsors")


class LoggingSponsorEventLogger(SponsorEventLogger):
    """Event logger forwarding sponsor audit events to logging."""

    def log(self, event: SponsorAuditEvent) -> None:
        logger.info(
            "Sponsor event %s account=%s tier=%s expiry=%s actor=%s metadata=%s",
            event.event_type.value,
            event.account_id,
            event.tier,
            event.expiry_date.isoformat() if event.expiry_date else "permanent",
            event.actor_id,
            event.metadata,
        )


def build_sponsor_service(config: SponsorConfig) -> SponsorService:
    if config.store_backend == "memory":
        store = InMemorySponsorStore()
    else:
        store = PostgresSponsorRepository(app_context.get_pool)
    return SponsorService(
        store=store,
        catalog=config.tier_catalog,
        event_logger=LoggingSponsorEventLogger(),
    )


def build_account_resolver(config: SponsorConfig) -> AccountResolver:
    if config.store_backend == "memory":
        return AccountResolver(InMemoryAccountDirectory(dict(config.memory_accounts)))
    return AccountResolver(PostgresAccountDirectory(app_context.get_pool))


@lru_cache(maxsize=1)
def get_sponsor_service() -> SponsorService:
    return build_sponsor_service(app_context.get_sponsor_config())


@lru_cache(maxsize=1)
def get_account_resolver() -> AccountResolver:
    return build_account_resolver(app_context.get_sponsor_config())


def get_command_dispatcher() -> SponsorCommandDispatcher:
    return SponsorCommandDispatcher(get_sponsor_service(), get_account_resolver())


def reset_sponsor_services() -> None:
    get_sponsor_service.cache_clear()
    get_account_resolver.cache_clear()


__all__ = [
    "LoggingSponsorEventLogger",
    "build_account_resolver",
    "build_sponsor_service",
    "get_account_resolver",
    "get_command_dispatcher",
    "get_sponsor_service",
    "reset_sponsor_services",
]
