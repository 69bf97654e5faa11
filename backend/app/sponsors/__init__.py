"""Sponsor entitlement ledger: tiers, records and administrative operations."""

from .accounts import (
    AccountDirectory,
    AccountId,
    AccountResolver,
    ActorContext,
    AdminFlag,
    InMemoryAccountDirectory,
)
from .catalog import DEFAULT_TIER_CATALOG, TierCatalog, TierDefinition, load_tier_catalog
from .errors import (
    AccountNotResolvable,
    CatalogConfigurationError,
    InteractiveActorRequired,
    InvalidArgumentCount,
    InvalidDuration,
    InvalidTier,
    MissingAdminFlag,
    SponsorError,
    StoreUnavailable,
)
from .models import (
    GrantResult,
    SponsorAuditEvent,
    SponsorAuditEventType,
    SponsorQueryResult,
    SponsorRecord,
    SponsorSnapshot,
)
from .result import Err, Ok, StoreResult
from .service import SponsorEventLogger, SponsorService
from .store import InMemorySponsorStore, SponsorStore

__all__ = [
    "AccountDirectory",
    "AccountId",
    "AccountNotResolvable",
    "AccountResolver",
    "ActorContext",
    "AdminFlag",
    "CatalogConfigurationError",
    "DEFAULT_TIER_CATALOG",
    "Err",
    "GrantResult",
    "InMemoryAccountDirectory",
    "InMemorySponsorStore",
    "InteractiveActorRequired",
    "InvalidArgumentCount",
    "InvalidDuration",
    "InvalidTier",
    "MissingAdminFlag",
    "Ok",
    "SponsorAuditEvent",
    "SponsorAuditEventType",
    "SponsorError",
    "SponsorEventLogger",
    "SponsorQueryResult",
    "SponsorRecord",
    "SponsorService",
    "SponsorSnapshot",
    "SponsorStore",
    "StoreResult",
    "StoreUnavailable",
    "TierCatalog",
    "TierDefinition",
    "load_tier_catalog",
]
