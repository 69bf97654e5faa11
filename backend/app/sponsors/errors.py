"""Exceptions raised by the sponsor ledger."""
from __future__ import annotations

from typing import Any, Dict, Mapping, Optional

from fastapi import HTTPException, status


class CatalogConfigurationError(ValueError):
    """Raised at startup when the tier catalog is inconsistent."""


class SponsorError(Exception):
    """Represents an actionable sponsor ledger failure surfaced to callers."""

    code = "sponsor_error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, detail: Optional[Mapping[str, Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = dict(detail or {})

    @property
    def payload(self) -> Mapping[str, Any]:
        """Serialized representation suitable for JSON responses."""

        base_detail: Dict[str, Any] = {"error": self.code, "message": self.message}
        base_detail.update(self.detail)
        return base_detail

    def to_http_exception(self) -> HTTPException:
        """Convert the domain error into a FastAPI HTTPException."""

        return HTTPException(status_code=self.status_code, detail=dict(self.payload))


class InvalidArgumentCount(SponsorError):
    code = "invalid_argument_count"

    def __init__(self, *, expected: str, received: int) -> None:
        super().__init__(
            f"Wrong number of arguments: expected {expected}, got {received}.",
            detail={"expected": expected, "received": received},
        )


class AccountNotResolvable(SponsorError):
    code = "account_not_resolvable"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, identifier: str) -> None:
        super().__init__(
            f"No player matches '{identifier}' and it is not a valid account id.",
            detail={"identifier": identifier},
        )


class InvalidTier(SponsorError):
    code = "invalid_tier"

    def __init__(self, tier: str) -> None:
        super().__init__(f"Sponsor tier '{tier}' does not exist.", detail={"tier": tier})


class InvalidDuration(SponsorError):
    code = "invalid_duration"

    def __init__(self, value: object) -> None:
        super().__init__(
            f"Duration must be a non-negative whole number of days, got {value!r}.",
            detail={"duration": str(value)},
        )


class InteractiveActorRequired(SponsorError):
    code = "interactive_actor_required"
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, tier: str) -> None:
        super().__init__(
            f"Tier '{tier}' can only be granted by a player with an active session.",
            detail={"tier": tier},
        )


class MissingAdminFlag(SponsorError):
    code = "missing_admin_flag"
    status_code = status.HTTP_403_FORBIDDEN

    def __init__(self, flag: str) -> None:
        super().__init__(f"Admin flag '{flag}' is required.", detail={"required_flag": flag})


class StoreUnavailable(SponsorError):
    code = "store_unavailable"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(
            f"Sponsor store failed during {operation}: {cause}",
            detail={"operation": operation},
        )
        self.operation = operation
        self.cause = cause


__all__ = [
    "AccountNotResolvable",
    "CatalogConfigurationError",
    "InteractiveActorRequired",
    "InvalidArgumentCount",
    "InvalidDuration",
    "InvalidTier",
    "MissingAdminFlag",
    "SponsorError",
    "StoreUnavailable",
]
