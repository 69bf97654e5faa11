"""Account identifiers, display-name resolution and invoking actors."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Iterable, Optional, Protocol
from uuid import UUID

from .errors import AccountNotResolvable, MissingAdminFlag, StoreUnavailable


@dataclass(frozen=True)
class AccountId:
    """Canonical, stable identifier of a player account."""

    value: UUID

    @classmethod
    def parse(cls, raw: str) -> Optional["AccountId"]:
        """Return an ``AccountId`` when ``raw`` is UUID text, otherwise ``None``."""

        try:
            return cls(UUID(raw.strip()))
        except (AttributeError, ValueError):
            return None

    def __str__(self) -> str:
        return str(self.value)


class AdminFlag(str, Enum):
    """Administrative permissions relevant to the sponsor ledger."""

    ADMIN = "admin"
    SPONSOR = "sponsor"


@dataclass(frozen=True)
class ActorContext:
    """The administrator invoking an operation.

    ``session_id`` is the invoker's own account identifier when the call
    originates from an interactive player session, and ``None`` for the
    server console or other automated callers.
    """

    session_id: Optional[UUID] = None
    flags: FrozenSet[AdminFlag] = field(default_factory=frozenset)

    @classmethod
    def console(cls) -> "ActorContext":
        return cls(session_id=None, flags=frozenset(AdminFlag))

    @property
    def is_interactive(self) -> bool:
        return self.session_id is not None

    def has_flag(self, flag: AdminFlag) -> bool:
        return flag in self.flags

    def require_flag(self, flag: AdminFlag) -> None:
        if not self.has_flag(flag):
            raise MissingAdminFlag(flag.value)


class AccountDirectory(Protocol):
    """Looks up players by their current display name."""

    async def find_account_id(self, display_name: str) -> Optional[UUID]:
        ...


class InMemoryAccountDirectory:
    """Directory backed by a dictionary, suitable for tests and local development."""

    def __init__(self, accounts: Optional[Dict[str, UUID]] = None) -> None:
        self._accounts: Dict[str, UUID] = {}
        for name, account_id in (accounts or {}).items():
            self.register(name, account_id)

    def register(self, display_name: str, account_id: UUID) -> None:
        self._accounts[display_name.casefold()] = account_id

    def forget(self, display_name: str) -> None:
        self._accounts.pop(display_name.casefold(), None)

    @property
    def display_names(self) -> Iterable[str]:
        return tuple(self._accounts)

    async def find_account_id(self, display_name: str) -> Optional[UUID]:
        return self._accounts.get(display_name.casefold())


class AccountResolver:
    """Turns administrator input into a canonical :class:`AccountId`."""

    def __init__(self, directory: AccountDirectory) -> None:
        self._directory = directory

    async def resolve(self, identifier: str) -> AccountId:
        candidate = (identifier or "").strip()
        if not candidate:
            raise AccountNotResolvable(identifier or "")

        parsed = AccountId.parse(candidate)
        if parsed is not None:
            return parsed

        try:
            account_id = await self._directory.find_account_id(candidate)
        except Exception as exc:
            raise StoreUnavailable("account lookup", exc) from exc
        if account_id is None:
            raise AccountNotResolvable(candidate)
        return AccountId(account_id)


__all__ = [
    "AccountDirectory",
    "AccountId",
    "AccountResolver",
    "ActorContext",
    "AdminFlag",
    "InMemoryAccountDirectory",
]
