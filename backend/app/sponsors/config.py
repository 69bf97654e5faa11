"""Sponsor ledger configuration helpers."""
from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Tuple
from uuid import UUID

from .catalog import TierCatalog, load_tier_catalog

STORE_BACKENDS = {"postgres", "memory"}


@dataclass(frozen=True)
class SponsorConfig:
    """Runtime configuration for the sponsor ledger and its admin surfaces."""

    db_host: str
    db_port: int
    db_name: str
    db_user: str
    db_password: str
    db_connect_timeout: int
    pool_min_size: int
    pool_max_size: int
    command_timeout: float
    store_backend: str
    tier_catalog: TierCatalog
    jwt_secret_key: str
    jwt_exp_minutes: int
    session_cookie_name: str
    log_level: str
    memory_accounts: Tuple[Tuple[str, UUID], ...] = ()

    @property
    def db_config(self) -> Dict[str, Any]:
        return {
            "host": self.db_host,
            "port": self.db_port,
            "database": self.db_name,
            "user": self.db_user,
            "password": self.db_password,
        }


def _to_int(value: Optional[str], *, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected integer value, got {value!r}") from exc


def _to_float(value: Optional[str], *, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Expected float value, got {value!r}") from exc


def _parse_memory_accounts(raw_value: Optional[str]) -> Tuple[Tuple[str, UUID], ...]:
    """Parse ``Name=uuid,Other=uuid`` pairs for the in-memory account directory."""

    accounts = []
    for entry in (raw_value or "").split(","):
        if not entry.strip():
            continue
        name, sep, raw_id = entry.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"SPONSOR_ACCOUNTS entries must look like Name=uuid, got {entry!r}")
        try:
            accounts.append((name.strip(), UUID(raw_id.strip())))
        except ValueError as exc:
            raise ValueError(f"Invalid account id in SPONSOR_ACCOUNTS: {raw_id!r}") from exc
    return tuple(accounts)


def _parse_connect_timeout(raw_value: Optional[str]) -> int:
    timeout = _to_float(raw_value, default=5.0)
    if timeout < 0:
        raise ValueError("DB_CONNECT_TIMEOUT must be non-negative")
    return int(math.ceil(timeout))


def load_sponsor_config(env: Optional[Mapping[str, str]] = None) -> SponsorConfig:
    """Load :class:`SponsorConfig` from environment variables."""

    env_mapping = os.environ if env is None else env

    store_backend = (env_mapping.get("SPONSOR_STORE") or "postgres").strip().lower()
    if store_backend not in STORE_BACKENDS:
        raise ValueError(f"SPONSOR_STORE must be one of {sorted(STORE_BACKENDS)}, got {store_backend!r}")

    pool_min_size = max(1, _to_int(env_mapping.get("SPONSOR_POOL_MIN_SIZE"), default=1))
    pool_max_size = max(pool_min_size, _to_int(env_mapping.get("SPONSOR_POOL_MAX_SIZE"), default=5))

    return SponsorConfig(
        db_host=env_mapping.get("DB_HOST", "127.0.0.1"),
        db_port=_to_int(env_mapping.get("DB_PORT"), default=5432),
        db_name=env_mapping.get("DB_NAME", "sponsors_db"),
        db_user=env_mapping.get("DB_USER", "sponsor_user"),
        db_password=env_mapping.get("DB_PASSWORD", "sponsor_pass"),
        db_connect_timeout=_parse_connect_timeout(env_mapping.get("DB_CONNECT_TIMEOUT")),
        pool_min_size=pool_min_size,
        pool_max_size=pool_max_size,
        command_timeout=max(0.0, _to_float(env_mapping.get("SPONSOR_COMMAND_TIMEOUT"), default=10.0)),
        store_backend=store_backend,
        tier_catalog=load_tier_catalog(env_mapping),
        jwt_secret_key=env_mapping.get("JWT_SECRET_KEY", "dev-secret-change-me"),
        jwt_exp_minutes=_to_int(env_mapping.get("JWT_EXP_MINUTES"), default=60 * 24 * 7),
        session_cookie_name=env_mapping.get("SESSION_COOKIE_NAME", "session"),
        log_level=(env_mapping.get("SPONSOR_LOG_LEVEL") or "INFO").strip().upper(),
        memory_accounts=_parse_memory_accounts(env_mapping.get("SPONSOR_ACCOUNTS")),
    )


__all__ = ["SponsorConfig", "load_sponsor_config"]
