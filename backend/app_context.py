"""Shared application context for reusable dependencies."""
from __future__ import annotations

from typing import Any, Callable, Optional

_get_pool: Optional[Callable[[], Any]] = None
_get_current_actor: Optional[Callable[..., Any]] = None
_sponsor_config: Optional[Any] = None


def configure(
    *,
    get_pool: Callable[[], Any],
    get_current_actor: Callable[..., Any],
    sponsor_config: Any,
) -> None:
    """Register application-wide dependencies required by modular routers."""

    global _get_pool
    global _get_current_actor
    global _sponsor_config

    _get_pool = get_pool
    _get_current_actor = get_current_actor
    _sponsor_config = sponsor_config


def reset() -> None:
    global _get_pool
    global _get_current_actor
    global _sponsor_config

    _get_pool = None
    _get_current_actor = None
    _sponsor_config = None


def _require(value: Optional[Any], name: str) -> Any:
    if value is None:
        raise RuntimeError(f"Application context has not been configured yet: {name}")
    return value


def get_pool() -> Any:
    pool_factory = _require(_get_pool, "get_pool")
    return pool_factory()


def get_current_actor(*args: Any, **kwargs: Any) -> Any:
    dependency = _require(_get_current_actor, "get_current_actor")
    return dependency(*args, **kwargs)


def get_sponsor_config() -> Any:
    return _require(_sponsor_config, "sponsor_config")
