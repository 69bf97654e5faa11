"""Tagged result values returned by store-facing calls."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    kind: str
    cause: BaseException


StoreResult = Union[Ok[T], Err]


__all__ = ["Err", "Ok", "StoreResult"]
