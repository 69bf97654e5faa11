"""Static catalog definitions for sponsor tiers."""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable, Mapping, Optional, Tuple

from .errors import CatalogConfigurationError


@dataclass(frozen=True)
class TierDefinition:
    """Describes a single sponsor tier."""

    key: str
    description: str = ""
    private: bool = False


@dataclass(frozen=True)
class TierCatalog:
    """Ordered, immutable set of tiers that may be granted.

    Private tiers are a subset of the valid tiers; assigning one requires the
    invoking administrator to acknowledge it from an interactive session.
    """

    definitions: Tuple[TierDefinition, ...]

    def __post_init__(self) -> None:
        if not self.definitions:
            raise CatalogConfigurationError("Tier catalog must define at least one tier")
        seen = set()
        for definition in self.definitions:
            key = definition.key
            if not key or key != key.strip():
                raise CatalogConfigurationError(f"Invalid tier key: {key!r}")
            if key in seen:
                raise CatalogConfigurationError(f"Duplicate tier key: {key}")
            seen.add(key)

    @classmethod
    def from_keys(
        cls,
        tiers: Iterable[str],
        private_tiers: Iterable[str] = (),
        *,
        descriptions: Optional[Mapping[str, str]] = None,
    ) -> "TierCatalog":
        """Build a catalog from tag lists, enforcing ``private ⊆ valid``."""

        ordered = tuple(tiers)
        private = tuple(private_tiers)
        unknown = [tag for tag in private if tag not in ordered]
        if unknown:
            raise CatalogConfigurationError(
                "Private tiers must also be valid tiers: " + ", ".join(unknown)
            )
        private_set = set(private)
        descriptions = descriptions or {}
        return cls(
            definitions=tuple(
                TierDefinition(
                    key=tag,
                    description=descriptions.get(tag, ""),
                    private=tag in private_set,
                )
                for tag in ordered
            )
        )

    @property
    def tiers(self) -> Tuple[str, ...]:
        return tuple(definition.key for definition in self.definitions)

    @property
    def private_tiers(self) -> Tuple[str, ...]:
        return tuple(definition.key for definition in self.definitions if definition.private)

    @property
    def public_tiers(self) -> Tuple[str, ...]:
        return tuple(definition.key for definition in self.definitions if not definition.private)

    def get(self, tag: str) -> Optional[TierDefinition]:
        for definition in self.definitions:
            if definition.key == tag:
                return definition
        return None

    def is_valid_tier(self, tag: str) -> bool:
        return self.get(tag) is not None

    def is_private_tier(self, tag: str) -> bool:
        definition = self.get(tag)
        return bool(definition and definition.private)


DEFAULT_TIER_CATALOG = TierCatalog(
    definitions=(
        TierDefinition(key="soldier", description="Soldier sponsor tier"),
        TierDefinition(key="lieutenant", description="Lieutenant sponsor tier"),
        TierDefinition(key="colonel", description="Colonel sponsor tier"),
        TierDefinition(key="beatus_individual_tier", private=True),
        TierDefinition(key="ramzesina_individual_tier", private=True),
        TierDefinition(key="kompotik_individual_tier", private=True),
    )
)


def _split_tags(value: Optional[str]) -> Tuple[str, ...]:
    if not value:
        return ()
    return tuple(tag.strip() for tag in value.split(",") if tag.strip())


def load_tier_catalog(env: Optional[Mapping[str, str]] = None) -> TierCatalog:
    """Load the tier catalog, honouring ``SPONSOR_TIERS`` overrides."""

    env_mapping = os.environ if env is None else env

    tiers = _split_tags(env_mapping.get("SPONSOR_TIERS"))
    private_override = env_mapping.get("SPONSOR_PRIVATE_TIERS")
    if not tiers:
        if private_override is None:
            return DEFAULT_TIER_CATALOG
        tiers = DEFAULT_TIER_CATALOG.tiers

    if private_override is None:
        private = tuple(tag for tag in DEFAULT_TIER_CATALOG.private_tiers if tag in tiers)
    else:
        private = _split_tags(private_override)

    descriptions = {
        definition.key: definition.description
        for definition in DEFAULT_TIER_CATALOG.definitions
    }
    return TierCatalog.from_keys(tiers, private, descriptions=descriptions)


__all__ = [
    "DEFAULT_TIER_CATALOG",
    "TierCatalog",
    "TierDefinition",
    "load_tier_catalog",
]
