from __future__ import annotations

import pytest

from backend.app.sponsors import (
    DEFAULT_TIER_CATALOG,
    CatalogConfigurationError,
    TierCatalog,
    TierDefinition,
    load_tier_catalog,
)


def test_default_catalog_preserves_tier_order():
    assert DEFAULT_TIER_CATALOG.tiers == (
        "soldier",
        "lieutenant",
        "colonel",
        "beatus_individual_tier",
        "ramzesina_individual_tier",
        "kompotik_individual_tier",
    )
    assert DEFAULT_TIER_CATALOG.public_tiers == ("soldier", "lieutenant", "colonel")


def test_private_tiers_are_valid_tiers():
    for tier in DEFAULT_TIER_CATALOG.private_tiers:
        assert DEFAULT_TIER_CATALOG.is_valid_tier(tier)
        assert DEFAULT_TIER_CATALOG.is_private_tier(tier)


def test_membership_checks():
    assert DEFAULT_TIER_CATALOG.is_valid_tier("colonel")
    assert not DEFAULT_TIER_CATALOG.is_private_tier("colonel")
    assert not DEFAULT_TIER_CATALOG.is_valid_tier("general")
    assert not DEFAULT_TIER_CATALOG.is_private_tier("general")
    assert not DEFAULT_TIER_CATALOG.is_valid_tier("Soldier")


def test_private_tier_outside_valid_set_fails_at_construction():
    with pytest.raises(CatalogConfigurationError):
        TierCatalog.from_keys(["soldier"], ["secret_tier"])


def test_duplicate_and_empty_catalogs_are_rejected():
    with pytest.raises(CatalogConfigurationError):
        TierCatalog(definitions=(TierDefinition(key="a"), TierDefinition(key="a")))
    with pytest.raises(CatalogConfigurationError):
        TierCatalog(definitions=())


def test_load_tier_catalog_defaults_without_overrides():
    assert load_tier_catalog({}) is DEFAULT_TIER_CATALOG


def test_load_tier_catalog_from_environment():
    catalog = load_tier_catalog(
        {"SPONSOR_TIERS": "bronze, silver ,gold", "SPONSOR_PRIVATE_TIERS": "gold"}
    )

    assert catalog.tiers == ("bronze", "silver", "gold")
    assert catalog.private_tiers == ("gold",)


def test_load_tier_catalog_keeps_default_private_tiers_that_remain():
    catalog = load_tier_catalog({"SPONSOR_TIERS": "soldier,kompotik_individual_tier"})

    assert catalog.private_tiers == ("kompotik_individual_tier",)
    assert catalog.get("soldier").description == "Soldier sponsor tier"


def test_load_tier_catalog_rejects_unknown_private_tier():
    with pytest.raises(CatalogConfigurationError):
        load_tier_catalog({"SPONSOR_TIERS": "bronze", "SPONSOR_PRIVATE_TIERS": "platinum"})
