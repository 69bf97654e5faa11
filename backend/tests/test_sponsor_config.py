import asyncio

import pytest

from backend.app.services.sponsors import build_account_resolver
from backend.app.sponsors import DEFAULT_TIER_CATALOG, AccountId, AccountNotResolvable
from backend.app.sponsors.config import load_sponsor_config

from conftest import ALICE_ID, BOB_ID


def test_defaults_without_environment():
    config = load_sponsor_config({})

    assert config.store_backend == "postgres"
    assert config.db_config == {
        "host": "127.0.0.1",
        "port": 5432,
        "database": "sponsors_db",
        "user": "sponsor_user",
        "password": "sponsor_pass",
    }
    assert config.db_connect_timeout == 5
    assert config.pool_min_size == 1
    assert config.pool_max_size == 5
    assert config.command_timeout == 10.0
    assert config.tier_catalog is DEFAULT_TIER_CATALOG
    assert config.session_cookie_name == "session"
    assert config.log_level == "INFO"
    assert config.memory_accounts == ()


def test_environment_overrides():
    config = load_sponsor_config(
        {
            "SPONSOR_STORE": " Memory ",
            "DB_HOST": "db.internal",
            "DB_PORT": "6543",
            "DB_CONNECT_TIMEOUT": "2.5",
            "SPONSOR_POOL_MIN_SIZE": "4",
            "SPONSOR_POOL_MAX_SIZE": "2",
            "SPONSOR_TIERS": "bronze,silver",
            "SPONSOR_LOG_LEVEL": "debug",
        }
    )

    assert config.store_backend == "memory"
    assert config.db_host == "db.internal"
    assert config.db_port == 6543
    assert config.db_connect_timeout == 3
    assert config.pool_min_size == 4
    assert config.pool_max_size == 4
    assert config.tier_catalog.tiers == ("bronze", "silver")
    assert config.tier_catalog.private_tiers == ()
    assert config.log_level == "DEBUG"


@pytest.mark.parametrize(
    "env",
    [
        {"SPONSOR_STORE": "redis"},
        {"DB_PORT": "five"},
        {"DB_CONNECT_TIMEOUT": "-1"},
        {"SPONSOR_ACCOUNTS": "Alice"},
        {"SPONSOR_ACCOUNTS": "Alice=not-a-uuid"},
    ],
)
def test_invalid_values_are_rejected(env):
    with pytest.raises(ValueError):
        load_sponsor_config(env)


def test_memory_accounts_are_parsed():
    config = load_sponsor_config({"SPONSOR_ACCOUNTS": f" Alice={ALICE_ID}, Bob = {BOB_ID} ,"})

    assert config.memory_accounts == (("Alice", ALICE_ID), ("Bob", BOB_ID))


def test_memory_store_resolver_knows_configured_accounts():
    config = load_sponsor_config({"SPONSOR_STORE": "memory", "SPONSOR_ACCOUNTS": f"Alice={ALICE_ID}"})
    resolver = build_account_resolver(config)

    assert asyncio.run(resolver.resolve("alice")) == AccountId(ALICE_ID)
    with pytest.raises(AccountNotResolvable):
        asyncio.run(resolver.resolve("Bob"))
