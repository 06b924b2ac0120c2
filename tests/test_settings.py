"""Tests for settings configuration loading."""

from __future__ import annotations

import os
from pathlib import Path
from textwrap import dedent

import pytest
from pydantic import ValidationError

from ledger_stats.assets.ids import AssetId
from ledger_stats.constants import NATIVE_ASSET_ID_HEX, REFERENCE_ASSET_ID_HEX
from ledger_stats.settings import OutputFormat, StatsSettings

USDC_BECH32M = "passet1w6e7fvgxsy6ccy3m8q0eqcuyw6mh3yzqu3uq9h58nu8m8mku359spvulf6"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for key in [k for k in os.environ if k.startswith("LEDGER_STATS_")]:
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))


def test_defaults():
    settings = StatsSettings()

    assert settings.database_url is None
    assert settings.output == OutputFormat.TABLE
    assert settings.fetch_timeout_seconds == 30.0
    assert settings.native_asset == AssetId.from_hex(NATIVE_ASSET_ID_HEX)
    assert settings.reference_asset == AssetId.from_hex(REFERENCE_ASSET_ID_HEX)
    assert settings.connect_timeout_seconds == 10.0
    assert settings.log_level == "INFO"


def test_loads_table_from_config_file(tmp_path, monkeypatch):
    config_path = tmp_path / "config.toml"
    config_path.write_text(
        dedent(
            """
            [ledger_stats]
            output = "json"
            pool_max_size = 8
            fetch_timeout_seconds = 5.5
            registry_path = "assets.json"
            log_level = "debug"
            """
        ).strip()
    )
    monkeypatch.setenv("LEDGER_STATS_CONFIG", str(config_path))

    settings = StatsSettings()

    assert settings.output == OutputFormat.JSON
    assert settings.pool_max_size == 8
    assert settings.fetch_timeout_seconds == 5.5
    assert settings.registry_path == Path("assets.json")
    assert settings.log_level == "DEBUG"


def test_local_config_file_is_discovered(tmp_path):
    (tmp_path / "ledger-stats.toml").write_text('output = "formatted-json"\n')

    assert StatsSettings().output == OutputFormat.FORMATTED_JSON


def test_env_overrides_config_file(tmp_path, monkeypatch):
    config_path = tmp_path / "config.toml"
    config_path.write_text("pool_max_size = 8\n")
    monkeypatch.setenv("LEDGER_STATS_CONFIG", str(config_path))
    monkeypatch.setenv("LEDGER_STATS_POOL_MAX_SIZE", "6")

    assert StatsSettings().pool_max_size == 6


def test_init_kwargs_override_env(monkeypatch):
    monkeypatch.setenv("LEDGER_STATS_OUTPUT", "json")

    assert StatsSettings(output=OutputFormat.TABLE).output == OutputFormat.TABLE


def test_database_url_rejected_in_config_file(tmp_path, monkeypatch):
    config_path = tmp_path / "config.toml"
    config_path.write_text('database_url = "postgresql://user:pw@db/stats"\n')
    monkeypatch.setenv("LEDGER_STATS_CONFIG", str(config_path))

    with pytest.raises(ValueError, match="database_url"):
        StatsSettings()


def test_database_url_from_env_is_secret(monkeypatch):
    monkeypatch.setenv("LEDGER_STATS_DATABASE_URL", "postgresql://user:pw@db/stats")

    settings = StatsSettings()

    assert settings.database_url_required == "postgresql://user:pw@db/stats"
    assert "pw" not in repr(settings.database_url)
    assert settings.as_safe_dict()["database_url"] == "***redacted***"


def test_database_url_required_without_value():
    with pytest.raises(ValueError, match="database_url"):
        StatsSettings().database_url_required


def test_pool_min_cannot_exceed_max():
    with pytest.raises(ValidationError, match="pool_min_size"):
        StatsSettings(pool_min_size=5, pool_max_size=2)


def test_pool_size_must_be_positive():
    with pytest.raises(ValidationError, match="greater than or equal to 1"):
        StatsSettings(pool_min_size=0)


def test_asset_ids_are_normalised():
    settings = StatsSettings(native_asset_id="0x" + "AB" * 32)

    assert settings.native_asset_id.startswith("passet1")
    assert settings.native_asset.inner == b"\xab" * 32


def test_invalid_asset_id_rejected():
    with pytest.raises(ValidationError, match="asset id"):
        StatsSettings(reference_asset_id="abcd")


def test_asset_ids_accept_bech32m(monkeypatch):
    monkeypatch.setenv("LEDGER_STATS_REFERENCE_ASSET_ID", USDC_BECH32M)

    settings = StatsSettings()

    assert settings.reference_asset == AssetId.from_hex(REFERENCE_ASSET_ID_HEX)


def test_connect_timeout_must_be_positive():
    with pytest.raises(ValidationError, match="greater than 0"):
        StatsSettings(connect_timeout_seconds=0)
