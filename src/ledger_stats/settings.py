"""Settings module with unified configuration precedence: CLI > ENV > CONFIG FILE."""

from __future__ import annotations

import os
import tomllib
from enum import Enum
from pathlib import Path
from typing import Any

from dotenv import load_dotenv
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from .assets.ids import AssetId
from .constants import (
    DEFAULT_CONNECT_RETRIES,
    DEFAULT_CONNECT_TIMEOUT_SECONDS,
    DEFAULT_FETCH_TIMEOUT_SECONDS,
    DEFAULT_POOL_MAX_SIZE,
    DEFAULT_POOL_MIN_SIZE,
    NATIVE_ASSET_ID_HEX,
    REFERENCE_ASSET_ID_HEX,
)

load_dotenv()

CONFIG_ENV_VAR = "LEDGER_STATS_CONFIG"
SECRET_FIELDS = {"database_url"}


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"
    FORMATTED_JSON = "formatted-json"


class StatsSettings(BaseSettings):
    """Single source of truth for configuration. Values may come from:
    - CLI (init kwargs)
    - ENV / .env (prefixed with LEDGER_STATS_)
    - Config file (TOML), lowest precedence

    Do not read os.environ or files elsewhere in the codebase.
    """

    # --- store ---
    database_url: SecretStr | None = None
    pool_min_size: int = Field(default=DEFAULT_POOL_MIN_SIZE, ge=1)
    pool_max_size: int = Field(default=DEFAULT_POOL_MAX_SIZE, ge=1)
    connect_retries: int = Field(default=DEFAULT_CONNECT_RETRIES, ge=1)
    connect_timeout_seconds: float = Field(
        default=DEFAULT_CONNECT_TIMEOUT_SECONDS, gt=0
    )
    fetch_timeout_seconds: float | None = DEFAULT_FETCH_TIMEOUT_SECONDS

    # --- assets ---
    registry_path: Path | None = None
    native_asset_id: str = NATIVE_ASSET_ID_HEX
    reference_asset_id: str = REFERENCE_ASSET_ID_HEX

    # --- output ---
    output: OutputFormat = OutputFormat.TABLE

    # --- logging ---
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_STATS_",
        env_file=".env",
        extra="ignore",  # ignore unknown keys in env/config file
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def wrap_secrets(cls, v: Any) -> SecretStr | None:
        """Wrap string secrets in SecretStr."""
        if v is None or isinstance(v, SecretStr):
            return v
        return SecretStr(v)

    @field_validator("native_asset_id", "reference_asset_id")
    @classmethod
    def validate_asset_id(cls, v: str) -> str:
        """Accept ``passet1...`` or hex; normalised to the bech32m form."""
        return str(AssetId.parse(v))

    @field_validator("log_level")
    @classmethod
    def normalise_log_level(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def validate_pool_bounds(self) -> "StatsSettings":
        """Validate that the pool minimum does not exceed the maximum."""
        if self.pool_min_size > self.pool_max_size:
            raise ValueError(
                f"pool_min_size ({self.pool_min_size}) must not exceed "
                f"pool_max_size ({self.pool_max_size})"
            )
        return self

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Custom config-file source with explicit precedence: CLI > ENV > FILE."""
        env_cfg = os.environ.get(CONFIG_ENV_VAR)
        cfg_path = Path(env_cfg) if env_cfg else None

        class TomlConfigSource(PydanticBaseSettingsSource):
            def __init__(self, settings_cls: type[BaseSettings], path: Path | None):
                super().__init__(settings_cls)
                self._path = path

            def get_field_value(
                self, field: Any, field_name: str
            ) -> tuple[Any, str, bool]:
                return None, "", False

            def __call__(self) -> dict[str, Any]:
                if not self._path:
                    # Try default locations
                    local_config = Path("ledger-stats.toml")
                    user_config = Path.home() / ".config" / "ledger-stats" / "config.toml"
                    if local_config.exists():
                        self._path = local_config
                    elif user_config.exists():
                        self._path = user_config
                    else:
                        return {}

                if not self._path.exists():
                    return {}

                with self._path.open("rb") as f:
                    data = tomllib.load(f)  # supports top-level or [ledger_stats]
                body = data.get("ledger_stats", data)
                if not isinstance(body, dict):
                    return {}

                for key in SECRET_FIELDS:
                    if key in body:
                        raise ValueError(
                            f"Security violation: '{key}' found in TOML config file. "
                            f"Secrets must only be provided via environment variables or CLI flags."
                        )

                return body

        return (
            init_settings,  # CLI (highest)
            env_settings,  # ENV
            dotenv_settings,  # .env
            TomlConfigSource(settings_cls, cfg_path),  # CONFIG (lowest)
            file_secret_settings,  # optional secrets dir
        )

    def as_safe_dict(self) -> dict[str, Any]:
        """Return the config as a JSON-friendly dict with secrets redacted."""
        data = self.model_dump(mode="json")
        if self.database_url:
            data["database_url"] = "***redacted***"
        return data

    @property
    def database_url_required(self) -> str:
        """Get the database URL, raising ValueError if not set."""
        if self.database_url is None:
            raise ValueError("database_url must be configured")
        return self.database_url.get_secret_value()

    @property
    def native_asset(self) -> AssetId:
        return AssetId.parse(self.native_asset_id)

    @property
    def reference_asset(self) -> AssetId:
        return AssetId.parse(self.reference_asset_id)
