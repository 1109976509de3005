"""Configuration loader for pagesnap using Pydantic settings.

Config precedence (highest wins):
  1. CLI flags (where applicable)
  2. Environment variables (PAGESNAP_* with __ for nesting; IS_OFFLINE)
  3. settings.local.toml
  4. settings.<env>.toml
  5. settings.default.toml
"""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pagesnap.models.runtime import RuntimeMode

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

_THIS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = Path(os.getenv("PAGESNAP_PROJECT_ROOT", _THIS_DIR.parents[2]))
CONFIG_DIR = PROJECT_ROOT / "config"

ENV_VAR_NAME = "PAGESNAP_ENV"
DEFAULT_ENV = "local"


def _resolve_env() -> str:
    return (os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()


def _load_toml(path: Path) -> dict[str, Any]:
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class BrowserSettings(BaseSettings):
    """Playwright browser settings."""

    model_config = SettingsConfigDict(env_prefix="PAGESNAP_BROWSER__")

    headless: bool = True
    timeout_ms: int = Field(default=30_000, gt=0)
    close_timeout_sec: float = Field(default=10.0, gt=0)
    # Empty means the platform default Chrome location.
    local_executable: str = ""
    install_root: str = "/opt/ms-playwright"
    window_width: int = Field(default=1920, gt=0)
    window_height: int = Field(default=1080, gt=0)
    base_args: list[str] = Field(default_factory=list)


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="PAGESNAP_API__")

    host: str = "0.0.0.0"
    port: int = 8000
    cors_origins: list[str] = ["*"]
    request_timeout_sec: float = Field(default=60.0, gt=0)


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Root pagesnap settings with nested sections."""

    model_config = SettingsConfigDict(
        env_prefix="PAGESNAP_",
        env_nested_delimiter="__",
        extra="ignore",
        populate_by_name=True,
    )

    env: str = Field(default_factory=_resolve_env)
    project_root: Path = Field(default=PROJECT_ROOT)
    debug: bool = False
    log_level: str = "INFO"
    json_logs: bool = False

    # Raw string; RuntimeMode.from_flag() decides what counts as "true".
    is_offline: str = Field(
        default="",
        validation_alias=AliasChoices("IS_OFFLINE", "PAGESNAP_OFFLINE", "is_offline"),
    )

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    api: APISettings = Field(default_factory=APISettings)

    @property
    def runtime_mode(self) -> RuntimeMode:
        """Runtime mode derived from the offline flag."""
        return RuntimeMode.from_flag(self.is_offline)

    @model_validator(mode="before")
    @classmethod
    def _merge_toml_files(cls, values: dict[str, Any]) -> dict[str, Any]:
        """Layer TOML config files before env var overrides."""
        defaults = _load_toml(CONFIG_DIR / "settings.default.toml")
        env_name = (values.get("env") or os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()
        env_overrides = _load_toml(CONFIG_DIR / f"settings.{env_name}.toml")
        local_overrides = _load_toml(CONFIG_DIR / "settings.local.toml")

        # Merge: defaults < env-specific < local < explicit values
        merged: dict[str, Any] = {}
        for layer in (defaults, env_overrides, local_overrides, values):
            for key, val in layer.items():
                if isinstance(val, dict) and isinstance(merged.get(key), dict):
                    merged[key] = {**merged[key], **val}
                else:
                    merged[key] = val
        return merged

    @model_validator(mode="after")
    def _normalize(self) -> "Settings":
        """Normalize the log level and apply the debug switch."""
        self.log_level = "DEBUG" if self.debug else self.log_level.strip().upper()
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton settings instance (cached)."""
    return Settings()
