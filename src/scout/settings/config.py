"""Configuration loader for Scout using Pydantic settings.

Config precedence (highest wins):
  1. CLI flags (where applicable)
  2. Environment variables (SCOUT_* with __ for nesting)
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

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# ---------------------------------------------------------------------------
# Path helpers
# ---------------------------------------------------------------------------

_THIS_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = Path(os.getenv("SCOUT_PROJECT_ROOT", _THIS_DIR.parents[2]))
CONFIG_DIR = PROJECT_ROOT / "config"

ENV_VAR_NAME = "SCOUT_ENV"
DEFAULT_ENV = "local"

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)


def _resolve_env() -> str:
    return (os.getenv(ENV_VAR_NAME) or DEFAULT_ENV).strip()


def _load_toml(path: Path) -> dict[str, Any]:
    if path.is_file():
        with open(path, "rb") as f:
            return tomllib.load(f)
    return {}


def _default_headless() -> bool:
    # PLAYWRIGHT_HEADLESS=false is the only value that turns headless off
    return os.getenv("PLAYWRIGHT_HEADLESS", "true").strip().lower() != "false"


def _default_user_data_dir() -> str:
    return os.getenv(
        "PLAYWRIGHT_USER_DATA_DIR",
        str(Path.home() / ".cache" / "playwright-profile"),
    )


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class LLMSettings(BaseSettings):
    """LLM provider configuration."""

    model_config = SettingsConfigDict(env_prefix="SCOUT_LLM__")

    provider: str = "openai"
    model: str = "gpt-4o-mini"
    api_key: str = ""
    base_url: str = ""
    ollama_base_url: str = "http://localhost:11434"
    temperature: float = 0.2
    max_tokens: int = 1024
    max_retries: int = 3


class BrowserSettings(BaseSettings):
    """Playwright browser settings."""

    model_config = SettingsConfigDict(env_prefix="SCOUT_BROWSER__")

    headless: bool = Field(default_factory=_default_headless)
    executable_path: str = ""
    user_data_dir: str = Field(default_factory=_default_user_data_dir)
    viewport_width: int = 1280
    viewport_height: int = 800
    locale: str = "en-US"
    timezone_id: str = "America/Los_Angeles"
    user_agent: str = DEFAULT_USER_AGENT
    timeout_ms: int = 30_000
    wait_until: str = "domcontentloaded"
    screenshot_quality: int = Field(80, ge=0, le=100)
    type_delay_ms: int = 25
    click_timeout_ms: int = 5_000
    scroll_distance: int = 500
    sandbox: bool = False


class StealthSettings(BaseSettings):
    """Anti-detection / stealth configuration."""

    model_config = SettingsConfigDict(env_prefix="SCOUT_STEALTH__")

    apply_stealth_scripts: bool = True
    extra_launch_args: list[str] = Field(default_factory=list)


class StorageSettings(BaseSettings):
    """History persistence configuration.

    ``db_url`` takes precedence when set (any SQLAlchemy URL, e.g.
    ``postgresql+pg8000://...``); otherwise a local SQLite file at
    ``sqlite_path`` is used.
    """

    model_config = SettingsConfigDict(env_prefix="SCOUT_STORAGE__")

    db_url: str = ""
    sqlite_path: str = "data/scout.db"


class APISettings(BaseSettings):
    """API server configuration."""

    model_config = SettingsConfigDict(env_prefix="SCOUT_API__")

    host: str = "0.0.0.0"
    port: int = 5000
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:5173"]
    poll_interval_ms: int = 1000


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseSettings):
    """Root Scout settings with nested sections."""

    model_config = SettingsConfigDict(
        env_prefix="SCOUT_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    env: str = Field(default_factory=_resolve_env)
    project_root: Path = Field(default=PROJECT_ROOT)
    log_level: str = "INFO"

    llm: LLMSettings = Field(default_factory=LLMSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    stealth: StealthSettings = Field(default_factory=StealthSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    api: APISettings = Field(default_factory=APISettings)

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
    def _resolve_paths(self) -> "Settings":
        """Normalize relative paths against project_root."""
        root = self.project_root
        if not Path(self.storage.sqlite_path).is_absolute():
            self.storage.sqlite_path = str(root / self.storage.sqlite_path)
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton settings instance (cached)."""
    return Settings()
