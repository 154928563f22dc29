"""
config.py — Centralized Application Configuration Loader

Purpose:
- Define a single source of truth for application settings.
- Load and validate environment variables from `.env` or OS environment.
- Provide the FMP income-statement endpoint, API key and symbol used by the
  fetcher.

This module does NOT:
- Make external API calls.
- Validate that the endpoint or key are usable. An empty URL or key yields a
  failed request, surfaced as a FetchError by the fetcher.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# .env is looked up next to the backend directory first, then in the CWD
# config.py is at: backend/incomeview/core/config.py
_CONFIG_DIR = Path(__file__).parent  # backend/incomeview/core
_BACKEND_DIR = _CONFIG_DIR.parent.parent  # backend
_ENV_FILE = _BACKEND_DIR / ".env"

if _ENV_FILE.exists():
    _ENV_FILE_PATH = str(_ENV_FILE.resolve())
else:
    _ENV_FILE_PATH = ".env"


class Settings(BaseSettings):
    """
    Settings container for the income statement viewer.

    Core workflow:
    1. Pull annual income statements for FMP_SYMBOL from FMP_API_URL
    2. Filter / sort / format them in memory
    3. Nothing is persisted
    """
    FMP_API_URL: str = Field(
        "",
        description="Income statement endpoint prefix; the symbol is appended "
                    "(e.g. https://financialmodelingprep.com/api/v3/income-statement/)",
    )
    FMP_API_KEY: str = Field(
        "",
        description="FMP API key (can be empty if FMP_API_KEY_PATH is set)",
    )
    FMP_API_KEY_PATH: str = Field(
        "",
        description="Path to file containing the FMP API key (alternative to FMP_API_KEY)",
    )
    FMP_SYMBOL: str = Field(
        "AAPL",
        description="Ticker symbol whose income statements are displayed",
    )
    FMP_REQUEST_TIMEOUT_SECONDS: float = Field(
        30.0,
        description="HTTP timeout for the income statement request (seconds)",
    )
    LOG_LEVEL: str = Field(
        "INFO",
        description="Root log level: DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )

    @field_validator("FMP_API_KEY", "FMP_API_URL", mode="before")
    @classmethod
    def strip_value(cls, v: Any) -> str:
        """Strip whitespace from URL and key."""
        if isinstance(v, str):
            return v.strip()
        return v or ""

    @field_validator("FMP_SYMBOL", mode="before")
    @classmethod
    def normalize_symbol(cls, v: Any) -> str:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @model_validator(mode="after")
    def load_api_key_from_file(self) -> "Settings":
        """Load API key from file if FMP_API_KEY_PATH is provided."""
        if self.FMP_API_KEY_PATH and not self.FMP_API_KEY:
            key_path = Path(self.FMP_API_KEY_PATH).expanduser()
            if not key_path.exists():
                raise ValueError(f"API key file not found: {key_path}")
            try:
                with key_path.open("r", encoding="utf-8") as f:
                    self.FMP_API_KEY = f.read().strip()
            except OSError as e:
                raise ValueError(f"Failed to read API key from {key_path}: {e}") from e
        return self

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the process-wide settings (read once at startup)."""
    return Settings()
