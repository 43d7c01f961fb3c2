"""
Configuration module for the quote relay: provider credentials, broker
destination, tracked symbols and loop cadence, with environment overrides.
"""

import logging
from pathlib import Path
from typing import List, Optional, Tuple

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .relay.errors import ConfigurationError
from .relay.fetcher import DEFAULT_PROVIDER_URL, ProviderConfig
from .relay.publisher import BrokerConfig

logger = logging.getLogger(__name__)

DEFAULT_SYMBOLS = "AAPL,GOOGL,MSFT"


def parse_symbols(raw) -> Tuple[str, ...]:
    """
    Normalize a symbol list given as a comma separated string or a sequence.

    Whitespace is stripped, empty entries are dropped and duplicates removed
    keeping the first occurrence, so the configured order is preserved.
    """
    if raw is None:
        return ()
    if isinstance(raw, str):
        items = raw.split(",")
    else:
        items = list(raw)

    seen = []
    for item in items:
        symbol = str(item).strip()
        if symbol and symbol not in seen:
            seen.append(symbol)
    return tuple(seen)


def load_symbols_file(path: Path) -> Tuple[str, ...]:
    """
    Load the tracked symbol list from a YAML file of the form::

        symbols:
          - AAPL
          - MSFT
    """
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigurationError(
            ["symbols_file"], f"Cannot read symbols file {path}: {e}"
        ) from e

    if isinstance(data, list):
        symbols = data
    elif isinstance(data, dict):
        symbols = data.get("symbols")
    else:
        symbols = None

    if not isinstance(symbols, list):
        raise ConfigurationError(
            ["symbols"], f"Symbols file {path} must contain a 'symbols' list"
        )
    return parse_symbols(symbols)


class Settings(BaseSettings):
    """
    Application settings using Pydantic for validation
    and environment variable support.
    """

    # Upstream quote provider
    api_key: Optional[str] = Field(
        default=None, repr=False, description="API key for the quote provider"
    )
    provider_url: str = Field(
        default=DEFAULT_PROVIDER_URL, description="Quote provider base URL"
    )

    # Downstream broker
    broker_url: Optional[str] = Field(
        default=None, description="URL the updates are POSTed to"
    )

    # Tracked symbols
    symbols: str = Field(
        default=DEFAULT_SYMBOLS, description="Comma separated ticker symbols"
    )
    symbols_file: Optional[Path] = Field(
        default=None, description="YAML file listing symbols, overrides 'symbols'"
    )

    # Loop settings
    interval_seconds: float = Field(
        default=10.0, gt=0, description="Seconds between relay cycles"
    )
    request_timeout: float = Field(
        default=30.0, gt=0, description="Request timeout in seconds"
    )
    max_workers: int = Field(
        default=1, ge=1, description="Parallel workers per cycle (1 = sequential)"
    )
    run_on_start: bool = Field(
        default=False, description="Run the first cycle immediately on start"
    )

    # General settings
    log_level: str = Field(default="INFO", description="Logging level")

    model_config = {
        "env_prefix": "QUOTERELAY_",
        "case_sensitive": False,
        "env_file": ".env",
        "extra": "ignore",
    }

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v):
        level = str(v).upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("api_key", "broker_url")
    @classmethod
    def blank_to_none(cls, v):
        if v is not None and not v.strip():
            return None
        return v

    def tracked_symbols(self) -> Tuple[str, ...]:
        """Return the ordered, de-duplicated symbol list."""
        if self.symbols_file is not None:
            return load_symbols_file(self.symbols_file)
        return parse_symbols(self.symbols)

    def missing(self) -> List[str]:
        """Names of required settings that are not set."""
        missing = []
        if not self.api_key:
            missing.append("api_key")
        if not self.broker_url:
            missing.append("broker_url")
        return missing

    def require(self) -> None:
        """
        Check that everything the relay loop needs is configured.

        Raises:
            ConfigurationError: If the API key, the broker URL or the symbol
                list is missing.
        """
        missing = self.missing()
        if missing:
            env_names = ", ".join(f"QUOTERELAY_{name.upper()}" for name in missing)
            raise ConfigurationError(missing, f"Missing required settings: {env_names}")
        if not self.tracked_symbols():
            raise ConfigurationError(["symbols"], "No symbols configured")

    def provider_config(self) -> ProviderConfig:
        if not self.api_key:
            raise ConfigurationError(
                ["api_key"], "Missing required settings: QUOTERELAY_API_KEY"
            )
        return ProviderConfig(
            base_url=self.provider_url,
            api_key=self.api_key,
            timeout=self.request_timeout,
        )

    def broker_config(self) -> BrokerConfig:
        if not self.broker_url:
            raise ConfigurationError(
                ["broker_url"], "Missing required settings: QUOTERELAY_BROKER_URL"
            )
        return BrokerConfig(url=self.broker_url, timeout=self.request_timeout)

    def masked_api_key(self) -> str:
        """API key with all but the last four characters hidden."""
        if not self.api_key:
            return "<not set>"
        if len(self.api_key) <= 4:
            return "*" * len(self.api_key)
        return "*" * (len(self.api_key) - 4) + self.api_key[-4:]
