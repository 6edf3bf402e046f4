"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class RatesSettings(BaseSettings):
    """Exchange-rate source settings."""

    model_config = SettingsConfigDict(env_prefix="RATES_")

    url: str = "https://api.yadio.io/exrates/BTC"
    refresh_interval: int = 300  # seconds between fetches (5 minutes)
    timeout: float = 10.0


class ParitySettings(BaseSettings):
    """Parity estimation policy.

    Two revisions of the near-parity heuristic exist. "banded" treats a sat
    price in [1, band_high) as "now" and only classifies an interpolated
    crossing as past when the sat price is above 1. "legacy" uses an absolute
    tolerance around 1 and has no guard.
    """

    model_config = SettingsConfigDict(env_prefix="PARITY_")

    policy: Literal["banded", "legacy"] = "banded"
    band_high: Decimal = Decimal("1.25")
    legacy_tolerance: Decimal = Decimal("0.1")
    historic_window_years: int = 3  # hide past parity older than this by default


class DashboardSettings(BaseSettings):
    """Dashboard server configuration."""

    model_config = SettingsConfigDict(env_prefix="DASHBOARD_")

    host: str = "0.0.0.0"
    port: int = 8080
    update_interval: int = 5  # seconds between WebSocket pushes


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    rates: RatesSettings = RatesSettings()
    parity: ParitySettings = ParitySettings()
    dashboard: DashboardSettings = DashboardSettings()
