"""Configuration system using pydantic-settings with environment variable loading."""

from decimal import Decimal
from typing import Literal

from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class ExchangeSettings(BaseSettings):
    """Binance spot connection settings."""

    model_config = SettingsConfigDict(env_prefix="BINANCE_")

    api_key: SecretStr = SecretStr("")
    api_secret: SecretStr = SecretStr("")
    testnet: bool = False


class TradingSettings(BaseSettings):
    """Order translation parameters."""

    model_config = SettingsConfigDict(env_prefix="TRADING_")

    mode: Literal["paper", "live"] = "paper"
    execution_spread: Decimal = Decimal("0.001")  # 0.1% off the live price


class StorageSettings(BaseSettings):
    """Audit store location."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    db_path: str = "data/orders.db"


class CacheSettings(BaseSettings):
    """Instrument metadata cache configuration."""

    model_config = SettingsConfigDict(env_prefix="CACHE_")

    instrument_ttl_seconds: float = 3600.0


class AppSettings(BaseSettings):
    """Root application settings, composing all sub-settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
    )

    log_level: str = "INFO"
    exchange: ExchangeSettings = ExchangeSettings()
    trading: TradingSettings = TradingSettings()
    storage: StorageSettings = StorageSettings()
    cache: CacheSettings = CacheSettings()
