"""Shared test fixtures for the order engine."""

from collections.abc import AsyncIterator, Callable
from decimal import Decimal
from typing import Any

import pytest
import pytest_asyncio

from order_engine.config import AppSettings, ExchangeSettings, StorageSettings, TradingSettings
from order_engine.data.database import OrderDatabase
from order_engine.data.store import LimitOrderStore
from order_engine.models import DecisionOrderRequest, InstrumentMetadata


@pytest.fixture
def mock_settings(tmp_path) -> AppSettings:  # type: ignore[no-untyped-def]
    """Return AppSettings with test defaults (paper mode, dummy API keys)."""
    return AppSettings(
        log_level="DEBUG",
        exchange=ExchangeSettings(
            api_key="test-api-key",  # type: ignore[arg-type]
            api_secret="test-api-secret",  # type: ignore[arg-type]
            testnet=True,
        ),
        trading=TradingSettings(mode="paper"),
        storage=StorageSettings(db_path=str(tmp_path / "orders.db")),
    )


@pytest.fixture
def btc_metadata() -> InstrumentMetadata:
    """BTCUSDT with 8/8 precision and no minimum notional."""
    return InstrumentMetadata(
        symbol="BTCUSDT",
        base_asset="BTC",
        quote_asset="USDT",
        quantity_precision=8,
        price_precision=8,
        min_notional=Decimal("0"),
    )


@pytest.fixture
def make_request() -> Callable[..., DecisionOrderRequest]:
    """Factory for BTCUSDT requests; keyword overrides replace the defaults."""

    def _make(**overrides: Any) -> DecisionOrderRequest:
        fields: dict[str, Any] = {
            "pair": "BTCUSDT",
            "denomination_token": "USDT",
            "side": "BUY",
            "quantity": Decimal("100"),
            "limit_price": Decimal("99.9"),
            "base_price": Decimal("100"),
            "max_price_drift_pct": Decimal("0.05"),
        }
        fields.update(overrides)
        return DecisionOrderRequest(**fields)

    return _make


@pytest_asyncio.fixture
async def database() -> AsyncIterator[OrderDatabase]:
    """Connected in-memory audit database."""
    db = OrderDatabase(":memory:")
    await db.connect()
    yield db
    await db.close()


@pytest.fixture
def store(database: OrderDatabase) -> LimitOrderStore:
    return LimitOrderStore(database)
