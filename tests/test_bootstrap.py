"""Tests for engine wiring, settings loading and cycle log context."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
import structlog

from order_engine.bootstrap import _build_components, open_engine
from order_engine.config import AppSettings, TradingSettings
from order_engine.exchange.client import ExchangeClient
from order_engine.execution.live_executor import LiveOrderExecutor
from order_engine.execution.paper_executor import PaperOrderExecutor
from order_engine.logging import bind_cycle_context, clear_cycle_context
from order_engine.models import DecisionOrderRequest, InstrumentMetadata, LimitOrderStatus


@pytest.fixture
def exchange_client() -> AsyncMock:
    client = AsyncMock(spec=ExchangeClient)
    client.get_instrument_metadata.return_value = InstrumentMetadata(
        "ETHUSDT", "ETH", "USDT", 4, 2, Decimal("5")
    )
    client.fetch_price.return_value = Decimal("3000")
    return client


class TestSettings:
    def test_defaults(self, monkeypatch) -> None:
        monkeypatch.delenv("TRADING_MODE", raising=False)
        settings = TradingSettings()
        assert settings.mode == "paper"
        assert settings.execution_spread == Decimal("0.001")

    def test_env_overrides(self, monkeypatch) -> None:
        monkeypatch.setenv("TRADING_MODE", "live")
        monkeypatch.setenv("TRADING_EXECUTION_SPREAD", "0.002")
        settings = TradingSettings()
        assert settings.mode == "live"
        assert settings.execution_spread == Decimal("0.002")


class TestBuildComponents:
    def test_paper_mode_uses_paper_executor(self, mock_settings, exchange_client) -> None:
        components = _build_components(mock_settings, exchange_client)
        assert isinstance(components.executor, PaperOrderExecutor)
        assert components.exchange_client is exchange_client

    def test_live_mode_uses_live_executor(self, mock_settings, exchange_client) -> None:
        settings = mock_settings.model_copy(update={"trading": TradingSettings(mode="live")})
        components = _build_components(settings, exchange_client)
        assert isinstance(components.executor, LiveOrderExecutor)


class TestOpenEngine:
    @pytest.mark.asyncio
    async def test_runs_a_cycle_and_closes(
        self, mock_settings: AppSettings, exchange_client: AsyncMock
    ) -> None:
        request = DecisionOrderRequest(
            pair="ETHUSDT",
            denomination_token="ETH",
            side="SELL",
            quantity=Decimal("0.5"),
            limit_price=Decimal("3000"),
            base_price=Decimal("3000"),
            max_price_drift_pct=Decimal("0.01"),
        )

        async with open_engine(
            mock_settings, exchange_client=exchange_client, configure_logging=False
        ) as engine:
            result = await engine.decision_executor.execute_decision(
                "user-1", "review-1", [request]
            )
            stored = await engine.store.list_by_review_result("review-1")

        exchange_client.connect.assert_awaited_once()
        exchange_client.close.assert_awaited_once()
        assert result.placed == 1
        assert stored[0].status == LimitOrderStatus.OPEN
        assert stored[0].exchange_order_id.startswith("paper_")
        # SELL always anchors above the observed price: 3000 * 1.001
        assert stored[0].planned.price == Decimal("3003.00")

    @pytest.mark.asyncio
    async def test_database_closed_when_exchange_connect_fails(
        self, mock_settings: AppSettings, exchange_client: AsyncMock
    ) -> None:
        exchange_client.connect.side_effect = RuntimeError("exchange down")

        with pytest.raises(RuntimeError, match="exchange down"):
            async with open_engine(
                mock_settings, exchange_client=exchange_client, configure_logging=False
            ):
                pass

        exchange_client.close.assert_not_awaited()


class TestCycleContext:
    def test_bind_and_clear(self) -> None:
        bind_cycle_context("user-1", "review-9")
        assert structlog.contextvars.get_contextvars() == {
            "user_id": "user-1",
            "review_result_id": "review-9",
        }
        clear_cycle_context()
        assert structlog.contextvars.get_contextvars() == {}

    @pytest.mark.asyncio
    async def test_context_cleared_after_cycle(
        self, mock_settings: AppSettings, exchange_client: AsyncMock
    ) -> None:
        async with open_engine(
            mock_settings, exchange_client=exchange_client, configure_logging=False
        ) as engine:
            await engine.decision_executor.execute_decision("user-1", "review-1", [])

        assert "review_result_id" not in structlog.contextvars.get_contextvars()
