"""Component wiring for embedding the order engine in a host process.

The engine has no CLI or network surface of its own; the workflow review
process opens it once and calls ``DecisionExecutor.execute_decision`` for
each decision cycle.

Wiring order (in _build_components):
1. ExchangeClient (BinanceClient)
2. InstrumentCache (metadata with TTL)
3. OrderDatabase + LimitOrderStore (audit table)
4. OrderExecutor (PaperOrderExecutor or LiveOrderExecutor based on mode)
5. OrderSubmitter
6. DecisionExecutor
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from order_engine.config import AppSettings
from order_engine.data.database import OrderDatabase
from order_engine.data.store import LimitOrderStore
from order_engine.exchange.binance_client import BinanceClient
from order_engine.exchange.client import ExchangeClient
from order_engine.execution.executor import OrderExecutor
from order_engine.logging import get_logger, setup_logging
from order_engine.market_data.instrument_cache import InstrumentCache
from order_engine.orders.engine import DecisionExecutor
from order_engine.orders.submitter import OrderSubmitter


@dataclass
class EngineComponents:
    exchange_client: ExchangeClient
    database: OrderDatabase
    store: LimitOrderStore
    executor: OrderExecutor
    decision_executor: DecisionExecutor


def _build_components(
    settings: AppSettings, exchange_client: ExchangeClient | None = None
) -> EngineComponents:
    """Create the dependency graph without opening any connection."""
    logger = get_logger("order_engine.bootstrap")

    if exchange_client is None:
        exchange_client = BinanceClient(settings.exchange)

    instrument_cache = InstrumentCache(
        exchange_client, ttl_seconds=settings.cache.instrument_ttl_seconds
    )

    database = OrderDatabase(settings.storage.db_path)
    store = LimitOrderStore(database)

    executor: OrderExecutor
    if settings.trading.mode == "paper":
        from order_engine.execution.paper_executor import PaperOrderExecutor

        executor = PaperOrderExecutor()
    else:
        from order_engine.execution.live_executor import LiveOrderExecutor

        if not settings.exchange.api_key.get_secret_value():
            logger.warning(
                "no_api_keys_configured",
                mode="live",
                note="Order placement will be rejected by the exchange.",
            )
        executor = LiveOrderExecutor(exchange_client)

    submitter = OrderSubmitter(executor, store)
    decision_executor = DecisionExecutor(
        exchange_client,
        instrument_cache,
        submitter,
        spread=settings.trading.execution_spread,
    )

    return EngineComponents(
        exchange_client=exchange_client,
        database=database,
        store=store,
        executor=executor,
        decision_executor=decision_executor,
    )


@asynccontextmanager
async def open_engine(
    settings: AppSettings | None = None,
    exchange_client: ExchangeClient | None = None,
    configure_logging: bool = True,
) -> AsyncIterator[EngineComponents]:
    """Build, connect and yield the engine; close everything on exit.

    Args:
        settings: Application settings; loaded from the environment if None.
        exchange_client: Override for the Binance client (tests, other venues).
        configure_logging: Set up structlog from settings.log_level.
    """
    if settings is None:
        settings = AppSettings()
    if configure_logging:
        setup_logging(settings.log_level)

    logger = get_logger("order_engine.bootstrap")
    components = _build_components(settings, exchange_client)

    await components.database.connect()
    try:
        await components.exchange_client.connect()
        try:
            logger.info(
                "order_engine_started",
                mode=settings.trading.mode,
                db_path=settings.storage.db_path,
            )
            yield components
        finally:
            await components.exchange_client.close()
    finally:
        await components.database.close()
        logger.info("order_engine_stopped")
