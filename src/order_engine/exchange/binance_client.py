"""Binance spot client implementation via ccxt async.

Wraps ccxt.async_support.binance with market loading, metadata extraction
keyed by the exchange pair id (e.g. "BTCUSDT"), and async cleanup.
"""

from decimal import Decimal

import ccxt.async_support as ccxt_async
from ccxt.base.decimal_to_precision import TICK_SIZE

from order_engine.config import ExchangeSettings
from order_engine.exceptions import InstrumentNotFoundError, PriceUnavailableError
from order_engine.exchange.client import ExchangeClient
from order_engine.exchange.types import precision_from_step
from order_engine.logging import get_logger
from order_engine.models import InstrumentMetadata, OrderSide

logger = get_logger(__name__)

# Used when the exchange omits a precision for a market
_DEFAULT_PRECISION = 8


class BinanceClient(ExchangeClient):
    """Concrete Binance spot client using ccxt async."""

    def __init__(self, settings: ExchangeSettings) -> None:
        self._settings = settings
        self._exchange = ccxt_async.binance(
            {
                "apiKey": settings.api_key.get_secret_value(),
                "secret": settings.api_secret.get_secret_value(),
                "enableRateLimit": True,
                "options": {"defaultType": "spot"},
            }
        )
        if settings.testnet:
            self._exchange.set_sandbox_mode(True)
        self._markets: dict = {}

    @property
    def exchange(self) -> ccxt_async.binance:
        """Access the underlying ccxt exchange instance."""
        return self._exchange

    async def connect(self) -> None:
        logger.info("connecting_to_binance", testnet=self._settings.testnet)
        self._markets = await self._exchange.load_markets()
        logger.info("binance_connected", market_count=len(self._markets))

    async def close(self) -> None:
        logger.info("closing_binance_connection")
        await self._exchange.close()
        logger.info("binance_connection_closed")

    async def _find_market(self, pair: str) -> dict:
        if not self._markets:
            self._markets = await self._exchange.load_markets()

        pair_id = pair.upper()
        for market in self._markets.values():
            if market.get("id") == pair_id and market.get("spot"):
                return market
        raise InstrumentNotFoundError(f"Pair {pair} not found in loaded spot markets")

    def _to_places(self, value: object) -> int:
        if value is None:
            return _DEFAULT_PRECISION
        if getattr(self._exchange, "precisionMode", TICK_SIZE) == TICK_SIZE:
            return precision_from_step(str(value))
        return int(value)

    async def get_instrument_metadata(self, pair: str) -> InstrumentMetadata:
        """Extract pair constraints from cached market data.

        Precision is converted to decimal places whether ccxt reports tick
        sizes or digit counts.
        """
        market = await self._find_market(pair)
        precision = market.get("precision") or {}
        cost_limits = (market.get("limits") or {}).get("cost") or {}

        return InstrumentMetadata(
            symbol=market["id"],
            base_asset=market["base"],
            quote_asset=market["quote"],
            quantity_precision=self._to_places(precision.get("amount")),
            price_precision=self._to_places(precision.get("price")),
            min_notional=Decimal(str(cost_limits.get("min") or 0)),
        )

    async def fetch_price(self, pair: str) -> Decimal:
        """Return the last traded price for a pair."""
        market = await self._find_market(pair)
        ticker = await self._exchange.fetch_ticker(market["symbol"])
        last = ticker.get("last") or ticker.get("close")
        if last is None:
            raise PriceUnavailableError(f"No price available for {pair}")
        price = Decimal(str(last))
        if not price.is_finite() or price <= 0:
            raise PriceUnavailableError(f"Invalid price {last} for {pair}")
        return price

    async def create_limit_order(
        self,
        symbol: str,
        side: OrderSide,
        qty: Decimal,
        price: Decimal,
    ) -> dict:
        market = await self._find_market(symbol)
        logger.info(
            "creating_limit_order",
            symbol=symbol,
            side=side.value,
            qty=str(qty),
            price=str(price),
        )
        return await self._exchange.create_order(
            market["symbol"],
            "limit",
            side.value,
            float(qty),
            float(price),
            params={"timeInForce": "GTC"},
        )
