"""Abstract exchange client interface.

The order engine depends only on this interface; ccxt and Binance details
stay in the concrete implementation.
"""

from abc import ABC, abstractmethod
from decimal import Decimal

from order_engine.models import InstrumentMetadata, OrderSide


class ExchangeClient(ABC):
    """Abstract base class for spot exchange API clients."""

    @abstractmethod
    async def connect(self) -> None:
        """Initialize connection and load markets."""
        ...

    @abstractmethod
    async def close(self) -> None:
        """Release network resources (required for ccxt async)."""
        ...

    @abstractmethod
    async def get_instrument_metadata(self, pair: str) -> InstrumentMetadata:
        """Return base/quote assets, precisions and minimum notional for a pair.

        Raises:
            InstrumentNotFoundError: If the exchange does not list the pair.
        """
        ...

    @abstractmethod
    async def fetch_price(self, pair: str) -> Decimal:
        """Return the current observed price for a pair.

        Raises:
            PriceUnavailableError: If no positive price is available.
        """
        ...

    @abstractmethod
    async def create_limit_order(
        self,
        symbol: str,
        side: OrderSide,
        qty: Decimal,
        price: Decimal,
    ) -> dict:
        """Place a GTC limit order and return the raw exchange response."""
        ...
