"""Exchange client layer -- Binance spot integration via ccxt."""

from order_engine.exchange.binance_client import BinanceClient
from order_engine.exchange.client import ExchangeClient
from order_engine.exchange.types import (
    ceil_to_precision,
    leading_digit,
    precision_from_step,
    round_to_precision,
)

__all__ = [
    "BinanceClient",
    "ExchangeClient",
    "ceil_to_precision",
    "leading_digit",
    "precision_from_step",
    "round_to_precision",
]
