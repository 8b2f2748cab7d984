"""Exceptions raised by the order engine.

Routine rejections (stale price, undersized order, malformed limit price)
are never raised; they end up as canceled audit rows. The classes below
cover caller contract violations and failures whose outcome is unknown.
"""


class EngineError(Exception):
    """Base exception for all order engine errors."""


class InvalidOrderRequestError(EngineError, ValueError):
    """Raised when a decision order request violates its construction contract."""


class DenominationMismatchError(InvalidOrderRequestError):
    """Raised when the requested denomination is neither the base nor the quote asset."""


class InstrumentNotFoundError(EngineError):
    """Raised when the exchange does not list the requested trading pair."""


class PriceUnavailableError(EngineError):
    """Raised when no usable market price can be observed for a pair."""


class OrderPlacementError(EngineError):
    """Raised when the exchange order call fails or returns no order id.

    The order's true state on the exchange is unknown, so it must not be
    recorded as a cancellation.
    """

    def __init__(self, symbol: str, message: str) -> None:
        super().__init__(f"order placement failed for {symbol}: {message}")
        self.symbol = symbol
        self.message = message
