"""Abstract order executor interface.

PaperOrderExecutor and LiveOrderExecutor both implement this ABC, so the
decision pipeline is identical regardless of trading mode.
"""

from abc import ABC, abstractmethod

from order_engine.models import LimitOrderParams


class OrderExecutor(ABC):
    """Places finalized limit orders on behalf of a user."""

    @abstractmethod
    async def place_limit_order(self, user_id: str, params: LimitOrderParams) -> str:
        """Submit a limit order exactly as given and return the exchange order id.

        Args:
            user_id: Owner of the decision cycle the order belongs to.
            params: Rounded symbol, side, qty and price.

        Returns:
            The exchange-assigned order identifier.

        Raises:
            OrderPlacementError: If the exchange call fails or returns no id.
                Not retried here.
        """
        ...
