"""Paper trading executor.

Accepts every order without touching the exchange and hands back a
simulated order id. Metadata and prices still come from the live market,
so planning behaves exactly as in live mode.
"""

from uuid import uuid4

from order_engine.execution.executor import OrderExecutor
from order_engine.logging import get_logger
from order_engine.models import LimitOrderParams

logger = get_logger(__name__)


class PaperOrderExecutor(OrderExecutor):
    """Simulated order executor; keeps placed orders in memory."""

    def __init__(self) -> None:
        self._placed: dict[str, tuple[str, LimitOrderParams]] = {}

    @property
    def placed_orders(self) -> dict[str, tuple[str, LimitOrderParams]]:
        """Map of paper order id to (user_id, params)."""
        return dict(self._placed)

    async def place_limit_order(self, user_id: str, params: LimitOrderParams) -> str:
        order_id = f"paper_{uuid4().hex[:12]}"
        self._placed[order_id] = (user_id, params)

        logger.info(
            "paper_order_placed",
            user_id=user_id,
            order_id=order_id,
            symbol=params.symbol,
            side=params.side.value,
            qty=str(params.qty),
            price=str(params.price),
        )
        return order_id
