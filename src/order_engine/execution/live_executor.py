"""Live order executor via the exchange client.

ccxt errors (network, rejected order, rate limit) are re-raised as
OrderPlacementError with the original chained.
"""

import ccxt.async_support as ccxt_async

from order_engine.exceptions import OrderPlacementError
from order_engine.exchange.client import ExchangeClient
from order_engine.execution.executor import OrderExecutor
from order_engine.logging import get_logger
from order_engine.models import LimitOrderParams

logger = get_logger(__name__)


class LiveOrderExecutor(OrderExecutor):
    """Real order executor that delegates to an exchange client.

    Args:
        exchange_client: The exchange client to place real orders through.
    """

    def __init__(self, exchange_client: ExchangeClient) -> None:
        self._exchange_client = exchange_client

    async def place_limit_order(self, user_id: str, params: LimitOrderParams) -> str:
        try:
            result = await self._exchange_client.create_limit_order(
                symbol=params.symbol,
                side=params.side,
                qty=params.qty,
                price=params.price,
            )
        except ccxt_async.BaseError as exc:
            logger.error(
                "live_order_failed",
                user_id=user_id,
                symbol=params.symbol,
                side=params.side.value,
                error=str(exc),
            )
            raise OrderPlacementError(params.symbol, str(exc)) from exc

        order_id = (result or {}).get("id")
        if order_id is None or order_id == "":
            raise OrderPlacementError(params.symbol, "order id missing")

        logger.info(
            "live_order_placed",
            user_id=user_id,
            order_id=str(order_id),
            symbol=params.symbol,
            side=params.side.value,
            qty=str(params.qty),
            price=str(params.price),
        )
        return str(order_id)
