"""Order submission and audit recording.

An accepted plan goes to the executor and becomes an open record; a
rejected plan becomes a canceled record without any exchange call. When
the exchange call itself fails, nothing is recorded and the error
propagates, because the order's real state on the exchange is unknown.
"""

from order_engine.data.store import LimitOrderStore
from order_engine.execution.executor import OrderExecutor
from order_engine.logging import get_logger
from order_engine.models import LimitOrderRecord, LimitOrderStatus, PlannedOrder
from order_engine.orders.planner import OrderPlan

logger = get_logger(__name__)


class OrderSubmitter:
    """Turns order plans into exchange calls and audit rows.

    Args:
        executor: Paper or live order executor.
        store: Audit store receiving exactly one row per plan.
    """

    def __init__(self, executor: OrderExecutor, store: LimitOrderStore) -> None:
        self._executor = executor
        self._store = store

    async def submit(
        self, user_id: str, review_result_id: str, plan: OrderPlan
    ) -> LimitOrderRecord:
        """Place an accepted plan or record a rejected one.

        Raises:
            OrderPlacementError: If the exchange call fails. No row is written.
        """
        if plan.params is None:
            return await self.record_cancellation(
                user_id, review_result_id, plan.planned, plan.reason or "unknown"
            )

        order_id = await self._executor.place_limit_order(user_id, plan.params)

        record = LimitOrderRecord(
            user_id=user_id,
            review_result_id=review_result_id,
            status=LimitOrderStatus.OPEN,
            planned=plan.planned,
            exchange_order_id=order_id,
        )
        await self._store.insert(record)

        logger.info(
            "limit_order_opened",
            record_id=record.id,
            order_id=order_id,
            symbol=plan.params.symbol,
            side=plan.params.side.value,
            qty=str(plan.params.qty),
            price=str(plan.params.price),
            rescued=plan.rescued,
        )
        return record

    async def record_cancellation(
        self,
        user_id: str,
        review_result_id: str,
        planned: PlannedOrder,
        reason: str,
    ) -> LimitOrderRecord:
        record = LimitOrderRecord(
            user_id=user_id,
            review_result_id=review_result_id,
            status=LimitOrderStatus.CANCELED,
            planned=planned,
            cancellation_reason=reason,
        )
        await self._store.insert(record)

        logger.info(
            "limit_order_canceled",
            record_id=record.id,
            symbol=planned.symbol,
            side=planned.side.value,
            reason=reason,
        )
        return record
