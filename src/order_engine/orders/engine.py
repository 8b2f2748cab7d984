"""Decision cycle runner.

Each instruction of a cycle is processed end-to-end on its own task:
metadata lookup, price lookup, planning, submission and persistence.
Instructions share no mutable state, complete in any order, and a failure
in one never cancels its siblings.
"""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field
from decimal import Decimal

from order_engine.exchange.client import ExchangeClient
from order_engine.logging import bind_cycle_context, clear_cycle_context, get_logger
from order_engine.market_data.instrument_cache import InstrumentCache
from order_engine.models import DecisionOrderRequest, LimitOrderRecord, LimitOrderStatus
from order_engine.orders.planner import plan_order
from order_engine.orders.pricing_guard import DEFAULT_SPREAD, PRICE_DIVERGENCE_REASON
from order_engine.orders.submitter import OrderSubmitter

logger = get_logger(__name__)


@dataclass
class RequestFailure:
    """An instruction whose pipeline raised instead of producing a record."""

    request: DecisionOrderRequest
    error: BaseException


@dataclass
class CycleResult:
    """Aggregated outcome of one decision cycle."""

    records: list[LimitOrderRecord] = field(default_factory=list)
    failures: list[RequestFailure] = field(default_factory=list)

    @property
    def placed(self) -> int:
        return sum(1 for r in self.records if r.status == LimitOrderStatus.OPEN)

    @property
    def canceled(self) -> int:
        return sum(1 for r in self.records if r.status == LimitOrderStatus.CANCELED)

    @property
    def price_divergence_cancellations(self) -> int:
        return sum(
            1
            for r in self.records
            if r.cancellation_reason == PRICE_DIVERGENCE_REASON
        )

    @property
    def needs_price_divergence_retry(self) -> bool:
        """True when the market ran away from every instruction that got this far.

        A hint for the scheduler to request a fresh decision.
        """
        return self.price_divergence_cancellations > 0 and self.placed == 0


class DecisionExecutor:
    """Translates decision instructions into limit orders and audit records.

    Args:
        exchange_client: Source of observed prices.
        instrument_cache: Cached instrument metadata lookups.
        submitter: Places orders and writes audit rows.
        spread: Relative offset used when anchoring to the live price.
    """

    def __init__(
        self,
        exchange_client: ExchangeClient,
        instrument_cache: InstrumentCache,
        submitter: OrderSubmitter,
        spread: Decimal = DEFAULT_SPREAD,
    ) -> None:
        self._exchange_client = exchange_client
        self._instrument_cache = instrument_cache
        self._submitter = submitter
        self._spread = spread

    async def process_request(
        self,
        user_id: str,
        review_result_id: str,
        request: DecisionOrderRequest,
    ) -> LimitOrderRecord:
        """Run one instruction through the full pipeline.

        Raises:
            DenominationMismatchError: Token is not one of the pair's assets.
            InstrumentNotFoundError / PriceUnavailableError: Lookup failures.
            OrderPlacementError: The exchange call failed; nothing recorded.
        """
        metadata = await self._instrument_cache.get(request.pair)
        observed_price = await self._exchange_client.fetch_price(request.pair)

        plan = plan_order(request, metadata, observed_price, self._spread)
        logger.debug(
            "order_planned",
            pair=request.pair,
            side=request.side.value,
            observed_price=str(observed_price),
            accepted=plan.accepted,
            reason=plan.reason,
        )
        return await self._submitter.submit(user_id, review_result_id, plan)

    async def execute_decision(
        self,
        user_id: str,
        review_result_id: str,
        requests: Sequence[DecisionOrderRequest],
    ) -> CycleResult:
        """Process all instructions of one decision cycle concurrently.

        Errors are isolated per instruction and collected in
        ``CycleResult.failures``; they are never converted to cancellations.
        """
        bind_cycle_context(user_id, review_result_id)
        try:
            outcomes = await asyncio.gather(
                *(
                    self.process_request(user_id, review_result_id, request)
                    for request in requests
                ),
                return_exceptions=True,
            )
        finally:
            clear_cycle_context()

        result = CycleResult()
        for request, outcome in zip(requests, outcomes):
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
            if isinstance(outcome, BaseException):
                logger.error(
                    "decision_order_failed",
                    user_id=user_id,
                    review_result_id=review_result_id,
                    pair=request.pair,
                    error_type=type(outcome).__name__,
                    error=str(outcome),
                )
                result.failures.append(RequestFailure(request=request, error=outcome))
            else:
                result.records.append(outcome)

        logger.info(
            "decision_cycle_complete",
            user_id=user_id,
            review_result_id=review_result_id,
            requested=len(requests),
            placed=result.placed,
            canceled=result.canceled,
            failed=len(result.failures),
            needs_price_divergence_retry=result.needs_price_divergence_retry,
        )
        return result
