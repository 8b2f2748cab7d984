"""Pure translation of one decision instruction into an order plan.

Runs the pricing guard, sizing resolver and minimum-notional rescue in
order and returns either exchange-ready parameters or a cancellation
reason, together with the audit payload that explains the outcome. No I/O
happens here; the observed price and metadata are passed in.
"""

from dataclasses import dataclass
from decimal import Decimal

from order_engine.models import (
    DecisionOrderRequest,
    InstrumentMetadata,
    LimitOrderParams,
    PlannedOrder,
)
from order_engine.orders.min_notional import rescue
from order_engine.orders.pricing_guard import DEFAULT_SPREAD, resolve_price
from order_engine.orders.sizing import check_denomination, resolve_quantity


@dataclass(frozen=True)
class OrderPlan:
    """Outcome of planning: ``params`` when accepted, ``reason`` when canceled."""

    planned: PlannedOrder
    params: LimitOrderParams | None = None
    reason: str | None = None
    drift_exceeded: bool = False
    rescued: bool = False

    @property
    def accepted(self) -> bool:
        return self.params is not None


def _planned(
    request: DecisionOrderRequest,
    metadata: InstrumentMetadata,
    qty: Decimal | None = None,
    price: Decimal | None = None,
    observed_price: Decimal | None = None,
) -> PlannedOrder:
    return PlannedOrder(
        symbol=metadata.symbol,
        side=request.side,
        qty=qty,
        price=price,
        limit_price=request.limit_price,
        base_price=request.base_price,
        max_price_drift_pct=request.max_price_drift_pct,
        observed_price=observed_price,
        manually_edited=request.manually_edited,
    )


def plan_order(
    request: DecisionOrderRequest,
    metadata: InstrumentMetadata,
    observed_price: Decimal,
    spread: Decimal = DEFAULT_SPREAD,
) -> OrderPlan:
    """Translate a request into an order plan.

    Raises:
        DenominationMismatchError: If the request's token is not one of
            the pair's assets. Checked first, regardless of market state.
    """
    check_denomination(request, metadata)

    price_outcome = resolve_price(
        request, observed_price, metadata.price_precision, spread
    )
    if not price_outcome.accepted:
        # The observed price explains a drift rejection; it played no part
        # in a malformed-input rejection.
        return OrderPlan(
            planned=_planned(
                request,
                metadata,
                observed_price=observed_price if price_outcome.drift_exceeded else None,
            ),
            reason=price_outcome.reason,
            drift_exceeded=price_outcome.drift_exceeded,
        )

    price = price_outcome.price
    assert price is not None
    observed = observed_price if price_outcome.used_observed_price else None

    qty = resolve_quantity(request, metadata, price)
    rescue_outcome = rescue(
        qty, price, metadata.min_notional, metadata.quantity_precision
    )
    if not rescue_outcome.accepted:
        return OrderPlan(
            planned=_planned(request, metadata, qty, price, observed),
            reason=rescue_outcome.reason,
        )

    final_qty = rescue_outcome.qty
    assert final_qty is not None
    return OrderPlan(
        planned=_planned(request, metadata, final_qty, price, observed),
        params=LimitOrderParams(
            symbol=metadata.symbol,
            side=request.side,
            qty=final_qty,
            price=price,
        ),
        rescued=rescue_outcome.rescued,
    )
