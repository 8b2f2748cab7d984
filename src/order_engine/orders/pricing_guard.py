"""Staleness checks and execution price selection.

The guard decides whether an instruction is still actionable given the
price observed now, and if so which limit price to send:

- SELL always re-anchors to the live price, ``observed * (1 + spread)``,
  even when the market has not moved since decision time.
- BUY keeps the proposed ``limit_price`` verbatim when the market has not
  moved, and otherwise re-anchors to ``observed * (1 - spread)`` so the
  order keeps resting below the market.

The asymmetry is intended. Everything here is pure and synchronous.
"""

from dataclasses import dataclass
from decimal import Decimal

from order_engine.exchange.types import round_to_precision
from order_engine.models import DecisionOrderRequest, OrderSide

DEFAULT_SPREAD = Decimal("0.001")

PRICE_DIVERGENCE_REASON = "price divergence too high"


@dataclass(frozen=True)
class PriceOutcome:
    """Result of the pricing guard: an execution price or a cancellation reason."""

    price: Decimal | None = None
    drift: Decimal | None = None
    used_observed_price: bool = False
    reason: str | None = None
    drift_exceeded: bool = False

    @property
    def accepted(self) -> bool:
        return self.reason is None


def compute_drift(base_price: Decimal, observed_price: Decimal) -> Decimal:
    """Relative move of the observed price away from the decision-time price."""
    return (observed_price - base_price) / base_price


def resolve_price(
    request: DecisionOrderRequest,
    observed_price: Decimal,
    price_precision: int,
    spread: Decimal = DEFAULT_SPREAD,
) -> PriceOutcome:
    """Validate staleness bounds and compute the rounded execution price.

    Args:
        request: The instruction being translated.
        observed_price: The market price observed right now.
        price_precision: Decimal places allowed for the price.
        spread: Relative offset applied when anchoring to the live price.

    Returns:
        PriceOutcome with ``price`` set when accepted, ``reason`` otherwise.
    """
    limit_price = request.limit_price
    if limit_price is None or not limit_price.is_finite():
        return PriceOutcome(reason=f"Malformed limitPrice: {limit_price}")

    max_drift = request.max_price_drift_pct
    if max_drift is None or not max_drift.is_finite() or max_drift <= 0:
        return PriceOutcome(reason=f"Malformed maxPriceDriftPct: {max_drift}")

    drift = compute_drift(request.base_price, observed_price)
    if abs(drift) > max_drift:
        return PriceOutcome(
            drift=drift,
            reason=PRICE_DIVERGENCE_REASON,
            drift_exceeded=True,
        )

    if request.side == OrderSide.SELL:
        raw_price = observed_price * (Decimal("1") + spread)
        used_observed = True
    elif drift == 0:
        raw_price = limit_price
        used_observed = False
    else:
        raw_price = observed_price * (Decimal("1") - spread)
        used_observed = True

    price = round_to_precision(raw_price, price_precision)
    if price <= 0:
        return PriceOutcome(
            drift=drift,
            reason=f"Malformed adjusted limitPrice: {price}",
        )

    return PriceOutcome(price=price, drift=drift, used_observed_price=used_observed)
