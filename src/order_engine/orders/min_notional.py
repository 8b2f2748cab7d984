"""Minimum-notional rescue for rounding shortfalls.

When ``qty * price`` lands below the exchange minimum, the order is bumped
to the smallest representable quantity that clears it, but only if the
requested quantity already shares its leading significant digit and that
digit's decimal position with that minimum. Anything further off is
treated as a sizing mistake and rejected rather than silently scaled up.

Example at price 110000, min notional 5, 8 quantity places: the minimum
is 0.00004546. A qty of 0.000043 (4 x 10^-5) is bumped; 0.00003
(3 x 10^-5) is rejected.
"""

from dataclasses import dataclass
from decimal import Decimal

from order_engine.exchange.types import ceil_to_precision, leading_digit

BELOW_MIN_NOTIONAL_REASON = "order below min notional"


@dataclass(frozen=True)
class RescueOutcome:
    qty: Decimal | None = None
    rescued: bool = False
    reason: str | None = None

    @property
    def accepted(self) -> bool:
        return self.reason is None


def rescue(
    qty: Decimal,
    price: Decimal,
    min_notional: Decimal,
    quantity_precision: int,
) -> RescueOutcome:
    """Pass qty through, bump it to the minimum, or reject it."""
    if qty * price >= min_notional:
        return RescueOutcome(qty=qty)

    min_qty = ceil_to_precision(min_notional / price, quantity_precision)
    requested = leading_digit(qty)
    if requested is not None and requested == leading_digit(min_qty):
        return RescueOutcome(qty=min_qty, rescued=True)

    return RescueOutcome(reason=BELOW_MIN_NOTIONAL_REASON)
