"""Precision helpers shared by the exchange client and order planning.

All rounding is done on Decimal with an explicit rounding mode so two
callers can never disagree on the result.
"""

from decimal import ROUND_CEILING, ROUND_HALF_UP, Decimal


def _quantum(places: int) -> Decimal:
    return Decimal(1).scaleb(-places)


def round_to_precision(value: Decimal, places: int) -> Decimal:
    """Round half-up to a fixed number of decimal places.

    Args:
        value: The raw price or quantity.
        places: Decimal places allowed by the exchange (0 for whole units).

    Returns:
        The rounded value, quantized to exactly ``places`` places.
    """
    return value.quantize(_quantum(places), rounding=ROUND_HALF_UP)


def ceil_to_precision(value: Decimal, places: int) -> Decimal:
    """Round up to the smallest value representable at ``places`` decimal places."""
    return value.quantize(_quantum(places), rounding=ROUND_CEILING)


def precision_from_step(step: Decimal | str | float | int) -> int:
    """Convert a step or tick size into a count of decimal places.

    ``"0.00100"`` -> 3, ``"1"`` -> 0, ``"10"`` -> 0.
    """
    normalized = Decimal(str(step)).normalize()
    exponent = normalized.as_tuple().exponent
    if not isinstance(exponent, int) or exponent >= 0:
        return 0
    return -exponent


def leading_digit(value: Decimal) -> tuple[int, int] | None:
    """Return ``(d, n)`` such that the first significant digit of value is d x 10^-n.

    Returns None for zero, negative and non-finite values, which have no
    meaningful leading digit.
    """
    if not value.is_finite() or value <= 0:
        return None
    digits = value.normalize().as_tuple().digits
    return digits[0], -value.adjusted()
