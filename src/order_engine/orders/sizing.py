"""Order size normalization into base-asset units at exchange precision."""

from decimal import Decimal

from order_engine.exceptions import DenominationMismatchError
from order_engine.exchange.types import round_to_precision
from order_engine.models import DecisionOrderRequest, InstrumentMetadata


def check_denomination(
    request: DecisionOrderRequest, metadata: InstrumentMetadata
) -> None:
    """Raise DenominationMismatchError unless the token is one of the pair's assets."""
    if request.denomination_token not in (metadata.base_asset, metadata.quote_asset):
        raise DenominationMismatchError(
            f"Token {request.denomination_token} is neither base "
            f"{metadata.base_asset} nor quote {metadata.quote_asset} "
            f"of {metadata.symbol}"
        )


def resolve_quantity(
    request: DecisionOrderRequest,
    metadata: InstrumentMetadata,
    price: Decimal,
) -> Decimal:
    """Convert the requested quantity to base units and round it half-up.

    Quote-denominated sizes go through the resolved execution price, never
    the decision-time base or limit price.
    """
    check_denomination(request, metadata)
    if request.denomination_token == metadata.quote_asset:
        qty = request.quantity / price
    else:
        qty = request.quantity
    return round_to_precision(qty, metadata.quantity_precision)
