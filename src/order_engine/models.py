"""Shared data models for the order engine.

All monetary values use Decimal. Floats are only produced at the ccxt boundary.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any
from uuid import uuid4

from order_engine.exceptions import InvalidOrderRequestError


class OrderSide(str, Enum):
    """Order direction."""

    BUY = "buy"
    SELL = "sell"

    @classmethod
    def parse(cls, value: "OrderSide | str") -> "OrderSide":
        if isinstance(value, OrderSide):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidOrderRequestError(f"Invalid order side: {value}") from None


class LimitOrderStatus(str, Enum):
    """Lifecycle status of a persisted limit order."""

    OPEN = "open"
    FILLED = "filled"
    CANCELED = "canceled"


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _required_decimal(name: str, value: Any) -> Decimal:
    try:
        result = _to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise InvalidOrderRequestError(f"Malformed {name}: {value}") from None
    if not result.is_finite() or result <= 0:
        raise InvalidOrderRequestError(f"Malformed {name}: {value}")
    return result


def _optional_decimal(value: Any) -> Decimal | None:
    # Checked later by the pricing guard, which cancels instead of raising.
    if value is None:
        return None
    try:
        return _to_decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        return Decimal("NaN")


@dataclass(frozen=True)
class DecisionOrderRequest:
    """One trade instruction from a decision cycle, for a single pair.

    pair, side, quantity and base_price are validated here and raise
    InvalidOrderRequestError. limit_price and max_price_drift_pct are kept
    as given so a malformed value can be recorded as a cancellation.
    """

    pair: str
    denomination_token: str
    side: OrderSide
    quantity: Decimal
    limit_price: Decimal | None
    base_price: Decimal
    max_price_drift_pct: Decimal | None
    manually_edited: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.pair, str) or not self.pair.strip():
            raise InvalidOrderRequestError(f"Malformed pair: {self.pair!r}")
        if (
            not isinstance(self.denomination_token, str)
            or not self.denomination_token.strip()
        ):
            raise InvalidOrderRequestError(
                f"Malformed token: {self.denomination_token!r}"
            )
        object.__setattr__(self, "pair", self.pair.strip().upper())
        object.__setattr__(
            self, "denomination_token", self.denomination_token.strip().upper()
        )
        object.__setattr__(self, "side", OrderSide.parse(self.side))
        object.__setattr__(
            self, "quantity", _required_decimal("qty", self.quantity)
        )
        object.__setattr__(
            self, "base_price", _required_decimal("basePrice", self.base_price)
        )
        object.__setattr__(self, "limit_price", _optional_decimal(self.limit_price))
        object.__setattr__(
            self, "max_price_drift_pct", _optional_decimal(self.max_price_drift_pct)
        )
        object.__setattr__(self, "manually_edited", bool(self.manually_edited))

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "DecisionOrderRequest":
        """Build a request from the upstream decision payload (camelCase keys)."""
        try:
            return cls(
                pair=payload["pair"],
                denomination_token=payload["token"],
                side=payload["side"],
                quantity=payload["qty"],
                limit_price=payload.get("limitPrice"),
                base_price=payload["basePrice"],
                max_price_drift_pct=payload.get("maxPriceDriftPct"),
                manually_edited=payload.get("manuallyEdited", False),
            )
        except KeyError as exc:
            raise InvalidOrderRequestError(f"Missing field: {exc.args[0]}") from None


@dataclass(frozen=True)
class InstrumentMetadata:
    """Exchange trading constraints for a spot pair.

    Precisions are decimal places, not step sizes.
    """

    symbol: str
    base_asset: str
    quote_asset: str
    quantity_precision: int
    price_precision: int
    min_notional: Decimal = Decimal("0")


@dataclass(frozen=True)
class LimitOrderParams:
    """Exactly what is sent to the exchange order call."""

    symbol: str
    side: OrderSide
    qty: Decimal
    price: Decimal


def _decimal_or_none(value: Any) -> Decimal | None:
    return None if value is None else Decimal(value)


def _str_or_none(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


@dataclass(frozen=True)
class PlannedOrder:
    """Audit payload explaining how an instruction was turned into an order."""

    symbol: str
    side: OrderSide
    qty: Decimal | None
    price: Decimal | None
    limit_price: Decimal | None
    base_price: Decimal
    max_price_drift_pct: Decimal | None
    observed_price: Decimal | None = None
    manually_edited: bool = False

    def to_payload(self) -> dict[str, Any]:
        """Serialize with camelCase keys and Decimals as strings."""
        payload: dict[str, Any] = {
            "symbol": self.symbol,
            "side": self.side.name,
            "qty": _str_or_none(self.qty),
            "price": _str_or_none(self.price),
            "limitPrice": _str_or_none(self.limit_price),
            "basePrice": str(self.base_price),
            "maxPriceDriftPct": _str_or_none(self.max_price_drift_pct),
        }
        if self.observed_price is not None:
            payload["observedPrice"] = str(self.observed_price)
        payload["manuallyEdited"] = self.manually_edited
        return payload

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "PlannedOrder":
        return cls(
            symbol=payload["symbol"],
            side=OrderSide.parse(payload["side"]),
            qty=_decimal_or_none(payload.get("qty")),
            price=_decimal_or_none(payload.get("price")),
            limit_price=_decimal_or_none(payload.get("limitPrice")),
            base_price=Decimal(payload["basePrice"]),
            max_price_drift_pct=_decimal_or_none(payload.get("maxPriceDriftPct")),
            observed_price=_decimal_or_none(payload.get("observedPrice")),
            manually_edited=bool(payload.get("manuallyEdited", False)),
        )


@dataclass(frozen=True)
class LimitOrderRecord:
    """A persisted audit row: one per processed instruction."""

    user_id: str
    review_result_id: str
    status: LimitOrderStatus
    planned: PlannedOrder
    cancellation_reason: str | None = None
    exchange_order_id: str | None = None
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        # Rows later closed by fill reconciliation keep their exchange id,
        # so only the states this engine writes are checked.
        if self.status == LimitOrderStatus.CANCELED and self.cancellation_reason is None:
            raise ValueError("canceled records need a cancellation_reason")
        if self.status == LimitOrderStatus.OPEN and self.exchange_order_id is None:
            raise ValueError("open records need an exchange_order_id")
        if self.status == LimitOrderStatus.OPEN and self.cancellation_reason is not None:
            raise ValueError("open records cannot carry a cancellation_reason")
