"""Tests for OrderDatabase and LimitOrderStore on an in-memory SQLite database."""

import json
import sqlite3
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from order_engine.data.database import OrderDatabase
from order_engine.data.store import LimitOrderStore
from order_engine.models import (
    LimitOrderRecord,
    LimitOrderStatus,
    OrderSide,
    PlannedOrder,
)

T0 = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


def _planned(symbol: str = "BTCUSDT", observed: Decimal | None = None) -> PlannedOrder:
    return PlannedOrder(
        symbol=symbol,
        side=OrderSide.BUY,
        qty=Decimal("0.00100000"),
        price=Decimal("99900.00"),
        limit_price=Decimal("99900"),
        base_price=Decimal("100000"),
        max_price_drift_pct=Decimal("0.02"),
        observed_price=observed,
    )


def _open(user_id: str = "user-1", review: str = "review-1", **kwargs) -> LimitOrderRecord:
    return LimitOrderRecord(
        user_id=user_id,
        review_result_id=review,
        status=LimitOrderStatus.OPEN,
        planned=kwargs.pop("planned", _planned()),
        exchange_order_id=kwargs.pop("exchange_order_id", "ex-1"),
        **kwargs,
    )


def _canceled(user_id: str = "user-1", review: str = "review-1", **kwargs) -> LimitOrderRecord:
    return LimitOrderRecord(
        user_id=user_id,
        review_result_id=review,
        status=LimitOrderStatus.CANCELED,
        planned=kwargs.pop("planned", _planned()),
        cancellation_reason=kwargs.pop("cancellation_reason", "price divergence too high"),
        **kwargs,
    )


class TestOrderDatabase:
    def test_db_property_requires_connection(self) -> None:
        database = OrderDatabase(":memory:")
        with pytest.raises(RuntimeError, match="not connected"):
            _ = database.db

    @pytest.mark.asyncio
    async def test_schema_version_written_once(self, tmp_path) -> None:
        path = str(tmp_path / "nested" / "orders.db")
        async with OrderDatabase(path) as database:
            cursor = await database.db.execute("SELECT COUNT(*) FROM schema_version")
            assert (await cursor.fetchone())[0] == 1

        # Reopening an existing file does not duplicate the version row
        async with OrderDatabase(path) as database:
            cursor = await database.db.execute("SELECT COUNT(*) FROM schema_version")
            assert (await cursor.fetchone())[0] == 1

    @pytest.mark.asyncio
    async def test_status_check_constraint(self, database: OrderDatabase) -> None:
        with pytest.raises(sqlite3.IntegrityError):
            await database.db.execute(
                "INSERT INTO limit_order (id, user_id, review_result_id, status, "
                "planned_json, created_at) VALUES ('x', 'u', 'r', 'failed', '{}', 'now')"
            )


class TestLimitOrderStore:
    @pytest.mark.asyncio
    async def test_insert_and_get_round_trip(self, store: LimitOrderStore) -> None:
        record = _open(created_at=T0)
        await store.insert(record)

        loaded = await store.get(record.id)
        assert loaded == record
        assert loaded.planned.qty == Decimal("0.00100000")
        assert loaded.created_at == T0

    @pytest.mark.asyncio
    async def test_get_unknown_returns_none(self, store: LimitOrderStore) -> None:
        assert await store.get("missing") is None

    @pytest.mark.asyncio
    async def test_planned_json_uses_string_decimals(
        self, store: LimitOrderStore, database: OrderDatabase
    ) -> None:
        record = _canceled(planned=_planned(observed=Decimal("103000")))
        await store.insert(record)

        cursor = await database.db.execute(
            "SELECT planned_json FROM limit_order WHERE id = ?", (record.id,)
        )
        payload = json.loads((await cursor.fetchone())[0])
        assert payload["side"] == "BUY"
        assert payload["price"] == "99900.00"
        assert payload["observedPrice"] == "103000"
        assert payload["manuallyEdited"] is False

    @pytest.mark.asyncio
    async def test_planned_json_omits_observed_price_when_unused(
        self, store: LimitOrderStore, database: OrderDatabase
    ) -> None:
        record = _open()
        await store.insert(record)

        cursor = await database.db.execute(
            "SELECT planned_json FROM limit_order WHERE id = ?", (record.id,)
        )
        payload = json.loads((await cursor.fetchone())[0])
        assert "observedPrice" not in payload

    @pytest.mark.asyncio
    async def test_list_by_review_result_oldest_first(
        self, store: LimitOrderStore
    ) -> None:
        later = _canceled(created_at=T0 + timedelta(seconds=5))
        earlier = _open(created_at=T0)
        other_cycle = _open(review="review-2", created_at=T0)
        for record in (later, earlier, other_cycle):
            await store.insert(record)

        records = await store.list_by_review_result("review-1")
        assert [r.id for r in records] == [earlier.id, later.id]

    @pytest.mark.asyncio
    async def test_list_open_filters_status_and_user(
        self, store: LimitOrderStore
    ) -> None:
        mine = _open(user_id="user-1", created_at=T0)
        theirs = _open(user_id="user-2", created_at=T0 + timedelta(seconds=1))
        await store.insert(mine)
        await store.insert(theirs)
        await store.insert(_canceled(user_id="user-1"))

        assert [r.id for r in await store.list_open()] == [mine.id, theirs.id]
        assert [r.id for r in await store.list_open("user-2")] == [theirs.id]

    @pytest.mark.asyncio
    async def test_count(self, store: LimitOrderStore) -> None:
        assert await store.count() == 0
        await store.insert(_open())
        await store.insert(_canceled())
        assert await store.count() == 2

    @pytest.mark.asyncio
    async def test_duplicate_id_rejected(self, store: LimitOrderStore) -> None:
        record = _open()
        await store.insert(record)
        with pytest.raises(sqlite3.IntegrityError):
            await store.insert(record)
