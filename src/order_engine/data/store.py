"""Append-only audit store for limit orders.

One row is written per processed instruction, open or canceled, and this
engine never updates it afterwards. Later status changes (fills,
cancellations) belong to other components reading through the query
methods below.

The planned order is stored as JSON with Decimals as strings.
"""

import json
from datetime import datetime

import aiosqlite

from order_engine.data.database import OrderDatabase
from order_engine.logging import get_logger
from order_engine.models import LimitOrderRecord, LimitOrderStatus, PlannedOrder

logger = get_logger(__name__)

_SELECT_COLUMNS = (
    "SELECT id, user_id, review_result_id, status, planned_json, "
    "cancellation_reason, order_id, created_at FROM limit_order"
)


def _row_to_record(row: aiosqlite.Row) -> LimitOrderRecord:
    return LimitOrderRecord(
        id=row["id"],
        user_id=row["user_id"],
        review_result_id=row["review_result_id"],
        status=LimitOrderStatus(row["status"]),
        planned=PlannedOrder.from_payload(json.loads(row["planned_json"])),
        cancellation_reason=row["cancellation_reason"],
        exchange_order_id=row["order_id"],
        created_at=datetime.fromisoformat(row["created_at"]),
    )


class LimitOrderStore:
    """Typed read/write access to the ``limit_order`` table.

    Args:
        database: Connected OrderDatabase.
    """

    def __init__(self, database: OrderDatabase) -> None:
        self._database = database

    async def insert(self, record: LimitOrderRecord) -> None:
        """Persist a new record. Records are never updated by this engine."""
        await self._database.db.execute(
            "INSERT INTO limit_order "
            "(id, user_id, review_result_id, status, planned_json, "
            "cancellation_reason, order_id, created_at) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            (
                record.id,
                record.user_id,
                record.review_result_id,
                record.status.value,
                json.dumps(record.planned.to_payload()),
                record.cancellation_reason,
                record.exchange_order_id,
                record.created_at.isoformat(),
            ),
        )
        await self._database.db.commit()

        logger.debug(
            "limit_order_recorded",
            record_id=record.id,
            status=record.status.value,
            symbol=record.planned.symbol,
        )

    async def get(self, record_id: str) -> LimitOrderRecord | None:
        cursor = await self._database.db.execute(
            f"{_SELECT_COLUMNS} WHERE id = ?", (record_id,)
        )
        row = await cursor.fetchone()
        return _row_to_record(row) if row is not None else None

    async def list_by_review_result(
        self, review_result_id: str
    ) -> list[LimitOrderRecord]:
        """Return all records of one decision cycle, oldest first."""
        cursor = await self._database.db.execute(
            f"{_SELECT_COLUMNS} WHERE review_result_id = ? "
            "ORDER BY created_at, rowid",
            (review_result_id,),
        )
        rows = await cursor.fetchall()
        return [_row_to_record(row) for row in rows]

    async def list_open(self, user_id: str | None = None) -> list[LimitOrderRecord]:
        """Return open records, optionally restricted to one user."""
        if user_id is None:
            cursor = await self._database.db.execute(
                f"{_SELECT_COLUMNS} WHERE status = ? ORDER BY created_at, rowid",
                (LimitOrderStatus.OPEN.value,),
            )
        else:
            cursor = await self._database.db.execute(
                f"{_SELECT_COLUMNS} WHERE status = ? AND user_id = ? "
                "ORDER BY created_at, rowid",
                (LimitOrderStatus.OPEN.value, user_id),
            )
        rows = await cursor.fetchall()
        return [_row_to_record(row) for row in rows]

    async def count(self) -> int:
        cursor = await self._database.db.execute("SELECT COUNT(*) FROM limit_order")
        row = await cursor.fetchone()
        return int(row[0]) if row is not None else 0
