"""Audit persistence layer.

Provides the SQLite database manager and the append-only limit order store.
"""

from order_engine.data.database import OrderDatabase
from order_engine.data.store import LimitOrderStore

__all__ = ["LimitOrderStore", "OrderDatabase"]
