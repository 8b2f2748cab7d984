"""Market data layer -- cached instrument metadata lookups."""

from order_engine.market_data.instrument_cache import InstrumentCache

__all__ = ["InstrumentCache"]
