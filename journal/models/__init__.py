"""Database models."""

from journal.models.trade import Trade
from journal.models.trade_high import TradeHigh

__all__ = [
    "Trade",
    "TradeHigh",
]
