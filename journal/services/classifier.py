"""Trade type classification: 0DTE, swing, and swing-day."""

from datetime import tzinfo
from typing import Iterable

from journal.services.domain import TradeSnapshot
from journal.utils.constants import (
    TRADE_TYPE_0DTE,
    TRADE_TYPE_PRECEDENCE,
    TRADE_TYPE_SWING,
    TRADE_TYPE_SWING_DAY,
)
from journal.utils.timeutils import same_calendar_day


def is_swing_day(trade: TradeSnapshot, tz: tzinfo) -> bool:
    """Every recorded high (unfiltered) fell on the entry day."""
    if trade.treat_as_loss or not trade.highs or trade.entry_at is None:
        return False
    return all(same_calendar_day(h.observed_at, trade.entry_at, tz) for h in trade.highs)


def classify(trade: TradeSnapshot, tz: tzinfo) -> frozenset[str]:
    """Label a trade as {"0dte"}, {"swing"} or {"swing", "swing-day"}.

    Trades missing an entry or expiry timestamp cannot be classified and get
    an empty set.
    """
    if trade.entry_at is None or trade.expiry_at is None:
        return frozenset()
    if same_calendar_day(trade.entry_at, trade.expiry_at, tz):
        return frozenset({TRADE_TYPE_0DTE})
    if is_swing_day(trade, tz):
        return frozenset({TRADE_TYPE_SWING, TRADE_TYPE_SWING_DAY})
    return frozenset({TRADE_TYPE_SWING})


def primary_trade_type(labels: Iterable[str]) -> str | None:
    """Collapse a label set to one tag: 0dte > swing-day > swing."""
    labels = set(labels)
    for trade_type in TRADE_TYPE_PRECEDENCE:
        if trade_type in labels:
            return trade_type
    return None
