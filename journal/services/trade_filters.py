"""Trade-level query filters and the facets offered to the dashboard."""

from dataclasses import dataclass
from datetime import date, tzinfo
from typing import Sequence

from journal.services.classifier import classify
from journal.services.domain import TradeSnapshot
from journal.utils.constants import DAY_NAMES, EXIT_POLICY_AVERAGE, EXIT_POLICY_MEDIAN
from journal.utils.timeutils import calendar_days_between, day_name, ensure_utc, local_date, ordinal


@dataclass(frozen=True)
class TradeQuery:
    start_date: date | None = None
    end_date: date | None = None
    verified: str = "all"
    tickers: tuple[str, ...] = ()
    trade_types: tuple[str, ...] = ()
    days_of_week: tuple[str, ...] = ()
    sort: str = "newest"


def filter_by_date(
    trades: Sequence[TradeSnapshot],
    start: date | None,
    end: date | None,
    tz: tzinfo,
) -> list[TradeSnapshot]:
    """Keep trades whose local entry date lies in [start, end]."""
    if start is None and end is None:
        return list(trades)

    result = []
    for trade in trades:
        day = local_date(trade.entry_at, tz)
        if day is None:
            continue
        if (start is None or day >= start) and (end is None or day <= end):
            result.append(trade)
    return result


def filter_by_verified(trades: Sequence[TradeSnapshot], verified: str) -> list[TradeSnapshot]:
    if verified == "verified":
        return [t for t in trades if t.verified]
    if verified == "unverified":
        return [t for t in trades if not t.verified]
    return list(trades)


def filter_by_tickers(trades: Sequence[TradeSnapshot], tickers: Sequence[str]) -> list[TradeSnapshot]:
    wanted = {t.strip().upper() for t in tickers if t and t.strip()}
    if not wanted:
        return list(trades)
    return [t for t in trades if t.ticker and t.ticker.upper() in wanted]


def filter_by_trade_types(
    trades: Sequence[TradeSnapshot],
    trade_types: Sequence[str],
    tz: tzinfo,
) -> list[TradeSnapshot]:
    """Keep trades carrying any of the requested type labels."""
    wanted = set(trade_types)
    if not wanted:
        return list(trades)
    return [t for t in trades if wanted & classify(t, tz)]


def filter_by_days_of_week(
    trades: Sequence[TradeSnapshot],
    days: Sequence[str],
    tz: tzinfo,
) -> list[TradeSnapshot]:
    wanted = {d.strip().lower() for d in days if d}
    if not wanted:
        return list(trades)
    result = []
    for trade in trades:
        name = day_name(trade.entry_at, tz)
        if name is not None and name.lower() in wanted:
            result.append(trade)
    return result


def sort_trades(trades: Sequence[TradeSnapshot], order: str = "newest") -> list[TradeSnapshot]:
    """Sort by entry time; trades without an entry always sort last."""
    dated = [t for t in trades if t.entry_at is not None]
    undated = [t for t in trades if t.entry_at is None]
    dated.sort(key=lambda t: ensure_utc(t.entry_at), reverse=(order != "oldest"))
    return dated + undated


def apply_query(trades: Sequence[TradeSnapshot], query: TradeQuery, tz: tzinfo) -> list[TradeSnapshot]:
    result = filter_by_date(trades, query.start_date, query.end_date, tz)
    result = filter_by_verified(result, query.verified)
    result = filter_by_tickers(result, query.tickers)
    result = filter_by_trade_types(result, query.trade_types, tz)
    result = filter_by_days_of_week(result, query.days_of_week, tz)
    return sort_trades(result, query.sort)


def exit_policy_options(trades: Sequence[TradeSnapshot]) -> list[dict]:
    """Rank choices up to the largest number of highs on any trade, then avg/median."""
    max_highs = max((len(t.highs) for t in trades), default=0)
    options = [{"value": i, "label": ordinal(i + 1)} for i in range(max(max_highs, 1))]
    options.append({"value": EXIT_POLICY_AVERAGE, "label": "Average"})
    options.append({"value": EXIT_POLICY_MEDIAN, "label": "Median"})
    return options


def available_filters(trades: Sequence[TradeSnapshot], tz: tzinfo) -> dict:
    """Distinct values present in `trades` for each dashboard filter."""
    tickers: set[str] = set()
    trade_types: set[str] = set()
    days: set[str] = set()
    days_passed: set[int] = set()

    for trade in trades:
        if trade.ticker:
            tickers.add(trade.ticker.upper())
        trade_types.update(classify(trade, tz))
        name = day_name(trade.entry_at, tz)
        if name is not None:
            days.add(name)
        for high in trade.highs:
            passed = calendar_days_between(trade.entry_at, high.observed_at, tz)
            if passed is not None:
                days_passed.add(passed)

    return {
        "tickers": sorted(tickers),
        "trade_types": sorted(trade_types),
        "days_of_week": [d for d in DAY_NAMES if d in days],
        "days_passed": sorted(days_passed),
        "exit_policies": exit_policy_options(trades),
    }
