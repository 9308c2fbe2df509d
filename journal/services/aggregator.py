"""Portfolio statistics over a set of trades and their P/L.

Pure computation: callers compute the P/L map (see exit_engine.compute_pl_map)
and hand it in together with the same options, so the aggregator can re-derive
eligible highs for timing stats and the sell-day breakdown.
"""

import logging
from dataclasses import dataclass, field
from datetime import tzinfo
from typing import Iterable

import numpy as np

from journal.services.classifier import classify
from journal.services.domain import AnalysisOptions, PLResult, TradeSnapshot
from journal.services.exit_engine import filter_highs, resolve_exit
from journal.utils.constants import (
    CONTRACT_MULTIPLIER,
    TRADE_TYPE_0DTE,
    TRADE_TYPE_SWING,
    TRADE_TYPE_SWING_DAY,
    Weekday,
)
from journal.utils.timeutils import ensure_utc, weekday_bucket

logger = logging.getLogger(__name__)


def _weekday_zeros() -> dict[Weekday, float]:
    return {day: 0 for day in Weekday}


@dataclass
class DayWinLoss:
    wins: int = 0
    losses: int = 0


@dataclass
class Summary:
    """Aggregate journal statistics. Durations are in seconds."""
    trade_count: int = 0
    total_profit_dollars: float = 0.0
    total_cost_dollars: float = 0.0
    total_percent: float = 0.0

    win_count: int = 0
    loss_count: int = 0
    win_ratio: float = 0.0
    weighted_win_ratio: float = 0.0

    calls: int = 0
    puts: int = 0
    swings: int = 0
    swings_day: int = 0
    zero_dte: int = 0

    trades_by_day: dict[Weekday, int] = field(default_factory=_weekday_zeros)
    win_loss_by_day: dict[Weekday, DayWinLoss] = field(
        default_factory=lambda: {day: DayWinLoss() for day in Weekday}
    )
    pl_by_day_bought: dict[Weekday, float] = field(default_factory=_weekday_zeros)
    pl_by_day_sold: dict[Weekday, float] = field(default_factory=_weekday_zeros)

    avg_time_between_highs: float | None = None
    median_time_between_highs: float | None = None
    avg_high_to_low: float | None = None
    median_high_to_low: float | None = None


def is_win(trade: TradeSnapshot, pl: PLResult) -> bool:
    """A win needs positive dollars; break-even and treat-as-loss are losses."""
    return not trade.treat_as_loss and pl.dollars > 0


def _average(values: list[float]) -> float | None:
    return float(np.mean(values)) if values else None


def _median(values: list[float]) -> float | None:
    return float(np.median(values)) if values else None


def high_time_gaps(
    trades: Iterable[TradeSnapshot],
    options: AnalysisOptions,
    tz: tzinfo,
) -> tuple[list[float], list[float]]:
    """Collect (successive high-to-high gaps, top-two-highs gaps) in seconds.

    Only trades with at least two eligible, timestamped highs contribute.
    """
    between: list[float] = []
    high_to_low: list[float] = []

    for trade in trades:
        highs = [h for h in filter_highs(trade, options.filters, tz) if h.observed_at is not None]
        if len(highs) < 2:
            continue

        times = sorted(ensure_utc(h.observed_at) for h in highs)
        for prev, cur in zip(times, times[1:]):
            between.append((cur - prev).total_seconds())

        top, second = sorted(highs, key=lambda h: h.price, reverse=True)[:2]
        gap = ensure_utc(top.observed_at) - ensure_utc(second.observed_at)
        high_to_low.append(abs(gap.total_seconds()))

    return between, high_to_low


def sell_day(trade: TradeSnapshot, options: AnalysisOptions, tz: tzinfo) -> Weekday | None:
    """Weekday the position was sold: the exit high's day, else expiry, else entry."""
    selection = resolve_exit(trade, options.filters, options.exit_policy, tz)
    if selection is not None and selection.high is not None and selection.high.observed_at is not None:
        return weekday_bucket(selection.high.observed_at, tz)
    return weekday_bucket(trade.expiry_at or trade.entry_at, tz)


def aggregate(
    trades: Iterable[TradeSnapshot],
    pl_by_trade_id: dict[str, PLResult],
    options: AnalysisOptions,
    tz: tzinfo,
) -> Summary:
    """Summarize non-excluded trades.

    Trades without an entry in `pl_by_trade_id` are skipped with a warning.
    """
    summary = Summary()
    included: list[TradeSnapshot] = []

    total_abs = 0.0
    total_positive = 0.0

    for trade in trades:
        if trade.excluded:
            continue
        pl = pl_by_trade_id.get(trade.id)
        if pl is None:
            logger.warning(f"No P/L computed for trade {trade.id}; skipping it in summary")
            continue
        included.append(trade)

        # Money
        summary.total_profit_dollars += pl.dollars
        summary.total_cost_dollars += (trade.average_entry or 0.0) * CONTRACT_MULTIPLIER
        total_abs += abs(pl.dollars)
        if pl.dollars > 0:
            total_positive += pl.dollars

        # Outcomes
        won = is_win(trade, pl)
        if won:
            summary.win_count += 1
        else:
            summary.loss_count += 1

        # Composition
        if trade.option_type == "call":
            summary.calls += 1
        elif trade.option_type == "put":
            summary.puts += 1

        labels = classify(trade, tz)
        if TRADE_TYPE_0DTE in labels:
            summary.zero_dte += 1
        elif TRADE_TYPE_SWING in labels:
            summary.swings += 1
            if TRADE_TYPE_SWING_DAY in labels and not trade.treat_as_loss:
                summary.swings_day += 1

        # Weekday breakdowns
        bought = weekday_bucket(trade.entry_at, tz)
        if bought is not None:
            summary.trades_by_day[bought] += 1
            summary.pl_by_day_bought[bought] += pl.dollars
            bucket = summary.win_loss_by_day[bought]
            if won:
                bucket.wins += 1
            else:
                bucket.losses += 1

        sold = sell_day(trade, options, tz)
        if sold is not None:
            summary.pl_by_day_sold[sold] += pl.dollars

    summary.trade_count = len(included)

    if summary.total_cost_dollars:
        summary.total_percent = summary.total_profit_dollars / summary.total_cost_dollars * 100
    if summary.trade_count:
        summary.win_ratio = summary.win_count / summary.trade_count * 100
    if total_abs:
        summary.weighted_win_ratio = total_positive / total_abs * 100

    between, high_to_low = high_time_gaps(included, options, tz)
    summary.avg_time_between_highs = _average(between)
    summary.median_time_between_highs = _median(between)
    summary.avg_high_to_low = _average(high_to_low)
    summary.median_high_to_low = _median(high_to_low)

    return summary
