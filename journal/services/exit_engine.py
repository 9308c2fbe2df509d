"""Exit-price selection and P/L computation.

All functions are pure computation over TradeSnapshot values: no I/O, no
database access, no mutation of their inputs.
"""

from dataclasses import dataclass
from datetime import tzinfo
from typing import Iterable, Sequence

import numpy as np

from journal.services.domain import (
    AnalysisOptions,
    ExitPolicy,
    FilterConfig,
    HighObservation,
    PLResult,
    TradeSnapshot,
    normalize_exit_policy,
    percent_change,
)
from journal.utils.constants import CONTRACT_MULTIPLIER, EXIT_POLICY_AVERAGE, EXIT_POLICY_MEDIAN
from journal.utils.timeutils import calendar_days_between, time_of_day


@dataclass(frozen=True)
class ExitSelection:
    """Chosen exit price; `high` is None for synthetic average/median exits."""
    price: float
    high: HighObservation | None = None


# ---------------------------------------------------------------------------
# High-price filter
# ---------------------------------------------------------------------------

def filter_highs(trade: TradeSnapshot, config: FilterConfig, tz: tzinfo) -> list[HighObservation]:
    """Reduce a trade's highs to those eligible for exit selection.

    Treat-as-loss trades never have eligible highs. Each configured
    constraint must pass; order is preserved.
    """
    if trade.treat_as_loss or not trade.highs:
        return []

    highs = list(trade.highs)

    if config.max_gain_percent is not None:
        highs = [
            h for h in highs
            if not percent_change(trade.average_entry, h.price) > config.max_gain_percent
        ]

    if config.max_high_time is not None:
        highs = [h for h in highs if _before_cutoff(h, config.max_high_time, tz)]

    if config.max_days_passed is not None:
        highs = [h for h in highs if _within_days(trade, h, config.max_days_passed, tz)]

    return highs


def _before_cutoff(high: HighObservation, cutoff: str, tz: tzinfo) -> bool:
    observed = time_of_day(high.observed_at, tz)
    return observed is not None and observed <= cutoff


def _within_days(trade: TradeSnapshot, high: HighObservation, max_days: int, tz: tzinfo) -> bool:
    days = calendar_days_between(trade.entry_at, high.observed_at, tz)
    return days is not None and days <= max_days


# ---------------------------------------------------------------------------
# Exit selector
# ---------------------------------------------------------------------------

def select_exit(highs: Sequence[HighObservation], policy: ExitPolicy) -> ExitSelection | None:
    """Pick the representative exit from eligible highs.

    A rank is clamped into range (0 = highest price, ties keep input order);
    "average" and "median" produce a synthetic price with no high attached.
    """
    if not highs:
        return None

    policy = normalize_exit_policy(policy)
    prices = [h.price for h in highs]

    if policy == EXIT_POLICY_AVERAGE:
        return ExitSelection(price=float(np.mean(prices)))

    if policy == EXIT_POLICY_MEDIAN:
        return ExitSelection(price=float(np.median(prices)))

    ranked = sorted(highs, key=lambda h: h.price, reverse=True)
    idx = min(policy, len(ranked) - 1)
    return ExitSelection(price=ranked[idx].price, high=ranked[idx])


# ---------------------------------------------------------------------------
# P/L calculator
# ---------------------------------------------------------------------------

def resolve_exit(
    trade: TradeSnapshot,
    config: FilterConfig,
    policy: ExitPolicy,
    tz: tzinfo,
) -> ExitSelection | None:
    """The exit the calculator would use: override first, then selection."""
    if trade.treat_as_loss:
        return None
    override = trade.override_high
    if override is not None:
        return ExitSelection(price=override.price, high=override)
    return select_exit(filter_highs(trade, config, tz), policy)


def compute_pl(
    trade: TradeSnapshot,
    config: FilterConfig,
    policy: ExitPolicy,
    tz: tzinfo,
    loss_modifier_pct: float = 100.0,
) -> PLResult:
    """Realized P/L for one trade.

    Resolution order: treat-as-loss (always a full loss), pinned override
    high, filtered selection, then the modifier-driven loss when nothing is
    eligible.
    """
    entry = trade.average_entry or 0.0

    if trade.treat_as_loss:
        return PLResult(dollars=-entry * CONTRACT_MULTIPLIER, percent=-100.0)

    selection = resolve_exit(trade, config, policy, tz)
    if selection is None:
        loss_pct = -loss_modifier_pct
        return PLResult(dollars=(loss_pct / 100) * entry * CONTRACT_MULTIPLIER, percent=loss_pct)

    return PLResult(
        dollars=(selection.price - entry) * CONTRACT_MULTIPLIER,
        percent=percent_change(entry, selection.price),
    )


def compute_pl_map(
    trades: Iterable[TradeSnapshot],
    options: AnalysisOptions,
    tz: tzinfo,
) -> dict[str, PLResult]:
    """P/L for every non-excluded trade, keyed by trade id."""
    return {
        t.id: compute_pl(t, options.filters, options.exit_policy, tz, options.loss_modifier_pct)
        for t in trades
        if not t.excluded
    }
