"""Immutable trade snapshots and analysis options.

The P/L engine, classifier and aggregator only ever see these frozen
dataclasses, never the database rows, so a computation cannot mutate the
trades it is handed.
"""

import math
from dataclasses import dataclass, field
from datetime import datetime

from journal.utils.constants import EXIT_POLICY_ALIASES

ExitPolicy = int | str


@dataclass(frozen=True)
class HighObservation:
    """One recorded post-entry price peak."""
    id: str
    price: float
    observed_at: datetime | None = None


@dataclass(frozen=True)
class TradeSnapshot:
    id: str
    ticker: str = ""
    average_entry: float = 0.0
    strike_price: float = 0.0
    option_type: str = "call"
    entry_at: datetime | None = None
    expiry_at: datetime | None = None
    verified: bool = False
    excluded: bool = False
    treat_as_loss: bool = False
    high_override_id: str | None = None
    highs: tuple[HighObservation, ...] = ()
    images: tuple[str, ...] = ()
    trader: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def find_high(self, high_id: str | None) -> HighObservation | None:
        if not high_id:
            return None
        for high in self.highs:
            if high.id == high_id:
                return high
        return None

    @property
    def override_high(self) -> HighObservation | None:
        """The pinned high, or None when unset or dangling."""
        return self.find_high(self.high_override_id)


@dataclass(frozen=True)
class FilterConfig:
    """Constraints on which highs may be sold into. None disables a constraint."""
    max_gain_percent: float | None = None
    max_high_time: str | None = None  # "HH:MM" local wall clock
    max_days_passed: int | None = None

    def __post_init__(self):
        # NaN used to mean "unset" in older payloads
        if isinstance(self.max_gain_percent, float) and math.isnan(self.max_gain_percent):
            object.__setattr__(self, "max_gain_percent", None)
        if not self.max_high_time:
            object.__setattr__(self, "max_high_time", None)


@dataclass(frozen=True)
class AnalysisOptions:
    """Everything that changes how P/L is derived, bundled for callers."""
    filters: FilterConfig = field(default_factory=FilterConfig)
    exit_policy: ExitPolicy = 0
    loss_modifier_pct: float = 100.0

    def __post_init__(self):
        object.__setattr__(self, "exit_policy", normalize_exit_policy(self.exit_policy))


@dataclass(frozen=True)
class PLResult:
    dollars: float
    percent: float


def normalize_exit_policy(policy) -> ExitPolicy:
    """Coerce an exit policy to a non-negative rank, "average" or "median".

    Unknown strings and negative ranks fall back to rank 0 (the highest high).
    """
    if isinstance(policy, bool):
        return 0
    if isinstance(policy, int):
        return max(policy, 0)
    if isinstance(policy, str):
        text = policy.strip().lower()
        if text in EXIT_POLICY_ALIASES:
            return EXIT_POLICY_ALIASES[text]
        try:
            return max(int(text), 0)
        except ValueError:
            return 0
    return 0


def percent_change(entry: float, price: float) -> float:
    """Percent move from entry to price; NaN when entry is zero."""
    if not entry:
        return float("nan")
    return (price - entry) / entry * 100
