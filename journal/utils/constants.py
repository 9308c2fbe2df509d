"""Shared constants for the journal domain."""

from enum import IntEnum

# Standard equity option contract covers 100 shares
CONTRACT_MULTIPLIER = 100

OPTION_TYPES = ["call", "put"]

TRADE_TYPE_0DTE = "0dte"
TRADE_TYPE_SWING = "swing"
TRADE_TYPE_SWING_DAY = "swing-day"
TRADE_TYPES = [TRADE_TYPE_0DTE, TRADE_TYPE_SWING, TRADE_TYPE_SWING_DAY]

# Single-tag precedence when a trade needs exactly one type
TRADE_TYPE_PRECEDENCE = [TRADE_TYPE_0DTE, TRADE_TYPE_SWING_DAY, TRADE_TYPE_SWING]

EXIT_POLICY_AVERAGE = "average"
EXIT_POLICY_MEDIAN = "median"
EXIT_POLICY_ALIASES: dict[str, str] = {
    "avg": EXIT_POLICY_AVERAGE,
    "average": EXIT_POLICY_AVERAGE,
    "median": EXIT_POLICY_MEDIAN,
}

VERIFIED_FILTERS = ["all", "verified", "unverified"]
SORT_ORDERS = ["newest", "oldest"]

DAY_NAMES = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]


class Weekday(IntEnum):
    """Trading weekdays used as statistics buckets (Python's Monday=0 numbering)."""

    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4

    @property
    def label(self) -> str:
        return DAY_NAMES[self.value]


# Saturday/Sunday (datetime.weekday() 5 and 6) never land in a weekday bucket
WEEKEND_EXCLUDED = frozenset({5, 6})
