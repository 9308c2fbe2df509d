"""Pydantic schemas for the dashboard API.

The summary is serialized with camelCase names (totalProfitDollars,
plByDaySold, ...), which is what the dashboard front end reads.
"""

import math
import re

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from journal.config import settings
from journal.schemas.trade import TradeFilterRequest, TradeRead
from journal.services.aggregator import Summary
from journal.services.domain import AnalysisOptions, FilterConfig, PLResult, normalize_exit_policy
from journal.utils.constants import EXIT_POLICY_ALIASES

_HHMM_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def _finite(value: float | None) -> float | None:
    """JSON has no NaN/inf; report them as null."""
    if value is None or math.isinf(value) or math.isnan(value):
        return None
    return value


class AnalysisOptionsRequest(BaseModel):
    max_gain_percent: float | None = None
    max_high_time: str | None = None
    max_days_passed: int | None = Field(default=None, ge=0)
    exit_policy: int | str = 0
    loss_modifier_pct: float = Field(default_factory=lambda: settings.default_loss_modifier_pct, ge=0)

    @field_validator("max_high_time")
    @classmethod
    def _validate_time(cls, value: str | None) -> str | None:
        if value is None or value == "":
            return None
        if not _HHMM_RE.fullmatch(value):
            raise ValueError("must be HH:MM (24h)")
        return value

    @field_validator("exit_policy")
    @classmethod
    def _validate_exit_policy(cls, value: int | str) -> int | str:
        if isinstance(value, int):
            if value < 0:
                raise ValueError("rank must be >= 0")
            return value
        text = value.strip().lower()
        if text in EXIT_POLICY_ALIASES:
            return EXIT_POLICY_ALIASES[text]
        if text.isdigit():
            return int(text)
        allowed = ", ".join(sorted(EXIT_POLICY_ALIASES))
        raise ValueError(f"must be a non-negative rank or one of: {allowed}")

    def to_options(self) -> AnalysisOptions:
        return AnalysisOptions(
            filters=FilterConfig(
                max_gain_percent=self.max_gain_percent,
                max_high_time=self.max_high_time,
                max_days_passed=self.max_days_passed,
            ),
            exit_policy=normalize_exit_policy(self.exit_policy),
            loss_modifier_pct=self.loss_modifier_pct,
        )


class DashboardRequest(BaseModel):
    query: TradeFilterRequest = Field(default_factory=TradeFilterRequest)
    options: AnalysisOptionsRequest = Field(default_factory=AnalysisOptionsRequest)


class PLRead(BaseModel):
    dollars: float | None
    percent: float | None

    @classmethod
    def from_result(cls, pl: PLResult) -> "PLRead":
        return cls(dollars=_finite(pl.dollars), percent=_finite(pl.percent))


class DayWinLossRead(BaseModel):
    wins: int
    losses: int


class SummaryRead(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    trade_count: int
    total_profit_dollars: float | None
    total_cost_dollars: float | None
    total_percent: float | None
    win_count: int
    loss_count: int
    win_ratio: float
    weighted_win_ratio: float | None
    calls: int
    puts: int
    swings: int
    swings_day: int
    zero_dte: int = Field(alias="zeroDTE")
    trades_by_day: dict[str, int]
    win_loss_by_day: dict[str, DayWinLossRead]
    pl_by_day_bought: dict[str, float | None]
    pl_by_day_sold: dict[str, float | None]
    avg_time_between_highs: float | None
    median_time_between_highs: float | None
    avg_high_to_low: float | None
    median_high_to_low: float | None

    @classmethod
    def from_summary(cls, summary: Summary) -> "SummaryRead":
        return cls(
            trade_count=summary.trade_count,
            total_profit_dollars=_finite(summary.total_profit_dollars),
            total_cost_dollars=_finite(summary.total_cost_dollars),
            total_percent=_finite(summary.total_percent),
            win_count=summary.win_count,
            loss_count=summary.loss_count,
            win_ratio=summary.win_ratio,
            weighted_win_ratio=_finite(summary.weighted_win_ratio),
            calls=summary.calls,
            puts=summary.puts,
            swings=summary.swings,
            swings_day=summary.swings_day,
            zero_dte=summary.zero_dte,
            trades_by_day={d.label: n for d, n in summary.trades_by_day.items()},
            win_loss_by_day={
                d.label: DayWinLossRead(wins=wl.wins, losses=wl.losses)
                for d, wl in summary.win_loss_by_day.items()
            },
            pl_by_day_bought={d.label: _finite(v) for d, v in summary.pl_by_day_bought.items()},
            pl_by_day_sold={d.label: _finite(v) for d, v in summary.pl_by_day_sold.items()},
            avg_time_between_highs=summary.avg_time_between_highs,
            median_time_between_highs=summary.median_time_between_highs,
            avg_high_to_low=summary.avg_high_to_low,
            median_high_to_low=summary.median_high_to_low,
        )


class DashboardResponse(BaseModel):
    trades: list[TradeRead]
    summary: SummaryRead
    pl: dict[str, PLRead]
    available_filters: dict
