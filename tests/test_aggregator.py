"""Tests for portfolio statistics."""

import logging
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from journal.services.aggregator import aggregate, high_time_gaps, is_win, sell_day
from journal.services.domain import AnalysisOptions, FilterConfig, HighObservation, PLResult, TradeSnapshot
from journal.services.exit_engine import compute_pl_map
from journal.utils.constants import Weekday

NY = ZoneInfo("America/New_York")


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def _make_trade(trade_id: str, **overrides) -> TradeSnapshot:
    fields = dict(id=trade_id, ticker="SPY", average_entry=2.0, option_type="call")
    fields.update(overrides)
    return TradeSnapshot(**fields)


def _summarize(trades, options=None):
    options = options or AnalysisOptions()
    return aggregate(trades, compute_pl_map(trades, options, NY), options, NY)


@pytest.fixture
def week_of_trades():
    """Monday swing winner, Tuesday and Wednesday 0DTE losers."""
    return [
        _make_trade(
            "mon",
            entry_at=utc(2025, 1, 6, 14, 30),
            expiry_at=utc(2025, 1, 10, 21),
            highs=(HighObservation("h1", 3.0, utc(2025, 1, 7, 15)),),
        ),
        _make_trade(
            "tue",
            option_type="put",
            entry_at=utc(2025, 1, 7, 14, 30),
            expiry_at=utc(2025, 1, 7, 21),
        ),
        _make_trade(
            "wed",
            entry_at=utc(2025, 1, 8, 14, 30),
            expiry_at=utc(2025, 1, 8, 21),
        ),
    ]


# ---------------------------------------------------------------------------
# 1. Totals and ratios
# ---------------------------------------------------------------------------

class TestTotals:
    def test_empty_journal(self):
        summary = aggregate([], {}, AnalysisOptions(), NY)
        assert summary.trade_count == 0
        assert summary.total_profit_dollars == 0
        assert summary.win_ratio == 0
        assert summary.weighted_win_ratio == 0
        assert summary.total_percent == 0
        assert summary.avg_time_between_highs is None
        assert summary.median_high_to_low is None
        assert all(count == 0 for count in summary.trades_by_day.values())

    def test_money_and_ratios(self, week_of_trades):
        summary = _summarize(week_of_trades, AnalysisOptions(loss_modifier_pct=25))
        assert summary.trade_count == 3
        assert summary.total_profit_dollars == pytest.approx(0.0)
        assert summary.total_cost_dollars == pytest.approx(600.0)
        assert summary.total_percent == pytest.approx(0.0)
        assert summary.win_count == 1
        assert summary.loss_count == 2
        assert summary.win_ratio == pytest.approx(100 / 3)
        assert summary.weighted_win_ratio == pytest.approx(50.0)

    def test_total_percent_against_cost(self):
        trades = [_make_trade("a", highs=(HighObservation("h", 3.0),))]
        assert _summarize(trades).total_percent == pytest.approx(50.0)

    def test_break_even_counts_as_loss(self):
        trade = _make_trade("flat", highs=(HighObservation("h", 2.0),))
        summary = _summarize([trade])
        assert summary.win_count == 0
        assert summary.loss_count == 1

    def test_treat_as_loss_is_not_a_win(self):
        trade = _make_trade("t", treat_as_loss=True)
        assert not is_win(trade, PLResult(dollars=10.0, percent=5.0))


# ---------------------------------------------------------------------------
# 2. Composition
# ---------------------------------------------------------------------------

class TestComposition:
    def test_counts(self, week_of_trades):
        summary = _summarize(week_of_trades)
        assert summary.calls == 2
        assert summary.puts == 1
        assert summary.zero_dte == 2
        assert summary.swings == 1
        assert summary.swings_day == 0

    def test_swing_day_counted(self):
        trade = _make_trade(
            "sd",
            entry_at=utc(2025, 1, 6, 14, 30),
            expiry_at=utc(2025, 1, 10, 21),
            highs=(HighObservation("h", 3.0, utc(2025, 1, 6, 16)),),
        )
        summary = _summarize([trade])
        assert summary.swings == 1
        assert summary.swings_day == 1

    def test_excluded_trades_are_skipped(self, week_of_trades):
        hidden = _make_trade("hidden", excluded=True, entry_at=utc(2025, 1, 9, 15), expiry_at=utc(2025, 1, 9, 21))
        summary = _summarize(week_of_trades + [hidden])
        assert summary.trade_count == 3
        assert summary.trades_by_day[Weekday.THURSDAY] == 0

    def test_missing_pl_is_skipped_with_warning(self, week_of_trades, caplog):
        pl_map = compute_pl_map(week_of_trades, AnalysisOptions(), NY)
        del pl_map["wed"]
        with caplog.at_level(logging.WARNING):
            summary = aggregate(week_of_trades, pl_map, AnalysisOptions(), NY)
        assert summary.trade_count == 2
        assert "wed" in caplog.text


# ---------------------------------------------------------------------------
# 3. Weekday breakdowns
# ---------------------------------------------------------------------------

class TestWeekdays:
    def test_by_day_bought(self, week_of_trades):
        summary = _summarize(week_of_trades, AnalysisOptions(loss_modifier_pct=25))
        assert summary.trades_by_day[Weekday.MONDAY] == 1
        assert summary.trades_by_day[Weekday.FRIDAY] == 0
        assert summary.pl_by_day_bought[Weekday.MONDAY] == pytest.approx(100.0)
        assert summary.pl_by_day_bought[Weekday.TUESDAY] == pytest.approx(-50.0)
        assert summary.win_loss_by_day[Weekday.MONDAY].wins == 1
        assert summary.win_loss_by_day[Weekday.WEDNESDAY].losses == 1

    def test_by_day_sold(self, week_of_trades):
        summary = _summarize(week_of_trades, AnalysisOptions(loss_modifier_pct=25))
        # Monday's trade sold into its Tuesday high; Tuesday's 0DTE expired Tuesday
        assert summary.pl_by_day_sold[Weekday.MONDAY] == 0
        assert summary.pl_by_day_sold[Weekday.TUESDAY] == pytest.approx(50.0)
        assert summary.pl_by_day_sold[Weekday.WEDNESDAY] == pytest.approx(-50.0)

    def test_weekend_entry_has_no_bucket(self):
        saturday = _make_trade("sat", entry_at=utc(2025, 1, 11, 15), expiry_at=utc(2025, 1, 17, 21))
        summary = _summarize([saturday])
        assert summary.trade_count == 1
        assert sum(summary.trades_by_day.values()) == 0
        assert set(summary.trades_by_day) == set(Weekday)

    def test_sell_day_falls_back_to_entry(self):
        trade = _make_trade("t", entry_at=utc(2025, 1, 9, 15))
        assert sell_day(trade, AnalysisOptions(), NY) is Weekday.THURSDAY

    def test_sell_day_synthetic_exit_uses_expiry(self):
        trade = _make_trade(
            "t",
            entry_at=utc(2025, 1, 6, 15),
            expiry_at=utc(2025, 1, 10, 21),
            highs=(HighObservation("a", 3.0, utc(2025, 1, 7, 15)), HighObservation("b", 4.0, utc(2025, 1, 8, 15))),
        )
        assert sell_day(trade, AnalysisOptions(exit_policy="average"), NY) is Weekday.FRIDAY


# ---------------------------------------------------------------------------
# 4. High timing
# ---------------------------------------------------------------------------

class TestHighTiming:
    @pytest.fixture
    def timed_trade(self):
        return _make_trade(
            "timed",
            entry_at=utc(2025, 1, 6, 14, 30),
            expiry_at=utc(2025, 1, 10, 21),
            highs=(
                HighObservation("a", 3.0, utc(2025, 1, 6, 15, 0)),
                HighObservation("b", 2.5, utc(2025, 1, 6, 15, 10)),
                HighObservation("c", 3.5, utc(2025, 1, 6, 16, 0)),
            ),
        )

    def test_gaps(self, timed_trade):
        between, high_to_low = high_time_gaps([timed_trade], AnalysisOptions(), NY)
        assert between == [600.0, 3000.0]
        assert high_to_low == [3600.0]

    def test_summary_timing(self, timed_trade):
        summary = _summarize([timed_trade])
        assert summary.avg_time_between_highs == pytest.approx(1800.0)
        assert summary.median_time_between_highs == pytest.approx(1800.0)
        assert summary.avg_high_to_low == pytest.approx(3600.0)

    def test_filters_apply_to_timing(self, timed_trade):
        options = AnalysisOptions(filters=FilterConfig(max_high_time="10:30"))
        between, high_to_low = high_time_gaps([timed_trade], options, NY)
        assert between == [600.0]
        assert high_to_low == [600.0]

    def test_single_high_contributes_nothing(self):
        trade = _make_trade("one", highs=(HighObservation("a", 3.0, utc(2025, 1, 6, 15)),))
        summary = _summarize([trade])
        assert summary.avg_time_between_highs is None
        assert summary.avg_high_to_low is None
