"""Tests for 0DTE / swing / swing-day classification."""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from journal.services.classifier import classify, is_swing_day, primary_trade_type
from journal.services.domain import HighObservation, TradeSnapshot

NY = ZoneInfo("America/New_York")


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


def _make_trade(**overrides) -> TradeSnapshot:
    fields = dict(id="t1", ticker="SPY", average_entry=1.5, entry_at=utc(2025, 1, 6, 14, 30))
    fields.update(overrides)
    return TradeSnapshot(**fields)


def test_same_day_expiry_is_0dte():
    trade = _make_trade(expiry_at=utc(2025, 1, 6, 21, 0))
    assert classify(trade, NY) == {"0dte"}


def test_0dte_ignores_highs():
    trade = _make_trade(
        expiry_at=utc(2025, 1, 6, 21, 0),
        highs=(HighObservation("h1", 2.0, utc(2025, 1, 6, 15)),),
    )
    assert classify(trade, NY) == {"0dte"}


def test_later_expiry_is_swing():
    trade = _make_trade(
        expiry_at=utc(2025, 1, 10, 21, 0),
        highs=(HighObservation("h1", 2.0, utc(2025, 1, 8, 15)),),
    )
    assert classify(trade, NY) == {"swing"}


def test_swing_without_highs_is_plain_swing():
    trade = _make_trade(expiry_at=utc(2025, 1, 10, 21, 0))
    assert classify(trade, NY) == {"swing"}


def test_swing_with_all_highs_on_entry_day_is_swing_day():
    trade = _make_trade(
        expiry_at=utc(2025, 1, 10, 21, 0),
        highs=(
            HighObservation("h1", 2.0, utc(2025, 1, 6, 15)),
            HighObservation("h2", 2.4, utc(2025, 1, 6, 20)),
        ),
    )
    assert classify(trade, NY) == {"swing", "swing-day"}


def test_one_later_high_breaks_swing_day():
    trade = _make_trade(
        expiry_at=utc(2025, 1, 10, 21, 0),
        highs=(
            HighObservation("h1", 2.0, utc(2025, 1, 6, 15)),
            HighObservation("h2", 2.4, utc(2025, 1, 7, 15)),
        ),
    )
    assert classify(trade, NY) == {"swing"}


def test_treat_as_loss_is_never_swing_day():
    trade = _make_trade(
        expiry_at=utc(2025, 1, 10, 21, 0),
        treat_as_loss=True,
        highs=(HighObservation("h1", 2.0, utc(2025, 1, 6, 15)),),
    )
    assert not is_swing_day(trade, NY)
    assert classify(trade, NY) == {"swing"}


@pytest.mark.parametrize(
    "overrides",
    [{"entry_at": None, "expiry_at": utc(2025, 1, 6, 21)}, {"expiry_at": None}],
)
def test_missing_dates_are_unclassified(overrides):
    assert classify(_make_trade(**overrides), NY) == frozenset()


def test_calendar_day_uses_journal_timezone():
    # Both legs fall on Monday evening in New York; the second pair straddles midnight UTC
    trade = _make_trade(entry_at=utc(2025, 1, 7, 1, 0), expiry_at=utc(2025, 1, 7, 3, 0))
    trade_after_midnight = _make_trade(entry_at=utc(2025, 1, 6, 23, 0), expiry_at=utc(2025, 1, 7, 1, 0))
    assert classify(trade, NY) == {"0dte"}
    assert classify(trade_after_midnight, NY) == {"0dte"}
    assert classify(trade_after_midnight, timezone.utc) == {"swing"}


@pytest.mark.parametrize(
    "labels, expected",
    [
        ({"0dte"}, "0dte"),
        ({"swing"}, "swing"),
        ({"swing", "swing-day"}, "swing-day"),
        (set(), None),
    ],
)
def test_primary_trade_type(labels, expected):
    assert primary_trade_type(labels) == expected
