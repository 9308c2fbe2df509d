"""Dashboard state as immutable snapshots.

Every change is an event folded into the current snapshot by `reduce`, which
returns a new DashboardState and leaves the old one untouched. Statistics are
never patched in place: `derive` recomputes them from a snapshot.
"""

import logging
from dataclasses import dataclass, field, replace
from datetime import tzinfo
from typing import Callable

from journal.services.aggregator import Summary, aggregate
from journal.services.domain import AnalysisOptions, HighObservation, PLResult, TradeSnapshot
from journal.services.exit_engine import compute_pl_map
from journal.services.trade_filters import TradeQuery, apply_query

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardState:
    trades: tuple[TradeSnapshot, ...] = ()
    query: TradeQuery = field(default_factory=TradeQuery)
    options: AnalysisOptions = field(default_factory=AnalysisOptions)


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TradesLoaded:
    trades: tuple[TradeSnapshot, ...]


@dataclass(frozen=True)
class TradeUpserted:
    trade: TradeSnapshot


@dataclass(frozen=True)
class TradeRemoved:
    trade_id: str


@dataclass(frozen=True)
class HighAppended:
    trade_id: str
    high: HighObservation


@dataclass(frozen=True)
class QueryChanged:
    query: TradeQuery


@dataclass(frozen=True)
class OptionsChanged:
    options: AnalysisOptions


Event = TradesLoaded | TradeUpserted | TradeRemoved | HighAppended | QueryChanged | OptionsChanged


def reduce(state: DashboardState, event: Event) -> DashboardState:
    """Return the snapshot that follows `state` after `event`."""
    if isinstance(event, TradesLoaded):
        return replace(state, trades=tuple(event.trades))

    if isinstance(event, TradeUpserted):
        ids = [t.id for t in state.trades]
        if event.trade.id in ids:
            trades = tuple(event.trade if t.id == event.trade.id else t for t in state.trades)
        else:
            trades = state.trades + (event.trade,)
        return replace(state, trades=trades)

    if isinstance(event, TradeRemoved):
        return replace(state, trades=tuple(t for t in state.trades if t.id != event.trade_id))

    if isinstance(event, HighAppended):
        trades = tuple(
            replace(t, highs=t.highs + (event.high,)) if t.id == event.trade_id else t
            for t in state.trades
        )
        return replace(state, trades=trades)

    if isinstance(event, QueryChanged):
        return replace(state, query=event.query)

    if isinstance(event, OptionsChanged):
        return replace(state, options=event.options)

    raise TypeError(f"Unknown dashboard event: {type(event).__name__}")


@dataclass(frozen=True)
class DerivedView:
    """Everything the dashboard renders, computed from one snapshot."""
    trades: tuple[TradeSnapshot, ...]
    visible_trades: tuple[TradeSnapshot, ...]
    pl_by_trade_id: dict[str, PLResult]
    summary: Summary


def derive(state: DashboardState, tz: tzinfo) -> DerivedView:
    """Query-filter the trades, then compute P/L and the summary for the non-excluded ones."""
    trades = tuple(apply_query(state.trades, state.query, tz))
    visible = tuple(t for t in trades if not t.excluded)
    pl_by_trade_id = compute_pl_map(visible, state.options, tz)
    summary = aggregate(visible, pl_by_trade_id, state.options, tz)
    return DerivedView(
        trades=trades,
        visible_trades=visible,
        pl_by_trade_id=pl_by_trade_id,
        summary=summary,
    )


Listener = Callable[[DashboardState, DashboardState], None]


class DashboardStore:
    """Holds the current snapshot and notifies subscribers on each dispatch."""

    def __init__(self, initial: DashboardState | None = None):
        self._state = initial or DashboardState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> DashboardState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: Event) -> DashboardState:
        previous = self._state
        self._state = reduce(previous, event)
        logger.debug(f"Dashboard event {type(event).__name__} applied")
        for listener in list(self._listeners):
            listener(previous, self._state)
        return self._state
