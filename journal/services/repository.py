"""Trade repository over SQLModel.

Hands out immutable TradeSnapshot values so nothing downstream can write
back through a live ORM row. Every mutating call commits before returning.
"""

import logging
from collections import defaultdict
from datetime import datetime, timezone
from typing import Any

from sqlmodel import Session, func, select

from journal.models.trade import Trade
from journal.models.trade_high import TradeHigh
from journal.services.domain import HighObservation, TradeSnapshot
from journal.utils.timeutils import ensure_utc

logger = logging.getLogger(__name__)

# Fields a caller may change through update()
UPDATABLE_FIELDS = {
    "trader",
    "ticker",
    "average_entry",
    "strike_price",
    "option_type",
    "trade_datetime",
    "expire_datetime",
    "verified",
    "excluded",
    "treat_as_loss",
    "high_override_id",
}

DATETIME_FIELDS = ("trade_datetime", "expire_datetime")


def to_high(row: TradeHigh) -> HighObservation:
    return HighObservation(id=row.id, price=row.price, observed_at=ensure_utc(row.high_datetime))


def to_snapshot(trade: Trade, highs: list[TradeHigh]) -> TradeSnapshot:
    return TradeSnapshot(
        id=trade.id,
        trader=trade.trader or "",
        ticker=trade.ticker or "",
        average_entry=trade.average_entry or 0.0,
        strike_price=trade.strike_price or 0.0,
        option_type=trade.option_type or "call",
        entry_at=ensure_utc(trade.trade_datetime),
        expiry_at=ensure_utc(trade.expire_datetime),
        verified=bool(trade.verified),
        excluded=bool(trade.excluded),
        treat_as_loss=bool(trade.treat_as_loss),
        high_override_id=trade.high_override_id,
        highs=tuple(to_high(h) for h in highs),
        images=tuple(trade.images or ()),
        created_at=ensure_utc(trade.created_at),
        updated_at=ensure_utc(trade.updated_at),
    )


class TradeRepository:
    def __init__(self, session: Session):
        self.session = session

    # -- reads ---------------------------------------------------------------

    def _highs_by_trade(self, trade_ids: list[str]) -> dict[str, list[TradeHigh]]:
        grouped: dict[str, list[TradeHigh]] = defaultdict(list)
        if not trade_ids:
            return grouped
        rows = self.session.exec(
            select(TradeHigh)
            .where(TradeHigh.trade_id.in_(trade_ids))  # type: ignore[attr-defined]
            .order_by(TradeHigh.position, TradeHigh.id)
        ).all()
        for row in rows:
            grouped[row.trade_id].append(row)
        return grouped

    def _snapshot(self, trade: Trade) -> TradeSnapshot:
        return to_snapshot(trade, self._highs_by_trade([trade.id]).get(trade.id, []))

    def get_all(self) -> list[TradeSnapshot]:
        trades = self.session.exec(select(Trade)).all()
        highs = self._highs_by_trade([t.id for t in trades])
        return [to_snapshot(t, highs.get(t.id, [])) for t in trades]

    def find_by_id(self, trade_id: str) -> TradeSnapshot | None:
        trade = self.session.get(Trade, trade_id.strip())
        return self._snapshot(trade) if trade else None

    # -- writes --------------------------------------------------------------

    def create(self, data: dict[str, Any]) -> TradeSnapshot:
        """Insert a trade. Highs in `data` (legacy imports) are inserted with it."""
        payload = dict(data)
        highs = payload.pop("highs", None) or []
        if payload.get("ticker"):
            payload["ticker"] = payload["ticker"].upper()
        for key in DATETIME_FIELDS:
            if key in payload:
                payload[key] = ensure_utc(payload[key])
        if payload.get("id") is None:
            payload.pop("id", None)

        trade = Trade(**payload)
        self.session.add(trade)
        self.session.flush()
        for position, high in enumerate(highs):
            self.session.add(TradeHigh(trade_id=trade.id, position=position, **high))

        self.session.commit()
        self.session.refresh(trade)
        logger.info(f"Created trade {trade.id} ({trade.ticker})")
        return self._snapshot(trade)

    def update(self, trade_id: str, patch: dict[str, Any]) -> TradeSnapshot | None:
        trade = self.session.get(Trade, trade_id.strip())
        if not trade:
            return None

        for key, value in patch.items():
            if key not in UPDATABLE_FIELDS:
                logger.debug(f"Ignoring non-updatable field {key!r} on trade {trade_id}")
                continue
            if key == "ticker" and value:
                value = value.upper()
            if key in DATETIME_FIELDS:
                value = ensure_utc(value)
            setattr(trade, key, value)
        trade.updated_at = datetime.now(timezone.utc)

        self.session.add(trade)
        self.session.commit()
        self.session.refresh(trade)
        return self._snapshot(trade)

    def delete(self, trade_id: str) -> TradeSnapshot | None:
        """Delete a trade together with all of its highs."""
        trade = self.session.get(Trade, trade_id.strip())
        if not trade:
            return None

        snapshot = self._snapshot(trade)
        for high in self._highs_by_trade([trade.id]).get(trade.id, []):
            self.session.delete(high)
        self.session.flush()
        self.session.delete(trade)
        self.session.commit()
        logger.info(f"Deleted trade {snapshot.id}")
        return snapshot

    def append_high(self, trade_id: str, price: float, observed_at: datetime) -> HighObservation | None:
        trade = self.session.get(Trade, trade_id.strip())
        if not trade:
            return None

        last = self.session.exec(
            select(func.max(TradeHigh.position)).where(TradeHigh.trade_id == trade.id)
        ).one()
        row = TradeHigh(
            trade_id=trade.id,
            price=price,
            high_datetime=ensure_utc(observed_at),
            position=0 if last is None else last + 1,
        )
        self.session.add(row)
        trade.updated_at = datetime.now(timezone.utc)
        self.session.add(trade)
        self.session.commit()
        self.session.refresh(row)
        logger.info(f"Added high {row.id} @ {price} to trade {trade.id}")
        return to_high(row)

    def delete_high(self, trade_id: str, high_id: str) -> HighObservation | None:
        """Remove one high; clears the trade's override if it pointed there."""
        trade = self.session.get(Trade, trade_id.strip())
        row = self.session.get(TradeHigh, high_id)
        if not trade or not row or row.trade_id != trade.id:
            return None

        removed = to_high(row)
        if trade.high_override_id == row.id:
            trade.high_override_id = None
        trade.updated_at = datetime.now(timezone.utc)
        self.session.delete(row)
        self.session.add(trade)
        self.session.commit()
        return removed

    def add_image(self, trade_id: str, url: str) -> TradeSnapshot | None:
        trade = self.session.get(Trade, trade_id.strip())
        if not trade:
            return None
        # Reassign so SQLAlchemy sees the JSON column change
        trade.images = [*(trade.images or []), url]
        self.session.add(trade)
        self.session.commit()
        self.session.refresh(trade)
        return self._snapshot(trade)

    def remove_image(self, trade_id: str, url: str) -> TradeSnapshot | None:
        trade = self.session.get(Trade, trade_id.strip())
        if not trade:
            return None
        trade.images = [u for u in (trade.images or []) if u != url]
        self.session.add(trade)
        self.session.commit()
        self.session.refresh(trade)
        return self._snapshot(trade)
