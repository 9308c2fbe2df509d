"""Import/export of the flat trades.json file the journal used to live in.

The file is a JSON array of trade objects:

    {"id", "trader", "ticker", "average_entry", "strike_price", "option_type",
     "trade_datetime", "expire_datetime", "verified", "excluded",
     "treat_as_loss", "high_override_id", "images",
     "option_price_highs": [{"id", "price", "high_datetime"}]}
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from journal.services.domain import TradeSnapshot
from journal.services.repository import TradeRepository
from journal.utils.timeutils import parse_timestamp

logger = logging.getLogger(__name__)


def _as_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def load_legacy_records(path: str | Path) -> list[dict[str, Any]]:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON array of trades")
    return data


def record_to_trade_data(record: dict[str, Any]) -> dict[str, Any]:
    """Map one legacy record onto TradeRepository.create() input."""
    highs = []
    for high in record.get("option_price_highs") or []:
        entry = {
            "price": _as_float(high.get("price")),
            "high_datetime": parse_timestamp(high.get("high_datetime")),
        }
        if high.get("id"):
            entry["id"] = str(high["id"])
        highs.append(entry)

    return {
        "id": str(record["id"]).strip() if record.get("id") else None,
        "trader": record.get("trader") or "",
        "ticker": str(record.get("ticker") or "").upper(),
        "average_entry": _as_float(record.get("average_entry")),
        "strike_price": _as_float(record.get("strike_price")),
        "option_type": str(record.get("option_type") or "call").lower(),
        "trade_datetime": parse_timestamp(record.get("trade_datetime")),
        "expire_datetime": parse_timestamp(record.get("expire_datetime")),
        "verified": bool(record.get("verified", False)),
        "excluded": bool(record.get("excluded", False)),
        "treat_as_loss": bool(record.get("treat_as_loss", False)),
        "high_override_id": record.get("high_override_id") or None,
        "images": list(record.get("images") or []),
        "highs": highs,
    }


def import_records(repo: TradeRepository, records: Iterable[dict[str, Any]]) -> tuple[int, int]:
    """Create trades from legacy records, skipping ids that already exist.

    Returns (imported, skipped).
    """
    imported = skipped = 0
    for record in records:
        data = record_to_trade_data(record)
        if data["id"] and repo.find_by_id(data["id"]) is not None:
            logger.info(f"Trade {data['id']} already present, skipping")
            skipped += 1
            continue
        repo.create(data)
        imported += 1
    logger.info(f"Imported {imported} trades ({skipped} skipped)")
    return imported, skipped


def _iso(value) -> str | None:
    return value.isoformat().replace("+00:00", "Z") if value is not None else None


def snapshot_to_record(trade: TradeSnapshot) -> dict[str, Any]:
    return {
        "id": trade.id,
        "trader": trade.trader,
        "ticker": trade.ticker,
        "average_entry": trade.average_entry,
        "strike_price": trade.strike_price,
        "option_type": trade.option_type,
        "trade_datetime": _iso(trade.entry_at),
        "expire_datetime": _iso(trade.expiry_at),
        "verified": trade.verified,
        "excluded": trade.excluded,
        "treat_as_loss": trade.treat_as_loss,
        "high_override_id": trade.high_override_id,
        "images": list(trade.images),
        "option_price_highs": [
            {"id": h.id, "price": h.price, "high_datetime": _iso(h.observed_at)}
            for h in trade.highs
        ],
    }


def dump_legacy_records(trades: Iterable[TradeSnapshot], path: str | Path) -> int:
    records = [snapshot_to_record(t) for t in trades]
    with open(path, "w", encoding="utf-8") as f:
        json.dump(records, f, indent=2)
    return len(records)
