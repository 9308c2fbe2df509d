#!/usr/bin/env python3
"""Export the journal database to the flat trades.json format.

Usage:
    python scripts/export_trades_json.py <database_url> <output_path>

Example:
    python scripts/export_trades_json.py \
        sqlite:///data/journal.db \
        backups/trades.json
"""

import sys
from pathlib import Path

from sqlalchemy import create_engine, inspect
from sqlmodel import Session


def export(database_url: str, output_path: str):
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    src = create_engine(database_url, connect_args=connect_args)

    tables = set(inspect(src).get_table_names())
    if "trade" not in tables:
        print(f"ERROR: no trade table in {database_url}")
        sys.exit(1)

    from journal.services.legacy_json import dump_legacy_records
    from journal.services.repository import TradeRepository

    with Session(src) as session:
        trades = TradeRepository(session).get_all()

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    count = dump_legacy_records(trades, out)

    highs = sum(len(t.highs) for t in trades)
    print(f"  trade: {count} rows exported")
    print(f"  trade_high: {highs} rows exported")
    print(f"\nWrote {out}")


if __name__ == "__main__":
    if len(sys.argv) != 3:
        print(__doc__)
        sys.exit(1)
    export(sys.argv[1], sys.argv[2])
