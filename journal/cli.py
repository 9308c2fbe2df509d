"""CLI tool for journal operations.

Usage:
    python -m journal.cli serve
    python -m journal.cli import-json <trades.json>
    python -m journal.cli summary [exit_policy]
"""

import sys

from sqlmodel import Session

from journal.config import settings
from journal.database import engine, create_db_and_tables
from journal.services.dashboard_state import DashboardState, derive
from journal.services.domain import AnalysisOptions
from journal.services.legacy_json import import_records, load_legacy_records
from journal.services.repository import TradeRepository
from journal.utils.logging import setup_logging
from journal.utils.timeutils import format_duration, resolve_timezone


def serve():
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run("journal.main:app", host=settings.host, port=settings.port, log_level=settings.log_level.lower())


def import_json(path: str):
    """Load trades from a legacy trades.json file."""
    create_db_and_tables()
    try:
        records = load_legacy_records(path)
    except (OSError, ValueError) as e:
        print(f"Could not read {path}: {e}")
        sys.exit(1)

    with Session(engine) as session:
        imported, skipped = import_records(TradeRepository(session), records)

    print(f"Imported {imported} trades, skipped {skipped} already present.")


def summary(exit_policy: str = "0"):
    """Print journal statistics for one exit policy."""
    create_db_and_tables()
    tz = resolve_timezone(settings.timezone)
    options = AnalysisOptions(exit_policy=exit_policy, loss_modifier_pct=settings.default_loss_modifier_pct)

    with Session(engine) as session:
        trades = TradeRepository(session).get_all()

    view = derive(DashboardState(trades=tuple(trades), options=options), tz)
    s = view.summary

    print(f"Trades:          {s.trade_count} ({len(view.trades) - s.trade_count} excluded)")
    print(f"Exit policy:     {options.exit_policy}")
    print(f"Total P/L:       ${s.total_profit_dollars:,.2f} on ${s.total_cost_dollars:,.2f} ({s.total_percent:+.2f}%)")
    print(f"Wins / losses:   {s.win_count} / {s.loss_count}")
    print(f"Win ratio:       {s.win_ratio:.2f}% (weighted {s.weighted_win_ratio:.2f}%)")
    print(f"Calls / puts:    {s.calls} / {s.puts}")
    print(f"0DTE / swing:    {s.zero_dte} / {s.swings} ({s.swings_day} swing-day)")
    print(f"High to high:    avg {format_duration(s.avg_time_between_highs) or '-'}, "
          f"median {format_duration(s.median_time_between_highs) or '-'}")
    print(f"Top two highs:   avg {format_duration(s.avg_high_to_low) or '-'}, "
          f"median {format_duration(s.median_high_to_low) or '-'}")
    print("\nBy entry day:")
    for day, count in s.trades_by_day.items():
        wl = s.win_loss_by_day[day]
        print(f"  {day.label:<10} {count:>3} trades  {wl.wins}W/{wl.losses}L  "
              f"bought ${s.pl_by_day_bought[day]:>10,.2f}  sold ${s.pl_by_day_sold[day]:>10,.2f}")


def main():
    setup_logging()
    if len(sys.argv) < 2:
        print("Usage: python -m journal.cli <command>")
        print("Commands: serve, import-json <path>, summary [exit_policy]")
        sys.exit(1)

    command = sys.argv[1]
    if command == "serve":
        serve()
    elif command == "import-json":
        if len(sys.argv) < 3:
            print("Usage: python -m journal.cli import-json <path>")
            sys.exit(1)
        import_json(sys.argv[2])
    elif command == "summary":
        summary(*sys.argv[2:3])
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
