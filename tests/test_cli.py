"""Tests for the journal CLI commands."""

import json
import sys

import pytest

from journal import cli


@pytest.fixture
def cli_engine(engine, monkeypatch):
    monkeypatch.setattr(cli, "engine", engine)
    return engine


def _write_trades(tmp_path):
    path = tmp_path / "trades.json"
    path.write_text(json.dumps([
        {
            "id": "a",
            "ticker": "SPY",
            "average_entry": 2.0,
            "option_type": "call",
            "trade_datetime": "2025-01-06T14:30:00Z",
            "expire_datetime": "2025-01-10T21:00:00Z",
            "option_price_highs": [
                {"id": "h1", "price": 3.0, "high_datetime": "2025-01-06T15:00:00Z"},
                {"id": "h2", "price": 2.5, "high_datetime": "2025-01-06T16:00:00Z"},
            ],
        },
        {
            "id": "b",
            "ticker": "QQQ",
            "average_entry": 1.0,
            "option_type": "put",
            "trade_datetime": "2025-01-07T14:30:00Z",
            "expire_datetime": "2025-01-07T21:00:00Z",
        },
    ]))
    return path


def test_import_json(cli_engine, tmp_path, capsys):
    path = _write_trades(tmp_path)

    cli.import_json(str(path))
    cli.import_json(str(path))

    out = capsys.readouterr().out
    assert "Imported 2 trades, skipped 0" in out
    assert "Imported 0 trades, skipped 2" in out


def test_import_json_missing_file(cli_engine, tmp_path):
    with pytest.raises(SystemExit):
        cli.import_json(str(tmp_path / "missing.json"))


def test_summary(cli_engine, tmp_path, capsys):
    cli.import_json(str(_write_trades(tmp_path)))
    capsys.readouterr()

    cli.summary("median")

    out = capsys.readouterr().out
    assert "Exit policy:     median" in out
    assert "Wins / losses:   1 / 1" in out
    assert "0DTE / swing:    1 / 1 (1 swing-day)" in out
    assert "High to high:    avg 1h 0m 0s" in out


def test_main_unknown_command(monkeypatch):
    monkeypatch.setattr(sys, "argv", ["journal", "frobnicate"])
    with pytest.raises(SystemExit):
        cli.main()
