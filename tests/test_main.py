"""Tests for CLI entry point (main.py)."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from stockcore.main import _parse_args, main
from stockcore.metrics.categorized import FRAME_COLUMNS

# --- Test fixtures ---


def _make_document(n_days: int = 260) -> dict[str, Any]:
    dates = pd.bdate_range("2023-01-02", periods=n_days, tz="UTC")
    stamps = [int(d.value // 1_000_000) for d in dates]
    return {
        "ticker": "ACME",
        "companyName": "Acme Industries",
        "market": {"nsePrice": 150.0, "sma50": 140.0},
        "financials": [
            {"year": "2024", "INC": {"Revenue": 1000, "NetIncome": 100}},
            {"year": "2023", "INC": {"Revenue": 800, "NetIncome": 80}},
        ],
        "peers": [
            {"tickerId": "ACME", "companyName": "Acme Industries", "marketCap": 1000},
            {"tickerId": "BETA", "companyName": "Beta Corp", "marketCap": 500},
        ],
        "history": {
            "price": [[t, 100.0 + i * 0.5] for i, t in enumerate(stamps)],
            "volume": [[t, 1000 + i] for i, t in enumerate(stamps)],
        },
    }


def _write_document(tmp_path: Path, document: Any | None = None) -> Path:
    path = tmp_path / "acme.json"
    path.write_text(json.dumps(document if document is not None else _make_document()))
    return path


# --- CLI parsing tests ---


class TestSignalParser:
    """Tests for signal subcommand argument parsing."""

    def test_parses_input(self) -> None:
        args = _parse_args(["signal", "acme.json"])
        assert args.command == "signal"
        assert args.input == Path("acme.json")
        assert args.price is None
        assert args.strong_ratio is None
        assert args.tz == "UTC"

    def test_price_and_strong_ratio(self) -> None:
        args = _parse_args(["signal", "acme.json", "--price", "101.5", "--strong-ratio", "2"])
        assert args.price == 101.5
        assert args.strong_ratio == 2.0

    def test_timezone(self) -> None:
        args = _parse_args(["signal", "acme.json", "--tz", "Asia/Kolkata"])
        assert args.tz == "Asia/Kolkata"

    def test_verbose_flag(self) -> None:
        args = _parse_args(["signal", "acme.json", "-v"])
        assert args.verbose is True

    def test_no_input_raises(self) -> None:
        with pytest.raises(SystemExit):
            _parse_args(["signal"])


class TestMetricsParser:
    """Tests for metrics subcommand argument parsing."""

    def test_default_output(self) -> None:
        args = _parse_args(["metrics", "acme.json"])
        assert args.output == Path("output/metrics.csv")

    def test_custom_output(self) -> None:
        args = _parse_args(["metrics", "acme.json", "--output", "/tmp/m.csv"])
        assert args.output == Path("/tmp/m.csv")

    def test_command_required(self) -> None:
        with pytest.raises(SystemExit):
            _parse_args([])


# --- main tests ---


class TestMainSignal:
    """End-to-end signal command."""

    def test_prints_signal_and_readings(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["signal", str(_write_document(tmp_path))])
        out = capsys.readouterr().out

        assert out.startswith("ACME: Bullish")
        assert "Bullish score:" in out
        assert "- Daily: Price > SMA 200" in out
        assert "Daily (260 points)" in out
        assert "Weekly (52 points)" in out
        assert "Monthly (12 points)" in out

    def test_strong_ratio(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        main(["signal", str(_write_document(tmp_path)), "--strong-ratio", "1.5"])
        assert capsys.readouterr().out.startswith("ACME: Strongly Bullish")

    def test_no_history(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
        document = _make_document()
        document["history"] = {}
        main(["signal", str(_write_document(tmp_path, document))])
        out = capsys.readouterr().out
        assert out.startswith("ACME: Not Enough Data for Signal")
        assert "Daily: No price data for Daily" in out

    def test_missing_file_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["signal", str(tmp_path / "absent.json")])
        assert exc.value.code == 1

    def test_unknown_timezone_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["signal", str(_write_document(tmp_path)), "--tz", "Nowhere/City"])
        assert exc.value.code == 1

    def test_local_timezone_buckets(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        main(["signal", str(_write_document(tmp_path)), "--tz", "Asia/Kolkata"])
        out = capsys.readouterr().out
        assert "Weekly (52 points)" in out
        assert "Monthly (12 points)" in out

    def test_invalid_strong_ratio_exits(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(["signal", str(_write_document(tmp_path)), "--strong-ratio", "1.0"])
        assert exc.value.code == 1


class TestMainMetrics:
    """End-to-end metrics command."""

    def test_writes_csv(self, tmp_path: Path) -> None:
        output = tmp_path / "out" / "metrics.csv"
        main(["metrics", str(_write_document(tmp_path)), "--output", str(output)])

        frame = pd.read_csv(output)
        assert list(frame.columns) == FRAME_COLUMNS
        row = frame[frame["label"] == "Market Cap"].iloc[0]
        assert row["peer_verdict"] == "higher"
        assert row["peer_average"] == "500.00 Cr"

    def test_not_an_object_exits(self, tmp_path: Path) -> None:
        path = _write_document(tmp_path, ["not", "an", "object"])
        with pytest.raises(SystemExit) as exc:
            main(["metrics", str(path), "--output", str(tmp_path / "m.csv")])
        assert exc.value.code == 1
        assert not (tmp_path / "m.csv").exists()
