"""CLI entry point for the stock analysis engines."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from stockcore.analysis.signal import TechnicalAnalysis, analyze_technicals
from stockcore.analysis.timeframes import IndicatorBundle
from stockcore.config import IndicatorConfig, ScoringConfig
from stockcore.data import load_stock_file
from stockcore.metrics.categorized import compute_categorized_metrics, metrics_frame

logger = logging.getLogger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).

    Returns:
        Parsed arguments namespace.
    """
    parser = argparse.ArgumentParser(
        prog="stockcore",
        description="Technical signal and fundamental metrics for one stock",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    # signal command
    signal_parser = subparsers.add_parser(
        "signal", help="Score the multi-timeframe technical signal"
    )
    signal_parser.add_argument(
        "input",
        type=Path,
        help="Stock JSON document",
    )
    signal_parser.add_argument(
        "--price",
        type=float,
        default=None,
        help="Reference price (default: last daily price)",
    )
    signal_parser.add_argument(
        "--strong-ratio",
        type=float,
        default=None,
        help="Enable Strongly Bullish/Bearish above this ratio (default: disabled)",
    )
    signal_parser.add_argument(
        "--tz",
        default="UTC",
        help="Timezone for weekly/monthly buckets, e.g. Asia/Kolkata (default: UTC)",
    )
    signal_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    # metrics command
    metrics_parser = subparsers.add_parser(
        "metrics", help="Compute categorized financial metrics and export CSV"
    )
    metrics_parser.add_argument(
        "input",
        type=Path,
        help="Stock JSON document",
    )
    metrics_parser.add_argument(
        "--output",
        type=Path,
        default=Path("output/metrics.csv"),
        help="Output CSV path (default: output/metrics.csv)",
    )
    metrics_parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    return parser.parse_args(argv)


def _format_value(value: float | None, fmt: str = ".2f") -> str:
    return "-" if value is None else format(value, fmt)


def _bundle_lines(bundle: IndicatorBundle) -> list[str]:
    """Human-readable latest readings for one timeframe."""
    name = bundle.timeframe.value
    if bundle.error:
        return [f"{name}: {bundle.error}"]

    lines = [f"{name} ({bundle.length} points)"]
    for label, readings in (("SMA", bundle.smas), ("EMA", bundle.emas)):
        parts = [
            f"{period}={_format_value(r.value if r else None)}"
            for period, r in readings.items()
        ]
        lines.append(f"  {label}: {', '.join(parts)}")
    if bundle.rsi is not None:
        lines.append(f"  RSI: {bundle.rsi.value:.2f} ({bundle.rsi.zone.value})")
    if bundle.bollinger is not None:
        bb = bundle.bollinger
        lines.append(f"  Bollinger: {bb.lower:.2f} / {bb.middle:.2f} / {bb.upper:.2f}")
    if bundle.macd is not None:
        m = bundle.macd
        lines.append(
            f"  MACD: {m.macd:.4f}, signal {_format_value(m.signal, '.4f')}, "
            f"histogram {_format_value(m.histogram, '.4f')}"
        )
    lines.append(
        f"  VWAP: {_format_value(bundle.vwap)}, OBV: {_format_value(bundle.obv, '.0f')}, "
        f"OBV SMA: {_format_value(bundle.obv_sma, '.0f')}"
    )
    return lines


def format_analysis(ticker: str, analysis: TechnicalAnalysis) -> str:
    """Render a technical analysis as plain text.

    Args:
        ticker: Ticker shown in the header.
        analysis: Output of ``analyze_technicals``.

    Returns:
        Multi-line report: signal, scores, reasons, then per-timeframe readings.
    """
    signal = analysis.signal
    lines = [
        f"{ticker}: {signal.classification.value}",
        f"Bullish score: {signal.bullish_score:.2f}  Bearish score: {signal.bearish_score:.2f}",
    ]
    lines.extend(f"- {reason}" for reason in signal.reasons)
    for bundle in analysis.bundles:
        lines.extend(_bundle_lines(bundle))
    return "\n".join(lines)


def run_signal(args: argparse.Namespace) -> None:
    """Execute the signal command.

    Args:
        args: Parsed CLI arguments (input, price, strong_ratio, tz).
    """
    stock, daily = load_stock_file(args.input)
    scoring = ScoringConfig(strong_ratio=args.strong_ratio)
    indicator_config = IndicatorConfig(timezone=args.tz)
    analysis = analyze_technicals(daily, args.price, indicator_config, scoring)
    print(format_analysis(stock.ticker, analysis))


def run_metrics(args: argparse.Namespace) -> None:
    """Execute the metrics command.

    Args:
        args: Parsed CLI arguments (input, output).
    """
    stock, _ = load_stock_file(args.input)
    frame = metrics_frame(compute_categorized_metrics(stock))

    output: Path = args.output
    output.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(output, index=False)
    logger.info("%s: %d metrics written to %s", stock.ticker, len(frame), output)


def main(argv: list[str] | None = None) -> None:
    """Main entry point.

    Args:
        argv: Argument list (defaults to sys.argv[1:]).
    """
    args = _parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        if args.command == "signal":
            run_signal(args)
        elif args.command == "metrics":
            run_metrics(args)
        else:
            logger.error("Unknown command: %s", args.command)
            sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error("%s: %s", args.input, e)
        sys.exit(1)


if __name__ == "__main__":
    main()
