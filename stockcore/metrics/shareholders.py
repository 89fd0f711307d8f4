"""Shareholder returns and share capital metrics."""

from __future__ import annotations

from collections.abc import Sequence

from stockcore.data.models import FinancialYearRecord, PeerRecord
from stockcore.metrics import keys
from stockcore.metrics.accessors import (
    find_statement_value,
    safe_get,
    safe_ratio,
    to_count,
    to_currency,
    to_percentage,
)
from stockcore.metrics.comparisons import with_peers
from stockcore.metrics.keys import Statement
from stockcore.metrics.models import Formatted, Metric


def shareholder_returns(
    yearly: Sequence[FinancialYearRecord],
    primary: PeerRecord | None,
    average_dividend_yield: Formatted,
) -> list[Metric]:
    """Dividend per share, yield against peers, and payout ratio.

    Args:
        yearly: Yearly records, most recent first.
        primary: The company's own peer-table row.
        average_dividend_yield: Peer average dividend yield.

    Returns:
        Metrics in display order.
    """
    eps = find_statement_value(yearly, 0, Statement.INCOME, keys.DILUTED_EPS)
    dps = find_statement_value(yearly, 0, Statement.INCOME, keys.DPS)
    dividend_yield = safe_get(lambda: primary.dividend_yield)

    yield_metric = Metric.from_formatted(
        "Dividend Yield (%)", to_percentage(dividend_yield, color_sign=True),
        "Dividend Yield (%): Annual DPS / Current Share Price. Return from "
        "dividends relative to price.",
    )
    return [
        Metric.from_formatted(
            "Dividend Per Share (DPS)", to_currency(dps),
            "DPS: Total dividends paid per share. Direct cash return to "
            "shareholders.",
        ),
        with_peers(
            yield_metric, dividend_yield, average_dividend_yield, "Dividend Yield",
            allow_non_positive=True,
        ),
        Metric.from_formatted(
            "Payout Ratio (%)", to_percentage(safe_ratio(dps, eps, 100)),
            "Payout Ratio (%): DPS / EPS. % of earnings paid as dividends. High "
            "ratio may be unsustainable; low can mean reinvestment for growth.",
        ),
    ]


def share_capital(yearly: Sequence[FinancialYearRecord]) -> list[Metric]:
    """Share counts and book value per share from total equity."""
    shares = find_statement_value(yearly, 0, Statement.BALANCE, keys.COMMON_SHARES)
    diluted = find_statement_value(yearly, 0, Statement.INCOME, keys.DILUTED_WEIGHTED_SHARES)
    equity = find_statement_value(yearly, 0, Statement.BALANCE, keys.TOTAL_EQUITY)

    return [
        Metric.from_formatted(
            "Total Common Shares Outstanding", to_count(shares),
            "Total common shares issued & held by investors. Used for "
            "per-share metrics.",
        ),
        Metric.from_formatted(
            "Diluted Weighted Avg Shares", to_count(diluted),
            "Avg. shares if all dilutive securities (options, etc.) exercised. "
            "Used for diluted EPS.",
        ),
        Metric.from_formatted(
            "Book Value per Share (Total Equity)",
            to_currency(safe_ratio(equity, shares)),
            "Total equity / total common shares. Net asset value per share.",
        ),
    ]
