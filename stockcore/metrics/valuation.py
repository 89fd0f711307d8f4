"""Valuation metrics: multiples, size, quoted prices and acquired intangibles."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from stockcore.data.models import FinancialYearRecord, MarketSnapshot, PeerRecord
from stockcore.metrics import keys
from stockcore.metrics.accessors import (
    find_statement_value,
    safe_get,
    to_crores,
    to_currency,
    to_ratio,
)
from stockcore.metrics.comparisons import with_peers
from stockcore.metrics.keys import Statement
from stockcore.metrics.models import NOT_AVAILABLE, Formatted, Metric


def nse_price(market: MarketSnapshot, primary: PeerRecord | None) -> Any:
    """NSE quote, falling back to the price in the company's peer-table row."""
    price = safe_get(lambda: market.nse_price)
    if price is NOT_AVAILABLE:
        price = safe_get(lambda: primary.price)
    return price


def valuation_metrics(
    yearly: Sequence[FinancialYearRecord],
    primary: PeerRecord | None,
    market: MarketSnapshot,
    average_pe: Formatted,
    average_pb: Formatted,
    average_market_cap: Formatted,
) -> list[Metric]:
    """P/E and P/B (lower is better) and market cap (size) against peers.

    Args:
        yearly: Yearly records, most recent first.
        primary: The company's own peer-table row.
        market: Latest quote fields.
        average_pe: Peer average P/E.
        average_pb: Peer average P/B.
        average_market_cap: Peer average market cap in crores.

    Returns:
        Metrics in display order.
    """
    pe = safe_get(lambda: primary.price_to_earnings)
    pb = safe_get(lambda: primary.price_to_book)
    market_cap = safe_get(lambda: primary.market_cap)

    pe_metric = Metric.from_formatted(
        "P/E Ratio (TTM)", to_ratio(pe),
        "Price / Trailing 12-Month Earnings Per Share. Lower may mean "
        "undervaluation; higher can suggest overvaluation or high growth "
        "expectations. Compare with peers.",
    )
    pb_metric = Metric.from_formatted(
        "P/B Ratio", to_ratio(pb),
        "Price / Book Value per Share. <1 may suggest undervaluation; >1 "
        "(esp. >3) may indicate overvaluation. Industry context is key.",
    )
    market_cap_metric = Metric.from_formatted(
        "Market Cap", to_crores(market_cap),
        "Share Price x Total Shares Outstanding. Indicates company size.",
    )

    return [
        with_peers(pe_metric, pe, average_pe, "P/E", lower_is_better=True),
        with_peers(pb_metric, pb, average_pb, "P/B", lower_is_better=True),
        with_peers(
            market_cap_metric, market_cap, average_market_cap, "Market Cap",
            size_comparison=True,
        ),
        Metric.from_formatted(
            "NSE Price", to_currency(nse_price(market, primary)),
            "Current share price on the National Stock Exchange of India; "
            "latest traded price.",
        ),
        Metric.from_formatted(
            "BSE Price", to_currency(safe_get(lambda: market.bse_price)),
            "Current share price on the Bombay Stock Exchange of India; "
            "latest traded price.",
        ),
        Metric.from_formatted(
            "Goodwill (Net)",
            to_crores(find_statement_value(yearly, 0, Statement.BALANCE, keys.GOODWILL)),
            "Premium paid for acquired assets (e.g., brand) over their fair "
            "value, less impairment charges.",
        ),
        Metric.from_formatted(
            "Intangible Assets (Net)",
            to_crores(find_statement_value(yearly, 0, Statement.BALANCE, keys.INTANGIBLES)),
            "Non-physical assets (e.g., patents, brand value), less "
            "amortization. Can drive future earnings.",
        ),
    ]
