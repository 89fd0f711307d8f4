"""Growth metrics: year-over-year changes and multi-year CAGR."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from stockcore.data.models import FinancialYearRecord
from stockcore.metrics import keys
from stockcore.metrics.accessors import find_statement_value
from stockcore.metrics.comparisons import cagr, yoy_growth
from stockcore.metrics.keys import Statement
from stockcore.metrics.models import Metric

logger = logging.getLogger(__name__)

# (label, statement, key, explanation)
_YOY_LINES = (
    (
        "Revenue Growth (YoY)", Statement.INCOME, keys.REVENUE,
        "YoY % change in total revenue. Shows sales growth rate; consistent "
        "positive growth is good.",
    ),
    (
        "Net Income Growth (YoY)", Statement.INCOME, keys.NET_INCOME,
        "YoY % change in net profit. Shows bottom-line profit growth; key for "
        "valuation.",
    ),
    (
        "EPS Growth (Diluted, YoY)", Statement.INCOME, keys.DILUTED_EPS,
        "YoY % change in diluted EPS. Per-share profit growth (accounts for "
        "potential shares). Key for investors.",
    ),
    (
        "Tangible Book Value Growth (YoY)", Statement.BALANCE, keys.TANGIBLE_BVPS,
        "YoY % change in tangible book value/share. Growth in underlying net "
        "asset value/share (excl. intangibles).",
    ),
)

# (label, key); all from the income statement
_CAGR_LINES = (
    ("Revenue", keys.REVENUE),
    ("Net Income", keys.NET_INCOME),
    ("Diluted EPS", keys.DILUTED_EPS),
)

# (horizon label, start year index, compounding periods, minimum years of data)
_CAGR_HORIZONS = (
    ("3Y", 2, 2, 3),
    ("5Y", 4, 4, 5),
)


def growth_trends(yearly: Sequence[FinancialYearRecord]) -> list[Metric]:
    """YoY growth of revenue, net income, diluted EPS and tangible book value.

    Args:
        yearly: Yearly records, most recent first.

    Returns:
        Metrics in display order; empty without a prior year.
    """
    if len(yearly) < 2:
        logger.debug("No prior year, skipping growth trends")
        return []

    metrics = []
    for label, statement, key, explanation in _YOY_LINES:
        current = find_statement_value(yearly, 0, statement, key)
        previous = find_statement_value(yearly, 1, statement, key)
        metrics.append(Metric.from_formatted(label, yoy_growth(current, previous), explanation))
    return metrics


def historical_performance(yearly: Sequence[FinancialYearRecord]) -> list[Metric]:
    """3Y and 5Y CAGR for revenue, net income and diluted EPS.

    The 3Y figure compounds over two periods from the year at index 2 and
    needs at least three years of records; the 5Y figure compounds over four
    periods from index 4 and needs five.

    Args:
        yearly: Yearly records, most recent first.

    Returns:
        Metrics grouped by line item, 3Y before 5Y.
    """
    n_years = len(yearly)
    metrics = []
    for label, key in _CAGR_LINES:
        current = find_statement_value(yearly, 0, Statement.INCOME, key)
        for horizon, start_index, periods, min_years in _CAGR_HORIZONS:
            if n_years < min_years:
                continue
            start = find_statement_value(yearly, start_index, Statement.INCOME, key)
            metrics.append(
                Metric.from_formatted(
                    f"{label} CAGR ({horizon})",
                    cagr(current, start, periods),
                    f"{horizon} CAGR of {label.lower()}.",
                )
            )
    return metrics
