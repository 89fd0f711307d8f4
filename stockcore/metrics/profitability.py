"""Profitability, efficiency ratio and operational efficiency metrics."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from stockcore.data.models import FinancialYearRecord, PeerRecord
from stockcore.metrics import keys
from stockcore.metrics.accessors import (
    find_statement_value,
    safe_add,
    safe_get,
    safe_ratio,
    to_crores,
    to_float,
    to_percentage,
)
from stockcore.metrics.comparisons import with_peers, yoy_growth
from stockcore.metrics.keys import Statement
from stockcore.metrics.models import Formatted, Metric, Missing

logger = logging.getLogger(__name__)


def _income(yearly: Sequence[FinancialYearRecord], key: str, year_index: int = 0):
    return find_statement_value(yearly, year_index, Statement.INCOME, key)


def _with_prior_year(
    metric: Metric,
    yearly: Sequence[FinancialYearRecord],
    statement: Statement,
    key: str,
) -> Metric:
    """Attach YoY growth against the prior year when one exists."""
    if len(yearly) < 2:
        return metric
    current = find_statement_value(yearly, 0, statement, key)
    previous = find_statement_value(yearly, 1, statement, key)
    return metric.with_yoy(yoy_growth(current, previous))


def profitability_metrics(yearly: Sequence[FinancialYearRecord]) -> list[Metric]:
    """Latest-year profit lines, margin and EBITDA.

    EBITDA treats a missing D&A line as zero when operating income exists.

    Args:
        yearly: Yearly records, most recent first.

    Returns:
        Metrics in display order.
    """
    net_income = _income(yearly, keys.NET_INCOME)
    revenue = _income(yearly, keys.REVENUE)
    operating_income = _income(yearly, keys.OPERATING_INCOME)
    depreciation = _income(yearly, keys.DEPRECIATION_AMORTIZATION)

    margin = safe_ratio(net_income, revenue, 100)
    depreciation_or_zero = 0.0 if isinstance(to_float(depreciation), Missing) else depreciation
    ebitda = safe_add(operating_income, depreciation_or_zero)

    metrics = [
        _with_prior_year(
            Metric.from_formatted(
                "Net Income", to_crores(net_income),
                "Net Income: Profit after all expenses, interest, and taxes; "
                "a key profitability measure.",
            ),
            yearly, Statement.INCOME, keys.NET_INCOME,
        ),
        Metric.from_formatted(
            "Net Profit Margin", to_percentage(margin, color_sign=True),
            "Net Profit Margin: Net Income / Revenue. Measures efficiency in "
            "converting revenue to profit. Higher is better.",
        ),
        _with_prior_year(
            Metric.from_formatted(
                "Operating Income", to_crores(operating_income),
                "Operating Income (EBIT): Profit from core business operations, "
                "before interest and taxes.",
            ),
            yearly, Statement.INCOME, keys.OPERATING_INCOME,
        ),
        _with_prior_year(
            Metric.from_formatted(
                "Gross Profit", to_crores(_income(yearly, keys.GROSS_PROFIT)),
                "Gross Profit: Revenue - Cost of Goods Sold (COGS). Shows "
                "production/service delivery efficiency.",
            ),
            yearly, Statement.INCOME, keys.GROSS_PROFIT,
        ),
        Metric.from_formatted(
            "EBITDA", to_crores(ebitda),
            "EBITDA: Earnings Before Interest, Taxes, Depreciation & "
            "Amortization. Proxy for operational cash flow.",
        ),
        Metric.from_formatted(
            "Depreciation & Amortization (Income St.)", to_crores(depreciation),
            "D&A (Income St.): Non-cash expense for asset value decrease "
            "(tangible/intangible) over time.",
        ),
        Metric.from_formatted(
            "Unusual Expense/(Income)",
            to_crores(_income(yearly, keys.UNUSUAL_EXPENSE_INCOME)),
            "Unusual Expense/(Income): One-time/non-recurring items (e.g., "
            "restructuring). Can skew reported profit.",
        ),
        Metric.from_formatted(
            "Other Income (Net)", to_crores(_income(yearly, keys.OTHER_NET)),
            "Other Income (Net): Net income/expense from non-core activities "
            "(e.g., investments, FX).",
        ),
        Metric.from_formatted(
            "Minority Interest (Income St.)",
            to_crores(_income(yearly, keys.MINORITY_INTEREST)),
            "Minority Interest (Inc. St.): Subsidiary income portion not owned "
            "by parent; reduces parent's net income.",
        ),
    ]
    return metrics


def efficiency_ratios(
    yearly: Sequence[FinancialYearRecord],
    primary: PeerRecord | None,
    average_roe: Formatted,
) -> list[Metric]:
    """Return on equity (TTM with peer comparison, 5Y average) and return on assets.

    Args:
        yearly: Yearly records, most recent first.
        primary: The company's own peer-table row.
        average_roe: Peer average RoE (TTM).

    Returns:
        Metrics in display order.
    """
    roe = safe_get(lambda: primary.return_on_equity)
    roe_5y = safe_get(lambda: primary.return_on_equity_5y)
    total_assets = find_statement_value(yearly, 0, Statement.BALANCE, keys.TOTAL_ASSETS)
    roa = safe_ratio(_income(yearly, keys.NET_INCOME), total_assets, 100)

    roe_metric = Metric.from_formatted(
        "Return on Equity (RoE % - TTM)", to_percentage(roe, color_sign=True),
        "Profitability vs shareholders' equity (NI / Avg. Equity) TTM. "
        "Higher = better use of shareholder funds.",
    )
    return [
        with_peers(roe_metric, roe, average_roe, "RoE", allow_non_positive=True),
        Metric.from_formatted(
            "Return on Equity (RoE % - 5Y Avg)", to_percentage(roe_5y, color_sign=True),
            "5-year avg. RoE. Smooths fluctuations, shows long-term profit "
            "efficiency from equity.",
        ),
        Metric.from_formatted(
            "Return on Assets (RoA % - TTM)", to_percentage(roa, color_sign=True),
            "Efficiency of asset use for earnings (NI / Avg. Total Assets) TTM. "
            "Higher = better asset use.",
        ),
    ]


def operational_efficiency(yearly: Sequence[FinancialYearRecord]) -> list[Metric]:
    """Inventory level and its YoY change. Empty without a prior year."""
    if len(yearly) < 2:
        logger.debug("No prior year, skipping operational efficiency")
        return []

    inventory = find_statement_value(yearly, 0, Statement.BALANCE, keys.TOTAL_INVENTORY)
    previous = find_statement_value(yearly, 1, Statement.BALANCE, keys.TOTAL_INVENTORY)
    growth = yoy_growth(inventory, previous)

    return [
        Metric.from_formatted(
            "Total Inventory", to_crores(inventory),
            "Value of raw materials, WIP, and finished goods held.",
        ).with_yoy(growth),
        Metric.from_formatted(
            "Inventory Growth (YoY)", growth,
            "YoY % change in total inventory. Rapid growth without sales growth "
            "can be a warning.",
        ),
    ]
