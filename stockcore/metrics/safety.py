"""Balance sheet strength: debt, asset quality and liquidity."""

from __future__ import annotations

from collections.abc import Sequence

from stockcore.data.models import FinancialYearRecord
from stockcore.metrics import keys
from stockcore.metrics.accessors import (
    find_statement_value,
    safe_ratio,
    to_crores,
    to_currency,
    to_float,
    to_percentage,
    to_ratio,
)
from stockcore.metrics.keys import Statement
from stockcore.metrics.models import NOT_AVAILABLE, Metric, Missing


def _balance(yearly: Sequence[FinancialYearRecord], key: str):
    return find_statement_value(yearly, 0, Statement.BALANCE, key)


def financial_health_and_debt(yearly: Sequence[FinancialYearRecord]) -> list[Metric]:
    """Assets, debt, equity, leverage and other liabilities.

    Args:
        yearly: Yearly records, most recent first.

    Returns:
        Metrics in display order.
    """
    total_debt = _balance(yearly, keys.TOTAL_DEBT)
    total_equity = _balance(yearly, keys.TOTAL_EQUITY)
    interest_paid = find_statement_value(yearly, 0, Statement.CASH_FLOW, keys.CASH_INTEREST_PAID)
    net_interest = find_statement_value(
        yearly, 0, Statement.INCOME, keys.NET_INTEREST_NON_OPERATING
    )

    return [
        Metric.from_formatted(
            "Total Assets", to_crores(_balance(yearly, keys.TOTAL_ASSETS)),
            "Total company resources (current & non-current assets). "
            "Represents investments.",
        ),
        Metric.from_formatted(
            "Total Debt", to_crores(total_debt),
            "Total outstanding borrowings (short & long-term). Indicates "
            "financial obligations.",
        ),
        Metric.from_formatted(
            "Total Equity", to_crores(total_equity),
            "Company net worth (Assets - Liabilities). Shareholders' stake & "
            "retained earnings.",
        ),
        Metric.from_formatted(
            "Debt-to-Equity Ratio", to_ratio(safe_ratio(total_debt, total_equity)),
            "Financial leverage (Debt / Equity). Higher = more risk/debt "
            "reliance. Lower is safer. Industry varies.",
        ),
        Metric.from_formatted(
            "Interest Paid (from Cash Flow St.)", to_crores(interest_paid),
            "Actual cash paid for interest (from CFS). Shows real debt burden.",
        ),
        Metric.from_formatted(
            "Net Interest Income/(Expense) (from Income St.)", to_crores(net_interest),
            "Net interest income (from investments) - interest expense (on "
            "debt) (from IS). Can be +/-.",
        ),
        Metric.from_formatted(
            "Tangible Book Value per Share",
            to_currency(_balance(yearly, keys.TANGIBLE_BVPS)),
            "Book value/share (excl. goodwill, intangibles). Conservative "
            "per-share value measure.",
        ),
        Metric.from_formatted(
            "Long Term Investments", to_crores(_balance(yearly, keys.LONG_TERM_INVESTMENTS)),
            "Investments held >1 year (stocks, bonds, real estate, "
            "subsidiaries/associates).",
        ),
        Metric.from_formatted(
            "Accrued Expenses", to_crores(_balance(yearly, keys.ACCRUED_EXPENSES)),
            "Expenses incurred but not yet paid (e.g., salaries, period-end "
            "utilities). Current liability.",
        ),
        Metric.from_formatted(
            "Other Current Liabilities",
            to_crores(_balance(yearly, keys.OTHER_CURRENT_LIABILITIES)),
            "Short-term obligations (<1yr) not in standard categories (e.g., "
            "deferred revenue, taxes payable).",
        ),
        Metric.from_formatted(
            "Other Non-Current Liabilities",
            to_crores(_balance(yearly, keys.OTHER_LIABILITIES)),
            "Long-term obligations (>1yr) not in standard categories (e.g., "
            "deferred tax, pensions).",
        ),
    ]


def _share_of_assets(value, total_assets) -> float | Missing:
    assets = to_float(total_assets)
    if isinstance(assets, Missing) or assets <= 0:
        return NOT_AVAILABLE
    return safe_ratio(value, assets, 100)


def asset_quality(yearly: Sequence[FinancialYearRecord]) -> list[Metric]:
    """Goodwill and intangibles as a share of positive total assets."""
    total_assets = _balance(yearly, keys.TOTAL_ASSETS)
    return [
        Metric.from_formatted(
            "Goodwill as % of Total Assets",
            to_percentage(_share_of_assets(_balance(yearly, keys.GOODWILL), total_assets)),
            "Goodwill as % of total assets. High % can risk write-downs if "
            "acquisitions underperform.",
        ),
        Metric.from_formatted(
            "Intangibles as % of Total Assets",
            to_percentage(_share_of_assets(_balance(yearly, keys.INTANGIBLES), total_assets)),
            "Intangibles (excl. goodwill) as % of total assets.",
        ),
    ]


def liquidity(yearly: Sequence[FinancialYearRecord]) -> list[Metric]:
    """Liquid assets, current position and current ratio."""
    current_assets = _balance(yearly, keys.TOTAL_CURRENT_ASSETS)
    current_liabilities = _balance(yearly, keys.TOTAL_CURRENT_LIABILITIES)
    return [
        Metric.from_formatted(
            "Cash & Short Term Investments",
            to_crores(_balance(yearly, keys.CASH_AND_ST_INVESTMENTS)),
            "Most liquid assets (cash, deposits, money market, etc.). Buffer "
            "for short-term needs.",
        ),
        Metric.from_formatted(
            "Total Current Assets", to_crores(current_assets),
            "Assets convertible to cash <1 year (cash, receivables, inventory). "
            "Shows short-term resources.",
        ),
        Metric.from_formatted(
            "Total Current Liabilities", to_crores(current_liabilities),
            "Obligations due <1 year (payables, short-term debt, accrued "
            "expenses). Short-term commitments.",
        ),
        Metric.from_formatted(
            "Current Ratio", to_ratio(safe_ratio(current_assets, current_liabilities)),
            "Ability to cover short-term liabilities with short-term assets "
            "(Current Assets / Current Liabilities). >1 preferred. Industry varies.",
        ),
    ]
