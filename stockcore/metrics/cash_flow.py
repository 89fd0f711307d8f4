"""Cash flow health and detailed cash flow line items."""

from __future__ import annotations

from collections.abc import Sequence

from stockcore.data.models import FinancialYearRecord
from stockcore.metrics import keys
from stockcore.metrics.accessors import (
    find_statement_value,
    safe_add,
    safe_ratio,
    to_crores,
    to_ratio,
)
from stockcore.metrics.keys import Statement
from stockcore.metrics.models import Metric


def _cash(yearly: Sequence[FinancialYearRecord], key: str):
    return find_statement_value(yearly, 0, Statement.CASH_FLOW, key)


def cash_flow_health(yearly: Sequence[FinancialYearRecord]) -> list[Metric]:
    """Operating cash, CapEx, free cash flow and earnings quality.

    Free cash flow is CFO + CapEx, CapEx being reported as a negative
    outflow. It is N/A when either line is missing.

    Args:
        yearly: Yearly records, most recent first.

    Returns:
        Metrics in display order.
    """
    cfo = _cash(yearly, keys.CASH_FROM_OPERATIONS)
    capex = _cash(yearly, keys.CAPITAL_EXPENDITURES)
    net_income = find_statement_value(yearly, 0, Statement.INCOME, keys.NET_INCOME)

    return [
        Metric.from_formatted(
            "Cash from Operating Activities (CFO)", to_crores(cfo),
            "Cash from daily business operations. Key to financial health; "
            "positive & growing is good.",
        ),
        Metric.from_formatted(
            "Capital Expenditure (CapEx)", to_crores(capex),
            "Funds for acquiring/maintaining physical assets (PP&E). Usually a "
            "cash outflow (negative).",
        ),
        Metric.from_formatted(
            "Free Cash Flow (FCF)", to_crores(safe_add(cfo, capex)),
            "Cash for investors after OpEx & CapEx (CFO + CapEx). Shows ability "
            "to fund growth, dividends etc.",
        ),
        Metric.from_formatted(
            "Net Change in Cash", to_crores(_cash(yearly, keys.NET_CHANGE_IN_CASH)),
            "Net increase/decrease in cash & equivalents. Combined impact of "
            "operating, investing, financing.",
        ),
        Metric.from_formatted(
            "Operating Cash Flow to Net Income Ratio",
            to_ratio(safe_ratio(cfo, net_income)),
            "Earnings quality (CFO / Net Income). >1 suggests high quality; "
            "<1 may flag issues.",
        ),
        Metric.from_formatted(
            "Changes in Working Capital",
            to_crores(_cash(yearly, keys.CHANGES_IN_WORKING_CAPITAL)),
            "Net change in current assets (receivables, inventory) & current "
            "liabilities (payables). Impacts CFO.",
        ),
    ]


def advanced_cash_flow(yearly: Sequence[FinancialYearRecord]) -> list[Metric]:
    """Reconciling items and financing flows from the cash flow statement."""
    return [
        Metric.from_formatted(
            "Non-Cash Items (CFO Adj.)", to_crores(_cash(yearly, keys.NON_CASH_ITEMS)),
            "Adjusts profit to real cash flow (adds back non-cash expenses, "
            "deducts non-cash income). For earnings quality.",
        ),
        Metric.from_formatted(
            "Depreciation & Amortization (CFO Adj.)",
            to_crores(_cash(yearly, keys.DEPRECIATION_AMORTIZATION)),
            "Non-cash expense (asset wear/resource use), added back to "
            "reconcile NI to CFO. Key for capital-heavy firms.",
        ),
        Metric.from_formatted(
            "Cash Interest Paid", to_crores(_cash(yearly, keys.CASH_INTEREST_PAID)),
            "Actual cash paid for debt interest. Shows true debt burden; high "
            "interest can be risky.",
        ),
        Metric.from_formatted(
            "Net Debt Issued/(Retired)",
            to_crores(_cash(yearly, keys.DEBT_ISSUED_RETIRED)),
            "Net cash from new debt or debt repayment. Positive = more debt; "
            "negative = debt repaid. Part of CFF.",
        ),
        Metric.from_formatted(
            "Cash Dividends Paid", to_crores(_cash(yearly, keys.DIVIDENDS_PAID)),
            "Total cash paid as dividends. Direct cash return to shareholders. "
            "Part of CFF.",
        ),
        Metric.from_formatted(
            "Cash from Financing Activities (CFF)",
            to_crores(_cash(yearly, keys.CASH_FROM_FINANCING)),
            "Net cash from financing (debt, dividends, stock). Shows capital "
            "flow & funding strategy.",
        ),
        Metric.from_formatted(
            "Foreign Exchange Effects on Cash", to_crores(_cash(yearly, keys.FX_EFFECTS)),
            "FX rate change impact on foreign currency cash. Reconciles total "
            "cash change.",
        ),
    ]
