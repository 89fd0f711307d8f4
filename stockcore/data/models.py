"""Data models for the metrics engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FinancialYearRecord:
    """One fiscal year of statement line items.

    Values are kept as supplied (numbers or numeric strings); the metric
    accessors coerce them on read.

    Attributes:
        year: Fiscal year label, e.g. "2024".
        income_statement: Line-item key -> value (INC).
        balance_sheet: Line-item key -> value (BAL).
        cash_flow_statement: Line-item key -> value (CAS).
    """

    year: str
    income_statement: dict[str, Any] = field(default_factory=dict)
    balance_sheet: dict[str, Any] = field(default_factory=dict)
    cash_flow_statement: dict[str, Any] = field(default_factory=dict)


@dataclass
class PeerRecord:
    """One company row from the peer comparison table.

    The primary company appears in the same table; see ``split_peers``.
    """

    ticker_id: str | None = None
    company_name: str | None = None
    market_cap: Any = None
    price_to_earnings: Any = None
    price_to_book: Any = None
    dividend_yield: Any = None
    return_on_equity: Any = None
    return_on_equity_5y: Any = None
    price: Any = None
    percent_change: Any = None
    overall_rating: Any = None


@dataclass
class MarketSnapshot:
    """Latest quote and moving-average fields for the company."""

    nse_price: Any = None
    bse_price: Any = None
    day_high: Any = None
    year_high: Any = None
    year_low: Any = None
    percent_change: Any = None
    sma_50: Any = None
    sma_100: Any = None


@dataclass
class StockData:
    """Everything the metrics engine reads for one company.

    Attributes:
        ticker: Exchange ticker as entered.
        company_name: Display name.
        yearly: Yearly records, most recent first.
        primary_peer: The company's own row from the peer table, if found.
        actual_peers: Peer rows excluding the company itself.
        market: Latest quote fields.
    """

    ticker: str
    company_name: str
    yearly: list[FinancialYearRecord] = field(default_factory=list)
    primary_peer: PeerRecord | None = None
    actual_peers: list[PeerRecord] = field(default_factory=list)
    market: MarketSnapshot = field(default_factory=MarketSnapshot)
