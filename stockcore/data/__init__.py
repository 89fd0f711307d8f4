"""Input adapters: daily series pairing, peer split and JSON loading."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

from stockcore.analysis.resampling import SERIES_COLUMNS, empty_series
from stockcore.data.models import (
    FinancialYearRecord,
    MarketSnapshot,
    PeerRecord,
    StockData,
)

logger = logging.getLogger(__name__)

__all__ = [
    "FinancialYearRecord",
    "MarketSnapshot",
    "PeerRecord",
    "StockData",
    "build_daily_series",
    "load_stock_file",
    "split_peers",
]

# JSON field -> PeerRecord attribute
_PEER_FIELDS = {
    "tickerId": "ticker_id",
    "companyName": "company_name",
    "marketCap": "market_cap",
    "priceToEarningsValueRatio": "price_to_earnings",
    "priceToBookValueRatio": "price_to_book",
    "dividendYieldIndicatedAnnualDividend": "dividend_yield",
    "returnOnAverageEquityTrailing12Month": "return_on_equity",
    "returnOnAverageEquity5YearAverage": "return_on_equity_5y",
    "price": "price",
    "percentChange": "percent_change",
    "overallRating": "overall_rating",
}

_MARKET_FIELDS = {
    "nsePrice": "nse_price",
    "bsePrice": "bse_price",
    "dayHigh": "day_high",
    "yearHigh": "year_high",
    "yearLow": "year_low",
    "percentChange": "percent_change",
    "sma50": "sma_50",
    "sma100": "sma_100",
}


def _pairs_frame(pairs: Iterable[Sequence[Any]], column: str) -> pd.DataFrame:
    """Parse ``[timestamp, value]`` pairs, coercing strings to numbers."""
    rows = [tuple(p[:2]) for p in pairs if p is not None and len(p) >= 2]
    frame = pd.DataFrame(rows, columns=["timestamp", column])
    frame["timestamp"] = pd.to_numeric(frame["timestamp"], errors="coerce")
    frame[column] = pd.to_numeric(frame[column], errors="coerce").astype("float64")
    return frame


def build_daily_series(
    price_pairs: Iterable[Sequence[Any]],
    volume_pairs: Iterable[Sequence[Any]] | None = None,
) -> pd.DataFrame:
    """Join price and volume pairs on timestamp into a daily series.

    Points without a finite price are dropped. When a volume series is given,
    points without a matching finite volume are dropped too; without one the
    volume column is NaN throughout.

    Args:
        price_pairs: ``[timestamp_ms, price]`` pairs; prices may be strings.
        volume_pairs: Optional ``[timestamp_ms, volume]`` pairs.

    Returns:
        Frame with timestamp, price and volume columns, sorted by timestamp
        with duplicate timestamps collapsed to the last one.
    """
    prices = _pairs_frame(price_pairs, "price")
    if prices.empty:
        logger.warning("No price points supplied")
        return empty_series()

    if volume_pairs is not None:
        volumes = _pairs_frame(volume_pairs, "volume")
        volumes = volumes.drop_duplicates("timestamp", keep="last")
        series = prices.merge(volumes, on="timestamp", how="left")
        valid = np.isfinite(series["price"]) & np.isfinite(series["volume"])
    else:
        series = prices.assign(volume=np.nan)
        valid = np.isfinite(series["price"])
    valid &= series["timestamp"].notna()

    dropped = int((~valid).sum())
    if dropped:
        logger.warning("Dropped %d of %d daily points without valid data", dropped, len(series))

    series = series.loc[valid, list(SERIES_COLUMNS)].copy()
    series["timestamp"] = series["timestamp"].astype("int64")
    series = (
        series.drop_duplicates("timestamp", keep="last")
        .sort_values("timestamp")
        .reset_index(drop=True)
    )
    logger.debug("Built daily series with %d points", len(series))
    return series


def _first_word(name: str | None) -> str:
    parts = (name or "").split()
    return parts[0].lower() if parts else ""


def split_peers(
    peers: list[PeerRecord], ticker: str, company_name: str
) -> tuple[PeerRecord | None, list[PeerRecord]]:
    """Separate the company's own row from its peer table.

    The primary row is matched by ticker first, then by a peer name that
    contains the first word of the company name. A peer is excluded from the
    comparison set when its ticker matches or its name starts with the same
    word.

    Returns:
        (primary row or None, remaining peers).
    """
    ticker_key = (ticker or "").strip().upper()
    name_key = _first_word(company_name)

    primary = None
    if ticker_key:
        primary = next(
            (p for p in peers if (p.ticker_id or "").upper() == ticker_key), None
        )
    if primary is None and name_key:
        primary = next(
            (p for p in peers if name_key in (p.company_name or "").lower()), None
        )

    actual = []
    for peer in peers:
        if ticker_key and (peer.ticker_id or "").upper() == ticker_key:
            continue
        if name_key and _first_word(peer.company_name) == name_key:
            continue
        actual.append(peer)

    if primary is None:
        logger.warning("%s: company not found in its peer table", ticker)
    logger.debug("%s: %d peers after excluding the company", ticker, len(actual))
    return primary, actual


def _statement(raw: Any) -> dict[str, Any]:
    """Accept either a key -> value mapping or a list of {key, value} items."""
    if isinstance(raw, dict):
        return dict(raw)
    if isinstance(raw, list):
        return {
            item["key"]: item.get("value")
            for item in raw
            if isinstance(item, dict) and "key" in item
        }
    return {}


def _year_record(raw: dict[str, Any]) -> FinancialYearRecord:
    statements = raw.get("stockFinancialMap", raw)
    return FinancialYearRecord(
        year=str(raw.get("year", raw.get("yearName", "N/A"))),
        income_statement=_statement(statements.get("INC")),
        balance_sheet=_statement(statements.get("BAL")),
        cash_flow_statement=_statement(statements.get("CAS")),
    )


def _map_fields(raw: dict[str, Any], fields: dict[str, str]) -> dict[str, Any]:
    return {attr: raw.get(key) for key, attr in fields.items()}


def load_stock_file(path: str | Path) -> tuple[StockData, pd.DataFrame]:
    """Load a company JSON document.

    Expected keys: ``ticker``, ``companyName``, ``market``, ``financials``
    (most recent year first), ``peers`` and ``history`` with ``price`` and
    optional ``volume`` pair lists.

    Args:
        path: JSON file path.

    Returns:
        (StockData for the metrics engine, daily series for the technical
        engine).

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the document is not valid JSON or not an object.
    """
    with open(path, encoding="utf-8") as f:
        document = json.load(f)
    if not isinstance(document, dict):
        raise ValueError(f"{path}: expected a JSON object, got {type(document).__name__}")

    ticker = str(document.get("ticker", ""))
    company_name = str(document.get("companyName", ""))

    peers = [PeerRecord(**_map_fields(p, _PEER_FIELDS)) for p in document.get("peers", [])]
    primary, actual = split_peers(peers, ticker, company_name)

    stock = StockData(
        ticker=ticker,
        company_name=company_name,
        yearly=[_year_record(y) for y in document.get("financials", [])],
        primary_peer=primary,
        actual_peers=actual,
        market=MarketSnapshot(**_map_fields(document.get("market", {}), _MARKET_FIELDS)),
    )

    history = document.get("history", {})
    daily = build_daily_series(history.get("price", []), history.get("volume"))

    logger.info(
        "Loaded %s: %d years, %d peers, %d daily points",
        ticker, len(stock.yearly), len(actual), len(daily),
    )
    return stock, daily
