"""Categorized metrics orchestrator.

Computes peer averages once, runs every category in display order and
flattens the result for export.
"""

from __future__ import annotations

import logging
import math

import pandas as pd

from stockcore.data.models import StockData
from stockcore.metrics.accessors import to_crores, to_percentage, to_ratio
from stockcore.metrics.cash_flow import advanced_cash_flow, cash_flow_health
from stockcore.metrics.comparisons import peer_average
from stockcore.metrics.models import Metric, MetricCategory, Missing
from stockcore.metrics.profitability import (
    efficiency_ratios,
    operational_efficiency,
    profitability_metrics,
)
from stockcore.metrics.safety import asset_quality, financial_health_and_debt, liquidity
from stockcore.metrics.sentiment import key_technical_indicators, overall_sentiment
from stockcore.metrics.shareholders import share_capital, shareholder_returns
from stockcore.metrics.trends import growth_trends, historical_performance
from stockcore.metrics.valuation import nse_price, valuation_metrics

logger = logging.getLogger(__name__)

FRAME_COLUMNS = [
    "category",
    "label",
    "value",
    "unit",
    "raw",
    "color",
    "peer_average",
    "peer_verdict",
    "peer_text",
    "yoy_growth",
    "explanation",
]


def compute_categorized_metrics(stock: StockData) -> dict[MetricCategory, list[Metric]]:
    """Run every metric category for one company.

    Peer averages use ``stock.actual_peers`` only, so the company never
    counts towards its own benchmark. Categories that need a prior year come
    back empty when only one year is present.

    Args:
        stock: Company records, peer rows and latest quote.

    Returns:
        Category -> metrics, in display order.
    """
    yearly = stock.yearly
    primary = stock.primary_peer
    peers = stock.actual_peers

    if not yearly:
        logger.warning("%s: no yearly financial records", stock.ticker)
    if primary is None:
        logger.warning("%s: no peer-table row for the company; peer metrics are N/A", stock.ticker)

    average_market_cap = peer_average(peers, "market_cap", to_crores)
    average_pe = peer_average(peers, "price_to_earnings", to_ratio)
    average_pb = peer_average(peers, "price_to_book", to_ratio)
    average_yield = peer_average(peers, "dividend_yield", to_percentage)
    average_roe = peer_average(peers, "return_on_equity", to_percentage)

    categorized = {
        MetricCategory.PROFITABILITY: profitability_metrics(yearly),
        MetricCategory.VALUATION: valuation_metrics(
            yearly, primary, stock.market, average_pe, average_pb, average_market_cap
        ),
        MetricCategory.CASH_FLOW_HEALTH: cash_flow_health(yearly),
        MetricCategory.ADVANCED_CASH_FLOW: advanced_cash_flow(yearly),
        MetricCategory.FINANCIAL_HEALTH_AND_DEBT: financial_health_and_debt(yearly),
        MetricCategory.ASSET_QUALITY: asset_quality(yearly),
        MetricCategory.SHAREHOLDER_RETURNS: shareholder_returns(yearly, primary, average_yield),
        MetricCategory.SHARE_CAPITAL: share_capital(yearly),
        MetricCategory.EFFICIENCY_RATIOS: efficiency_ratios(yearly, primary, average_roe),
        MetricCategory.OPERATIONAL_EFFICIENCY: operational_efficiency(yearly),
        MetricCategory.GROWTH_TRENDS: growth_trends(yearly),
        MetricCategory.HISTORICAL_PERFORMANCE: historical_performance(yearly),
        MetricCategory.LIQUIDITY: liquidity(yearly),
        MetricCategory.KEY_TECHNICAL_INDICATORS: key_technical_indicators(
            stock.market, nse_price(stock.market, primary)
        ),
        MetricCategory.OVERALL_SENTIMENT: overall_sentiment(primary),
    }

    total = sum(len(m) for m in categorized.values())
    available = sum(1 for m in categorized.values() for metric in m if not metric.is_missing)
    logger.info(
        "%s: %d metrics across %d categories (%d available)",
        stock.ticker, total, len(categorized), available,
    )
    return categorized


def _raw(value: float | Missing) -> float:
    return math.nan if isinstance(value, Missing) else value


def metrics_frame(categorized: dict[MetricCategory, list[Metric]]) -> pd.DataFrame:
    """Flatten categorized metrics into one row per metric.

    Args:
        categorized: Output of ``compute_categorized_metrics``.

    Returns:
        DataFrame with FRAME_COLUMNS; ``raw`` is NaN where unavailable.
    """
    rows = []
    for category, metrics in categorized.items():
        for metric in metrics:
            rows.append({
                "category": category.value,
                "label": metric.label,
                "value": str(metric.formatted),
                "unit": metric.unit,
                "raw": _raw(metric.raw),
                "color": metric.color_class.value,
                "peer_average": metric.peer_average.display if metric.peer_average else "",
                "peer_verdict": metric.peer_verdict.value if metric.peer_verdict else "",
                "peer_text": metric.peer_text,
                "yoy_growth": metric.yoy_growth.display if metric.yoy_growth else "",
                "explanation": metric.explanation,
            })
    return pd.DataFrame(rows, columns=FRAME_COLUMNS)
