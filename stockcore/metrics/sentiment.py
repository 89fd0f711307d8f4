"""Market-facing metrics: price range, moving averages and analyst rating."""

from __future__ import annotations

from typing import Any

from stockcore.data.models import MarketSnapshot, PeerRecord
from stockcore.metrics.accessors import safe_get, safe_ratio, to_currency, to_float, to_percentage
from stockcore.metrics.models import NOT_AVAILABLE, ColorClass, Metric, Missing

_POSITIVE_TERMS = (
    "bullish", "buy", "strong buy", "outperform", "positive", "accumulate", "overweight",
)
_NEGATIVE_TERMS = (
    "bearish", "sell", "strong sell", "underperform", "negative", "reduce", "underweight",
)


def _price_vs_average(price: Any, average: Any) -> float | Missing:
    """Percent distance of price above (+) or below (-) a moving average."""
    ratio = safe_ratio(price, average)
    if isinstance(ratio, Missing):
        return NOT_AVAILABLE
    return (ratio - 1) * 100


def _year_range(market: MarketSnapshot) -> Metric:
    high = to_currency(safe_get(lambda: market.year_high))
    low = to_currency(safe_get(lambda: market.year_low))
    explanation = (
        "52-week high/low price. Shows recent trading range; potential "
        "support/resistance."
    )
    if high.is_missing and low.is_missing:
        return Metric(label="52-Week High/Low", formatted=NOT_AVAILABLE, explanation=explanation)
    return Metric(
        label="52-Week High/Low",
        formatted=f"{high.display} / {low.display}",
        explanation=explanation,
    )


def key_technical_indicators(market: MarketSnapshot, price: Any) -> list[Metric]:
    """52-week range, day change and price position against 50/100-day MAs.

    Args:
        market: Latest quote fields including exchange-published averages.
        price: Reference price (NSE quote or its fallback).

    Returns:
        Metrics in display order.
    """
    sma_50 = safe_get(lambda: market.sma_50)
    sma_100 = safe_get(lambda: market.sma_100)
    return [
        _year_range(market),
        Metric.from_formatted(
            "Day's % Change",
            to_percentage(safe_get(lambda: market.percent_change), color_sign=True),
            "Day's price % change vs previous close. Shows short-term momentum.",
        ),
        Metric.from_formatted(
            "50-Day Moving Avg. (NSE)", to_currency(sma_50),
            "NSE 50-day avg. closing price. Medium-term trend & "
            "support/resistance indicator.",
        ),
        Metric.from_formatted(
            "100-Day Moving Avg. (NSE)", to_currency(sma_100),
            "NSE 100-day avg. closing price. Long-term trend indicator.",
        ),
        Metric.from_formatted(
            "Price vs 50-Day MA",
            to_percentage(_price_vs_average(price, sma_50), color_sign=True),
            "Price % vs 50-Day MA. Positive = above; negative = below.",
        ),
        Metric.from_formatted(
            "Price vs 100-Day MA",
            to_percentage(_price_vs_average(price, sma_100), color_sign=True),
            "Price % vs 100-Day MA. Positive = above; negative = below.",
        ),
    ]


def rating_color(rating: Any) -> ColorClass:
    """Colour an analyst rating by the sentiment words it contains."""
    text = rating.lower() if isinstance(rating, str) else ""
    if any(term in text for term in _POSITIVE_TERMS):
        return ColorClass.POSITIVE
    if any(term in text for term in _NEGATIVE_TERMS):
        return ColorClass.NEGATIVE
    return ColorClass.NEUTRAL


def overall_sentiment(primary: PeerRecord | None) -> list[Metric]:
    """Analyst consensus rating from the company's peer-table row."""
    rating = safe_get(lambda: primary.overall_rating)
    number = to_float(rating)
    return [
        Metric(
            label="Analyst Rating",
            formatted=rating if isinstance(rating, Missing) else str(rating),
            raw=number,
            color_class=rating_color(rating),
            explanation=(
                "Analyst consensus (e.g., Buy, Hold, Sell) on stock's future. "
                "Expert opinion, use with other factors."
            ),
        )
    ]
