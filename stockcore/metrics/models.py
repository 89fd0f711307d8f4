"""Value types shared by the metric category modules."""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from enum import Enum


class Missing(Enum):
    """Placeholder for a value that cannot be shown as a number.

    Distinct from 0, None and NaN so callers can tell "no data" apart from
    "data that makes the ratio meaningless".
    """

    NOT_AVAILABLE = "N/A"
    NOT_MEANINGFUL = "Not Meaningful"

    def __str__(self) -> str:
        return self.value


NOT_AVAILABLE = Missing.NOT_AVAILABLE
NOT_MEANINGFUL = Missing.NOT_MEANINGFUL


class ColorClass(Enum):
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"


class Verdict(Enum):
    """Outcome of comparing a company value with its peer average."""

    BETTER = "better"
    WORSE = "worse"
    HIGHER = "higher"
    LOWER = "lower"
    NEUTRAL = "neutral"


class MetricCategory(Enum):
    """Metric groups in display order."""

    PROFITABILITY = "Profitability"
    VALUATION = "Valuation"
    CASH_FLOW_HEALTH = "Cash Flow Health"
    ADVANCED_CASH_FLOW = "Advanced Cash Flow"
    FINANCIAL_HEALTH_AND_DEBT = "Financial Health & Debt"
    ASSET_QUALITY = "Asset Quality"
    SHAREHOLDER_RETURNS = "Shareholder Returns"
    SHARE_CAPITAL = "Share Capital"
    EFFICIENCY_RATIOS = "Efficiency Ratios"
    OPERATIONAL_EFFICIENCY = "Operational Efficiency"
    GROWTH_TRENDS = "Growth Trends (YoY)"
    HISTORICAL_PERFORMANCE = "Historical Performance (CAGR)"
    LIQUIDITY = "Liquidity"
    KEY_TECHNICAL_INDICATORS = "Key Technical Indicators"
    OVERALL_SENTIMENT = "Overall Sentiment"


@dataclass(frozen=True)
class Formatted:
    """A display string with its unit and the number behind it.

    Attributes:
        formatted: Display text, or a Missing sentinel on failure.
        unit: "Cr", "%", "x", "₹" or "" (always "" on failure).
        raw: Parsed number; NaN on failure.
        color_class: Sign colouring where the formatter applies one.
        symbol_prefix: True when the unit is a currency symbol shown first.
    """

    formatted: str | Missing
    unit: str = ""
    raw: float = math.nan
    color_class: ColorClass = ColorClass.NEUTRAL
    symbol_prefix: bool = False

    @property
    def is_missing(self) -> bool:
        return isinstance(self.formatted, Missing)

    @property
    def display(self) -> str:
        """Formatted value with its unit attached."""
        if self.is_missing:
            return str(self.formatted)
        if self.symbol_prefix:
            return f"{self.unit}{self.formatted}"
        if self.unit in ("", "%", "x"):
            return f"{self.formatted}{self.unit}"
        return f"{self.formatted} {self.unit}"


@dataclass(frozen=True)
class Metric:
    """One display-ready metric with optional peer and YoY annotations."""

    label: str
    formatted: str | Missing
    unit: str = ""
    raw: float | Missing = NOT_AVAILABLE
    color_class: ColorClass = ColorClass.NEUTRAL
    explanation: str = ""
    peer_average: Metric | None = None
    peer_verdict: Verdict | None = None
    peer_text: str = ""
    yoy_growth: Formatted | None = field(default=None)
    symbol_prefix: bool = False

    @classmethod
    def from_formatted(
        cls, label: str, value: Formatted, explanation: str = ""
    ) -> Metric:
        """Wrap a formatter result, mapping a NaN raw value to NOT_AVAILABLE."""
        raw: float | Missing = value.raw
        if isinstance(raw, float) and math.isnan(raw):
            raw = value.formatted if isinstance(value.formatted, Missing) else NOT_AVAILABLE
        return cls(
            label=label,
            formatted=value.formatted,
            unit=value.unit,
            raw=raw,
            color_class=value.color_class,
            explanation=explanation,
            symbol_prefix=value.symbol_prefix,
        )

    @property
    def is_missing(self) -> bool:
        return isinstance(self.formatted, Missing)

    @property
    def display(self) -> str:
        return Formatted(
            formatted=self.formatted,
            unit=self.unit,
            symbol_prefix=self.symbol_prefix,
        ).display

    def with_yoy(self, growth: Formatted) -> Metric:
        return replace(self, yoy_growth=growth)
