"""Growth rates and peer comparison."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import replace
from typing import Any

from stockcore.data.models import PeerRecord
from stockcore.metrics.accessors import safe_get, sign_color, to_float
from stockcore.metrics.models import (
    NOT_AVAILABLE,
    NOT_MEANINGFUL,
    Formatted,
    Metric,
    Missing,
    Verdict,
)

logger = logging.getLogger(__name__)


def yoy_growth(current: Any, previous: Any) -> Formatted:
    """Year-over-year change as a percentage of the prior value's magnitude.

    Args:
        current: Latest-year value.
        previous: Prior-year value.

    Returns:
        Sign-coloured percentage, or NOT_AVAILABLE if either value is
        missing or the prior value is zero.
    """
    cur = to_float(current)
    prev = to_float(previous)
    if isinstance(cur, Missing) or isinstance(prev, Missing) or prev == 0:
        return Formatted(formatted=NOT_AVAILABLE)
    growth = (cur - prev) / abs(prev) * 100
    return Formatted(
        formatted=f"{growth:.2f}", unit="%", raw=growth, color_class=sign_color(growth)
    )


def cagr(end: Any, start: Any, years: float) -> Formatted:
    """Compound annual growth rate between two values.

    Args:
        end: Latest value.
        start: Value ``years`` earlier.
        years: Number of compounding periods.

    Returns:
        Sign-coloured percentage. NOT_AVAILABLE if either value is missing,
        the start is zero or ``years`` is not positive. NOT_MEANINGFUL if
        either value is negative or zero, since the root of a negative ratio
        has no growth reading.
    """
    end_value = to_float(end)
    start_value = to_float(start)
    if (
        isinstance(end_value, Missing)
        or isinstance(start_value, Missing)
        or start_value == 0
        or years <= 0
    ):
        return Formatted(formatted=NOT_AVAILABLE)
    if start_value <= 0 or end_value <= 0:
        return Formatted(formatted=NOT_MEANINGFUL)
    rate = ((end_value / start_value) ** (1 / years) - 1) * 100
    return Formatted(
        formatted=f"{rate:.2f}", unit="%", raw=rate, color_class=sign_color(rate)
    )


def peer_average(
    peers: Sequence[PeerRecord],
    attribute: str,
    formatter: Callable[[Any], Formatted],
) -> Formatted:
    """Mean of one peer field, passed through ``formatter``.

    Non-numeric entries are skipped. The list must already exclude the
    company itself.

    Returns:
        Formatted mean, or the formatter's NOT_AVAILABLE result when no peer
        has a usable value.
    """
    values = []
    for peer in peers:
        number = to_float(safe_get(lambda: getattr(peer, attribute)))
        if not isinstance(number, Missing):
            values.append(number)
    if not values:
        logger.debug("No numeric peer values for %s", attribute)
        return formatter(NOT_AVAILABLE)
    return formatter(sum(values) / len(values))


def compare_to_peers(
    company_value: Any,
    average: Formatted,
    metric_name: str,
    lower_is_better: bool = False,
    size_comparison: bool = False,
    allow_non_positive: bool = False,
) -> tuple[Verdict, str]:
    """Verdict and display text for a company value against its peer average.

    Args:
        company_value: The company's raw value.
        average: Formatted peer average.
        metric_name: Short name used in the text, e.g. "P/E".
        lower_is_better: Invert polarity (valuation multiples).
        size_comparison: Use higher/lower with Larger/Smaller wording.
        allow_non_positive: Still compare when either value is <= 0; used
            where zero or negative is a real reading (RoE, yield).

    Returns:
        (Verdict, text such as "(Lower P/E vs Peers)"). Neutral with empty
        text when either side is missing, equal, or non-positive without
        ``allow_non_positive``.
    """
    neutral = (Verdict.NEUTRAL, "")
    company = to_float(company_value)
    if average.is_missing or isinstance(company, Missing):
        return neutral
    peer = average.raw

    if size_comparison:
        if company > peer:
            return Verdict.HIGHER, f"(Larger {metric_name} vs Peers)"
        if company < peer:
            return Verdict.LOWER, f"(Smaller {metric_name} vs Peers)"
        return neutral

    if company <= 0 or peer <= 0:
        if not allow_non_positive:
            return neutral
        lower_is_better = False

    if company == peer:
        return neutral
    higher = company > peer
    better = higher != lower_is_better
    word = "Higher" if higher else "Lower"
    return (Verdict.BETTER if better else Verdict.WORSE), f"({word} {metric_name} vs Peers)"


def with_peers(
    metric: Metric,
    company_value: Any,
    average: Formatted,
    metric_name: str,
    lower_is_better: bool = False,
    size_comparison: bool = False,
    allow_non_positive: bool = False,
) -> Metric:
    """Attach the peer average and comparison verdict to a metric."""
    verdict, text = compare_to_peers(
        company_value, average, metric_name,
        lower_is_better=lower_is_better,
        size_comparison=size_comparison,
        allow_non_positive=allow_non_positive,
    )
    return replace(
        metric,
        peer_average=Metric.from_formatted(f"Peer Avg. {metric_name}", average),
        peer_verdict=verdict,
        peer_text=text,
    )
