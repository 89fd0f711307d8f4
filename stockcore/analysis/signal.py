"""Weighted multi-timeframe signal scoring.

Every available reading casts a vote, scaled by its timeframe weight, on the
bullish or bearish side. The side that beats the other by the dominance ratio
sets the classification.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum

import pandas as pd

from stockcore.analysis.timeframes import (
    IndicatorBundle,
    RsiZone,
    TimeframeBundles,
    analyze_timeframes,
)
from stockcore.config import IndicatorConfig, ScoringConfig, Timeframe

logger = logging.getLogger(__name__)


class SignalClass(Enum):
    STRONGLY_BULLISH = "Strongly Bullish"
    BULLISH = "Bullish"
    NEUTRAL = "Neutral"
    BEARISH = "Bearish"
    STRONGLY_BEARISH = "Strongly Bearish"
    INSUFFICIENT_DATA = "Not Enough Data for Signal"
    ERROR = "Analysis Error"


@dataclass(frozen=True)
class Signal:
    """Directional verdict with the votes that produced it."""

    classification: SignalClass
    bullish_score: float = 0.0
    bearish_score: float = 0.0
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class TechnicalAnalysis:
    daily: IndicatorBundle
    weekly: IndicatorBundle
    monthly: IndicatorBundle
    signal: Signal

    @property
    def bundles(self) -> TimeframeBundles:
        return TimeframeBundles(daily=self.daily, weekly=self.weekly, monthly=self.monthly)


class _Ballot:
    """Running bullish/bearish totals and reasons in vote order."""

    def __init__(self) -> None:
        self.bullish = 0.0
        self.bearish = 0.0
        self.reasons: list[str] = []

    def bull(self, score: float, reason: str) -> None:
        self.bullish += score
        self.reasons.append(reason)

    def bear(self, score: float, reason: str) -> None:
        self.bearish += score
        self.reasons.append(reason)


def _vote_averages(
    ballot: _Ballot,
    bundle: IndicatorBundle,
    price: float,
    weight: float,
    scoring: ScoringConfig,
) -> None:
    name = bundle.timeframe.value
    for label, readings in (("SMA", bundle.smas), ("EMA", bundle.emas)):
        for period, reading in readings.items():
            if reading is None:
                continue
            # Equality has no abstain, it falls on the bearish side
            if price > reading.value:
                ballot.bull(scoring.average_score * weight, f"{name}: Price > {label} {period}")
            else:
                ballot.bear(scoring.average_score * weight, f"{name}: Price < {label} {period}")


def _vote_macd(
    ballot: _Ballot, bundle: IndicatorBundle, weight: float, scoring: ScoringConfig
) -> None:
    macd = bundle.macd
    if macd is None or macd.signal is None:
        return
    name = bundle.timeframe.value
    if macd.macd > macd.signal:
        ballot.bull(scoring.macd_cross_score * weight, f"{name}: MACD Line above Signal Line")
    elif macd.macd < macd.signal:
        ballot.bear(scoring.macd_cross_score * weight, f"{name}: MACD Line below Signal Line")

    if macd.histogram is not None:
        if macd.histogram > 0:
            ballot.bull(scoring.macd_histogram_score * weight, f"{name}: MACD Histogram Positive")
        elif macd.histogram < 0:
            ballot.bear(scoring.macd_histogram_score * weight, f"{name}: MACD Histogram Negative")


def _vote_rsi(
    ballot: _Ballot,
    bundle: IndicatorBundle,
    weight: float,
    scoring: ScoringConfig,
    indicators: IndicatorConfig,
) -> None:
    if bundle.rsi is None:
        return
    name = bundle.timeframe.value
    if bundle.rsi.zone is RsiZone.OVERSOLD:
        ballot.bull(
            scoring.rsi_score * weight,
            f"{name}: RSI < {indicators.rsi_oversold:g} (Oversold)",
        )
    elif bundle.rsi.zone is RsiZone.OVERBOUGHT:
        ballot.bear(
            scoring.rsi_score * weight,
            f"{name}: RSI > {indicators.rsi_overbought:g} (Overbought)",
        )


def _vote_volume(
    ballot: _Ballot,
    bundle: IndicatorBundle,
    price: float,
    weight: float,
    scoring: ScoringConfig,
    indicators: IndicatorConfig,
) -> None:
    name = bundle.timeframe.value
    if bundle.vwap is not None:
        label = f"VWAP ({indicators.vwap_period})"
        if price > bundle.vwap:
            ballot.bull(scoring.vwap_score * weight, f"{name}: Price > {label}")
        elif price < bundle.vwap:
            ballot.bear(scoring.vwap_score * weight, f"{name}: Price < {label}")

    if bundle.obv is not None and bundle.obv_sma is not None:
        period = indicators.obv_sma_period
        if bundle.obv > bundle.obv_sma:
            ballot.bull(
                scoring.obv_score * weight,
                f"{name}: OBV trending up (above its {period}-period SMA)",
            )
        elif bundle.obv < bundle.obv_sma:
            ballot.bear(
                scoring.obv_score * weight,
                f"{name}: OBV trending down (below its {period}-period SMA)",
            )


def _classify(bullish: float, bearish: float, scoring: ScoringConfig) -> SignalClass:
    strong = scoring.strong_ratio
    if bullish > bearish * scoring.dominance_ratio:
        if strong is not None and bullish > bearish * strong:
            return SignalClass.STRONGLY_BULLISH
        return SignalClass.BULLISH
    if bearish > bullish * scoring.dominance_ratio:
        if strong is not None and bearish > bullish * strong:
            return SignalClass.STRONGLY_BEARISH
        return SignalClass.BEARISH
    return SignalClass.NEUTRAL


def score_signal(
    bundles: TimeframeBundles,
    current_price: float,
    scoring: ScoringConfig | None = None,
    indicators: IndicatorConfig | None = None,
) -> Signal:
    """Combine the three timeframe bundles into one signal.

    The same reference price is compared against every timeframe. Bundles
    flagged with an error are skipped.

    Args:
        bundles: Daily, weekly and monthly indicator bundles.
        current_price: Reference price for every comparison.
        scoring: Vote sizes and thresholds (defaults if None).
        indicators: Indicator settings, used for thresholds in reasons.

    Returns:
        Signal with the weighted totals and at most ``max_reasons`` reasons.
    """
    scoring = scoring or ScoringConfig()
    indicators = indicators or IndicatorConfig()

    if current_price is None or not math.isfinite(current_price):
        logger.warning("No usable reference price (%s); signal not scored", current_price)
        return Signal(
            classification=SignalClass.INSUFFICIENT_DATA,
            reasons=("Current price not available for signal generation.",),
        )

    ballot = _Ballot()
    for bundle in bundles:
        if bundle.error:
            logger.debug("Skipping %s bundle: %s", bundle.timeframe.value, bundle.error)
            continue
        weight = scoring.timeframe_weights[bundle.timeframe]
        _vote_averages(ballot, bundle, current_price, weight, scoring)
        _vote_macd(ballot, bundle, weight, scoring)
        _vote_rsi(ballot, bundle, weight, scoring, indicators)
        _vote_volume(ballot, bundle, current_price, weight, scoring, indicators)

    if not ballot.reasons:
        logger.info("No indicator votes cast")
        return Signal(
            classification=SignalClass.INSUFFICIENT_DATA,
            reasons=("Not enough data for any indicator vote.",),
        )

    classification = _classify(ballot.bullish, ballot.bearish, scoring)
    logger.info(
        "Signal %s (bullish %.2f, bearish %.2f, %d votes)",
        classification.value, ballot.bullish, ballot.bearish, len(ballot.reasons),
    )
    return Signal(
        classification=classification,
        bullish_score=ballot.bullish,
        bearish_score=ballot.bearish,
        reasons=tuple(ballot.reasons[: scoring.max_reasons]),
    )


def _failed_analysis(message: str) -> TechnicalAnalysis:
    return TechnicalAnalysis(
        daily=IndicatorBundle.failed(Timeframe.DAILY, message),
        weekly=IndicatorBundle.failed(Timeframe.WEEKLY, message),
        monthly=IndicatorBundle.failed(Timeframe.MONTHLY, message),
        signal=Signal(classification=SignalClass.ERROR, reasons=(message,)),
    )


def analyze_technicals(
    daily: pd.DataFrame,
    current_price: float | None = None,
    indicator_config: IndicatorConfig | None = None,
    scoring_config: ScoringConfig | None = None,
) -> TechnicalAnalysis:
    """Run the full technical pipeline on a daily series.

    Args:
        daily: Daily frame with timestamp, price and volume columns.
        current_price: Reference price; the last daily price if None.
        indicator_config: Indicator periods and thresholds.
        scoring_config: Vote sizes and thresholds.

    Returns:
        TechnicalAnalysis with the three bundles and the signal. Failures
        inside the pipeline come back as an ERROR signal rather than raising.
    """
    indicator_config = indicator_config or IndicatorConfig()
    scoring_config = scoring_config or ScoringConfig()

    try:
        if current_price is None and not daily.empty:
            current_price = float(daily["price"].iloc[-1])
            logger.debug("Using last daily price %.2f as reference", current_price)

        bundles = analyze_timeframes(daily, current_price, indicator_config)
        signal = score_signal(bundles, current_price, scoring_config, indicator_config)
    except Exception as e:
        logger.exception("Technical analysis failed")
        return _failed_analysis(f"Technical analysis failed: {e}")

    return TechnicalAnalysis(
        daily=bundles.daily,
        weekly=bundles.weekly,
        monthly=bundles.monthly,
        signal=signal,
    )
