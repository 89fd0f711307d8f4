"""Per-timeframe indicator bundles for daily, weekly and monthly series."""

from __future__ import annotations

import logging
import math
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

import numpy as np
import pandas as pd

from stockcore.analysis import indicators
from stockcore.analysis.resampling import to_monthly, to_weekly
from stockcore.config import IndicatorConfig, Timeframe

logger = logging.getLogger(__name__)


class PricePosition(Enum):
    """Where the reference price sits relative to a reading."""

    ABOVE = "above"
    BELOW = "below"
    AT = "at"
    UNKNOWN = "unknown"


class RsiZone(Enum):
    """RSI classification against the configured thresholds."""

    OVERSOLD = "oversold"
    NEUTRAL = "neutral"
    OVERBOUGHT = "overbought"


@dataclass(frozen=True)
class AverageReading:
    """Latest value of a moving average."""

    value: float
    position: PricePosition


@dataclass(frozen=True)
class RsiReading:
    value: float
    zone: RsiZone


@dataclass(frozen=True)
class BollingerReading:
    """Latest band values; position is relative to the middle band."""

    upper: float
    middle: float
    lower: float
    position: PricePosition


@dataclass(frozen=True)
class MacdReading:
    macd: float
    signal: float | None
    histogram: float | None


@dataclass(frozen=True)
class IndicatorBundle:
    """Latest indicator readings for one timeframe.

    A slot is None when the series is too short for that indicator (or the
    volume column is unusable); such slots never count as a vote.

    Attributes:
        timeframe: Granularity of the source series.
        length: Number of points in the source series.
        smas: Period -> latest SMA reading (None if series too short).
        emas: Period -> latest EMA reading (None if series too short).
        rsi: Latest RSI and its zone.
        bollinger: Latest Bollinger Band values.
        macd: Latest MACD, signal and histogram values.
        vwap: Latest rolling VWAP.
        volume_sma: Latest volume SMA.
        obv: Latest On-Balance Volume.
        obv_sma: Latest SMA of the OBV series (trend reference).
        obv_series: Full OBV series.
        error: Set when the bundle could not be computed at all.
    """

    timeframe: Timeframe
    length: int = 0
    smas: dict[int, AverageReading | None] = field(default_factory=dict)
    emas: dict[int, AverageReading | None] = field(default_factory=dict)
    rsi: RsiReading | None = None
    bollinger: BollingerReading | None = None
    macd: MacdReading | None = None
    vwap: float | None = None
    volume_sma: float | None = None
    obv: float | None = None
    obv_sma: float | None = None
    obv_series: list[float] = field(default_factory=list)
    error: str | None = None

    @classmethod
    def failed(cls, timeframe: Timeframe, message: str) -> IndicatorBundle:
        """An error-flagged bundle with no readings."""
        return cls(timeframe=timeframe, error=message)


@dataclass(frozen=True)
class TimeframeBundles:
    """Bundles for all three timeframes, iterated daily to monthly."""

    daily: IndicatorBundle
    weekly: IndicatorBundle
    monthly: IndicatorBundle

    def __iter__(self) -> Iterator[IndicatorBundle]:
        return iter((self.daily, self.weekly, self.monthly))


def price_position(price: float | None, reference: float | None) -> PricePosition:
    """Compare a price with a reference level."""
    if price is None or reference is None:
        return PricePosition.UNKNOWN
    if price > reference:
        return PricePosition.ABOVE
    if price < reference:
        return PricePosition.BELOW
    return PricePosition.AT


def _last(values: list) -> float | None:
    """Last element as a float, or None if empty, None or non-finite."""
    if not values:
        return None
    value = values[-1]
    if value is None or not math.isfinite(value):
        return None
    return float(value)


def _average_reading(
    values: list[float], current_price: float | None
) -> AverageReading | None:
    latest = _last(values)
    if latest is None:
        return None
    return AverageReading(value=latest, position=price_position(current_price, latest))


def _rsi_zone(value: float, config: IndicatorConfig) -> RsiZone:
    if value < config.rsi_oversold:
        return RsiZone.OVERSOLD
    if value > config.rsi_overbought:
        return RsiZone.OVERBOUGHT
    return RsiZone.NEUTRAL


def _compute_averages(
    prices: np.ndarray,
    periods: tuple[int, ...],
    func,
    current_price: float | None,
) -> dict[int, AverageReading | None]:
    readings: dict[int, AverageReading | None] = {}
    for period in periods:
        if len(prices) >= period:
            readings[period] = _average_reading(func(prices, period), current_price)
        else:
            readings[period] = None
    return readings


def compute_bundle(
    series: pd.DataFrame,
    current_price: float | None,
    timeframe: Timeframe,
    config: IndicatorConfig,
) -> IndicatorBundle:
    """Run the indicator library over one series.

    Args:
        series: Frame with price and volume columns in chronological order.
        current_price: Reference price for above/below positions.
        timeframe: Granularity of the series.
        config: Indicator periods and thresholds.

    Returns:
        IndicatorBundle of latest readings, error-flagged if the series is
        empty.
    """
    if series.empty:
        logger.warning("%s: no price data", timeframe.value)
        return IndicatorBundle.failed(timeframe, f"No price data for {timeframe.value}")

    prices = series["price"].to_numpy(dtype=np.float64)
    volumes = series["volume"].to_numpy(dtype=np.float64)
    n = len(prices)

    smas = _compute_averages(prices, config.sma_periods, indicators.sma, current_price)
    emas = _compute_averages(prices, config.ema_periods, indicators.ema, current_price)

    rsi_reading = None
    rsi_latest = _last(indicators.rsi(prices, config.rsi_period))
    if rsi_latest is not None:
        rsi_reading = RsiReading(value=rsi_latest, zone=_rsi_zone(rsi_latest, config))

    bollinger_reading = None
    bands = indicators.bollinger_bands(
        prices, config.bollinger_period, config.bollinger_std_dev
    )
    middle = _last(bands.middle)
    if middle is not None:
        bollinger_reading = BollingerReading(
            upper=bands.upper[-1],
            middle=middle,
            lower=bands.lower[-1],
            position=price_position(current_price, middle),
        )

    macd_reading = None
    macd_result = indicators.macd(
        prices, config.macd_fast, config.macd_slow, config.macd_signal
    )
    macd_latest = _last(macd_result.macd_line)
    if macd_latest is not None:
        macd_reading = MacdReading(
            macd=macd_latest,
            signal=_last(macd_result.signal_line),
            histogram=_last(macd_result.histogram),
        )

    vwap = None
    volume_average = None
    obv_latest = None
    obv_sma = None
    obv_series: list[float] = []
    if len(volumes) == n and np.isfinite(volumes).any():
        if n >= config.vwap_period:
            vwap = _last(indicators.rolling_vwap(prices, volumes, config.vwap_period))
        if n >= config.volume_sma_period:
            volume_average = _last(indicators.volume_sma(volumes, config.volume_sma_period))
        obv_series = indicators.obv(prices, volumes)
        obv_latest = _last(obv_series)
        if len(obv_series) > config.obv_sma_period:
            obv_sma = _last(indicators.sma(obv_series, config.obv_sma_period))
    else:
        logger.debug("%s: volume unavailable, skipping volume indicators", timeframe.value)

    logger.debug(
        "%s: %d points, rsi=%s, macd=%s, vwap=%s",
        timeframe.value, n,
        "-" if rsi_reading is None else f"{rsi_reading.value:.2f}",
        "-" if macd_reading is None else f"{macd_reading.macd:.4f}",
        "-" if vwap is None else f"{vwap:.2f}",
    )

    return IndicatorBundle(
        timeframe=timeframe,
        length=n,
        smas=smas,
        emas=emas,
        rsi=rsi_reading,
        bollinger=bollinger_reading,
        macd=macd_reading,
        vwap=vwap,
        volume_sma=volume_average,
        obv=obv_latest,
        obv_sma=obv_sma,
        obv_series=obv_series,
    )


def analyze_timeframes(
    daily: pd.DataFrame,
    current_price: float | None,
    config: IndicatorConfig,
) -> TimeframeBundles:
    """Compute bundles for the daily series and its weekly/monthly resamples.

    Args:
        daily: Daily frame with timestamp, price and volume columns.
        current_price: Reference price used for every timeframe.
        config: Indicator periods and thresholds.

    Returns:
        TimeframeBundles for daily, weekly and monthly.
    """
    weekly = to_weekly(daily, config.timezone)
    monthly = to_monthly(daily, config.timezone)
    logger.info(
        "Analysing %d daily, %d weekly, %d monthly points",
        len(daily), len(weekly), len(monthly),
    )
    return TimeframeBundles(
        daily=compute_bundle(daily, current_price, Timeframe.DAILY, config),
        weekly=compute_bundle(weekly, current_price, Timeframe.WEEKLY, config),
        monthly=compute_bundle(monthly, current_price, Timeframe.MONTHLY, config),
    )
