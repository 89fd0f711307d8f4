"""Engine configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError


class Timeframe(Enum):
    """Series granularities analysed by the technical engine."""

    DAILY = "Daily"
    WEEKLY = "Weekly"
    MONTHLY = "Monthly"


@dataclass
class IndicatorConfig:
    """Indicator periods and thresholds applied to every timeframe."""

    sma_periods: tuple[int, ...] = (20, 50, 200)
    ema_periods: tuple[int, ...] = (20, 50, 200)

    # RSI
    rsi_period: int = 14
    rsi_oversold: float = 30.0
    rsi_overbought: float = 70.0

    # Bollinger Bands
    bollinger_period: int = 20
    bollinger_std_dev: float = 2.0

    # MACD
    macd_fast: int = 12
    macd_slow: int = 26
    macd_signal: int = 9

    # Volume
    vwap_period: int = 20
    volume_sma_period: int = 20
    obv_sma_period: int = 20

    # Calendar used for weekly and monthly buckets
    timezone: str = "UTC"

    def __post_init__(self) -> None:
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"Unknown timezone: {self.timezone!r}") from e
        if self.macd_fast >= self.macd_slow:
            raise ValueError(
                f"macd_fast ({self.macd_fast}) must be below "
                f"macd_slow ({self.macd_slow})"
            )
        if self.rsi_oversold >= self.rsi_overbought:
            raise ValueError(
                f"rsi_oversold ({self.rsi_oversold}) must be below "
                f"rsi_overbought ({self.rsi_overbought})"
            )
        periods = (
            *self.sma_periods,
            *self.ema_periods,
            self.rsi_period,
            self.bollinger_period,
            self.macd_signal,
            self.vwap_period,
            self.volume_sma_period,
            self.obv_sma_period,
        )
        if any(p < 1 for p in periods):
            raise ValueError(f"Indicator periods must be positive: {periods}")


def _default_weights() -> dict[Timeframe, float]:
    return {
        Timeframe.DAILY: 1.0,
        Timeframe.WEEKLY: 1.5,
        Timeframe.MONTHLY: 2.0,
    }


@dataclass
class ScoringConfig:
    """Vote sizes and classification thresholds for the signal scorer."""

    # Longer timeframes count more
    timeframe_weights: dict[Timeframe, float] = field(
        default_factory=_default_weights
    )

    # Per-vote scores (multiplied by the timeframe weight)
    average_score: float = 1.0
    macd_cross_score: float = 2.0
    macd_histogram_score: float = 0.5
    rsi_score: float = 1.5
    vwap_score: float = 1.0
    obv_score: float = 1.0

    # One side must beat the other by this factor to leave Neutral
    dominance_ratio: float = 1.1

    # Strong subtier (None = disabled)
    strong_ratio: float | None = None

    max_reasons: int = 15

    def __post_init__(self) -> None:
        missing = set(Timeframe) - set(self.timeframe_weights)
        if missing:
            raise ValueError(
                f"Missing timeframe weights: {sorted(t.value for t in missing)}"
            )
        if self.strong_ratio is not None and self.strong_ratio <= self.dominance_ratio:
            raise ValueError(
                f"strong_ratio ({self.strong_ratio}) must exceed "
                f"dominance_ratio ({self.dominance_ratio})"
            )
