"""Technical indicators over flat numeric sequences.

Every function is pure: the same input sequence always produces the same
output. Window indicators that cannot be computed for lack of data return
empty lists, or lists padded with None where the output is aligned to the
input length. Nothing here raises for short input; malformed input (nested or
non-numeric sequences) raises ValueError from the numpy conversion.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
from numpy.lib.stride_tricks import sliding_window_view

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BollingerBands:
    """Band series aligned with ``sma(data, period)``."""

    upper: list[float]
    middle: list[float]
    lower: list[float]


@dataclass(frozen=True)
class Macd:
    """MACD series aligned with the first index where both EMAs exist.

    Attributes:
        macd_line: Fast EMA minus slow EMA.
        signal_line: EMA of the MACD line, left-padded with None.
        histogram: MACD minus signal where both exist, else None.
    """

    macd_line: list[float]
    signal_line: list[float | None]
    histogram: list[float | None]


def _as_array(data: Sequence[float] | np.ndarray) -> np.ndarray:
    """Convert a flat sequence to float64, mapping None to NaN."""
    values = np.asarray(data, dtype=np.float64)
    if values.ndim != 1:
        raise ValueError(f"Expected a flat sequence, got {values.ndim} dimensions")
    return values


def _check_period(period: int) -> None:
    if period < 1:
        raise ValueError(f"Period must be positive, got {period}")


def sma(data: Sequence[float], period: int) -> list[float]:
    """Simple moving average over each trailing window.

    Returns:
        ``len(data) - period + 1`` values; empty if data is shorter than period.
    """
    _check_period(period)
    values = _as_array(data)
    if len(values) < period:
        return []
    return sliding_window_view(values, period).mean(axis=1).tolist()


def ema(data: Sequence[float], period: int) -> list[float]:
    """Exponential moving average seeded with the SMA of the first window.

    The first output is ``mean(data[:period])``; each later output applies
    ``k = 2 / (period + 1)`` to the next data point.

    Returns:
        ``len(data) - period + 1`` values; empty if data is shorter than period.
    """
    _check_period(period)
    values = _as_array(data)
    if len(values) < period:
        return []

    k = 2.0 / (period + 1)
    current = float(values[:period].mean())
    result = [current]
    for price in values[period:]:
        current = float(price) * k + current * (1.0 - k)
        result.append(current)
    return result


def rolling_std(data: Sequence[float], period: int) -> list[float]:
    """Population standard deviation (divide by period) per trailing window."""
    _check_period(period)
    values = _as_array(data)
    if len(values) < period:
        return []
    return sliding_window_view(values, period).std(axis=1).tolist()


def bollinger_bands(
    data: Sequence[float], period: int = 20, num_std_dev: float = 2.0
) -> BollingerBands:
    """SMA middle band with symmetric standard-deviation envelopes."""
    _check_period(period)
    values = _as_array(data)
    if len(values) < period:
        return BollingerBands(upper=[], middle=[], lower=[])

    windows = sliding_window_view(values, period)
    middle = windows.mean(axis=1)
    width = windows.std(axis=1) * num_std_dev
    return BollingerBands(
        upper=(middle + width).tolist(),
        middle=middle.tolist(),
        lower=(middle - width).tolist(),
    )


def _rsi_from_averages(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100.0 - 100.0 / (1.0 + rs)


def rsi(data: Sequence[float], period: int = 14) -> list[float]:
    """Relative Strength Index with Wilder smoothing.

    The first reading uses the simple mean of the first ``period`` gains and
    losses; later readings smooth with ``(avg * (period - 1) + x) / period``.
    A zero average loss reads as 100.

    Returns:
        ``len(data) - period`` values; empty if fewer than ``period + 1``
        data points.
    """
    _check_period(period)
    values = _as_array(data)
    if len(values) < period + 1:
        return []

    deltas = np.diff(values)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = float(gains[:period].mean())
    avg_loss = float(losses[:period].mean())
    result = [_rsi_from_averages(avg_gain, avg_loss)]

    for gain, loss in zip(gains[period:], losses[period:]):
        avg_gain = (avg_gain * (period - 1) + float(gain)) / period
        avg_loss = (avg_loss * (period - 1) + float(loss)) / period
        result.append(_rsi_from_averages(avg_gain, avg_loss))
    return result


def macd(
    data: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> Macd:
    """Moving Average Convergence Divergence.

    The MACD line starts at the first index where both EMAs are defined. The
    signal line is the EMA of the valid MACD values, left-padded with None so
    it lines up with the MACD line.

    Returns:
        Macd with all series empty when ``len(data) < slow + signal - 1``.
    """
    values = _as_array(data)
    if len(values) < slow_period + signal_period - 1:
        logger.debug(
            "MACD needs %d points, got %d",
            slow_period + signal_period - 1, len(values),
        )
        return Macd(macd_line=[], signal_line=[], histogram=[])

    fast_ema = ema(values, fast_period)
    slow_ema = ema(values, slow_period)

    # Both EMAs end on the last data point; the longer period starts later.
    common = min(len(fast_ema), len(slow_ema))
    macd_line = [
        f - s for f, s in zip(fast_ema[-common:], slow_ema[-common:])
    ]

    valid = [v for v in macd_line if math.isfinite(v)]
    if len(valid) < signal_period:
        return Macd(macd_line=macd_line, signal_line=[], histogram=[])

    signal_values = ema(valid, signal_period)
    padding = len(macd_line) - len(signal_values)
    signal_line: list[float | None] = [None] * padding + list(signal_values)

    histogram: list[float | None] = []
    for m, s in zip(macd_line, signal_line):
        if s is None or not math.isfinite(m):
            histogram.append(None)
        else:
            histogram.append(m - s)

    return Macd(macd_line=macd_line, signal_line=signal_line, histogram=histogram)


def _masked_list(values: np.ndarray, mask: np.ndarray, offset: int, n: int) -> list[float | None]:
    """Place windowed results at their window-end index, None elsewhere."""
    result: list[float | None] = [None] * n
    for i, (value, ok) in enumerate(zip(values, mask)):
        if ok:
            result[offset + i] = float(value)
    return result


def rolling_vwap(
    prices: Sequence[float], volumes: Sequence[float], period: int
) -> list[float | None]:
    """Volume-weighted average price over each trailing window.

    Returns:
        ``len(prices)`` values, None before the first full window, where any
        point in the window is invalid, or where the window volume is zero.
        All None when the two sequences differ in length.
    """
    _check_period(period)
    price_arr = _as_array(prices)
    volume_arr = _as_array(volumes)
    n = len(price_arr)
    if len(volume_arr) != n or n < period:
        return [None] * n

    valid = np.isfinite(price_arr) & np.isfinite(volume_arr)
    price_volume = sliding_window_view(price_arr * volume_arr, period).sum(axis=1)
    volume_sum = sliding_window_view(volume_arr, period).sum(axis=1)
    ok = sliding_window_view(valid, period).all(axis=1) & (volume_sum > 0)

    vwap = np.divide(
        price_volume, volume_sum,
        out=np.full(len(volume_sum), np.nan), where=ok,
    )
    return _masked_list(vwap, ok, period - 1, n)


def volume_sma(volumes: Sequence[float], period: int) -> list[float | None]:
    """SMA of volume that requires every point of the window to be valid.

    Returns:
        ``len(volumes)`` values, None before the first full window and for
        any window containing a missing value.
    """
    _check_period(period)
    volume_arr = _as_array(volumes)
    n = len(volume_arr)
    if n < period:
        return [None] * n

    windows = sliding_window_view(volume_arr, period)
    ok = sliding_window_view(np.isfinite(volume_arr), period).all(axis=1)
    return _masked_list(windows.mean(axis=1), ok, period - 1, n)


def obv(prices: Sequence[float], volumes: Sequence[float]) -> list[float]:
    """On-Balance Volume, starting at 0.

    Each step adds the day's volume when price rose, subtracts it when price
    fell, and carries the previous value when price was unchanged. A step
    with a missing price or volume carries the previous value too.
    """
    price_arr = _as_array(prices)
    volume_arr = _as_array(volumes)
    if len(price_arr) == 0 or len(volume_arr) != len(price_arr):
        return []

    deltas = np.diff(price_arr)
    direction = np.where(deltas > 0, 1.0, np.where(deltas < 0, -1.0, 0.0))
    step_volume = np.where(np.isfinite(volume_arr[1:]), volume_arr[1:], 0.0)
    steps = np.where(direction != 0, direction * step_volume, 0.0)
    return np.concatenate(([0.0], np.cumsum(steps))).tolist()
