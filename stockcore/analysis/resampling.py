"""Calendar resampling of a daily price/volume series.

Weekly buckets start on Monday, monthly buckets on the 1st; both follow the
calendar of a chosen timezone (UTC by default). A bucket's price is the last
daily price it contains and its volume is the sum of its daily volumes.
"""

from __future__ import annotations

import logging

import pandas as pd

logger = logging.getLogger(__name__)

SERIES_COLUMNS = ("timestamp", "price", "volume")

_EPOCH = pd.Timestamp("1970-01-01", tz="UTC")
_ONE_MS = pd.Timedelta(1, unit="ms")


def empty_series() -> pd.DataFrame:
    """A series frame with no rows and the standard column dtypes."""
    return pd.DataFrame({
        "timestamp": pd.Series(dtype="int64"),
        "price": pd.Series(dtype="float64"),
        "volume": pd.Series(dtype="float64"),
    })


def _check_columns(series: pd.DataFrame) -> None:
    missing = set(SERIES_COLUMNS) - set(series.columns)
    if missing:
        raise ValueError(f"Missing required columns: {sorted(missing)}")


def _local_dates(series: pd.DataFrame, tz: str) -> pd.Series:
    """Naive local calendar dates (midnight) of each timestamp in ``tz``."""
    stamps = pd.to_datetime(series["timestamp"], unit="ms", utc=True)
    return stamps.dt.tz_convert(tz).dt.tz_localize(None).dt.normalize()


def _aggregate(series: pd.DataFrame, bucket_start: pd.Series, tz: str) -> pd.DataFrame:
    """Collapse consecutive rows sharing a bucket start into one row.

    A bucket closes as soon as the next row's bucket start differs, or at the
    last row.
    """
    run_id = (bucket_start != bucket_start.shift()).cumsum()
    grouped = series.groupby(run_id, sort=False)

    starts = bucket_start.groupby(run_id, sort=False).first()
    starts = starts.dt.tz_localize(tz, nonexistent="shift_forward")
    result = pd.DataFrame({
        "timestamp": ((starts - _EPOCH) // _ONE_MS).astype("int64"),
        "price": grouped["price"].last().astype("float64"),
        "volume": grouped["volume"].sum(min_count=1).astype("float64"),
    })
    return result.reset_index(drop=True)


def _prepare(daily: pd.DataFrame, label: str) -> pd.DataFrame | None:
    _check_columns(daily)
    if daily.empty:
        logger.debug("No daily points to resample %s", label)
        return None
    if not daily["timestamp"].is_monotonic_increasing:
        logger.warning("Daily series is not in chronological order; %s buckets may split", label)
    return daily.reset_index(drop=True)


def to_weekly(daily: pd.DataFrame, tz: str = "UTC") -> pd.DataFrame:
    """Resample a daily series into Monday-start calendar weeks.

    Args:
        daily: Frame with timestamp (epoch ms), price and volume columns,
            in chronological order.
        tz: Timezone whose calendar weeks define the buckets.

    Returns:
        One row per week: week-start timestamp, closing price, summed volume.
        Empty when the input is empty.

    Raises:
        ValueError: If required columns are missing.
    """
    series = _prepare(daily, "weekly")
    if series is None:
        return empty_series()

    dates = _local_dates(series, tz)
    # dayofweek is 0 for Monday, so Sunday steps back six days
    week_start = dates - pd.to_timedelta(dates.dt.dayofweek, unit="D")
    weekly = _aggregate(series, week_start, tz)

    logger.debug("Resampled %d daily points into %d weeks", len(series), len(weekly))
    return weekly


def to_monthly(daily: pd.DataFrame, tz: str = "UTC") -> pd.DataFrame:
    """Resample a daily series into calendar months.

    Args:
        daily: Frame with timestamp (epoch ms), price and volume columns,
            in chronological order.
        tz: Timezone whose calendar months define the buckets.

    Returns:
        One row per month: month-start timestamp, closing price, summed
        volume. Empty when the input is empty.

    Raises:
        ValueError: If required columns are missing.
    """
    series = _prepare(daily, "monthly")
    if series is None:
        return empty_series()

    dates = _local_dates(series, tz)
    month_start = dates - pd.to_timedelta(dates.dt.day - 1, unit="D")
    monthly = _aggregate(series, month_start, tz)

    logger.debug("Resampled %d daily points into %d months", len(series), len(monthly))
    return monthly
