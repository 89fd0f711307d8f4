"""Tests for stockcore.analysis.signal."""

from __future__ import annotations

import math
from typing import Any

import pandas as pd
import pytest

from stockcore.analysis.resampling import empty_series
from stockcore.analysis.signal import (
    SignalClass,
    analyze_technicals,
    score_signal,
)
from stockcore.analysis.timeframes import (
    AverageReading,
    IndicatorBundle,
    MacdReading,
    PricePosition,
    RsiReading,
    RsiZone,
    TimeframeBundles,
)
from stockcore.config import ScoringConfig, Timeframe

PRICE = 100.0

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _readings(values: dict[int, float | None]) -> dict[int, AverageReading | None]:
    return {
        period: None if v is None else AverageReading(value=v, position=PricePosition.UNKNOWN)
        for period, v in values.items()
    }


def _make_bundle(timeframe: Timeframe = Timeframe.DAILY, **overrides: Any) -> IndicatorBundle:
    """Bundle where every reading is bullish against PRICE, RSI neutral."""
    fields: dict[str, Any] = {
        "timeframe": timeframe,
        "length": 250,
        "smas": _readings({20: 95.0, 50: 90.0, 200: 80.0}),
        "emas": _readings({20: 96.0, 50: 91.0, 200: 81.0}),
        "rsi": RsiReading(value=55.0, zone=RsiZone.NEUTRAL),
        "macd": MacdReading(macd=1.0, signal=0.5, histogram=0.5),
        "vwap": 97.0,
        "obv": 5000.0,
        "obv_sma": 4000.0,
    }
    fields.update(overrides)
    return IndicatorBundle(**fields)


def _empty_bundle(timeframe: Timeframe) -> IndicatorBundle:
    """Bundle with no readings but no error either."""
    return IndicatorBundle(timeframe=timeframe, length=3)


def _make_bundles(
    daily: IndicatorBundle | None = None,
    weekly: IndicatorBundle | None = None,
    monthly: IndicatorBundle | None = None,
) -> TimeframeBundles:
    return TimeframeBundles(
        daily=daily or _empty_bundle(Timeframe.DAILY),
        weekly=weekly or _empty_bundle(Timeframe.WEEKLY),
        monthly=monthly or _empty_bundle(Timeframe.MONTHLY),
    )


def _make_daily(n: int, step: float = 1.0) -> pd.DataFrame:
    dates = pd.bdate_range("2023-01-02", periods=n, tz="UTC")
    return pd.DataFrame({
        "timestamp": [int(d.value // 1_000_000) for d in dates],
        "price": [100.0 + i * step for i in range(n)],
        "volume": [1000.0] * n,
    })


# ---------------------------------------------------------------------------
# score_signal
# ---------------------------------------------------------------------------

class TestScoreSignal:

    def test_all_bullish_daily(self) -> None:
        """6 averages + MACD cross 2 + histogram 0.5 + VWAP 1 + OBV 1."""
        signal = score_signal(_make_bundles(daily=_make_bundle()), PRICE)
        assert signal.classification is SignalClass.BULLISH
        assert signal.bullish_score == pytest.approx(10.5)
        assert signal.bearish_score == 0.0

    def test_timeframe_weights(self) -> None:
        bundles = _make_bundles(
            daily=_make_bundle(Timeframe.DAILY),
            weekly=_make_bundle(Timeframe.WEEKLY),
            monthly=_make_bundle(Timeframe.MONTHLY),
        )
        signal = score_signal(bundles, PRICE)
        assert signal.bullish_score == pytest.approx(10.5 * (1.0 + 1.5 + 2.0))

    def test_reason_text(self) -> None:
        signal = score_signal(_make_bundles(weekly=_make_bundle(Timeframe.WEEKLY)), PRICE)
        assert signal.reasons == (
            "Weekly: Price > SMA 20",
            "Weekly: Price > SMA 50",
            "Weekly: Price > SMA 200",
            "Weekly: Price > EMA 20",
            "Weekly: Price > EMA 50",
            "Weekly: Price > EMA 200",
            "Weekly: MACD Line above Signal Line",
            "Weekly: MACD Histogram Positive",
            "Weekly: Price > VWAP (20)",
            "Weekly: OBV trending up (above its 20-period SMA)",
        )

    def test_all_bearish(self) -> None:
        bundle = _make_bundle(
            smas=_readings({20: 105.0, 50: 110.0}),
            emas=_readings({20: 106.0}),
            macd=MacdReading(macd=-1.0, signal=-0.5, histogram=-0.5),
            vwap=103.0,
            obv=1000.0,
            obv_sma=2000.0,
        )
        signal = score_signal(_make_bundles(daily=bundle), PRICE)
        assert signal.classification is SignalClass.BEARISH
        assert signal.bullish_score == 0.0
        assert signal.bearish_score == pytest.approx(3 + 2 + 0.5 + 1 + 1)
        assert "Daily: MACD Line below Signal Line" in signal.reasons
        assert "Daily: OBV trending down (below its 20-period SMA)" in signal.reasons

    def test_price_equal_to_average_votes_bearish(self) -> None:
        bundle = _make_bundle(
            smas=_readings({20: PRICE}), emas={}, macd=None, vwap=None, obv=None,
        )
        signal = score_signal(_make_bundles(daily=bundle), PRICE)
        assert signal.reasons == ("Daily: Price < SMA 20",)
        assert signal.bearish_score == pytest.approx(1.0)

    def test_equal_vwap_and_obv_abstain(self) -> None:
        bundle = _make_bundle(
            smas={}, emas={}, macd=None, vwap=PRICE, obv=10.0, obv_sma=10.0,
        )
        signal = score_signal(_make_bundles(daily=bundle), PRICE)
        assert signal.classification is SignalClass.INSUFFICIENT_DATA

    def test_rsi_oversold_is_bullish(self) -> None:
        rsi_only: dict[str, Any] = {
            "smas": {}, "emas": {}, "macd": None, "vwap": None, "obv": None,
            "rsi": RsiReading(value=25.0, zone=RsiZone.OVERSOLD),
        }
        bundles = _make_bundles(
            daily=_make_bundle(Timeframe.DAILY, **rsi_only),
            monthly=_make_bundle(Timeframe.MONTHLY, **rsi_only),
        )
        signal = score_signal(bundles, PRICE)
        assert signal.bullish_score == pytest.approx(1.5 * 1.0 + 1.5 * 2.0)
        assert "Daily: RSI < 30 (Oversold)" in signal.reasons
        assert "Monthly: RSI < 30 (Oversold)" in signal.reasons

    def test_rsi_overbought_is_bearish(self) -> None:
        bundle = _make_bundle(rsi=RsiReading(value=80.0, zone=RsiZone.OVERBOUGHT))
        signal = score_signal(_make_bundles(daily=bundle), PRICE)
        assert signal.bearish_score == pytest.approx(1.5)
        assert "Daily: RSI > 70 (Overbought)" in signal.reasons

    def test_macd_without_signal_does_not_vote(self) -> None:
        bundle = _make_bundle(
            smas={}, emas={}, vwap=None, obv=None,
            macd=MacdReading(macd=2.0, signal=None, histogram=None),
        )
        signal = score_signal(_make_bundles(daily=bundle), PRICE)
        assert signal.classification is SignalClass.INSUFFICIENT_DATA

    def test_balanced_votes_are_neutral(self) -> None:
        bundle = _make_bundle(
            smas=_readings({20: 90.0, 50: 110.0}), emas={}, macd=None, vwap=None, obv=None,
        )
        signal = score_signal(_make_bundles(daily=bundle), PRICE)
        assert signal.classification is SignalClass.NEUTRAL
        assert signal.bullish_score == signal.bearish_score == pytest.approx(1.0)

    def test_dominance_must_exceed_ratio(self) -> None:
        """Bullish 1.1 vs bearish 1.0 is not strictly above the 1.1 ratio."""
        scoring = ScoringConfig(vwap_score=1.1)
        bundle = _make_bundle(
            smas=_readings({20: 110.0}), emas={}, macd=None, vwap=90.0, obv=None,
        )
        signal = score_signal(_make_bundles(daily=bundle), PRICE, scoring)
        assert signal.classification is SignalClass.NEUTRAL

    def test_strong_tier_disabled_by_default(self) -> None:
        signal = score_signal(_make_bundles(daily=_make_bundle()), PRICE)
        assert signal.classification is SignalClass.BULLISH

    def test_strong_tier_when_enabled(self) -> None:
        scoring = ScoringConfig(strong_ratio=2.0)
        signal = score_signal(_make_bundles(daily=_make_bundle()), PRICE, scoring)
        assert signal.classification is SignalClass.STRONGLY_BULLISH

    def test_strong_tier_threshold(self) -> None:
        """Bullish 3 vs bearish 2: above 1.1x but not above 2x."""
        scoring = ScoringConfig(strong_ratio=2.0)
        bundle = _make_bundle(
            smas=_readings({20: 90.0, 50: 90.0, 200: 90.0}),
            emas=_readings({20: 110.0, 50: 110.0}),
            macd=None, vwap=None, obv=None,
        )
        signal = score_signal(_make_bundles(daily=bundle), PRICE, scoring)
        assert signal.classification is SignalClass.BULLISH

    def test_strongly_bearish(self) -> None:
        scoring = ScoringConfig(strong_ratio=2.0)
        bundle = _make_bundle(
            smas=_readings({20: 110.0}), emas={}, macd=None, vwap=None, obv=None,
        )
        signal = score_signal(_make_bundles(daily=bundle), PRICE, scoring)
        assert signal.classification is SignalClass.STRONGLY_BEARISH

    def test_reasons_capped(self) -> None:
        bundles = _make_bundles(
            daily=_make_bundle(Timeframe.DAILY),
            weekly=_make_bundle(Timeframe.WEEKLY),
            monthly=_make_bundle(Timeframe.MONTHLY),
        )
        signal = score_signal(bundles, PRICE)
        assert len(signal.reasons) == 15
        assert signal.reasons[0] == "Daily: Price > SMA 20"
        # Scores still count every vote
        assert signal.bullish_score == pytest.approx(47.25)

    def test_error_bundles_skipped(self) -> None:
        bundles = _make_bundles(
            daily=_make_bundle(Timeframe.DAILY),
            weekly=IndicatorBundle.failed(Timeframe.WEEKLY, "No price data for Weekly"),
        )
        signal = score_signal(bundles, PRICE)
        assert signal.bullish_score == pytest.approx(10.5)
        assert all(r.startswith("Daily") for r in signal.reasons)

    def test_no_votes_is_insufficient(self) -> None:
        signal = score_signal(_make_bundles(), PRICE)
        assert signal.classification is SignalClass.INSUFFICIENT_DATA
        assert signal.reasons == ("Not enough data for any indicator vote.",)
        assert signal.bullish_score == signal.bearish_score == 0.0

    @pytest.mark.parametrize("price", [None, math.nan, math.inf])
    def test_missing_price_is_insufficient(self, price: float | None) -> None:
        signal = score_signal(_make_bundles(daily=_make_bundle()), price)
        assert signal.classification is SignalClass.INSUFFICIENT_DATA
        assert signal.reasons == ("Current price not available for signal generation.",)


# ---------------------------------------------------------------------------
# analyze_technicals
# ---------------------------------------------------------------------------

class TestAnalyzeTechnicals:

    def test_rising_series_is_bullish(self) -> None:
        analysis = analyze_technicals(_make_daily(300))
        signal = analysis.signal
        assert signal.classification in (SignalClass.BULLISH, SignalClass.STRONGLY_BULLISH)
        assert signal.bullish_score > signal.bearish_score
        assert "Daily: Price > SMA 200" in signal.reasons

    def test_falling_series_is_bearish(self) -> None:
        analysis = analyze_technicals(_make_daily(300, step=-0.2))
        assert analysis.signal.classification in (
            SignalClass.BEARISH, SignalClass.STRONGLY_BEARISH,
        )

    def test_defaults_to_last_daily_price(self) -> None:
        daily = _make_daily(30)
        implicit = analyze_technicals(daily)
        explicit = analyze_technicals(daily, current_price=129.0)
        assert implicit.signal == explicit.signal

    def test_explicit_price_overrides(self) -> None:
        analysis = analyze_technicals(_make_daily(30), current_price=10.0)
        assert analysis.daily.smas[20].position is PricePosition.BELOW
        assert "Daily: Price < SMA 20" in analysis.signal.reasons

    def test_bundles_property(self) -> None:
        analysis = analyze_technicals(_make_daily(30))
        assert [b.timeframe for b in analysis.bundles] == [
            Timeframe.DAILY, Timeframe.WEEKLY, Timeframe.MONTHLY,
        ]

    def test_empty_series_is_insufficient(self) -> None:
        analysis = analyze_technicals(empty_series())
        assert analysis.signal.classification is SignalClass.INSUFFICIENT_DATA
        assert all(b.error for b in analysis.bundles)

    def test_malformed_input_is_error(self) -> None:
        daily = _make_daily(30).drop(columns=["volume"])
        analysis = analyze_technicals(daily)
        assert analysis.signal.classification is SignalClass.ERROR
        assert analysis.signal.reasons[0].startswith("Technical analysis failed")
        assert all(b.error for b in analysis.bundles)
