"""Tests for stockcore.metrics.comparisons."""

from __future__ import annotations

import pytest

from stockcore.data import split_peers
from stockcore.data.models import PeerRecord
from stockcore.metrics.accessors import to_crores, to_percentage, to_ratio
from stockcore.metrics.comparisons import (
    cagr,
    compare_to_peers,
    peer_average,
    with_peers,
    yoy_growth,
)
from stockcore.metrics.models import (
    NOT_AVAILABLE,
    NOT_MEANINGFUL,
    ColorClass,
    Formatted,
    Metric,
    Verdict,
)


def _make_peers() -> list[PeerRecord]:
    return [
        PeerRecord(ticker_id="ACME", company_name="Acme Industries Ltd", market_cap=1000),
        PeerRecord(ticker_id="BETA", company_name="Beta Corp", market_cap=500),
        PeerRecord(ticker_id="GAMMA", company_name="Gamma Ltd", market_cap="700"),
        PeerRecord(ticker_id="DELTA", company_name="Delta Ltd", market_cap="-"),
    ]


class TestYoyGrowth:

    def test_growth(self) -> None:
        result = yoy_growth(120, 100)
        assert result.display == "20.00%"
        assert result.raw == pytest.approx(20.0)
        assert result.color_class is ColorClass.POSITIVE

    def test_decline(self) -> None:
        result = yoy_growth(80, 100)
        assert result.raw == pytest.approx(-20.0)
        assert result.color_class is ColorClass.NEGATIVE

    def test_negative_prior_uses_magnitude(self) -> None:
        assert yoy_growth(50, -100).raw == pytest.approx(150.0)

    def test_zero_prior(self) -> None:
        assert yoy_growth(10, 0).formatted is NOT_AVAILABLE

    def test_missing_operand(self) -> None:
        assert yoy_growth(NOT_AVAILABLE, 100).formatted is NOT_AVAILABLE


class TestCagr:

    def test_two_periods(self) -> None:
        result = cagr(121, 100, 2)
        assert result.raw == pytest.approx(10.0)
        assert result.display == "10.00%"

    def test_negative_end(self) -> None:
        assert cagr(-5, 10, 2).formatted is NOT_MEANINGFUL

    def test_negative_start(self) -> None:
        assert cagr(10, -5, 2).formatted is NOT_MEANINGFUL

    def test_zero_start(self) -> None:
        assert cagr(10, 0, 2).formatted is NOT_AVAILABLE

    def test_zero_end(self) -> None:
        assert cagr(0, 10, 2).formatted is NOT_MEANINGFUL

    def test_non_positive_years(self) -> None:
        assert cagr(10, 5, 0).formatted is NOT_AVAILABLE

    def test_missing_operand(self) -> None:
        assert cagr(None, 5, 2).formatted is NOT_AVAILABLE


class TestPeerAverage:

    def test_excludes_primary_company(self) -> None:
        """Acme's own row must not pull the average to 733.33."""
        _, peers = split_peers(_make_peers(), "ACME", "Acme Industries")
        result = peer_average(peers, "market_cap", to_crores)
        assert result.raw == pytest.approx(600.0)
        assert result.display == "600.00 Cr"

    def test_no_numeric_values(self) -> None:
        peers = [PeerRecord(price_to_earnings="-"), PeerRecord()]
        assert peer_average(peers, "price_to_earnings", to_ratio).formatted is NOT_AVAILABLE

    def test_empty_peers(self) -> None:
        assert peer_average([], "dividend_yield", to_percentage).formatted is NOT_AVAILABLE


class TestCompareToPeers:

    def test_lower_pe_is_better(self) -> None:
        verdict, text = compare_to_peers(15, to_ratio(20), "P/E", lower_is_better=True)
        assert verdict is Verdict.BETTER
        assert text == "(Lower P/E vs Peers)"

    def test_higher_pe_is_worse(self) -> None:
        verdict, text = compare_to_peers(25, to_ratio(20), "P/E", lower_is_better=True)
        assert verdict is Verdict.WORSE
        assert text == "(Higher P/E vs Peers)"

    def test_higher_is_better_by_default(self) -> None:
        verdict, _ = compare_to_peers(18, to_percentage(12), "RoE")
        assert verdict is Verdict.BETTER

    def test_equal_is_neutral(self) -> None:
        assert compare_to_peers(20, to_ratio(20), "P/E") == (Verdict.NEUTRAL, "")

    def test_non_positive_is_neutral(self) -> None:
        assert compare_to_peers(-5, to_ratio(20), "P/E", lower_is_better=True) == (
            Verdict.NEUTRAL, "",
        )

    def test_non_positive_allowed(self) -> None:
        verdict, text = compare_to_peers(-5, to_percentage(10), "RoE", allow_non_positive=True)
        assert verdict is Verdict.WORSE
        assert text == "(Lower RoE vs Peers)"

    def test_size_comparison(self) -> None:
        verdict, text = compare_to_peers(
            1000, to_crores(600), "Market Cap", size_comparison=True
        )
        assert verdict is Verdict.HIGHER
        assert text == "(Larger Market Cap vs Peers)"

    def test_size_comparison_smaller(self) -> None:
        verdict, text = compare_to_peers(
            100, to_crores(600), "Market Cap", size_comparison=True
        )
        assert verdict is Verdict.LOWER
        assert text == "(Smaller Market Cap vs Peers)"

    def test_missing_average(self) -> None:
        missing = Formatted(formatted=NOT_AVAILABLE)
        assert compare_to_peers(10, missing, "P/E") == (Verdict.NEUTRAL, "")

    def test_missing_company_value(self) -> None:
        assert compare_to_peers("-", to_ratio(20), "P/E") == (Verdict.NEUTRAL, "")


class TestWithPeers:

    def test_attaches_average_and_verdict(self) -> None:
        metric = Metric.from_formatted("P/E Ratio (TTM)", to_ratio(15))
        result = with_peers(metric, 15, to_ratio(20), "P/E", lower_is_better=True)

        assert result.peer_average.label == "Peer Avg. P/E"
        assert result.peer_average.display == "20.00x"
        assert result.peer_verdict is Verdict.BETTER
        assert result.peer_text == "(Lower P/E vs Peers)"
        assert result.display == "15.00x"

    def test_missing_average_still_attached(self) -> None:
        metric = Metric.from_formatted("P/B Ratio", to_ratio(2))
        result = with_peers(metric, 2, Formatted(formatted=NOT_AVAILABLE), "P/B")
        assert result.peer_average.is_missing
        assert result.peer_verdict is Verdict.NEUTRAL
        assert result.peer_text == ""
