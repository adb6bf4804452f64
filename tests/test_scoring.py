"""Tests for the scoring primitives."""

import pytest

from contracts.scoring import (
    NOT_VALIDATED,
    confidence_band,
    is_auto_reject_candidate,
    is_validated,
    meets_autonomous_threshold,
    quality_score,
)


class TestQualityScore:
    """Test quality_score weighting."""

    def test_validated_weights_relevance_and_confidence(self):
        assert quality_score(0.9, 0.9) == pytest.approx(0.9)
        assert quality_score(1.0, 0.0) == pytest.approx(0.6)

    def test_unvalidated_is_penalized(self):
        assert quality_score(0.5, NOT_VALIDATED) == pytest.approx(0.35)
        assert quality_score(1.0, NOT_VALIDATED) == pytest.approx(0.7)

    def test_sentinel(self):
        assert not is_validated(NOT_VALIDATED)
        assert is_validated(0.0)


class TestThresholds:
    """Test the accept and reject bands."""

    def test_accept_requires_search_presence(self):
        assert meets_autonomous_threshold(0.9, 0.9, 0.75)
        # High relevance alone is not enough without a search hit
        assert not meets_autonomous_threshold(1.0, 0.2, 0.5)

    def test_unvalidated_never_auto_accepts(self):
        assert not meets_autonomous_threshold(1.0, NOT_VALIDATED, 0.5)

    def test_reject_on_low_score(self):
        assert is_auto_reject_candidate(0.5, NOT_VALIDATED)

    def test_reject_on_validated_but_absent(self):
        assert is_auto_reject_candidate(1.0, 0.1)

    def test_borderline_is_neither(self):
        assert not is_auto_reject_candidate(0.7, 0.5)
        assert not meets_autonomous_threshold(0.7, 0.5, 0.75)

    @pytest.mark.parametrize("value,band", [(0.85, "high"), (0.6, "medium"), (0.35, "low"), (0.1, "none")])
    def test_confidence_band(self, value, band):
        assert confidence_band(value) == band


GRID = [0.0, 0.1, 0.25, 0.4, 0.5, 0.6, 0.75, 0.9, 1.0]


class TestScoreProperties:
    """Test properties that hold across the whole input range."""

    @pytest.mark.parametrize("relevance", GRID)
    @pytest.mark.parametrize("search_confidence", GRID + [NOT_VALIDATED])
    def test_quality_score_stays_in_unit_range(self, relevance, search_confidence):
        assert 0.0 <= quality_score(relevance, search_confidence) <= 1.0

    @pytest.mark.parametrize("relevance", GRID)
    @pytest.mark.parametrize("search_confidence", GRID + [NOT_VALIDATED])
    def test_accepting_at_a_threshold_accepts_at_every_lower_one(self, relevance, search_confidence):
        thresholds = sorted(GRID)
        for low, high in zip(thresholds, thresholds[1:]):
            if meets_autonomous_threshold(relevance, search_confidence, high):
                assert meets_autonomous_threshold(relevance, search_confidence, low)
