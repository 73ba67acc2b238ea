"""Unit tests for condition and rating value objects."""

import pytest

from src.machine_inspection.domain.value_objects.condition import Condition, ConditionScore
from src.machine_inspection.domain.value_objects.condition_summary import ConditionSummary
from src.machine_inspection.domain.value_objects.rating import Rating


class TestCondition:
    """Test cases for Condition enum."""

    def test_condition_points(self):
        """Test the fixed point value of each condition."""
        assert Condition.GOOD.points == 80
        assert Condition.BETTER.points == 100
        assert Condition.BAD.points == 40

    def test_parse_recognized_values(self):
        """Test parsing of the known condition strings."""
        assert Condition.parse("Good") == Condition.GOOD
        assert Condition.parse("Bad") == Condition.BAD
        assert Condition.parse("Better") == Condition.BETTER
        assert Condition.parse("  Good  ") == Condition.GOOD

    def test_parse_condition_instance(self):
        """Test that an enum member is returned as is."""
        assert Condition.parse(Condition.BAD) is Condition.BAD

    def test_parse_empty_values(self):
        """Test that empty input is unanswered."""
        for value in [None, "", "   "]:
            assert Condition.parse(value) is None

    def test_parse_unrecognized_values(self):
        """Test that unknown or differently cased strings are unanswered."""
        for value in ["good", "GOOD", "Excellent", "N/A", "Average"]:
            assert Condition.parse(value) is None

    def test_parse_non_string(self):
        """Test that non-string input is unanswered."""
        assert Condition.parse(80) is None


class TestConditionScore:
    """Test cases for ConditionScore value object."""

    def test_answered_score(self):
        """Test an answered checkpoint score."""
        score = ConditionScore.answered(Condition.BETTER)

        assert score.is_answered is True
        assert score.condition == Condition.BETTER
        assert score.points == 100

    def test_unanswered_score(self):
        """Test an unanswered checkpoint score."""
        score = ConditionScore.unanswered()

        assert score.is_answered is False
        assert score.condition is None
        assert score.points is None

    def test_invalid_condition_type(self):
        """Test that raw strings are rejected."""
        with pytest.raises(ValueError, match="condition must be a Condition enum or None"):
            ConditionScore(condition="Good")

    def test_score_is_immutable(self):
        """Test that scores cannot be changed after creation."""
        score = ConditionScore.answered(Condition.GOOD)

        with pytest.raises(AttributeError):
            score.condition = Condition.BAD


class TestRating:
    """Test cases for Rating enum."""

    def test_rating_values(self):
        """Test rating display values."""
        assert Rating.EXCELLENT.value == "Excellent"
        assert Rating.GOOD.value == "Good"
        assert Rating.AVERAGE.value == "Average"
        assert Rating.NOT_GOOD.value == "Not Good"

    def test_from_score_boundaries(self):
        """Test classification at and around the thresholds."""
        test_cases = [
            (100, Rating.GOOD),
            (70, Rating.GOOD),
            (69, Rating.AVERAGE),
            (50, Rating.AVERAGE),
            (49, Rating.NOT_GOOD),
            (0, Rating.NOT_GOOD),
        ]

        for score, expected in test_cases:
            assert Rating.from_score(score) == expected

    def test_excellent_never_produced(self):
        """Test that no score maps to the reserved Excellent rating."""
        assert all(Rating.from_score(score) != Rating.EXCELLENT for score in range(0, 101))

    def test_descriptions(self):
        """Test human-readable descriptions."""
        assert Rating.GOOD.get_description() == "Overall score of 70% or more"
        assert Rating.AVERAGE.get_description() == "Overall score from 50% up to 69%"
        assert Rating.NOT_GOOD.get_description() == "Overall score below 50%"
        assert "Reserved" in Rating.EXCELLENT.get_description()


class TestConditionSummary:
    """Test cases for ConditionSummary value object."""

    def test_total(self):
        """Test the answered checkpoint total."""
        summary = ConditionSummary(good=2, bad=1, better=3)

        assert summary.total == 6

    def test_empty_summary(self):
        """Test default counts."""
        summary = ConditionSummary()

        assert summary.good == 0
        assert summary.total == 0

    def test_negative_counts_rejected(self):
        """Test that negative counts are rejected."""
        with pytest.raises(ValueError, match="Condition counts cannot be negative"):
            ConditionSummary(good=-1)
