"""Overall rating enumeration."""

from enum import Enum


GOOD_THRESHOLD = 70
AVERAGE_THRESHOLD = 50


class Rating(Enum):
    """Categorical label derived from an overall score."""

    # Reserved. The score thresholds never produce it.
    EXCELLENT = "Excellent"
    GOOD = "Good"
    AVERAGE = "Average"
    NOT_GOOD = "Not Good"

    @classmethod
    def from_score(cls, score: int) -> "Rating":
        """Classify a percentage score using inclusive lower bounds."""
        if score >= GOOD_THRESHOLD:
            return cls.GOOD
        elif score >= AVERAGE_THRESHOLD:
            return cls.AVERAGE
        else:
            return cls.NOT_GOOD

    def get_description(self) -> str:
        """Get human-readable description of the rating."""
        descriptions = {
            Rating.EXCELLENT: "Reserved top tier, not assigned by the current thresholds",
            Rating.GOOD: f"Overall score of {GOOD_THRESHOLD}% or more",
            Rating.AVERAGE: f"Overall score from {AVERAGE_THRESHOLD}% up to {GOOD_THRESHOLD - 1}%",
            Rating.NOT_GOOD: f"Overall score below {AVERAGE_THRESHOLD}%",
        }
        return descriptions.get(self, "Unknown rating")
