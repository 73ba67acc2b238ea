"""Score engine for machine inspection reports.

Pure functions that turn checkpoint conditions into unit scores, an overall
score and a rating. Nothing here performs I/O or mutates its input; every
result is a fresh value.

Averages are rounded to the nearest integer with ROUND_HALF_UP, so 86.67
becomes 87 and 62.5 becomes 63.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional, Sequence, Tuple, Union

from ..entities.report import InspectionReport, ReportStatus
from ..entities.unit import Checkpoint, InspectionUnit
from ..value_objects.condition import Condition, ConditionScore
from ..value_objects.condition_summary import ConditionSummary
from ..value_objects.rating import Rating


UnitsOrReport = Union[InspectionReport, Sequence[InspectionUnit]]


def round_half_up(numerator: int, denominator: int) -> int:
    """Divide two integers and round the quotient half-up."""
    if denominator == 0:
        return 0
    quotient = Decimal(numerator) / Decimal(denominator)
    return int(quotient.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def score_checkpoint_condition(condition: Union[Condition, str, None]) -> ConditionScore:
    """Map a checkpoint condition to its score.

    Good scores 80, Better 100 and Bad 40. Empty and unrecognized values are
    both unanswered and take no part in the unit average.
    """
    parsed = Condition.parse(condition)
    if parsed is None:
        return ConditionScore.unanswered()
    return ConditionScore.answered(parsed)


def compute_unit_score(unit: InspectionUnit) -> int:
    """Average the points of the answered checkpoints of a unit.

    Checkpoints nested in sub-units are included. A unit without answered
    checkpoints scores 0.
    """
    points = [
        score.points
        for score in (score_checkpoint_condition(cp.condition) for cp in unit.all_checkpoints())
        if score.is_answered
    ]
    if not points:
        return 0
    return round_half_up(sum(points), len(points))


def score_units(units: Iterable[InspectionUnit]) -> Tuple[InspectionUnit, ...]:
    """Return copies of the units with freshly computed unit scores."""
    return tuple(unit.with_score(compute_unit_score(unit)) for unit in units)


def compute_overall_score(units: UnitsOrReport) -> int:
    """Take the unweighted mean of the unit scores.

    Unit scores are used as they are, so callers recompute them first. A
    report without units scores 0.
    """
    units = _units_of(units)
    if not units:
        return 0
    return round_half_up(sum(unit.unit_score for unit in units), len(units))


def classify_rating(overall_score: int) -> Rating:
    """Classify an overall score as Good (>= 70), Average (>= 50) or Not Good."""
    return Rating.from_score(overall_score)


def calculate_scores(report: InspectionReport) -> InspectionReport:
    """Recompute unit scores, the overall score and the rating of a report.

    Returns a new report; the given one is left unchanged. A draft becomes
    scored once at least one checkpoint is answered. Saved reports keep
    their status.
    """
    units = score_units(report.units)
    overall_score = compute_overall_score(units)
    overall_rating = classify_rating(overall_score)

    status: Optional[ReportStatus] = None
    if report.status == ReportStatus.DRAFT and _any_answered(units):
        status = ReportStatus.SCORED

    return report.with_scores(
        units=units,
        overall_score=overall_score,
        overall_rating=overall_rating,
        status=status
    )


def count_conditions(units: UnitsOrReport) -> ConditionSummary:
    """Count answered checkpoints per condition across all units."""
    counts = {condition: 0 for condition in Condition}
    for unit in _units_of(units):
        for checkpoint in unit.all_checkpoints():
            score = score_checkpoint_condition(checkpoint.condition)
            if score.is_answered:
                counts[score.condition] += 1

    return ConditionSummary(
        good=counts[Condition.GOOD],
        bad=counts[Condition.BAD],
        better=counts[Condition.BETTER]
    )


def _units_of(units: UnitsOrReport) -> Tuple[InspectionUnit, ...]:
    """Accept either a report or a sequence of units."""
    if isinstance(units, InspectionReport):
        return units.units
    return tuple(units)


def _any_answered(units: Iterable[InspectionUnit]) -> bool:
    """Check if any checkpoint in the units is answered."""
    return any(
        _is_answered(checkpoint)
        for unit in units
        for checkpoint in unit.all_checkpoints()
    )


def _is_answered(checkpoint: Checkpoint) -> bool:
    return score_checkpoint_condition(checkpoint.condition).is_answered
