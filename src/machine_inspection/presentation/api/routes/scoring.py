"""Stateless scoring endpoints."""

from fastapi import APIRouter, Depends, Path

from ....application.services.report_service import ReportService
from ....domain.services.score_engine import classify_rating
from ..dependencies import get_report_service
from ..schemas.report_schemas import (
    ConditionSummaryResponse,
    RatingResponse,
    ScorePreviewRequest,
    ScorePreviewResponse,
    UnitResponse
)

router = APIRouter()


@router.post("/calculate", response_model=ScorePreviewResponse)
async def calculate_preview(
    request: ScorePreviewRequest,
    report_service: ReportService = Depends(get_report_service)
) -> ScorePreviewResponse:
    """
    Calculate scores for a checklist without storing a report.

    Returns the unit scores, overall score, rating and condition counts.
    """
    preview = report_service.preview_scores([unit.to_domain() for unit in request.units])

    return ScorePreviewResponse(
        units=[UnitResponse.from_unit(unit) for unit in preview.units],
        overall_score=preview.overall_score,
        overall_rating=preview.overall_rating,
        conditions=ConditionSummaryResponse.from_summary(preview.summary)
    )


@router.get("/rating/{score}", response_model=RatingResponse)
async def get_rating(
    score: int = Path(..., ge=0, le=100, description="Score percentage")
) -> RatingResponse:
    """Classify a score percentage into its rating."""
    rating = classify_rating(score)
    return RatingResponse(score=score, rating=rating, description=rating.get_description())
