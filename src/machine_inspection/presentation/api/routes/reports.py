"""Inspection report endpoints."""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from ....application.services.report_service import ReportService
from ....domain.entities.report import ReportStatus
from ..config import get_settings
from ..dependencies import get_report_service
from ..schemas.report_schemas import (
    ConditionSummaryResponse,
    CreateReportRequest,
    ReportListResponse,
    ReportResponse,
    ReportSummaryResponse,
    UnitResponse,
    UpdateCommentsRequest,
    UpdateConditionRequest,
    UpdateRemarksRequest
)

router = APIRouter()


@router.post("", response_model=ReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    request: CreateReportRequest,
    report_service: ReportService = Depends(get_report_service)
) -> ReportResponse:
    """
    Create a new report.

    Creates a draft report for the selected machine with the given checklist.
    """
    report = await report_service.create_draft(
        machine=request.machine.to_domain(),
        inspector=request.inspector.to_domain(),
        units=[unit.to_domain() for unit in request.units],
        customer=request.customer.to_domain() if request.customer else None,
        comments=request.comments
    )
    return ReportResponse.from_report(report)


@router.get("", response_model=ReportListResponse)
async def list_reports(
    report_status: Optional[ReportStatus] = Query(None, alias="status", description="Filter by report status"),
    inspector_id: Optional[str] = Query(None, description="Filter by owning inspector"),
    limit: Optional[int] = Query(None, ge=1, le=500, description="Maximum number of reports to return"),
    report_service: ReportService = Depends(get_report_service)
) -> ReportListResponse:
    """List reports, most recent first."""
    reports = await report_service.list_reports(
        status=report_status,
        inspector_id=inspector_id,
        limit=limit or get_settings().report_list_limit
    )
    return ReportListResponse(
        reports=[ReportResponse.from_report(report) for report in reports],
        total=len(reports)
    )


@router.get("/{report_id}", response_model=ReportResponse)
async def get_report(
    report_id: UUID,
    report_service: ReportService = Depends(get_report_service)
) -> ReportResponse:
    """Get report details by ID."""
    report = await report_service.get_report(report_id)
    if not report:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Report with ID {report_id} not found"
        )
    return ReportResponse.from_report(report)


@router.put("/{report_id}/checkpoints/condition", response_model=ReportResponse)
async def update_checkpoint_condition(
    report_id: UUID,
    request: UpdateConditionRequest,
    report_service: ReportService = Depends(get_report_service)
) -> ReportResponse:
    """
    Record the condition of one checkpoint.

    Scores are recalculated right away unless the service defers them to an
    explicit calculate or save.
    """
    report = await report_service.update_checkpoint_condition(
        report_id=report_id,
        unit_index=request.unit_index,
        checkpoint_index=request.checkpoint_index,
        condition=request.condition or None,
        sub_unit_index=request.sub_unit_index
    )
    return ReportResponse.from_report(report)


@router.put("/{report_id}/checkpoints/remarks", response_model=ReportResponse)
async def update_checkpoint_remarks(
    report_id: UUID,
    request: UpdateRemarksRequest,
    report_service: ReportService = Depends(get_report_service)
) -> ReportResponse:
    """Record remarks against one checkpoint."""
    report = await report_service.update_checkpoint_remarks(
        report_id=report_id,
        unit_index=request.unit_index,
        checkpoint_index=request.checkpoint_index,
        remarks=request.remarks,
        sub_unit_index=request.sub_unit_index
    )
    return ReportResponse.from_report(report)


@router.put("/{report_id}/comments", response_model=ReportResponse)
async def update_comments(
    report_id: UUID,
    request: UpdateCommentsRequest,
    report_service: ReportService = Depends(get_report_service)
) -> ReportResponse:
    """Update the inspector comments of a report."""
    report = await report_service.update_comments(report_id, request.comments)
    return ReportResponse.from_report(report)


@router.post("/{report_id}/calculate", response_model=ReportResponse)
async def calculate_scores(
    report_id: UUID,
    report_service: ReportService = Depends(get_report_service)
) -> ReportResponse:
    """Recalculate unit scores, overall score and rating of a report."""
    report = await report_service.calculate_scores(report_id)
    return ReportResponse.from_report(report)


@router.get("/{report_id}/summary", response_model=ReportSummaryResponse)
async def get_report_summary(
    report_id: UUID,
    report_service: ReportService = Depends(get_report_service)
) -> ReportSummaryResponse:
    """Get the scores and condition counts of a report."""
    report = await report_service.get_report(report_id)
    if not report:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Report with ID {report_id} not found"
        )
    summary = await report_service.get_summary(report_id)

    return ReportSummaryResponse(
        id=report.id,
        status=report.status,
        overall_score=report.overall_score,
        overall_rating=report.overall_rating,
        unit_scores=[UnitResponse.from_unit(unit) for unit in report.units],
        conditions=ConditionSummaryResponse.from_summary(summary)
    )


@router.post("/{report_id}/save", response_model=ReportResponse)
async def save_report(
    report_id: UUID,
    report_service: ReportService = Depends(get_report_service)
) -> ReportResponse:
    """
    Save a report.

    Runs the final score calculation and marks the report as saved. Saved
    reports can no longer be edited.
    """
    report = await report_service.save_report(report_id)
    return ReportResponse.from_report(report)


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: UUID,
    report_service: ReportService = Depends(get_report_service)
) -> Response:
    """Delete a report that has not been saved."""
    await report_service.delete_report(report_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
