"""Fault report endpoints — CRUD, workflow actions and attachments."""

from datetime import datetime

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile, status

from fault_tracker.application.schemas import (
    FaultReportCreate,
    FaultReportResponse,
    FaultReportStatusUpdate,
    FaultReportUpdate,
    JobCardResponse,
    PaginatedFaultReportsResponse,
    ProcurementRequestCreate,
    ProcurementResponse,
)
from fault_tracker.application.services import AttachmentUpload, FaultReportService
from fault_tracker.domain.entities import FaultReport, ReportFilters, ReportPriority
from fault_tracker.domain.exceptions import (
    AttachmentIntegrityError,
    AttachmentRejectedError,
    InvalidStatusTransitionError,
    ReportValidationError,
)
from fault_tracker.infrastructure.dependencies import get_fault_report_service

router = APIRouter(prefix="/fault-reports", tags=["Fault Reports"])

_NOT_FOUND = "Fault report not found"


# ── Helpers ──────────────────────────────────────────────────────────

def _found(report: FaultReport | None) -> FaultReportResponse:
    if report is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)
    return FaultReportResponse.model_validate(report, from_attributes=True)


def _bad_request(exc: Exception) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc))


async def _read_uploads(files: list[UploadFile] | None) -> list[AttachmentUpload]:
    uploads: list[AttachmentUpload] = []
    for upload_file in files or []:
        content = await upload_file.read()
        if not upload_file.filename and not content:
            continue
        uploads.append(AttachmentUpload(content=content, filename=upload_file.filename or "untitled"))
    return uploads


# ── Queries ──────────────────────────────────────────────────────────

@router.get("", response_model=PaginatedFaultReportsResponse)
async def list_reports(
    search: str | None = Query(None, description="Case-insensitive text search"),
    status_filter: str | None = Query(None, alias="status", description="Exact status or 'all'"),
    priority: str | None = Query(None, description="Exact priority or 'all'"),
    department: str | None = Query(None, description="Exact department or 'all'"),
    date_from: datetime | None = Query(None, description="Inclusive lower bound on created_at"),
    date_to: datetime | None = Query(None, description="Inclusive upper bound on created_at"),
    sort_by: str = Query("created_at"),
    sort_order: str = Query("desc", pattern="^(asc|desc)$"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=500),
    service: FaultReportService = Depends(get_fault_report_service),
) -> PaginatedFaultReportsResponse:
    """Retrieve a filtered, sorted, paginated list of fault reports."""
    result = await service.list_reports(
        ReportFilters(
            search=search,
            status=status_filter,
            priority=priority,
            department=department,
            date_from=date_from,
            date_to=date_to,
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
    )
    return PaginatedFaultReportsResponse.model_validate(result, from_attributes=True)


@router.get("/{report_id}", response_model=FaultReportResponse)
async def get_report(
    report_id: str,
    service: FaultReportService = Depends(get_fault_report_service),
) -> FaultReportResponse:
    """Retrieve a single fault report by ID."""
    return _found(await service.get_report(report_id))


# ── Mutations ────────────────────────────────────────────────────────

@router.post("", response_model=FaultReportResponse, status_code=status.HTTP_201_CREATED)
async def create_report(
    title: str = Form(..., min_length=1),
    description: str = Form(..., min_length=1),
    priority: ReportPriority = Form(...),
    department: str | None = Form(None),
    location: str | None = Form(None),
    reported_by: str | None = Form(None),
    attachments: list[UploadFile] | None = File(None),
    service: FaultReportService = Depends(get_fault_report_service),
) -> FaultReportResponse:
    """Submit a new fault report with up to five attachments (multipart form)."""
    data = FaultReportCreate(
        title=title,
        description=description,
        priority=priority,
        department=department,
        location=location,
        reported_by=reported_by,
    )
    uploads = await _read_uploads(attachments)
    try:
        report = await service.create_report(data, uploads)
    except (ReportValidationError, AttachmentRejectedError) as e:
        raise _bad_request(e)
    return FaultReportResponse.model_validate(report, from_attributes=True)


@router.patch("/{report_id}", response_model=FaultReportResponse)
async def update_report(
    report_id: str,
    data: FaultReportUpdate,
    service: FaultReportService = Depends(get_fault_report_service),
) -> FaultReportResponse:
    """Patch a report's descriptive fields."""
    try:
        report = await service.update_report(report_id, data)
    except ReportValidationError as e:
        raise _bad_request(e)
    return _found(report)


@router.patch("/{report_id}/status", response_model=FaultReportResponse)
async def update_report_status(
    report_id: str,
    data: FaultReportStatusUpdate,
    service: FaultReportService = Depends(get_fault_report_service),
) -> FaultReportResponse:
    """Set a report's status directly (e.g. manual rejection)."""
    return _found(await service.set_status(report_id, data.status))


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: str,
    service: FaultReportService = Depends(get_fault_report_service),
) -> None:
    """Delete a fault report and every attachment file it owns."""
    if not await service.delete_report(report_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=_NOT_FOUND)


# ── Workflow actions ─────────────────────────────────────────────────

@router.post("/{report_id}/issue-job-card", response_model=JobCardResponse)
async def issue_job_card(
    report_id: str,
    service: FaultReportService = Depends(get_fault_report_service),
) -> JobCardResponse:
    """Issue a job card to the workshop planner (pending → approved)."""
    try:
        report = await service.issue_job_card(report_id)
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return JobCardResponse(message="Job card issued to workshop planner", report=_found(report))


@router.post("/{report_id}/procurement-request", response_model=ProcurementResponse)
async def submit_procurement_request(
    report_id: str,
    data: ProcurementRequestCreate,
    service: FaultReportService = Depends(get_fault_report_service),
) -> ProcurementResponse:
    """Hand the report to the procurement manager (→ assigned)."""
    try:
        report = await service.submit_procurement_request(report_id, data.priority)
    except InvalidStatusTransitionError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return ProcurementResponse(
        message="The task is assigned to PM",
        priority=data.priority,
        report=_found(report),
    )


# ── Attachments ──────────────────────────────────────────────────────

@router.post("/{report_id}/attachments", response_model=FaultReportResponse)
async def add_attachment(
    report_id: str,
    attachment: UploadFile,
    service: FaultReportService = Depends(get_fault_report_service),
) -> FaultReportResponse:
    """Upload one more attachment to an existing report."""
    content = await attachment.read()
    try:
        report = await service.upload_attachment(report_id, content, attachment.filename or "untitled")
    except (AttachmentRejectedError, AttachmentIntegrityError) as e:
        raise _bad_request(e)
    return _found(report)


@router.delete("/{report_id}/attachments/{filename}", response_model=FaultReportResponse)
async def remove_attachment(
    report_id: str,
    filename: str,
    service: FaultReportService = Depends(get_fault_report_service),
) -> FaultReportResponse:
    """Unlink an attachment from a report and delete the stored file."""
    return _found(await service.remove_attachment(report_id, filename))
