"""Attachment download endpoint — serves only files linked to a report."""

import mimetypes

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import FileResponse

from fault_tracker.application.services import FaultReportService
from fault_tracker.domain.exceptions import EntityNotFoundError, FileAccessDeniedError
from fault_tracker.infrastructure.dependencies import get_fault_report_service

router = APIRouter(prefix="/files", tags=["Files"])


@router.get("/{filename}")
async def download_file(
    filename: str,
    service: FaultReportService = Depends(get_fault_report_service),
):
    """Download an attachment. Files not linked to any report are refused (403)."""
    try:
        path = await service.open_attachment(filename)
    except FileAccessDeniedError as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
    except EntityNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="File no longer exists on disk"
        )

    return FileResponse(
        path=str(path),
        filename=filename,
        media_type=mimetypes.guess_type(filename)[0] or "application/octet-stream",
    )
