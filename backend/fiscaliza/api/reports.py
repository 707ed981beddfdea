"""List report downloads."""
from __future__ import annotations
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from ..deps import get_inspection_service
from ..reports.exporters import ExportFormat, export
from ..reports.selection import filter_records, select_by_created_range
from ..schemas import InspectionStatus
from ..services.inspection_service import InspectionService
from .inspections import attachment_headers

router = APIRouter()


@router.get("/export")
async def export_report(
    format: ExportFormat = ExportFormat.PDF,
    q: Optional[str] = None,
    status: Optional[InspectionStatus] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
    service: InspectionService = Depends(get_inspection_service),
):
    """
    Export the list as PDF, CSV, XLSX or DOC.

    With `start` and `end` the records are picked by creation date (both days
    inclusive); otherwise the list filters `q` and `status` apply.
    """
    if (start is None) != (end is None):
        raise HTTPException(status_code=400, detail="start and end must be given together")
    if start is not None and end < start:
        raise HTTPException(status_code=400, detail="end must not be before start")

    records = await service.list()
    if start is not None:
        records = select_by_created_range(records, start, end)
    else:
        records = filter_records(records, q, status)

    artifact = await run_in_threadpool(export, records, format)
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers=attachment_headers(artifact.filename),
    )
