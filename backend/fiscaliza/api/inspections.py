"""Record store endpoints: list, intake, edits, photos, follow-ups, summary and detail PDF."""
from __future__ import annotations
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, UploadFile
from starlette.concurrency import run_in_threadpool
from starlette.responses import Response

from ..auth import get_current_user
from ..deps import get_inspection_service, get_observation_sync, get_storage, get_summarizer
from ..lib.dates import utcnow
from ..lib.datauri import guess_mime, to_data_uri
from ..reports.detail_pdf import render_detail_report
from ..reports.selection import filter_records
from ..schemas import (
    FollowUp, FollowUpIn, InspectionCreate, InspectionRecord, InspectionStatus,
    InspectionUpdate, Photo, PhotoIn, SummaryOut, UserAccount,
)
from ..services.inspection_service import InspectionService
from ..services.observation_sync import ObservationSync
from ..services.summarizer import Summarizer
from ..storage import StorageService

router = APIRouter()


def attachment_headers(filename: str) -> dict:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("", response_model=List[InspectionRecord])
async def list_inspections(
    q: Optional[str] = None,
    status: Optional[InspectionStatus] = None,
    service: InspectionService = Depends(get_inspection_service),
):
    """Newest first; `q` matches protocol, address or type."""
    return filter_records(await service.list(), q, status)


@router.post("", response_model=InspectionRecord, status_code=201)
async def create_inspection(
    request: InspectionCreate,
    background: BackgroundTasks,
    service: InspectionService = Depends(get_inspection_service),
    sync: Optional[ObservationSync] = Depends(get_observation_sync),
    current_user: UserAccount = Depends(get_current_user),
):
    record = await service.create(request, current_user.name)
    if sync is not None:
        background.add_task(sync.push, record)
    return record


@router.get("/{inspection_id}", response_model=InspectionRecord)
async def get_inspection(inspection_id: str, service: InspectionService = Depends(get_inspection_service)):
    return await service.get_by_id(inspection_id)


@router.patch("/{inspection_id}", response_model=InspectionRecord)
async def update_inspection(
    inspection_id: str,
    request: InspectionUpdate,
    service: InspectionService = Depends(get_inspection_service),
    current_user: UserAccount = Depends(get_current_user),
):
    return await service.update(inspection_id, request, current_user.name)


@router.post("/{inspection_id}/photos", response_model=Photo, status_code=201)
async def add_photo(
    inspection_id: str,
    request: PhotoIn,
    service: InspectionService = Depends(get_inspection_service),
    current_user: UserAccount = Depends(get_current_user),
):
    return await service.add_photo(inspection_id, request, current_user.name)


@router.post("/{inspection_id}/photos/upload", response_model=Photo, status_code=201)
async def upload_photo(
    inspection_id: str,
    file: UploadFile = File(...),
    service: InspectionService = Depends(get_inspection_service),
    storage: Optional[StorageService] = Depends(get_storage),
    current_user: UserAccount = Depends(get_current_user),
):
    """
    Multipart variant of add_photo. The image is kept inline as a data URI,
    or uploaded to object storage when it is configured.
    """
    await service.get_by_id(inspection_id)
    data = await file.read()
    name = file.filename or "foto.jpg"
    mime = file.content_type or guess_mime(name, "image/jpeg")
    if storage is not None:
        key = f"fotos/{int(utcnow().timestamp() * 1000)}-{name}"
        url = await run_in_threadpool(storage.upload_bytes, data, key, mime)
    else:
        url = to_data_uri(data, mime)
    return await service.add_photo(inspection_id, PhotoIn(url=url, name=name), current_user.name)


@router.post("/{inspection_id}/follow-ups", response_model=FollowUp, status_code=201)
async def add_follow_up(
    inspection_id: str,
    request: FollowUpIn,
    service: InspectionService = Depends(get_inspection_service),
    current_user: UserAccount = Depends(get_current_user),
):
    return await service.add_follow_up(inspection_id, request, current_user.name)


@router.post("/{inspection_id}/summary", response_model=SummaryOut)
async def summarize_report(
    inspection_id: str,
    service: InspectionService = Depends(get_inspection_service),
    summarizer: Summarizer = Depends(get_summarizer),
    current_user: UserAccount = Depends(get_current_user),
):
    """Summarize the findings text and store the result on the record."""
    record = await service.get_by_id(inspection_id)
    summary = await run_in_threadpool(summarizer.summarize, record.report or "")
    await service.set_summary(inspection_id, summary, current_user.name)
    return SummaryOut(report_summary=summary)


@router.get("/{inspection_id}/report.pdf")
async def detail_report(inspection_id: str, service: InspectionService = Depends(get_inspection_service)):
    record = await service.get_by_id(inspection_id)
    artifact = await run_in_threadpool(render_detail_report, record)
    return Response(
        content=artifact.content,
        media_type=artifact.media_type,
        headers=attachment_headers(artifact.filename),
    )
