# media_gallery/routers/upload_routers.py
"""
Upload and event creation HTTP endpoints.

Role: Multipart upload adapter over the Upload Pipeline
Responsibilities: Reading uploaded files into ``SourceFile`` models, event
                 creation, date inference for a single file
Interactions: Uses UploadPipeline and DateInference; never touches a store
"""
# NOTE: THIS FILE SHOULD NOT CONTAIN ANY BUSINESS LOGIC.

from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from ..constants import (
    MSG_DATE_REQUIRED,
    MSG_EVENT_FIELDS_REQUIRED,
    MSG_EVENT_MISSING,
    MSG_FILES_REQUIRED,
)
from ..dependencies import DateInferenceDep, UploadPipelineDep
from ..enums import DateSource
from ..models.event_model import EventCreate
from ..models.pipeline_models import SourceFile, UploadRequest
from ..utils.response_helpers import ResponseFormatter
from ..utils.router_helpers import handle_exceptions
from ..utils.time_utils import UTC_TIMEZONE

router = APIRouter(tags=["uploads"])

# Rejections caused by the request itself rather than by a store
CLIENT_ERROR_MESSAGES = {
    MSG_DATE_REQUIRED,
    MSG_EVENT_FIELDS_REQUIRED,
    MSG_EVENT_MISSING,
    MSG_FILES_REQUIRED,
}


async def to_source_file(upload: UploadFile, last_modified_ms: Optional[int] = None) -> SourceFile:
    data = await upload.read()
    last_modified = (
        datetime.fromtimestamp(last_modified_ms / 1000, tz=UTC_TIMEZONE)
        if last_modified_ms
        else None
    )
    return SourceFile(
        name=upload.filename or "",
        content_type=upload.content_type or "application/octet-stream",
        data=data,
        last_modified=last_modified,
    )


# ====================================================================
# EVENTS
# ====================================================================


@router.post("/events", status_code=status.HTTP_201_CREATED)
@handle_exceptions("create event")
async def create_event(event_data: EventCreate, upload_pipeline: UploadPipelineDep):
    """Create a timeline event with an empty media list."""
    outcome = await upload_pipeline.create_event(event_data)
    if not outcome.success:
        raise HTTPException(
            status_code=400 if outcome.message in CLIENT_ERROR_MESSAGES else 500,
            detail=outcome.message,
        )
    return ResponseFormatter.outcome(outcome)


# ====================================================================
# UPLOADS
# ====================================================================


@router.post("/media/upload")
@handle_exceptions("upload media")
async def upload_media(
    upload_pipeline: UploadPipelineDep,
    files: List[UploadFile] = File(..., description="Images and .mp4/.mov videos"),
    date: str = Form(""),
    event_id: Optional[str] = Form(None),
    caption: Optional[str] = Form(None),
    new_event_title: Optional[str] = Form(None),
    new_event_emoji: Optional[str] = Form(None),
    last_modified_ms: List[int] = Form(default=[]),
):
    """
    Upload a selection of files with a shared date, event and caption.

    Per-file failures do not fail the request; they are listed in
    ``data.results``. ``last_modified_ms`` optionally carries the browser's
    last-modified time of each file, in the same order.
    """
    sources = [
        await to_source_file(
            upload, last_modified_ms[index] if index < len(last_modified_ms) else None
        )
        for index, upload in enumerate(files)
    ]
    new_event = None
    if not event_id and new_event_title and new_event_title.strip():
        new_event = EventCreate(date=date, title=new_event_title, emoji_or_dot=new_event_emoji)

    result = await upload_pipeline.upload_selection(
        UploadRequest(
            files=sources,
            date=date,
            event_id=event_id or None,
            caption=caption,
            new_event=new_event,
        )
    )
    if not result.results and result.message in CLIENT_ERROR_MESSAGES:
        raise HTTPException(status_code=400, detail=result.message)
    return ResponseFormatter.outcome(result)


@router.post("/media/infer-date")
@handle_exceptions("infer capture date")
async def infer_date(
    date_inference: DateInferenceDep,
    file: UploadFile = File(...),
    last_modified_ms: Optional[int] = Form(None),
):
    """Best-effort capture date of one file: EXIF, then mvhd, then last-modified."""
    source = await to_source_file(file, last_modified_ms)
    inferred = await date_inference.infer_async(source)
    return ResponseFormatter.success(
        "Date inferred" if inferred else "No date found",
        data={
            "date": inferred,
            "source": (DateSource.METADATA if inferred else DateSource.NONE).value,
        },
    )
