# media_gallery/routers/metadata_routers.py
"""Metadata edit endpoints for media items and events."""
# NOTE: THIS FILE SHOULD NOT CONTAIN ANY BUSINESS LOGIC.

from typing import Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from ..dependencies import MetadataEditServiceDep
from ..models.event_model import EventUpdate
from ..utils.response_helpers import ResponseFormatter
from ..utils.router_helpers import handle_exceptions, validate_media_type

router = APIRouter(tags=["metadata"])


class MediaMetadataUpdate(BaseModel):
    """Request model for editing an uploaded image or video"""

    date: str = Field(..., description="ISO calendar date (YYYY-MM-DD)")
    event: Optional[str] = Field(
        None, description="Title of the event to link; blank unlinks"
    )


def _respond(outcome):
    if not outcome.success:
        raise HTTPException(status_code=400, detail=outcome.message)
    return ResponseFormatter.outcome(outcome)


@router.patch("/media/{media_type}/{media_id}")
@handle_exceptions("update media metadata")
async def update_media_metadata(
    media_type: str,
    media_id: str,
    update: MediaMetadataUpdate,
    metadata_service: MetadataEditServiceDep,
):
    kind = validate_media_type(media_type)
    outcome = await metadata_service.update_media_metadata(
        kind, media_id, update.date, update.event
    )
    return _respond(outcome)


@router.patch("/events/{event_id}")
@handle_exceptions("update event")
async def update_event(
    event_id: str, update: EventUpdate, metadata_service: MetadataEditServiceDep
):
    """Edit an event. Renaming it relinks every media item that pointed at the old title."""
    outcome = await metadata_service.update_event_metadata(event_id, update)
    return _respond(outcome)
