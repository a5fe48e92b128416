# media_gallery/routers/gallery_routers.py
"""
Gallery read endpoints.

Role: Presentation of the read model snapshot
Responsibilities: Gallery listing, search, manual refresh, lazy video URL
                 resolution, notification history
Interactions: Uses GalleryReadModel, SearchService and NotificationCenter
"""

from typing import Optional

from fastapi import APIRouter, Query

from ..dependencies import GalleryReadModelDep, NotificationCenterDep, SearchServiceDep
from ..enums import MediaType
from ..utils.response_helpers import ResponseFormatter
from ..utils.router_helpers import handle_exceptions, require_entity

router = APIRouter(tags=["gallery"])


@router.get("/gallery")
@handle_exceptions("get gallery")
async def get_gallery(read_model: GalleryReadModelDep):
    """Current snapshot: images, videos and events as last refreshed."""
    state = read_model.state
    return ResponseFormatter.success(
        "Gallery retrieved successfully",
        data=state.model_dump(mode="json", by_alias=True),
    )


@router.get("/gallery/search")
@handle_exceptions("search gallery")
async def search_gallery(
    read_model: GalleryReadModelDep,
    search_service: SearchServiceDep,
    q: Optional[str] = Query(None, description="Title, caption, filename or date"),
):
    result = search_service.search(read_model.state, q)
    message = "No matches" if result.no_match else f"{result.total} matches"
    return ResponseFormatter.success(message, data=result.model_dump(mode="json", by_alias=True))


@router.post("/gallery/refresh")
@handle_exceptions("refresh gallery")
async def refresh_gallery(read_model: GalleryReadModelDep):
    state = await read_model.refresh_all()
    return ResponseFormatter.success(
        "Gallery refreshed",
        data={
            "images": len(state.images),
            "videos": len(state.videos),
            "events": len(state.events),
        },
    )


@router.get("/gallery/videos/{video_id}/url")
@handle_exceptions("resolve video url")
async def get_video_url(video_id: str, read_model: GalleryReadModelDep):
    """Playback URL of a video, resolved on first request and then cached."""
    require_entity(read_model.find_media(MediaType.VIDEO, video_id), "video")
    url = await read_model.resolve_video_url(video_id)
    return ResponseFormatter.success("Video URL resolved", data={"id": video_id, "url": url})


@router.get("/notifications")
@handle_exceptions("get notifications")
async def get_notifications(
    notification_center: NotificationCenterDep,
    limit: Optional[int] = Query(None, ge=1, le=1000),
):
    """Recent notifications, newest first."""
    notifications = notification_center.recent(limit)
    return ResponseFormatter.success(
        "Notifications retrieved successfully",
        data=[notification.model_dump(mode="json") for notification in notifications],
    )
