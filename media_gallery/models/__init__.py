# media_gallery/models/__init__.py
from .event_model import Event, EventCreate, EventUpdate
from .gallery_model import GalleryState, SearchResult
from .media_model import ImageItem, MediaItem, VideoItem, media_item_from_document
from .notification_model import Notification
from .pipeline_models import (
    DeleteOutcome,
    DeleteRequestResult,
    EventCreateOutcome,
    FileUploadResult,
    MetadataEditOutcome,
    SourceFile,
    UploadBatchResult,
    UploadRequest,
)

__all__ = [
    "Event",
    "EventCreate",
    "EventUpdate",
    "GalleryState",
    "SearchResult",
    "ImageItem",
    "VideoItem",
    "MediaItem",
    "media_item_from_document",
    "Notification",
    "DeleteOutcome",
    "DeleteRequestResult",
    "EventCreateOutcome",
    "FileUploadResult",
    "MetadataEditOutcome",
    "SourceFile",
    "UploadBatchResult",
    "UploadRequest",
]
