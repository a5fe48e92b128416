# media_gallery/constants.py
"""
Application constants.

Collection names, object store layout and the user-facing notification
texts live here so services and tests agree on them.
"""

# =============================================================================
# DOCUMENT STORE COLLECTIONS
# =============================================================================

IMAGES_COLLECTION = "images"
VIDEOS_COLLECTION = "videos"
EVENTS_COLLECTION = "events"

# =============================================================================
# OBJECT STORE LAYOUT
# =============================================================================
#   images/full/<id>.jpg     full resolution, re-encoded JPEG
#   images/thumb/<id>.jpg    thumbnail
#   videos/full/<id>         original .mp4 / .mov
#   videos/thumb/<stem>.jpg  poster frame

IMAGE_FULL_ROOT = "images/full"
IMAGE_THUMB_ROOT = "images/thumb"
VIDEO_FULL_ROOT = "videos/full"
VIDEO_THUMB_ROOT = "videos/thumb"

JPEG_CONTENT_TYPE = "image/jpeg"
IMAGE_EXTENSION = "jpg"
DEFAULT_UPLOAD_STEM = "upload"

VIDEO_CONTENT_TYPES = {
    "mp4": "video/mp4",
    "mov": "video/quicktime",
}
SUPPORTED_VIDEO_EXTENSIONS = tuple(VIDEO_CONTENT_TYPES.keys())

# =============================================================================
# DOCUMENT FIELDS
# =============================================================================

FIELD_EVENT = "event"
FIELD_IMAGE_IDS = "imageIds"
FIELD_TITLE = "title"
FIELD_CREATED_AT = "createdAt"

# =============================================================================
# CONFIRMATION GATE KEYS
# =============================================================================

GATE_KEY_SEPARATOR = ":"

# =============================================================================
# NOTIFICATION MESSAGES
# =============================================================================

MSG_EVENT_FIELDS_REQUIRED = "Please fill in date and title."
MSG_EVENT_CREATED = "Event created successfully!"
MSG_EVENT_CREATE_FAILED = "Failed to create event. Please try again."
MSG_DATE_REQUIRED = "Please choose a date."
MSG_FILES_REQUIRED = "Please select at least one file."
MSG_EVENT_MISSING = "The selected event no longer exists."
MSG_NO_UPLOADS = "No files were successfully uploaded"
MSG_EVENT_DELETED = "Deleted timeline event"
MSG_EVENT_DELETE_FAILED = "Failed to delete timeline event."
MSG_METADATA_UPDATED = "Metadata updated"
MSG_METADATA_UPDATE_FAILED = "Failed to update metadata."


def uploads_completed_message(count: int) -> str:
    return f"{count} upload{'' if count == 1 else 's'} completed successfully!"


def uploads_failed_message(count: int) -> str:
    return f"{count} upload{'' if count == 1 else 's'} failed."


def media_deleted_message(media_type: str, media_id: str) -> str:
    return f"Deleted {media_type} {media_id}"


def media_delete_failed_message(media_type: str) -> str:
    return f"Failed to delete {media_type}. Check logs for details."
