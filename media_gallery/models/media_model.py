# media_gallery/models/media_model.py
from datetime import datetime
from typing import Annotated, Any, Dict, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..enums import MediaType


class MediaItemBase(BaseModel):
    """Fields shared by images and videos. Aliases are the document field names."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)

    id: str = Field(..., description="Filename-derived key, also the document id")
    date: str = Field(default="", description="ISO calendar date (YYYY-MM-DD)")
    event: Optional[str] = Field(
        default=None, description="Title of the linked event, if any"
    )
    caption: Optional[str] = Field(default=None, description="Free text caption")
    thumb_path: str = Field(..., alias="thumbPath", description="Thumbnail object key")
    thumb_url: Optional[str] = Field(default=None, alias="thumbUrl")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")

    @property
    def media_type(self) -> MediaType:
        return MediaType(self.type)  # type: ignore[attr-defined]

    @property
    def collection(self) -> str:
        return self.media_type.collection

    @property
    def binary_path(self) -> str:
        raise NotImplementedError


class ImageItem(MediaItemBase):
    type: Literal["image"] = "image"
    full_path: str = Field(..., alias="fullPath", description="Full JPEG object key")
    download_url: Optional[str] = Field(default=None, alias="downloadUrl")

    @property
    def binary_path(self) -> str:
        return self.full_path


class VideoItem(MediaItemBase):
    type: Literal["video"] = "video"
    video_path: str = Field(..., alias="videoPath", description="Video object key")
    duration_seconds: Optional[int] = Field(
        default=None, alias="durationSeconds", ge=0
    )

    @property
    def binary_path(self) -> str:
        return self.video_path


MediaItem = Annotated[Union[ImageItem, VideoItem], Field(discriminator="type")]


def media_item_from_document(
    media_type: MediaType, doc_id: str, data: Dict[str, Any]
) -> Union[ImageItem, VideoItem]:
    """
    Build a media model from a stored document.

    The document id wins over any ``id`` field inside the payload.
    """
    payload = {**data, "id": doc_id, "type": media_type.value}
    if media_type is MediaType.IMAGE:
        return ImageItem.model_validate(payload)
    return VideoItem.model_validate(payload)
