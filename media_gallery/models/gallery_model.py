# media_gallery/models/gallery_model.py
from datetime import datetime
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field

from .event_model import Event
from .media_model import ImageItem, VideoItem


class GalleryState(BaseModel):
    """
    Immutable snapshot of the stores as seen by presentation.

    The read model replaces the whole snapshot on every refresh; nothing
    mutates an instance after construction.
    """

    model_config = ConfigDict(frozen=True)

    images: Tuple[ImageItem, ...] = ()
    videos: Tuple[VideoItem, ...] = ()
    events: Tuple[Event, ...] = ()
    loaded: bool = False
    refreshed_at: Optional[datetime] = None

    @property
    def media_count(self) -> int:
        return len(self.images) + len(self.videos)


class SearchResult(BaseModel):
    query: str
    images: Tuple[ImageItem, ...] = ()
    videos: Tuple[VideoItem, ...] = ()
    events: Tuple[Event, ...] = ()
    no_match: bool = Field(
        default=False, description="Non-empty query that matched nothing"
    )

    @property
    def total(self) -> int:
        return len(self.images) + len(self.videos) + len(self.events)
