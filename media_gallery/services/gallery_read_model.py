# media_gallery/services/gallery_read_model.py
"""
Gallery Read Model

In-memory view of both stores used by presentation and consulted by the
pipelines. Pipelines never touch the snapshot; they only ask for a refresh
once their writes have settled. Each refresh builds a new ``GalleryState``
and swaps it in under a lock, so readers always see a complete snapshot.

Object URLs are resolved once per key and cached across refreshes. Video
URLs are resolved lazily on first request because they are only needed
when a video is actually played.
"""

import asyncio
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import ValidationError

from ..constants import EVENTS_COLLECTION
from ..enums import LogEmoji, LoggerName, LogSource, MediaType
from ..exceptions import ObjectNotFoundError
from ..models.event_model import Event
from ..models.gallery_model import GalleryState
from ..models.media_model import ImageItem, VideoItem, media_item_from_document
from ..stores.protocols import AuthService, DocumentStore, ObjectStore
from ..utils.time_utils import utc_now
from .logger import get_service_logger

logger = get_service_logger(LoggerName.READ_MODEL, LogSource.SYSTEM, LogEmoji.CACHE)


class GalleryReadModel:
    def __init__(self, document_store: DocumentStore, object_store: ObjectStore):
        self.document_store = document_store
        self.object_store = object_store
        self._state = GalleryState()
        self._lock = asyncio.Lock()
        self._url_cache: Dict[str, str] = {}
        self._unsubscribe: Optional[Callable[[], None]] = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def state(self) -> GalleryState:
        return self._state

    def find_media(
        self, media_type: MediaType, media_id: str
    ) -> Optional[Union[ImageItem, VideoItem]]:
        items = self._state.images if media_type is MediaType.IMAGE else self._state.videos
        return next((item for item in items if item.id == media_id), None)

    def find_event(self, event_id: str) -> Optional[Event]:
        return next((event for event in self._state.events if event.id == event_id), None)

    async def resolve_video_url(self, video_id: str) -> Optional[str]:
        video = self.find_media(MediaType.VIDEO, video_id)
        if video is None:
            return None
        return await self._resolve_url(video.binary_path)

    # ------------------------------------------------------------------
    # Refresh hooks
    # ------------------------------------------------------------------

    async def _resolve_url(self, key: str) -> Optional[str]:
        cached = self._url_cache.get(key)
        if cached is not None:
            return cached
        try:
            url = await self.object_store.resolve_url(key)
        except ObjectNotFoundError:
            logger.debug(f"No object behind {key}")
            return None
        self._url_cache[key] = url
        return url

    @staticmethod
    def _parse_media(
        media_type: MediaType, doc_id: str, data: Dict[str, Any]
    ) -> Optional[Union[ImageItem, VideoItem]]:
        try:
            return media_item_from_document(media_type, doc_id, data)
        except ValidationError as e:
            logger.warning(
                f"Skipping malformed {media_type.value} document {doc_id}",
                extra_context={"errors": e.error_count()},
            )
            return None

    async def _load_images(self) -> List[ImageItem]:
        images: List[ImageItem] = []
        for snapshot in await self.document_store.list(MediaType.IMAGE.collection):
            item = self._parse_media(MediaType.IMAGE, snapshot.id, snapshot.data)
            if not isinstance(item, ImageItem):
                continue
            thumb_url, download_url = await asyncio.gather(
                self._resolve_url(item.thumb_path), self._resolve_url(item.full_path)
            )
            images.append(
                item.model_copy(update={"thumb_url": thumb_url, "download_url": download_url})
            )
        images.sort(key=lambda item: (item.date, item.id), reverse=True)
        return images

    async def _load_videos(self) -> List[VideoItem]:
        videos: List[VideoItem] = []
        for snapshot in await self.document_store.list(MediaType.VIDEO.collection):
            item = self._parse_media(MediaType.VIDEO, snapshot.id, snapshot.data)
            if not isinstance(item, VideoItem):
                continue
            thumb_url = await self._resolve_url(item.thumb_path)
            videos.append(item.model_copy(update={"thumb_url": thumb_url}))
        videos.sort(key=lambda item: (item.date, item.id), reverse=True)
        return videos

    def _prune_url_cache(self, state: GalleryState) -> None:
        live = set()
        for image in state.images:
            live.update((image.thumb_path, image.full_path))
        for video in state.videos:
            live.update((video.thumb_path, video.video_path))
        for key in list(self._url_cache):
            if key not in live:
                del self._url_cache[key]

    async def refresh_media(self) -> GalleryState:
        """Reload images and videos. Store errors propagate to the caller."""
        async with self._lock:
            images, videos = await asyncio.gather(self._load_images(), self._load_videos())
            self._state = self._state.model_copy(
                update={
                    "images": tuple(images),
                    "videos": tuple(videos),
                    "loaded": True,
                    "refreshed_at": utc_now(),
                }
            )
            self._prune_url_cache(self._state)
        logger.debug(f"Media refreshed: {len(images)} images, {len(videos)} videos")
        return self._state

    @staticmethod
    def _parse_event(doc_id: str, data: Dict[str, Any]) -> Optional[Event]:
        try:
            return Event.from_document(doc_id, data)
        except ValidationError as e:
            logger.warning(
                f"Skipping malformed event document {doc_id}",
                extra_context={"errors": e.error_count()},
            )
            return None

    async def refresh_events(self) -> GalleryState:
        async with self._lock:
            events = []
            for snapshot in await self.document_store.list(EVENTS_COLLECTION):
                event = self._parse_event(snapshot.id, snapshot.data)
                if event is not None:
                    events.append(event)
            events.sort(key=lambda event: (event.date, event.title))
            self._state = self._state.model_copy(
                update={"events": tuple(events), "refreshed_at": utc_now()}
            )
        logger.debug(f"Events refreshed: {len(events)} events")
        return self._state

    async def refresh_all(self) -> GalleryState:
        await self.refresh_media()
        return await self.refresh_events()

    async def clear(self) -> None:
        async with self._lock:
            self._state = GalleryState()
            self._url_cache.clear()
        logger.info("Gallery state cleared")

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def _on_auth_change(self, signed_in: bool) -> None:
        if signed_in:
            await self.refresh_all()
        else:
            await self.clear()

    def attach_auth(self, auth: AuthService) -> None:
        """Populate on sign-in, clear on sign-out."""
        self.detach_auth()
        self._unsubscribe = auth.subscribe(self._on_auth_change)

    def detach_auth(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
