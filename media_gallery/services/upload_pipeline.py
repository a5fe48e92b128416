# media_gallery/services/upload_pipeline.py
"""
Upload Pipeline

Entry points:
- ``create_event``: validate and write a new event document
- ``upload_selection``: ingest a batch of files, optionally creating or
  linking an event first

Per file: render binaries -> resolve a free id -> upload full and thumb in
parallel -> merge-write the media document -> link it to the event. Files
run concurrently (bounded by a semaphore) and independently; one file
failing never blocks or rolls back the others. Once every file has settled
the read model is refreshed and a single aggregate notification is sent.

Neither entry point raises: every failure ends up in the returned outcome
and in a notification.
"""

import asyncio
from typing import Any, Awaitable, Dict, Optional

from pydantic import ValidationError

from ..constants import (
    EVENTS_COLLECTION,
    FIELD_CREATED_AT,
    FIELD_EVENT,
    FIELD_IMAGE_IDS,
    MSG_DATE_REQUIRED,
    MSG_EVENT_CREATE_FAILED,
    MSG_EVENT_CREATED,
    MSG_EVENT_FIELDS_REQUIRED,
    MSG_EVENT_MISSING,
    MSG_FILES_REQUIRED,
    MSG_NO_UPLOADS,
    uploads_completed_message,
    uploads_failed_message,
)
from ..enums import LogEmoji, LoggerName, LogSource, MediaType, NotificationSeverity
from ..exceptions import GalleryError, ValidationFailureError
from ..models.event_model import Event, EventCreate
from ..models.pipeline_models import (
    EventCreateOutcome,
    FileUploadResult,
    SourceFile,
    UploadBatchResult,
    UploadRequest,
)
from ..stores.protocols import (
    SERVER_TIMESTAMP,
    ArrayUnion,
    DocumentStore,
    NotificationSink,
    ObjectStore,
)
from ..utils.filename_utils import image_id_for, storage_keys_for, video_id_for
from ..utils.time_utils import is_iso_date
from .gallery_read_model import GalleryReadModel
from .identifier_resolver import IdentifierResolver
from .logger import get_service_logger
from .thumbnail_pipeline import RenderedMedia, ThumbnailPipeline

logger = get_service_logger(LoggerName.UPLOAD_PIPELINE, LogSource.PIPELINE, LogEmoji.UPLOAD)


async def _gather_or_raise(*aws: Awaitable[Any]) -> None:
    """Await all, then re-raise the first failure once every call settled."""
    results = await asyncio.gather(*aws, return_exceptions=True)
    for result in results:
        if isinstance(result, BaseException):
            raise result


class UploadPipeline:
    def __init__(
        self,
        document_store: DocumentStore,
        object_store: ObjectStore,
        resolver: IdentifierResolver,
        thumbnails: ThumbnailPipeline,
        read_model: GalleryReadModel,
        notifier: NotificationSink,
        max_concurrent_uploads: int = 4,
    ):
        self.document_store = document_store
        self.object_store = object_store
        self.resolver = resolver
        self.thumbnails = thumbnails
        self.read_model = read_model
        self.notifier = notifier
        self.max_concurrent_uploads = max(1, max_concurrent_uploads)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_event(event_create: EventCreate) -> Dict[str, Any]:
        date = (event_create.date or "").strip()
        title = (event_create.title or "").strip()
        if not date or not title or not is_iso_date(date):
            raise ValidationFailureError(MSG_EVENT_FIELDS_REQUIRED, operation="create_event")

        data: Dict[str, Any] = {
            "date": date,
            "title": title,
            FIELD_IMAGE_IDS: [],
            FIELD_CREATED_AT: SERVER_TIMESTAMP,
        }
        emoji = (event_create.emoji_or_dot or "").strip()
        if emoji:
            data["emojiOrDot"] = emoji
        return data

    async def create_event(self, event_create: EventCreate) -> EventCreateOutcome:
        """Write a new event, refresh events and notify. Never raises."""
        try:
            data = self._validate_event(event_create)
            event_id = await self.document_store.add(EVENTS_COLLECTION, data)
        except ValidationFailureError as e:
            logger.warning(f"Event rejected: {e.message}")
            self.notifier.notify(e.message, NotificationSeverity.ERROR)
            return EventCreateOutcome(success=False, message=e.message)
        except Exception as e:
            logger.error("Failed to create event", exception=e)
            self.notifier.notify(MSG_EVENT_CREATE_FAILED, NotificationSeverity.ERROR)
            return EventCreateOutcome(success=False, message=MSG_EVENT_CREATE_FAILED)

        logger.info(f"Created event {event_id} ({data['title']})", emoji=LogEmoji.EVENT)
        await self._refresh(media=False, events=True)
        self.notifier.notify(MSG_EVENT_CREATED, NotificationSeverity.SUCCESS)
        return EventCreateOutcome(success=True, event_id=event_id, message=MSG_EVENT_CREATED)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    @staticmethod
    def _build_document(
        media_type: MediaType,
        media_id: str,
        date: str,
        full_key: str,
        thumb_key: str,
        rendered: RenderedMedia,
        event: Optional[Event],
        caption: Optional[str],
    ) -> Dict[str, Any]:
        doc: Dict[str, Any] = {
            "id": media_id,
            "type": media_type.value,
            "date": date,
            "thumbPath": thumb_key,
            FIELD_CREATED_AT: SERVER_TIMESTAMP,
        }
        if media_type is MediaType.IMAGE:
            doc["fullPath"] = full_key
            if caption:
                doc["caption"] = caption
        else:
            doc["videoPath"] = full_key
            if rendered.duration_seconds is not None:
                doc["durationSeconds"] = rendered.duration_seconds
        if event is not None:
            doc[FIELD_EVENT] = event.title
        return doc

    async def _store_file(
        self,
        source: SourceFile,
        date: str,
        event: Optional[Event],
        caption: Optional[str],
    ) -> FileUploadResult:
        rendered = await self.thumbnails.generate(source)
        media_type = rendered.media_type
        base_name = (
            image_id_for(source.name)
            if media_type is MediaType.IMAGE
            else video_id_for(source.name, rendered.extension)
        )

        media_id = await self.resolver.resolve(base_name, media_type)
        full_key, thumb_key = storage_keys_for(media_type, media_id)
        try:
            await _gather_or_raise(
                self.object_store.upload(
                    full_key, rendered.full_data, rendered.full_content_type
                ),
                self.object_store.upload(thumb_key, rendered.thumb_data, "image/jpeg"),
            )
            doc = self._build_document(
                media_type, media_id, date, full_key, thumb_key, rendered, event, caption
            )
            await self.document_store.set(media_type.collection, media_id, doc, merge=True)
        finally:
            self.resolver.release(media_id, media_type)

        if event is not None:
            try:
                await self.document_store.update(
                    EVENTS_COLLECTION, event.id, {FIELD_IMAGE_IDS: ArrayUnion(media_id)}
                )
            except GalleryError as e:
                # The media document already names the event; reconciliation covers this
                logger.warning(
                    f"Could not link {media_id} to event {event.id}",
                    extra_context={"error": str(e)},
                )

        logger.info(
            f"Uploaded {source.name} as {media_id}",
            extra_context={"full_key": full_key, "thumb_key": thumb_key},
            emoji=LogEmoji.IMAGE if media_type is MediaType.IMAGE else LogEmoji.VIDEO,
        )
        return FileUploadResult(
            file_name=source.name,
            success=True,
            media_id=media_id,
            media_type=media_type,
            full_path=full_key,
            thumb_path=thumb_key,
        )

    async def _upload_one(
        self,
        source: SourceFile,
        date: str,
        event: Optional[Event],
        caption: Optional[str],
        semaphore: asyncio.Semaphore,
    ) -> FileUploadResult:
        async with semaphore:
            try:
                return await self._store_file(source, date, event, caption)
            except GalleryError as e:
                logger.error(
                    f"Upload failed for {source.name}: {e.message}",
                    error_context={"file": source.name, "operation": e.operation},
                )
                return FileUploadResult(file_name=source.name, success=False, error=e.message)
            except Exception as e:
                logger.error(f"Unexpected upload failure for {source.name}", exception=e)
                return FileUploadResult(file_name=source.name, success=False, error=str(e))

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------

    async def _load_event(self, event_id: str) -> Optional[Event]:
        snapshot = await self.document_store.get(EVENTS_COLLECTION, event_id)
        if not snapshot.exists:
            return None
        try:
            return Event.from_document(snapshot.id, snapshot.data)
        except ValidationError:
            logger.warning(f"Selected event {event_id} is malformed, treating it as missing")
            return None

    def _reject(self, message: str) -> UploadBatchResult:
        logger.warning(f"Upload rejected: {message}")
        self.notifier.notify(message, NotificationSeverity.ERROR)
        return UploadBatchResult(message=message)

    async def upload_selection(self, request: UploadRequest) -> UploadBatchResult:
        """Upload every file of ``request``. Never raises."""
        if not request.files:
            return self._reject(MSG_FILES_REQUIRED)

        date = (request.date or "").strip()
        selected_event: Optional[Event] = None
        created_event_id: Optional[str] = None

        if request.event_id:
            try:
                selected_event = await self._load_event(request.event_id)
            except GalleryError as e:
                logger.error("Could not load selected event", exception=e)
                return self._reject(MSG_EVENT_CREATE_FAILED)
            if selected_event is None:
                return self._reject(MSG_EVENT_MISSING)
            date = date or selected_event.date
        elif request.new_event is not None:
            outcome = await self.create_event(request.new_event)
            if not outcome.success or outcome.event_id is None:
                return UploadBatchResult(message=outcome.message)
            created_event_id = outcome.event_id
            selected_event = Event(
                id=outcome.event_id,
                title=request.new_event.title.strip(),
                date=request.new_event.date.strip(),
                emoji_or_dot=(request.new_event.emoji_or_dot or "").strip() or None,
            )
            date = date or selected_event.date

        if not date:
            return self._reject(MSG_DATE_REQUIRED)

        caption = (request.caption or "").strip() or None
        semaphore = asyncio.Semaphore(self.max_concurrent_uploads)
        logger.debug(
            f"Uploading {len(request.files)} files",
            extra_context={"date": date, "event_id": selected_event.id if selected_event else None},
        )
        results = await asyncio.gather(
            *(
                self._upload_one(source, date, selected_event, caption, semaphore)
                for source in request.files
            )
        )

        batch = UploadBatchResult(results=list(results), created_event_id=created_event_id)
        await self._refresh(
            media=True,
            events=created_event_id is not None
            or (selected_event is not None and batch.success_count > 0),
        )

        if batch.success_count == 0:
            batch.message = MSG_NO_UPLOADS
            self.notifier.notify(MSG_NO_UPLOADS, NotificationSeverity.ERROR)
        else:
            batch.message = uploads_completed_message(batch.success_count)
            self.notifier.notify(batch.message, NotificationSeverity.SUCCESS)
            if batch.failure_count:
                self.notifier.notify(
                    uploads_failed_message(batch.failure_count), NotificationSeverity.ERROR
                )

        logger.info(
            f"Upload finished: {batch.success_count} succeeded, {batch.failure_count} failed"
        )
        return batch

    async def _refresh(self, media: bool, events: bool) -> None:
        """Refresh the read model; the writes already happened, so failures only log."""
        try:
            if media:
                await self.read_model.refresh_media()
            if events:
                await self.read_model.refresh_events()
        except Exception as e:
            logger.error("Read model refresh failed", exception=e)
