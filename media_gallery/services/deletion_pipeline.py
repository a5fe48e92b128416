# media_gallery/services/deletion_pipeline.py
"""
Deletion Pipeline

Removes a media item or an event and cascades every dependent write. The
two stores are not transactional, so each cascade is ordered so that a
crash half way leaves nothing pointing at data that is gone:

Media item:
1. Delete full and thumb objects concurrently. A missing object is fine
   (a previous attempt may have removed it); any other failure stops here,
   before the metadata document is touched.
2. Delete the metadata document.
3. Remove the id from ``imageIds`` of every event referencing it.
4. Refresh media and notify.

Event:
1. Collect linked media through the reconciler (query + ``imageIds``).
2. Clear their ``event`` field in one atomic batch.
3. Delete the event document.
4. Refresh media and events and notify.

Entry points never raise; they notify and return a ``DeleteOutcome``.
"""

import asyncio
from typing import List, Union

from ..constants import (
    EVENTS_COLLECTION,
    MSG_EVENT_DELETE_FAILED,
    MSG_EVENT_DELETED,
    media_delete_failed_message,
    media_deleted_message,
)
from ..enums import LogEmoji, LoggerName, LogSource, NotificationSeverity
from ..exceptions import DocumentNotFoundError, GalleryError, ObjectNotFoundError
from ..models.event_model import Event
from ..models.media_model import ImageItem, VideoItem
from ..models.pipeline_models import DeleteOutcome
from ..stores.protocols import DocumentStore, NotificationSink, ObjectStore
from .event_link_reconciler import EventLinkReconciler, LinkedMedia
from .gallery_read_model import GalleryReadModel
from .logger import get_service_logger

logger = get_service_logger(LoggerName.DELETION_PIPELINE, LogSource.PIPELINE, LogEmoji.DELETE)


class DeletionPipeline:
    def __init__(
        self,
        document_store: DocumentStore,
        object_store: ObjectStore,
        reconciler: EventLinkReconciler,
        read_model: GalleryReadModel,
        notifier: NotificationSink,
    ):
        self.document_store = document_store
        self.object_store = object_store
        self.reconciler = reconciler
        self.read_model = read_model
        self.notifier = notifier

    async def _delete_binaries(self, *keys: str) -> None:
        results = await asyncio.gather(
            *(self.object_store.delete(key) for key in keys), return_exceptions=True
        )
        for key, result in zip(keys, results):
            if isinstance(result, ObjectNotFoundError):
                logger.warning(f"Object {key} was already gone, continuing")
            elif isinstance(result, BaseException):
                raise result

    async def delete_media(self, item: Union[ImageItem, VideoItem]) -> DeleteOutcome:
        """Delete binaries, metadata and event links of ``item``. Never raises."""
        label = item.media_type.value
        try:
            await self._delete_binaries(item.binary_path, item.thumb_path)
            await self.document_store.delete(item.collection, item.id)
            unlinked = await self.reconciler.remove_media_from_events(item.id, item.event)
        except GalleryError as e:
            logger.error(
                f"Failed to delete {label} {item.id}: {e.message}",
                error_context={"operation": e.operation, "media_id": item.id},
            )
            message = media_delete_failed_message(label)
            self.notifier.notify(message, NotificationSeverity.ERROR)
            return DeleteOutcome(success=False, target_id=item.id, message=message)
        except Exception as e:
            logger.error(f"Unexpected failure deleting {label} {item.id}", exception=e)
            message = media_delete_failed_message(label)
            self.notifier.notify(message, NotificationSeverity.ERROR)
            return DeleteOutcome(success=False, target_id=item.id, message=message)

        if unlinked:
            logger.debug(f"Unlinked {item.id} from events {unlinked}")
        await self._refresh(events=bool(unlinked))
        message = media_deleted_message(label, item.id)
        logger.info(message)
        self.notifier.notify(message, NotificationSeverity.SUCCESS)
        return DeleteOutcome(success=True, target_id=item.id, message=message)

    async def _clear_event_links(self, event: Event) -> List[LinkedMedia]:
        try:
            return await self.reconciler.set_event_field(event, None)
        except DocumentNotFoundError:
            # A linked item vanished between lookup and commit; nothing was applied
            logger.warning(f"Linked media of event {event.id} changed, retrying clear")
            return await self.reconciler.set_event_field(event, None)

    async def delete_event(self, event: Event) -> DeleteOutcome:
        """Unlink every media item from ``event``, then delete it. Never raises."""
        try:
            cleared = await self._clear_event_links(event)
            await self.document_store.delete(EVENTS_COLLECTION, event.id)
        except GalleryError as e:
            logger.error(
                f"Failed to delete event {event.id}: {e.message}",
                error_context={"operation": e.operation, "event_id": event.id},
            )
            self.notifier.notify(MSG_EVENT_DELETE_FAILED, NotificationSeverity.ERROR)
            return DeleteOutcome(success=False, target_id=event.id, message=MSG_EVENT_DELETE_FAILED)
        except Exception as e:
            logger.error(f"Unexpected failure deleting event {event.id}", exception=e)
            self.notifier.notify(MSG_EVENT_DELETE_FAILED, NotificationSeverity.ERROR)
            return DeleteOutcome(success=False, target_id=event.id, message=MSG_EVENT_DELETE_FAILED)

        await self._refresh(events=True)
        logger.info(f"Deleted event {event.id} ({event.title}), cleared {len(cleared)} media")
        self.notifier.notify(MSG_EVENT_DELETED, NotificationSeverity.SUCCESS)
        return DeleteOutcome(
            success=True,
            target_id=event.id,
            message=MSG_EVENT_DELETED,
            cleared_media_ids=[item.media_id for item in cleared],
        )

    async def _refresh(self, events: bool) -> None:
        try:
            await self.read_model.refresh_media()
            if events:
                await self.read_model.refresh_events()
        except Exception as e:
            logger.error("Read model refresh failed", exception=e)
