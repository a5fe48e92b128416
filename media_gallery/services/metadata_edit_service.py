# media_gallery/services/metadata_edit_service.py
"""
Metadata Edit Service

Edits of already uploaded media and of events from the admin area.

Renaming an event re-points the ``event`` field of every linked media
document at the new title, using the same reconciliation pass as event
deletion so media linked only through ``imageIds`` (or by id) follow too.
"""

from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..constants import (
    EVENTS_COLLECTION,
    FIELD_EVENT,
    MSG_EVENT_FIELDS_REQUIRED,
    MSG_METADATA_UPDATE_FAILED,
    MSG_METADATA_UPDATED,
)
from ..enums import LogEmoji, LoggerName, LogSource, MediaType, NotificationSeverity
from ..exceptions import DocumentNotFoundError, GalleryError, ValidationFailureError
from ..models.event_model import Event, EventUpdate
from ..models.pipeline_models import MetadataEditOutcome
from ..stores.protocols import DocumentStore, NotificationSink
from ..utils.time_utils import is_iso_date
from .event_link_reconciler import EventLinkReconciler
from .gallery_read_model import GalleryReadModel
from .logger import get_service_logger

logger = get_service_logger(LoggerName.METADATA_EDIT, LogSource.PIPELINE, LogEmoji.EVENT)


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


class MetadataEditService:
    def __init__(
        self,
        document_store: DocumentStore,
        reconciler: EventLinkReconciler,
        read_model: GalleryReadModel,
        notifier: NotificationSink,
    ):
        self.document_store = document_store
        self.reconciler = reconciler
        self.read_model = read_model
        self.notifier = notifier

    def _fail(self, target_id: str, message: str) -> MetadataEditOutcome:
        self.notifier.notify(message, NotificationSeverity.ERROR)
        return MetadataEditOutcome(success=False, target_id=target_id, message=message)

    async def update_media_metadata(
        self,
        media_type: MediaType,
        media_id: str,
        date: str,
        event: Optional[str] = None,
    ) -> MetadataEditOutcome:
        """Set date and event of one media item. A blank event unlinks it."""
        date = (date or "").strip()
        if not is_iso_date(date):
            logger.warning(f"Rejected metadata edit of {media_id}: bad date {date!r}")
            return self._fail(media_id, MSG_METADATA_UPDATE_FAILED)

        changes = {"date": date, FIELD_EVENT: _blank_to_none(event)}
        try:
            await self.document_store.update(media_type.collection, media_id, changes)
        except GalleryError as e:
            logger.error(
                f"Failed to update {media_type.value} {media_id}: {e.message}",
                error_context={"operation": e.operation, "media_id": media_id},
            )
            return self._fail(media_id, MSG_METADATA_UPDATE_FAILED)

        logger.info(f"Updated {media_type.value} {media_id}", extra_context=changes)
        await self._refresh(events=False)
        self.notifier.notify(MSG_METADATA_UPDATED, NotificationSeverity.SUCCESS)
        return MetadataEditOutcome(
            success=True,
            target_id=media_id,
            message=MSG_METADATA_UPDATED,
            updated_media_ids=[media_id],
        )

    @staticmethod
    def _event_changes(update: EventUpdate) -> Dict[str, Any]:
        date = (update.date or "").strip()
        title = (update.title or "").strip()
        if not title or not is_iso_date(date):
            raise ValidationFailureError(MSG_EVENT_FIELDS_REQUIRED, operation="update_event")
        return {
            "date": date,
            "title": title,
            "emojiOrDot": _blank_to_none(update.emoji_or_dot),
        }

    async def update_event_metadata(
        self, event_id: str, update: EventUpdate
    ) -> MetadataEditOutcome:
        """
        Update an event; a title change cascades to every linked media item.

        The event document is written first. Should the cascade then fail,
        media still reach the event through ``imageIds`` and a later edit
        or delete reconciles them.
        """
        try:
            changes = self._event_changes(update)
            snapshot = await self.document_store.get(EVENTS_COLLECTION, event_id)
            if not snapshot.exists:
                raise DocumentNotFoundError(f"Event {event_id} not found", operation="update_event")
            previous = Event.from_document(snapshot.id, snapshot.data)

            await self.document_store.update(EVENTS_COLLECTION, event_id, changes)

            updated_ids = []
            if changes["title"] != previous.title:
                linked = await self.reconciler.set_event_field(previous, changes["title"])
                updated_ids = [item.media_id for item in linked]
        except ValidationFailureError as e:
            logger.warning(f"Rejected edit of event {event_id}: {e.message}")
            return self._fail(event_id, e.message)
        except ValidationError:
            logger.warning(f"Event {event_id} is malformed and cannot be edited")
            return self._fail(event_id, MSG_METADATA_UPDATE_FAILED)
        except GalleryError as e:
            logger.error(
                f"Failed to update event {event_id}: {e.message}",
                error_context={"operation": e.operation, "event_id": event_id},
            )
            return self._fail(event_id, MSG_METADATA_UPDATE_FAILED)

        if updated_ids:
            logger.info(
                f"Renamed event {event_id} from {previous.title!r} to {changes['title']!r}",
                extra_context={"media": updated_ids},
            )
        await self._refresh(events=True)
        self.notifier.notify(MSG_METADATA_UPDATED, NotificationSeverity.SUCCESS)
        return MetadataEditOutcome(
            success=True,
            target_id=event_id,
            message=MSG_METADATA_UPDATED,
            updated_media_ids=updated_ids,
        )

    async def _refresh(self, events: bool) -> None:
        try:
            await self.read_model.refresh_media()
            if events:
                await self.read_model.refresh_events()
        except Exception as e:
            logger.error("Read model refresh failed", exception=e)
