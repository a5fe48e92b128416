# media_gallery/services/event_link_reconciler.py
"""
Event Link Reconciler

Events and media reference each other twice: ``Event.imageIds`` lists the
media ids, and every media document names its event in ``event``. The two
sides are written independently and drift. Whenever an event is deleted or
renamed, the set of linked media is rebuilt from both sides instead of
trusting either one:

- query ``images`` and ``videos`` where ``event`` equals the event title
  (and, for documents written by older clients, the event id)
- look every id of ``imageIds`` up in both collections

Only documents that currently exist are returned, each exactly once.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..constants import EVENTS_COLLECTION, FIELD_EVENT, FIELD_IMAGE_IDS, FIELD_TITLE
from ..enums import LogEmoji, LoggerName, LogSource, MediaType
from ..exceptions import DocumentNotFoundError
from ..models.event_model import Event
from ..stores.protocols import ArrayRemove, DocumentStore
from .logger import get_service_logger

logger = get_service_logger(LoggerName.EVENT_RECONCILER, LogSource.PIPELINE, LogEmoji.EVENT)


@dataclass(frozen=True)
class LinkedMedia:
    media_type: MediaType
    media_id: str

    @property
    def collection(self) -> str:
        return self.media_type.collection


class EventLinkReconciler:
    def __init__(self, document_store: DocumentStore):
        self.document_store = document_store

    async def collect_linked_media(self, event: Event) -> List[LinkedMedia]:
        """
        Every existing media document linked to ``event`` by either route.

        Ids listed in ``imageIds`` whose documents no longer exist are
        skipped silently.
        """
        found: Dict[Tuple[str, str], LinkedMedia] = {}
        link_values = [value for value in (event.title, event.id) if value]

        for media_type in MediaType:
            for value in dict.fromkeys(link_values):
                for snapshot in await self.document_store.query(
                    media_type.collection, FIELD_EVENT, value
                ):
                    found.setdefault(
                        (media_type.collection, snapshot.id),
                        LinkedMedia(media_type, snapshot.id),
                    )

        missing: List[str] = []
        for media_id in dict.fromkeys(event.image_ids):
            located = False
            for media_type in MediaType:
                key = (media_type.collection, media_id)
                if key in found:
                    located = True
                    continue
                snapshot = await self.document_store.get(media_type.collection, media_id)
                if snapshot.exists:
                    found[key] = LinkedMedia(media_type, media_id)
                    located = True
            if not located:
                missing.append(media_id)

        if missing:
            logger.debug(
                f"Event {event.id} lists {len(missing)} media that no longer exist",
                extra_context={"missing": missing},
            )
        logger.debug(f"Event {event.id} has {len(found)} linked media")
        return list(found.values())

    async def set_event_field(
        self, event: Event, next_value: Optional[str]
    ) -> List[LinkedMedia]:
        """
        Point every linked media document's ``event`` at ``next_value``.

        All updates go through one batch, committed only when non-empty.
        Returns the updated media.
        """
        linked = await self.collect_linked_media(event)
        if not linked:
            return linked

        batch = self.document_store.batch()
        for item in linked:
            batch.update(item.collection, item.media_id, {FIELD_EVENT: next_value})
        await batch.commit()
        logger.info(
            f"Set event field to {next_value!r} on {len(linked)} media of event {event.id}"
        )
        return linked

    async def remove_media_from_events(
        self, media_id: str, event_title: Optional[str] = None
    ) -> List[str]:
        """
        Remove ``media_id`` from ``imageIds`` of every event referencing it.

        Events are found by ``imageIds`` array-contains and by the media's
        own ``event`` title. Uses a set-removal update so concurrent
        removals of other ids never clobber each other. Returns the ids of
        the updated events.
        """
        event_ids: Dict[str, None] = {}
        for snapshot in await self.document_store.query(
            EVENTS_COLLECTION, FIELD_IMAGE_IDS, media_id, op="array_contains"
        ):
            event_ids.setdefault(snapshot.id, None)
        if event_title:
            for snapshot in await self.document_store.query(
                EVENTS_COLLECTION, FIELD_TITLE, event_title
            ):
                event_ids.setdefault(snapshot.id, None)

        updated: List[str] = []
        for event_id in event_ids:
            try:
                await self.document_store.update(
                    EVENTS_COLLECTION, event_id, {FIELD_IMAGE_IDS: ArrayRemove(media_id)}
                )
            except DocumentNotFoundError:
                logger.debug(f"Event {event_id} vanished before unlinking {media_id}")
                continue
            updated.append(event_id)
        return updated
