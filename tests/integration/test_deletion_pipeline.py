#!/usr/bin/env python3
"""
Tests for the Deletion Pipeline cascades of media items and events.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from media_factories import seed_event, seed_media
from media_gallery.constants import (
    EVENTS_COLLECTION,
    IMAGES_COLLECTION,
    MSG_EVENT_DELETE_FAILED,
    MSG_EVENT_DELETED,
    VIDEOS_COLLECTION,
)
from media_gallery.enums import MediaType, NotificationSeverity
from media_gallery.exceptions import DocumentNotFoundError, ObjectNotFoundError, StoreFailureError
from media_gallery.models.event_model import Event


async def _loaded(read_model):
    await read_model.refresh_all()
    return read_model


@pytest.mark.integration
@pytest.mark.deletion
class TestDeleteMedia:
    @pytest.mark.asyncio
    async def test_cascade_removes_everything(
        self, deletion_pipeline, document_store, object_store, read_model, notifier
    ):
        await seed_media(document_store, object_store, MediaType.IMAGE, "a.jpg", event="Summer Trip")
        await seed_media(document_store, object_store, MediaType.IMAGE, "b.jpg", event="Summer Trip")
        await seed_event(document_store, "evt1", "Summer Trip", image_ids=["a.jpg", "b.jpg"])
        item = (await _loaded(read_model)).find_media(MediaType.IMAGE, "a.jpg")

        outcome = await deletion_pipeline.delete_media(item)

        assert outcome.success is True
        assert "a.jpg" not in document_store.dump(IMAGES_COLLECTION)
        assert document_store.dump(EVENTS_COLLECTION)["evt1"]["imageIds"] == ["b.jpg"]
        assert "images/full/a.jpg" not in object_store.keys()
        assert "images/thumb/a.jpg" not in object_store.keys()
        assert read_model.find_media(MediaType.IMAGE, "a.jpg") is None
        assert read_model.find_event("evt1").image_ids == ["b.jpg"]
        latest = notifier.recent(1)[0]
        assert (latest.message, latest.severity) == ("Deleted image a.jpg", NotificationSeverity.SUCCESS)

    @pytest.mark.asyncio
    async def test_missing_thumbnail_does_not_block(
        self, deletion_pipeline, document_store, object_store, read_model, notifier
    ):
        await seed_media(document_store, object_store, MediaType.IMAGE, "a.jpg")
        await object_store.delete("images/thumb/a.jpg")
        item = (await _loaded(read_model)).find_media(MediaType.IMAGE, "a.jpg")

        outcome = await deletion_pipeline.delete_media(item)

        assert outcome.success is True
        assert document_store.dump(IMAGES_COLLECTION) == {}
        assert object_store.keys() == []
        assert notifier.recent(1)[0].severity is NotificationSeverity.SUCCESS

    @pytest.mark.asyncio
    async def test_store_failure_keeps_metadata(
        self, deletion_pipeline, document_store, object_store, read_model, notifier
    ):
        await seed_media(document_store, object_store, MediaType.VIDEO, "clip.mp4")
        item = (await _loaded(read_model)).find_media(MediaType.VIDEO, "clip.mp4")
        object_store.delete = AsyncMock(side_effect=StoreFailureError("permission denied"))

        outcome = await deletion_pipeline.delete_media(item)

        assert outcome.success is False
        assert "clip.mp4" in document_store.dump(VIDEOS_COLLECTION)
        latest = notifier.recent(1)[0]
        assert latest.severity is NotificationSeverity.ERROR
        assert latest.message == "Failed to delete video. Check logs for details."

    @pytest.mark.asyncio
    async def test_unlinks_by_title_even_when_list_is_stale(
        self, deletion_pipeline, document_store, object_store, read_model
    ):
        # imageIds never got the id, but the media document names the event
        await seed_media(document_store, object_store, MediaType.VIDEO, "clip.mp4", event="Trip")
        await seed_event(document_store, "evt1", "Trip", image_ids=[])
        item = (await _loaded(read_model)).find_media(MediaType.VIDEO, "clip.mp4")

        outcome = await deletion_pipeline.delete_media(item)

        assert outcome.success is True
        assert document_store.dump(EVENTS_COLLECTION)["evt1"]["imageIds"] == []

    @pytest.mark.asyncio
    async def test_never_raises_on_unexpected_errors(
        self, deletion_pipeline, document_store, object_store, read_model
    ):
        await seed_media(document_store, object_store, MediaType.IMAGE, "a.jpg")
        item = (await _loaded(read_model)).find_media(MediaType.IMAGE, "a.jpg")
        document_store.delete = AsyncMock(side_effect=RuntimeError("boom"))

        outcome = await deletion_pipeline.delete_media(item)

        assert outcome.success is False

    @pytest.mark.asyncio
    async def test_malformed_event_does_not_escape(
        self, deletion_pipeline, document_store, object_store, read_model, notifier
    ):
        await seed_media(document_store, object_store, MediaType.IMAGE, "a.jpg")
        await document_store.set(
            EVENTS_COLLECTION, "legacy", {"title": None, "date": "2024-07-04", "imageIds": []}
        )
        item = (await _loaded(read_model)).find_media(MediaType.IMAGE, "a.jpg")

        outcome = await deletion_pipeline.delete_media(item)

        assert outcome.success is True
        assert read_model.find_media(MediaType.IMAGE, "a.jpg") is None
        assert notifier.recent(1)[0].severity is NotificationSeverity.SUCCESS


@pytest.mark.integration
@pytest.mark.deletion
class TestDeleteEvent:
    @pytest.mark.asyncio
    async def test_clears_links_then_deletes(
        self, deletion_pipeline, document_store, object_store, read_model, notifier
    ):
        await seed_media(document_store, object_store, MediaType.IMAGE, "a.jpg", event="Trip")
        await seed_media(document_store, object_store, MediaType.VIDEO, "b.mp4", event="Trip")
        await seed_event(document_store, "evt1", "Trip", image_ids=["a.jpg", "b.mp4"])
        event = (await _loaded(read_model)).find_event("evt1")

        outcome = await deletion_pipeline.delete_event(event)

        assert outcome.success is True
        assert sorted(outcome.cleared_media_ids) == ["a.jpg", "b.mp4"]
        assert document_store.dump(IMAGES_COLLECTION)["a.jpg"]["event"] is None
        assert document_store.dump(VIDEOS_COLLECTION)["b.mp4"]["event"] is None
        assert document_store.dump(EVENTS_COLLECTION) == {}
        # Media survive an event delete
        assert "images/full/a.jpg" in object_store.keys()
        assert read_model.state.events == ()
        assert read_model.find_media(MediaType.IMAGE, "a.jpg").event is None
        assert notifier.recent(1)[0].message == MSG_EVENT_DELETED

    @pytest.mark.asyncio
    async def test_missing_document_is_skipped(
        self, deletion_pipeline, document_store, object_store
    ):
        await seed_media(document_store, object_store, MediaType.IMAGE, "a.jpg", event="Trip")
        await seed_event(document_store, "evt1", "Trip", image_ids=["a.jpg", "b.mp4"])
        event = Event(id="evt1", title="Trip", date="2024-07-04", image_ids=["a.jpg", "b.mp4"])
        batches = []
        original_batch = document_store.batch

        def recording_batch():
            batch = original_batch()
            batches.append(batch)
            return batch

        document_store.batch = recording_batch

        outcome = await deletion_pipeline.delete_event(event)

        assert outcome.success is True
        assert outcome.cleared_media_ids == ["a.jpg"]
        assert len(batches) == 1
        assert len(batches[0]) == 1
        assert document_store.dump(IMAGES_COLLECTION)["a.jpg"]["event"] is None
        assert document_store.dump(EVENTS_COLLECTION) == {}

    @pytest.mark.asyncio
    async def test_event_without_media_skips_batch(self, deletion_pipeline, document_store):
        await seed_event(document_store, "evt1", "Empty")
        document_store.batch = MagicMock()

        outcome = await deletion_pipeline.delete_event(Event(id="evt1", title="Empty"))

        assert outcome.success is True
        document_store.batch.assert_not_called()

    @pytest.mark.asyncio
    async def test_links_by_event_id_are_cleared(
        self, deletion_pipeline, document_store, object_store
    ):
        await seed_media(document_store, object_store, MediaType.IMAGE, "old.jpg", event="evt1")
        await seed_event(document_store, "evt1", "Trip")

        outcome = await deletion_pipeline.delete_event(Event(id="evt1", title="Trip"))

        assert outcome.cleared_media_ids == ["old.jpg"]
        assert document_store.dump(IMAGES_COLLECTION)["old.jpg"]["event"] is None

    @pytest.mark.asyncio
    async def test_batch_failure_keeps_event(
        self, deletion_pipeline, document_store, object_store, notifier
    ):
        await seed_media(document_store, object_store, MediaType.IMAGE, "a.jpg", event="Trip")
        await seed_event(document_store, "evt1", "Trip", image_ids=["a.jpg"])
        deletion_pipeline.reconciler.set_event_field = AsyncMock(
            side_effect=StoreFailureError("commit failed")
        )

        outcome = await deletion_pipeline.delete_event(Event(id="evt1", title="Trip"))

        assert outcome.success is False
        assert "evt1" in document_store.dump(EVENTS_COLLECTION)
        assert notifier.recent(1)[0].message == MSG_EVENT_DELETE_FAILED

    @pytest.mark.asyncio
    async def test_vanished_media_retries_once(self, deletion_pipeline, document_store):
        await seed_event(document_store, "evt1", "Trip")
        deletion_pipeline.reconciler.set_event_field = AsyncMock(
            side_effect=[DocumentNotFoundError("gone"), []]
        )

        outcome = await deletion_pipeline.delete_event(Event(id="evt1", title="Trip"))

        assert outcome.success is True
        assert deletion_pipeline.reconciler.set_event_field.await_count == 2


@pytest.mark.unit
@pytest.mark.deletion
class TestDeleteBinaries:
    @pytest.mark.asyncio
    async def test_not_found_is_tolerated(self, deletion_pipeline, object_store):
        object_store.delete = AsyncMock(side_effect=ObjectNotFoundError("gone"))

        await deletion_pipeline._delete_binaries("images/full/x.jpg", "images/thumb/x.jpg")

        assert object_store.delete.await_count == 2
