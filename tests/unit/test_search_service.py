#!/usr/bin/env python3
"""Tests for SearchService over a GalleryState snapshot."""

import pytest

from media_gallery.models.event_model import Event
from media_gallery.models.gallery_model import GalleryState
from media_gallery.models.media_model import ImageItem, VideoItem
from media_gallery.services.search_service import SearchService, tokenize


def _image(media_id, date, event=None, caption=None):
    return ImageItem(
        id=media_id,
        date=date,
        event=event,
        caption=caption,
        full_path=f"images/full/{media_id}",
        thumb_path=f"images/thumb/{media_id}",
    )


@pytest.fixture
def state():
    return GalleryState(
        images=(
            _image("beach.jpg", "2024-07-04", event="Summer Trip", caption="Sunset swim"),
            _image("tree.jpg", "2023-12-25", event="Christmas"),
        ),
        videos=(
            VideoItem(
                id="waves.mp4",
                date="2024-07-04",
                event="Summer Trip",
                video_path="videos/full/waves.mp4",
                thumb_path="videos/thumb/waves.jpg",
            ),
        ),
        events=(
            Event(id="e1", title="Summer Trip", date="2024-07-04", image_ids=["beach.jpg", "waves.mp4"]),
            Event(id="e2", title="Christmas", date="2023-12-25", image_ids=["tree.jpg"]),
        ),
        loaded=True,
    )


@pytest.mark.unit
class TestSearchService:
    def test_iso_date(self, state):
        result = SearchService().search(state, "2024-07-04")

        assert [i.id for i in result.images] == ["beach.jpg"]
        assert [v.id for v in result.videos] == ["waves.mp4"]
        assert [e.id for e in result.events] == ["e1"]
        assert result.no_match is False

    def test_title_is_case_insensitive(self, state):
        by_date = SearchService().search(state, "2024-07-04")
        by_title = SearchService().search(state, "summer")

        assert by_title.images == by_date.images
        assert by_title.videos == by_date.videos
        assert by_title.events == by_date.events

    def test_no_match(self, state):
        result = SearchService().search(state, "halloween")

        assert result.total == 0
        assert result.no_match is True

    def test_empty_query_returns_everything(self, state):
        result = SearchService().search(state, "   ")

        assert result.total == 5
        assert result.no_match is False

    @pytest.mark.parametrize("query", ["07/04/2024", "7/4/2024", "jul 4, 2024"])
    def test_other_date_spellings(self, state, query):
        result = SearchService().search(state, query)

        assert [e.id for e in result.events] == ["e1"]

    def test_all_tokens_must_match(self, state):
        result = SearchService().search(state, "summer sunset")

        assert [i.id for i in result.images] == ["beach.jpg"]
        assert result.videos == ()

    def test_filename_and_linked_ids(self, state):
        result = SearchService().search(state, "tree.jpg")

        assert [i.id for i in result.images] == ["tree.jpg"]
        assert [e.id for e in result.events] == ["e2"]

    def test_event_stored_by_id_matches_title(self):
        legacy = GalleryState(
            images=(_image("old.jpg", "2020-01-01", event="e9"),),
            events=(Event(id="e9", title="Graduation", date="2020-01-01"),),
        )

        result = SearchService().search(legacy, "graduation")

        assert [i.id for i in result.images] == ["old.jpg"]

    def test_tokenize(self):
        assert tokenize("  Summer   TRIP ") == ["summer", "trip"]
        assert tokenize(None) == []
