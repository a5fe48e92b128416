# tests/conftest.py
"""
Pytest configuration and fixtures shared by the unit and integration suites.

Everything runs against the in-memory stores with a frozen clock. Sample
media comes from ``media_factories``.
"""

from unittest.mock import AsyncMock

import pytest

from media_factories import FIXED_NOW, make_jpeg, make_png
from media_gallery.services.event_link_reconciler import EventLinkReconciler
from media_gallery.services.gallery_read_model import GalleryReadModel
from media_gallery.services.identifier_resolver import IdentifierResolver
from media_gallery.services.notification_service import NotificationCenter
from media_gallery.services.thumbnail_pipeline import RenderedPoster, ThumbnailPipeline
from media_gallery.stores import InMemoryDocumentStore, InMemoryObjectStore


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests without I/O")
    config.addinivalue_line("markers", "integration: pipelines wired end to end")
    config.addinivalue_line("markers", "upload: upload pipeline behaviour")
    config.addinivalue_line("markers", "deletion: deletion pipeline behaviour")
    config.addinivalue_line("markers", "thumbnail: thumbnail and poster rendering")


# ============================================================================
# MEDIA BYTES
# ============================================================================


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_jpeg()


@pytest.fixture
def png_bytes() -> bytes:
    return make_png()


# ============================================================================
# STORES AND SERVICES
# ============================================================================


@pytest.fixture
def document_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore(clock=lambda: FIXED_NOW)


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore(clock=lambda: FIXED_NOW)


@pytest.fixture
def notifier() -> NotificationCenter:
    """Doubles as a recording notification sink."""
    return NotificationCenter(history_size=100)


@pytest.fixture
def read_model(document_store, object_store) -> GalleryReadModel:
    return GalleryReadModel(document_store, object_store)


@pytest.fixture
def reconciler(document_store) -> EventLinkReconciler:
    return EventLinkReconciler(document_store)


@pytest.fixture
def resolver(document_store, object_store) -> IdentifierResolver:
    return IdentifierResolver(document_store, object_store)


@pytest.fixture
def thumbnails() -> ThumbnailPipeline:
    """Real image rendering; the video poster step is stubbed so fake MP4 bytes upload."""
    pipeline = ThumbnailPipeline()
    pipeline.generate_video_poster = AsyncMock(
        return_value=RenderedPoster(thumb_data=make_jpeg((320, 180)), duration_seconds=12)
    )
    return pipeline
