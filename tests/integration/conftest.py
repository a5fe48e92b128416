# tests/integration/conftest.py
"""
Fixtures for the integration suite: the pipelines wired to the shared
in-memory stores, and an HTTP client over the real application.
"""

import pytest
from fastapi.testclient import TestClient

from media_gallery.config import settings
from media_gallery.dependencies import DOCUMENT_STORE, OBJECT_STORE, get_registry
from media_gallery.main import app
from media_gallery.services.deletion_pipeline import DeletionPipeline
from media_gallery.services.upload_pipeline import UploadPipeline
from media_gallery.stores import InMemoryDocumentStore, InMemoryObjectStore


@pytest.fixture
def upload_pipeline(
    document_store, object_store, resolver, thumbnails, read_model, notifier
) -> UploadPipeline:
    return UploadPipeline(
        document_store=document_store,
        object_store=object_store,
        resolver=resolver,
        thumbnails=thumbnails,
        read_model=read_model,
        notifier=notifier,
    )


@pytest.fixture
def deletion_pipeline(
    document_store, object_store, reconciler, read_model, notifier
) -> DeletionPipeline:
    return DeletionPipeline(
        document_store=document_store,
        object_store=object_store,
        reconciler=reconciler,
        read_model=read_model,
        notifier=notifier,
    )


@pytest.fixture
def app_stores():
    return InMemoryDocumentStore(), InMemoryObjectStore()


@pytest.fixture
def test_client(app_stores, monkeypatch, tmp_path):
    """Test client whose registry is wired to fresh in-memory stores."""
    monkeypatch.setattr(settings, "data_directory", str(tmp_path))
    registry = get_registry()
    registry.clear_all_services()
    registry.replace_service(DOCUMENT_STORE, app_stores[0])
    registry.replace_service(OBJECT_STORE, app_stores[1])
    with TestClient(app) as client:
        yield client
    registry.clear_all_services()
