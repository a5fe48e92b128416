# media_gallery/dependencies/__init__.py
"""
Dependency injection for the media gallery API.

- ``registry``: singleton ServiceRegistry
- ``services``: factories and getters, store backends chosen from settings
- ``type_annotations``: ``Annotated[..., Depends(...)]`` aliases for routers
"""

from .registry import ServiceRegistry, get_registry
from .services import (
    DOCUMENT_STORE,
    OBJECT_STORE,
    get_confirmation_gate,
    get_date_inference,
    get_delete_controller,
    get_deletion_pipeline,
    get_document_store,
    get_identifier_resolver,
    get_metadata_edit_service,
    get_notification_center,
    get_object_store,
    get_read_model,
    get_reconciler,
    get_search_service,
    get_thumbnail_pipeline,
    get_upload_pipeline,
)
from .type_annotations import (
    DateInferenceDep,
    DeleteControllerDep,
    DocumentStoreDep,
    GalleryReadModelDep,
    MetadataEditServiceDep,
    NotificationCenterDep,
    ObjectStoreDep,
    SearchServiceDep,
    UploadPipelineDep,
)

__all__ = [
    "ServiceRegistry",
    "get_registry",
    "DOCUMENT_STORE",
    "OBJECT_STORE",
    "get_confirmation_gate",
    "get_date_inference",
    "get_delete_controller",
    "get_deletion_pipeline",
    "get_document_store",
    "get_identifier_resolver",
    "get_metadata_edit_service",
    "get_notification_center",
    "get_object_store",
    "get_read_model",
    "get_reconciler",
    "get_search_service",
    "get_thumbnail_pipeline",
    "get_upload_pipeline",
    # Type annotations
    "DateInferenceDep",
    "DeleteControllerDep",
    "DocumentStoreDep",
    "GalleryReadModelDep",
    "MetadataEditServiceDep",
    "NotificationCenterDep",
    "ObjectStoreDep",
    "SearchServiceDep",
    "UploadPipelineDep",
]
