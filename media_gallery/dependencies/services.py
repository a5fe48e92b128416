# media_gallery/dependencies/services.py
"""
Service factories.

Stores are picked from configuration; everything above them is wired from
the registry so that replacing a store swaps it for every consumer.
"""

from ..config import settings
from ..enums import DocumentStoreBackend, ObjectStoreBackend
from ..exceptions import ConfigurationError
from ..services.confirmation_gate import ConfirmationGate
from ..services.date_inference import DateInference
from ..services.delete_controller import DeleteController
from ..services.deletion_pipeline import DeletionPipeline
from ..services.event_link_reconciler import EventLinkReconciler
from ..services.gallery_read_model import GalleryReadModel
from ..services.identifier_resolver import IdentifierResolver
from ..services.metadata_edit_service import MetadataEditService
from ..services.notification_service import NotificationCenter
from ..services.search_service import SearchService
from ..services.thumbnail_pipeline import ThumbnailPipeline
from ..services.upload_pipeline import UploadPipeline
from ..stores import (
    FileSystemObjectStore,
    InMemoryDocumentStore,
    InMemoryObjectStore,
    PostgresDocumentStore,
)
from ..stores.protocols import DocumentStore, ObjectStore
from .registry import get_singleton_service, register_singleton_factory

DOCUMENT_STORE = "document_store"
OBJECT_STORE = "object_store"
NOTIFICATION_CENTER = "notification_center"
READ_MODEL = "read_model"
RECONCILER = "event_link_reconciler"
THUMBNAIL_PIPELINE = "thumbnail_pipeline"
IDENTIFIER_RESOLVER = "identifier_resolver"
DATE_INFERENCE = "date_inference"
UPLOAD_PIPELINE = "upload_pipeline"
DELETION_PIPELINE = "deletion_pipeline"
CONFIRMATION_GATE = "confirmation_gate"
DELETE_CONTROLLER = "delete_controller"
METADATA_EDIT_SERVICE = "metadata_edit_service"
SEARCH_SERVICE = "search_service"


# Stores


def _create_document_store() -> DocumentStore:
    if settings.document_store_backend is DocumentStoreBackend.POSTGRES:
        if not settings.database_url:
            raise ConfigurationError(
                "DATABASE_URL is required for the postgres document store",
                operation="create_document_store",
            )
        return PostgresDocumentStore(
            settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            timeout=settings.db_pool_timeout,
        )
    return InMemoryDocumentStore()


def _create_object_store() -> ObjectStore:
    if settings.object_store_backend is ObjectStoreBackend.FILESYSTEM:
        return FileSystemObjectStore(settings.objects_directory, settings.public_base_url)
    return InMemoryObjectStore()


register_singleton_factory(DOCUMENT_STORE, _create_document_store)
register_singleton_factory(OBJECT_STORE, _create_object_store)


def get_document_store() -> DocumentStore:
    return get_singleton_service(DOCUMENT_STORE)


def get_object_store() -> ObjectStore:
    return get_singleton_service(OBJECT_STORE)


# Shared services

register_singleton_factory(
    NOTIFICATION_CENTER,
    lambda: NotificationCenter(history_size=settings.notification_history_size),
)
register_singleton_factory(
    READ_MODEL, lambda: GalleryReadModel(get_document_store(), get_object_store())
)
register_singleton_factory(RECONCILER, lambda: EventLinkReconciler(get_document_store()))
register_singleton_factory(THUMBNAIL_PIPELINE, lambda: ThumbnailPipeline.from_settings(settings))
register_singleton_factory(
    IDENTIFIER_RESOLVER,
    lambda: IdentifierResolver(get_document_store(), get_object_store()),
)
register_singleton_factory(DATE_INFERENCE, DateInference)
register_singleton_factory(SEARCH_SERVICE, SearchService)


def get_notification_center() -> NotificationCenter:
    return get_singleton_service(NOTIFICATION_CENTER)


def get_read_model() -> GalleryReadModel:
    return get_singleton_service(READ_MODEL)


def get_reconciler() -> EventLinkReconciler:
    return get_singleton_service(RECONCILER)


def get_thumbnail_pipeline() -> ThumbnailPipeline:
    return get_singleton_service(THUMBNAIL_PIPELINE)


def get_identifier_resolver() -> IdentifierResolver:
    return get_singleton_service(IDENTIFIER_RESOLVER)


def get_date_inference() -> DateInference:
    return get_singleton_service(DATE_INFERENCE)


def get_search_service() -> SearchService:
    return get_singleton_service(SEARCH_SERVICE)


# Pipelines


def _create_upload_pipeline() -> UploadPipeline:
    return UploadPipeline(
        document_store=get_document_store(),
        object_store=get_object_store(),
        resolver=get_identifier_resolver(),
        thumbnails=get_thumbnail_pipeline(),
        read_model=get_read_model(),
        notifier=get_notification_center(),
        max_concurrent_uploads=settings.max_concurrent_uploads,
    )


def _create_deletion_pipeline() -> DeletionPipeline:
    return DeletionPipeline(
        document_store=get_document_store(),
        object_store=get_object_store(),
        reconciler=get_reconciler(),
        read_model=get_read_model(),
        notifier=get_notification_center(),
    )


register_singleton_factory(UPLOAD_PIPELINE, _create_upload_pipeline)
register_singleton_factory(DELETION_PIPELINE, _create_deletion_pipeline)
register_singleton_factory(
    CONFIRMATION_GATE,
    lambda: ConfirmationGate(timeout_seconds=settings.delete_confirm_timeout_seconds),
)
register_singleton_factory(
    DELETE_CONTROLLER,
    lambda: DeleteController(
        get_confirmation_gate(), get_deletion_pipeline(), get_read_model()
    ),
)
register_singleton_factory(
    METADATA_EDIT_SERVICE,
    lambda: MetadataEditService(
        get_document_store(),
        get_reconciler(),
        get_read_model(),
        get_notification_center(),
    ),
)


def get_upload_pipeline() -> UploadPipeline:
    return get_singleton_service(UPLOAD_PIPELINE)


def get_deletion_pipeline() -> DeletionPipeline:
    return get_singleton_service(DELETION_PIPELINE)


def get_confirmation_gate() -> ConfirmationGate:
    return get_singleton_service(CONFIRMATION_GATE)


def get_delete_controller() -> DeleteController:
    return get_singleton_service(DELETE_CONTROLLER)


def get_metadata_edit_service() -> MetadataEditService:
    return get_singleton_service(METADATA_EDIT_SERVICE)
