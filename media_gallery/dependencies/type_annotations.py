# media_gallery/dependencies/type_annotations.py
"""Annotated aliases for FastAPI dependency injection."""

from typing import Annotated

from fastapi import Depends

from ..services.date_inference import DateInference
from ..services.delete_controller import DeleteController
from ..services.gallery_read_model import GalleryReadModel
from ..services.metadata_edit_service import MetadataEditService
from ..services.notification_service import NotificationCenter
from ..services.search_service import SearchService
from ..services.upload_pipeline import UploadPipeline
from ..stores.protocols import DocumentStore, ObjectStore
from .services import (
    get_date_inference,
    get_delete_controller,
    get_document_store,
    get_metadata_edit_service,
    get_notification_center,
    get_object_store,
    get_read_model,
    get_search_service,
    get_upload_pipeline,
)

# Stores
DocumentStoreDep = Annotated[DocumentStore, Depends(get_document_store)]
ObjectStoreDep = Annotated[ObjectStore, Depends(get_object_store)]

# Services
NotificationCenterDep = Annotated[NotificationCenter, Depends(get_notification_center)]
GalleryReadModelDep = Annotated[GalleryReadModel, Depends(get_read_model)]
DateInferenceDep = Annotated[DateInference, Depends(get_date_inference)]
SearchServiceDep = Annotated[SearchService, Depends(get_search_service)]
MetadataEditServiceDep = Annotated[MetadataEditService, Depends(get_metadata_edit_service)]

# Pipelines
UploadPipelineDep = Annotated[UploadPipeline, Depends(get_upload_pipeline)]
DeleteControllerDep = Annotated[DeleteController, Depends(get_delete_controller)]
