"""
Services module for the media gallery.

Business logic lives here; routers only adapt HTTP requests onto these
services.

Available Services:
- IdentifierResolver: collision-free media ids
- thumbnail_pipeline: image thumbnails and video posters
- DateInference: capture date from EXIF / mvhd metadata
- UploadPipeline: event creation and file ingestion
- DeletionPipeline: media and event removal cascades
- EventLinkReconciler: event <-> media link discovery
- GalleryReadModel: cached snapshot of the stores
- SearchService: token filter over the snapshot
- ConfirmationGate / DeleteController: arm-then-confirm deletes
- UploadFormState: date source tracking for the upload form
- MetadataEditService: date/event edits and title rename cascade
- NotificationCenter: user-visible notifications
"""
