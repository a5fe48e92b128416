# media_gallery/models/pipeline_models.py
"""
Inputs and outcomes of the upload, deletion and metadata pipelines.

Every pipeline entry point returns one of the outcome models below instead
of raising, so callers (routers, tests) can inspect what happened.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, computed_field

from ..enums import GateState, MediaType
from ..utils.filename_utils import split_filename
from .event_model import EventCreate


class SourceFile(BaseModel):
    """A file selected for upload, fully read into memory."""

    name: str
    content_type: str = "application/octet-stream"
    data: bytes = Field(repr=False)
    last_modified: Optional[datetime] = None

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def stem(self) -> str:
        return split_filename(self.name)[0]

    @property
    def extension(self) -> str:
        return split_filename(self.name)[1]


class UploadRequest(BaseModel):
    """One upload selection: files plus the shared date/event/caption."""

    files: List[SourceFile] = Field(default_factory=list)
    date: str = ""
    event_id: Optional[str] = Field(
        default=None, description="Existing event to link the files to"
    )
    caption: Optional[str] = None
    new_event: Optional[EventCreate] = Field(
        default=None, description="Event to create before uploading"
    )


class FileUploadResult(BaseModel):
    file_name: str
    success: bool
    media_id: Optional[str] = None
    media_type: Optional[MediaType] = None
    full_path: Optional[str] = None
    thumb_path: Optional[str] = None
    error: Optional[str] = None


class UploadBatchResult(BaseModel):
    """Aggregate of one upload selection once every file has settled."""

    results: List[FileUploadResult] = Field(default_factory=list)
    created_event_id: Optional[str] = None
    message: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success_count(self) -> int:
        return sum(1 for result in self.results if result.success)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def failure_count(self) -> int:
        return sum(1 for result in self.results if not result.success)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def success(self) -> bool:
        return self.success_count > 0


class EventCreateOutcome(BaseModel):
    success: bool
    event_id: Optional[str] = None
    message: str


class DeleteOutcome(BaseModel):
    success: bool
    target_id: str
    message: str
    cleared_media_ids: List[str] = Field(
        default_factory=list,
        description="Media whose event link was cleared (event deletes only)",
    )


class MetadataEditOutcome(BaseModel):
    success: bool
    target_id: str
    message: str
    updated_media_ids: List[str] = Field(default_factory=list)


class DeleteRequestResult(BaseModel):
    """What one activation of a delete control did."""

    state: GateState
    target_key: str
    prompt: str = Field(default="", description="Confirmation text shown while armed")
    outcome: Optional[DeleteOutcome] = None
