# media_gallery/services/upload_form.py
"""
Upload form state.

Tracks where the form's date came from and decides when Date Inference
runs:

- selecting files infers a date from the first file, unless an existing
  event is selected (the event's date wins) or the probe went stale
  because newer files were selected, an event was picked or a date was
  typed while it ran
- selecting an event takes its date, except when the current date was
  inferred from metadata: an inferred date is never overwritten after
  the fact
- typing a date (or an event name) drops the event selection
"""

from typing import List, Optional, Sequence

from ..enums import DateSource, LogEmoji, LoggerName, LogSource
from ..models.event_model import Event, EventCreate
from ..models.pipeline_models import SourceFile, UploadRequest
from .date_inference import DateInference
from .logger import get_service_logger

logger = get_service_logger(LoggerName.DATE_INFERENCE, LogSource.SYSTEM, LogEmoji.EVENT)


class UploadFormState:
    def __init__(self, date_inference: Optional[DateInference] = None):
        self.date_inference = date_inference or DateInference()
        self.files: List[SourceFile] = []
        self.date = ""
        self.date_source = DateSource.NONE
        self.selected_event: Optional[Event] = None
        self.event_name = ""
        self.emoji_or_dot = ""
        self.caption = ""
        self._probe_generation = 0

    async def select_files(self, files: Sequence[SourceFile]) -> Optional[str]:
        """Replace the selection; returns the inferred date when one was applied."""
        self.files = list(files)
        self._probe_generation += 1
        generation = self._probe_generation

        if not self.files or self.selected_event is not None:
            return None

        source_at_start = self.date_source
        source = self.files[0]
        inferred = await self.date_inference.infer_async(source)
        if not inferred:
            return None
        if (
            generation != self._probe_generation
            or self.selected_event is not None
            or self.date_source != source_at_start
        ):
            logger.debug(f"Discarding stale date probe for {source.name}")
            return None

        self.date = inferred
        self.date_source = DateSource.METADATA
        return inferred

    def select_event(self, event: Event) -> None:
        self.selected_event = event
        self.event_name = event.title
        if self.date_source is DateSource.METADATA and self.date:
            logger.debug(f"Keeping inferred date {self.date} over event date {event.date}")
            return
        self.date = event.date
        self.date_source = DateSource.EVENT

    def set_date(self, value: str) -> None:
        self.date = value.strip()
        self.date_source = DateSource.MANUAL if self.date else DateSource.NONE
        self.selected_event = None

    def set_event_name(self, name: str) -> None:
        self.event_name = name
        self.selected_event = None

    def to_request(self) -> UploadRequest:
        new_event = None
        if self.selected_event is None and self.event_name.strip():
            new_event = EventCreate(
                date=self.date,
                title=self.event_name,
                emoji_or_dot=self.emoji_or_dot or None,
            )
        return UploadRequest(
            files=self.files,
            date=self.date,
            event_id=self.selected_event.id if self.selected_event else None,
            caption=self.caption or None,
            new_event=new_event,
        )

    def reset(self) -> None:
        """Clear the form after a successful upload."""
        self.files = []
        self.date = ""
        self.date_source = DateSource.NONE
        self.selected_event = None
        self.event_name = ""
        self.emoji_or_dot = ""
        self.caption = ""
        self._probe_generation += 1
