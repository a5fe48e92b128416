# media_gallery/services/date_inference.py
"""
Date Inference

Best-effort capture date of an upload, used to pre-fill the upload date
when no existing event is selected.

Sources, in order:
1. JPEG EXIF: DateTimeOriginal, DateTimeDigitized, then IFD0 DateTime
2. MP4/MOV: creation time of the ``mvhd`` box inside ``moov``
3. The file's last-modified time, when the client supplied one

Never raises; unreadable metadata simply yields ``None``.
"""

import asyncio
import struct
from io import BytesIO
from typing import Iterator, Optional, Tuple

from PIL import ExifTags, Image

from ..enums import LogEmoji, LoggerName, LogSource
from ..models.pipeline_models import SourceFile
from ..utils.filename_utils import split_filename
from ..utils.time_utils import (
    parse_exif_date,
    quicktime_seconds_to_datetime,
    to_iso_date,
)
from .logger import get_service_logger

logger = get_service_logger(LoggerName.DATE_INFERENCE, LogSource.PIPELINE, LogEmoji.EVENT)

JPEG_EXTENSIONS = ("jpg", "jpeg")
JPEG_CONTENT_TYPES = ("image/jpeg", "image/jpg")
QUICKTIME_EXTENSIONS = ("mp4", "mov")
QUICKTIME_CONTENT_TYPES = ("video/mp4", "video/quicktime")

# Box walks stop after this many siblings to bound work on garbage input
MAX_BOXES = 512

_PARSE_ERRORS = (
    OSError,
    ValueError,
    SyntaxError,
    KeyError,
    IndexError,
    TypeError,
    struct.error,
    Image.DecompressionBombError,
)


def _iter_boxes(data: bytes, start: int, end: int) -> Iterator[Tuple[str, int, int]]:
    """Yield ``(type, payload_start, box_end)`` for each box in ``data[start:end]``."""
    offset = start
    for _ in range(MAX_BOXES):
        if offset + 8 > end:
            return
        size, box_type = struct.unpack_from(">I4s", data, offset)
        header_size = 8
        if size == 1:
            if offset + 16 > end:
                return
            (size,) = struct.unpack_from(">Q", data, offset + 8)
            header_size = 16
        elif size == 0:
            # Box extends to the end of the enclosing container
            size = end - offset
        if size < header_size:
            return
        yield box_type.decode("latin-1"), offset + header_size, min(offset + size, end)
        offset += size


def parse_mvhd_creation_date(data: bytes) -> Optional[str]:
    """Creation date of the first ``moov/mvhd`` box, as ``YYYY-MM-DD``."""
    for box_type, payload_start, box_end in _iter_boxes(data, 0, len(data)):
        if box_type != "moov":
            continue
        for child_type, child_start, child_end in _iter_boxes(data, payload_start, box_end):
            if child_type != "mvhd":
                continue
            version = data[child_start]
            if version == 1:
                (seconds,) = struct.unpack_from(">Q", data, child_start + 4)
            else:
                (seconds,) = struct.unpack_from(">I", data, child_start + 4)
            created = quicktime_seconds_to_datetime(seconds)
            return to_iso_date(created) if created else None
    return None


def parse_jpeg_exif_date(data: bytes) -> Optional[str]:
    with Image.open(BytesIO(data)) as img:
        exif = img.getexif()
        exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
        for tag in (ExifTags.Base.DateTimeOriginal, ExifTags.Base.DateTimeDigitized):
            parsed = parse_exif_date(exif_ifd.get(tag))
            if parsed:
                return parsed
        return parse_exif_date(exif.get(ExifTags.Base.DateTime))


class DateInference:
    @staticmethod
    def _is_likely_jpeg(source: SourceFile) -> bool:
        extension = split_filename(source.name)[1].lower()
        return extension in JPEG_EXTENSIONS or source.content_type.lower() in JPEG_CONTENT_TYPES

    @staticmethod
    def _is_likely_quicktime(source: SourceFile) -> bool:
        extension = split_filename(source.name)[1].lower()
        return (
            extension in QUICKTIME_EXTENSIONS
            or source.content_type.lower() in QUICKTIME_CONTENT_TYPES
        )

    def infer(self, source: SourceFile) -> Optional[str]:
        """Return the inferred ``YYYY-MM-DD`` date of ``source`` or ``None``."""
        try:
            if self._is_likely_jpeg(source):
                parsed = parse_jpeg_exif_date(source.data)
                if parsed:
                    logger.debug(f"{source.name}: date {parsed} from EXIF")
                    return parsed

            if self._is_likely_quicktime(source):
                parsed = parse_mvhd_creation_date(source.data)
                if parsed:
                    logger.debug(f"{source.name}: date {parsed} from mvhd")
                    return parsed
        except _PARSE_ERRORS as e:
            logger.debug(
                f"{source.name}: unreadable embedded metadata",
                extra_context={"error": str(e)},
            )

        if source.last_modified is not None:
            fallback = to_iso_date(source.last_modified)
            logger.debug(f"{source.name}: date {fallback} from last-modified time")
            return fallback

        return None

    async def infer_async(self, source: SourceFile) -> Optional[str]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self.infer, source)
