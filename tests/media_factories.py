# tests/media_factories.py
"""
Sample media and seeded documents shared by the unit and integration suites.

Images are generated with Pillow; MP4 headers are assembled by hand so date
inference can be exercised without a video encoder.
"""

import struct
from datetime import datetime, timezone
from io import BytesIO
from typing import Optional, Tuple

from PIL import ExifTags, Image, ImageDraw

from media_gallery.constants import EVENTS_COLLECTION, FIELD_CREATED_AT
from media_gallery.enums import MediaType
from media_gallery.models.pipeline_models import SourceFile
from media_gallery.utils.filename_utils import storage_keys_for

FIXED_NOW = datetime(2024, 7, 5, 12, 0, 0, tzinfo=timezone.utc)


def make_jpeg(
    size: Tuple[int, int] = (1600, 1200),
    color: str = "skyblue",
    exif_date: Optional[str] = None,
) -> bytes:
    """JPEG bytes, optionally carrying an EXIF DateTimeOriginal like ``2024:07:04 18:30:00``."""
    img = Image.new("RGB", size, color=color)
    draw = ImageDraw.Draw(img)
    draw.rectangle([10, 10, size[0] // 2, size[1] // 2], fill="lightgreen")
    buffer = BytesIO()
    if exif_date:
        exif = Image.Exif()
        exif[ExifTags.IFD.Exif] = {ExifTags.Base.DateTimeOriginal: exif_date}
        img.save(buffer, "JPEG", quality=95, exif=exif)
    else:
        img.save(buffer, "JPEG", quality=95)
    return buffer.getvalue()


def make_png(size: Tuple[int, int] = (800, 600)) -> bytes:
    img = Image.new("RGBA", size, color=(255, 0, 0, 128))
    buffer = BytesIO()
    img.save(buffer, "PNG")
    return buffer.getvalue()


def _box(box_type: bytes, payload: bytes) -> bytes:
    return struct.pack(">I4s", 8 + len(payload), box_type) + payload


def make_mp4_header(creation_seconds: int, version: int = 0) -> bytes:
    """``ftyp`` + ``moov/mvhd`` with the given QuickTime creation time."""
    if version == 1:
        mvhd = bytes([1, 0, 0, 0]) + struct.pack(">QQIQ", creation_seconds, creation_seconds, 1000, 0)
    else:
        mvhd = bytes([0, 0, 0, 0]) + struct.pack(">IIII", creation_seconds, creation_seconds, 1000, 0)
    ftyp = _box(b"ftyp", b"isom" + struct.pack(">I", 512) + b"isomiso2")
    return ftyp + _box(b"moov", _box(b"mvhd", mvhd + bytes(80)))


def make_source(name: str, data: bytes, content_type: str = "image/jpeg", **kwargs) -> SourceFile:
    return SourceFile(name=name, content_type=content_type, data=data, **kwargs)


async def seed_media(
    document_store,
    object_store,
    media_type: MediaType,
    media_id: str,
    date: str = "2024-07-04",
    event: Optional[str] = None,
    with_binaries: bool = True,
) -> Tuple[str, str]:
    """Write a media document (and its objects) the way an upload would."""
    full_key, thumb_key = storage_keys_for(media_type, media_id)
    doc = {"id": media_id, "type": media_type.value, "date": date, "thumbPath": thumb_key}
    doc["fullPath" if media_type is MediaType.IMAGE else "videoPath"] = full_key
    if event is not None:
        doc["event"] = event
    await document_store.set(media_type.collection, media_id, doc)
    if with_binaries:
        await object_store.upload(full_key, b"full", "application/octet-stream")
        await object_store.upload(thumb_key, b"thumb", "image/jpeg")
    return full_key, thumb_key


async def seed_event(
    document_store,
    event_id: str,
    title: str,
    date: str = "2024-07-04",
    image_ids=(),
) -> None:
    await document_store.set(
        EVENTS_COLLECTION,
        event_id,
        {"title": title, "date": date, "imageIds": list(image_ids), FIELD_CREATED_AT: FIXED_NOW},
    )
