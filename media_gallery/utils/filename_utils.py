# media_gallery/utils/filename_utils.py
"""
Filename helpers shared by the identifier resolver and the upload pipeline.
"""

from typing import Optional, Tuple

from ..constants import (
    DEFAULT_UPLOAD_STEM,
    IMAGE_EXTENSION,
    IMAGE_FULL_ROOT,
    IMAGE_THUMB_ROOT,
    SUPPORTED_VIDEO_EXTENSIONS,
    VIDEO_CONTENT_TYPES,
    VIDEO_FULL_ROOT,
    VIDEO_THUMB_ROOT,
)
from ..enums import MediaType


def split_filename(name: str) -> Tuple[str, str]:
    """
    Split ``name`` into stem and extension at the last dot.

    A name starting with its only dot has an empty stem.

    >>> split_filename("beach.jpg")
    ('beach', 'jpg')
    >>> split_filename("archive.tar.gz")
    ('archive.tar', 'gz')
    >>> split_filename(".jpg")
    ('', 'jpg')
    """
    dot = name.rfind(".")
    if dot < 0:
        return name, ""
    return name[:dot], name[dot + 1 :]


def join_filename(stem: str, extension: str) -> str:
    return f"{stem}.{extension}" if extension else stem


def suffixed_filename(name: str, counter: int) -> str:
    """``beach.jpg`` with counter 2 becomes ``beach-2.jpg``."""
    stem, extension = split_filename(name)
    return join_filename(f"{stem}-{counter}", extension)


def sanitize_stem(stem: str) -> str:
    """Strip path separators and whitespace; empty stems become ``upload``."""
    cleaned = stem.replace("/", "_").replace("\\", "_").strip()
    return cleaned or DEFAULT_UPLOAD_STEM


def get_video_extension(name: str, content_type: Optional[str] = None) -> Optional[str]:
    """Supported video extension for a file, from its name or content type."""
    extension = split_filename(name)[1].lower()
    if extension in SUPPORTED_VIDEO_EXTENSIONS:
        return extension
    if content_type:
        for candidate, mime in VIDEO_CONTENT_TYPES.items():
            if mime == content_type.lower():
                return candidate
    return None


def is_video_file(name: str, content_type: Optional[str] = None) -> bool:
    """True when the file looks like a video at all, supported or not."""
    if content_type and content_type.lower().startswith("video/"):
        return True
    return get_video_extension(name) is not None


def media_type_for(name: str, content_type: Optional[str] = None) -> MediaType:
    return MediaType.VIDEO if is_video_file(name, content_type) else MediaType.IMAGE


def image_id_for(name: str) -> str:
    """Images are always re-encoded, so their id always ends in ``.jpg``."""
    return join_filename(sanitize_stem(split_filename(name)[0]), IMAGE_EXTENSION)


def video_id_for(name: str, extension: str) -> str:
    return join_filename(sanitize_stem(split_filename(name)[0]), extension)


def poster_name_for(video_id: str) -> str:
    """``clip.mp4`` -> ``clip.jpg``"""
    return join_filename(split_filename(video_id)[0], IMAGE_EXTENSION)


def storage_keys_for(media_type: MediaType, media_id: str) -> Tuple[str, str]:
    """Object store keys (full, thumb) of a media item."""
    if media_type is MediaType.IMAGE:
        return f"{IMAGE_FULL_ROOT}/{media_id}", f"{IMAGE_THUMB_ROOT}/{media_id}"
    return f"{VIDEO_FULL_ROOT}/{media_id}", f"{VIDEO_THUMB_ROOT}/{poster_name_for(media_id)}"
