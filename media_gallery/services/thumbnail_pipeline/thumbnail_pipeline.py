# media_gallery/services/thumbnail_pipeline/thumbnail_pipeline.py
"""
Thumbnail Pipeline

Single entry point the upload pipeline uses to turn a selected file into
the binaries it stores: the full-size object and its preview. Decoding and
encoding are CPU-bound and run in the default executor so concurrent
uploads keep the event loop responsive.
"""

import asyncio
from dataclasses import dataclass
from functools import partial
from typing import Optional

from ...config import Settings
from ...constants import JPEG_CONTENT_TYPE, VIDEO_CONTENT_TYPES
from ...enums import LoggerName, LogSource, MediaType
from ...exceptions import UnsupportedMediaError
from ...models.pipeline_models import SourceFile
from ...utils.filename_utils import get_video_extension, media_type_for
from ..logger import get_service_logger
from .generators import (
    ImageThumbnailGenerator,
    RenderedImage,
    RenderedPoster,
    VideoPosterGenerator,
)

logger = get_service_logger(LoggerName.THUMBNAIL_PIPELINE, LogSource.PIPELINE)


@dataclass
class RenderedMedia:
    """Binaries produced for one source file."""

    media_type: MediaType
    full_data: bytes
    full_content_type: str
    thumb_data: bytes
    extension: str
    duration_seconds: Optional[int] = None


class ThumbnailPipeline:
    def __init__(
        self,
        image_generator: Optional[ImageThumbnailGenerator] = None,
        poster_generator: Optional[VideoPosterGenerator] = None,
    ):
        self.image_generator = image_generator or ImageThumbnailGenerator()
        self.poster_generator = poster_generator or VideoPosterGenerator()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ThumbnailPipeline":
        return cls(
            image_generator=ImageThumbnailGenerator(
                max_edge=settings.thumbnail_max_edge,
                thumb_quality=settings.thumbnail_quality,
                full_quality=settings.full_image_quality,
            ),
            poster_generator=VideoPosterGenerator(
                max_edge=settings.thumbnail_max_edge,
                quality=settings.thumbnail_quality,
                seek_seconds=settings.video_poster_seek_seconds,
            ),
        )

    async def generate_image(self, source: SourceFile) -> RenderedImage:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, partial(self.image_generator.render, source.data, source.name)
        )

    async def generate_video_poster(
        self, source: SourceFile, extension: str
    ) -> RenderedPoster:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            partial(self.poster_generator.render, source.data, extension, source.name),
        )

    async def generate(self, source: SourceFile) -> RenderedMedia:
        """
        Render the stored binaries for ``source``.

        Raises:
            UnsupportedMediaError: Video in a container other than mp4/mov
            DecodeFailureError: The file cannot be decoded
        """
        media_type = media_type_for(source.name, source.content_type)

        if media_type is MediaType.IMAGE:
            image = await self.generate_image(source)
            return RenderedMedia(
                media_type=media_type,
                full_data=image.full_data,
                full_content_type=JPEG_CONTENT_TYPE,
                thumb_data=image.thumb_data,
                extension="jpg",
            )

        extension = get_video_extension(source.name, source.content_type)
        if extension is None:
            raise UnsupportedMediaError(
                f"Unsupported video format for {source.name}; use .mp4 or .mov",
                operation="thumbnail",
            )
        poster = await self.generate_video_poster(source, extension)
        logger.debug(f"Generated poster for {source.name}")
        return RenderedMedia(
            media_type=media_type,
            full_data=source.data,
            full_content_type=VIDEO_CONTENT_TYPES[extension],
            thumb_data=poster.thumb_data,
            extension=extension,
            duration_seconds=poster.duration_seconds,
        )
