# media_gallery/services/thumbnail_pipeline/generators/image_generator.py
"""
Image Thumbnail Generator Component

Decodes an uploaded image, applies its EXIF orientation and produces both
the full-size JPEG that is stored as the original and the bounded
thumbnail.
"""

from dataclasses import dataclass
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from ....enums import LoggerName, LogSource
from ....exceptions import DecodeFailureError
from ...logger import get_service_logger
from ..thumbnail_utils import encode_jpeg, render_bounded_jpeg, to_rgb

logger = get_service_logger(LoggerName.THUMBNAIL_PIPELINE, LogSource.PIPELINE)


@dataclass
class RenderedImage:
    full_data: bytes
    thumb_data: bytes
    width: int
    height: int


class ImageThumbnailGenerator:
    """
    Component responsible for image thumbnails.

    Runs synchronously; the pipeline moves it off the event loop.
    """

    def __init__(
        self, max_edge: int = 480, thumb_quality: int = 70, full_quality: int = 90
    ):
        self.max_edge = max_edge
        self.thumb_quality = max(1, min(95, thumb_quality))
        self.full_quality = max(1, min(95, full_quality))

    def render(self, data: bytes, file_name: str = "") -> RenderedImage:
        """
        Decode ``data`` and render the full JPEG and thumbnail.

        Raises:
            DecodeFailureError: The bytes are not a decodable image
        """
        try:
            with Image.open(BytesIO(data)) as source:
                source.load()
                oriented = ImageOps.exif_transpose(source)
                rgb = to_rgb(oriented)
                try:
                    full_data = encode_jpeg(rgb, self.full_quality)
                    thumb_data = render_bounded_jpeg(
                        rgb, self.max_edge, self.thumb_quality
                    )
                    width, height = rgb.size
                finally:
                    if rgb is not oriented:
                        rgb.close()
                    oriented.close()
        except (
            UnidentifiedImageError,
            Image.DecompressionBombError,
            OSError,
            SyntaxError,
            ValueError,
        ) as e:
            logger.warning(
                f"Could not decode image {file_name or '<bytes>'}",
                extra_context={"error": str(e), "size": len(data)},
            )
            raise DecodeFailureError(
                f"Could not decode image {file_name or '<bytes>'}: {e}",
                operation="thumbnail",
            ) from e

        logger.debug(
            f"Rendered {file_name or 'image'} {width}x{height}",
            extra_context={"full_bytes": len(full_data), "thumb_bytes": len(thumb_data)},
        )
        return RenderedImage(
            full_data=full_data, thumb_data=thumb_data, width=width, height=height
        )
