# media_gallery/services/thumbnail_pipeline/thumbnail_utils.py
"""
Thumbnail Utility Functions
"""

from io import BytesIO
from typing import Tuple

from PIL import Image


def calculate_bounded_dimensions(
    source_size: Tuple[int, int], max_edge: int
) -> Tuple[int, int]:
    """
    Scale ``source_size`` so its longest edge is at most ``max_edge``.

    Aspect ratio is preserved and images are never upscaled.

    Args:
        source_size: (width, height) of source image
        max_edge: Longest allowed edge in pixels

    Returns:
        (width, height) of the bounded image
    """
    width, height = source_size
    longest = max(width, height)
    if longest <= max_edge or longest == 0:
        return width, height
    scale = max_edge / longest
    return max(1, round(width * scale)), max(1, round(height * scale))


def to_rgb(image: Image.Image) -> Image.Image:
    """Convert to RGB if necessary (handles RGBA, P, L, CMYK, etc.)"""
    if image.mode == "RGB":
        return image
    return image.convert("RGB")


def encode_jpeg(image: Image.Image, quality: int) -> bytes:
    output = BytesIO()
    image.save(output, format="JPEG", quality=quality, optimize=True)
    return output.getvalue()


def render_bounded_jpeg(image: Image.Image, max_edge: int, quality: int) -> bytes:
    """Resize a copy of ``image`` to fit ``max_edge`` and encode it as JPEG."""
    thumb = image.copy()
    try:
        thumb.thumbnail(
            calculate_bounded_dimensions(image.size, max_edge),
            Image.Resampling.LANCZOS,
        )
        return encode_jpeg(thumb, quality)
    finally:
        thumb.close()
