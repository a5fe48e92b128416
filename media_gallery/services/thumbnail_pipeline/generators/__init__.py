# media_gallery/services/thumbnail_pipeline/generators/__init__.py
"""
Thumbnail Generators

- ImageThumbnailGenerator: full-size JPEG re-encode plus bounded thumbnail
- VideoPosterGenerator: poster frame and duration of a video
"""

from .image_generator import ImageThumbnailGenerator, RenderedImage
from .video_poster_generator import RenderedPoster, VideoPosterGenerator

__all__ = [
    "ImageThumbnailGenerator",
    "RenderedImage",
    "VideoPosterGenerator",
    "RenderedPoster",
]
