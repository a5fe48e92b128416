# media_gallery/services/thumbnail_pipeline/__init__.py
"""
Thumbnail Pipeline Module

Image thumbnails, full-size JPEG re-encodes and video poster frames.
"""

from .generators import (
    ImageThumbnailGenerator,
    RenderedImage,
    RenderedPoster,
    VideoPosterGenerator,
)
from .thumbnail_pipeline import RenderedMedia, ThumbnailPipeline
from .thumbnail_utils import calculate_bounded_dimensions

__all__ = [
    "ThumbnailPipeline",
    "RenderedMedia",
    "ImageThumbnailGenerator",
    "RenderedImage",
    "VideoPosterGenerator",
    "RenderedPoster",
    "calculate_bounded_dimensions",
]
