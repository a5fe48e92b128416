#!/usr/bin/env python3
"""
Tests for the thumbnail pipeline: bounded JPEG thumbnails, full-size
re-encodes and video poster frames.
"""

import os
import tempfile
from io import BytesIO
from unittest.mock import Mock, patch

import cv2
import numpy as np
import pytest
from PIL import Image

from media_factories import make_jpeg, make_source
from media_gallery.enums import MediaType
from media_gallery.exceptions import DecodeFailureError, UnsupportedMediaError
from media_gallery.services.thumbnail_pipeline import (
    ImageThumbnailGenerator,
    ThumbnailPipeline,
    VideoPosterGenerator,
    calculate_bounded_dimensions,
)


def _open(data: bytes) -> Image.Image:
    return Image.open(BytesIO(data))


@pytest.mark.unit
@pytest.mark.thumbnail
class TestBoundedDimensions:
    def test_landscape_is_bounded_by_width(self):
        assert calculate_bounded_dimensions((1600, 1200), 480) == (480, 360)

    def test_portrait_is_bounded_by_height(self):
        assert calculate_bounded_dimensions((1200, 1600), 480) == (360, 480)

    def test_small_images_are_not_upscaled(self):
        assert calculate_bounded_dimensions((320, 200), 480) == (320, 200)


@pytest.mark.unit
@pytest.mark.thumbnail
class TestImageThumbnailGenerator:
    def test_renders_full_and_thumb(self, jpeg_bytes):
        rendered = ImageThumbnailGenerator().render(jpeg_bytes, "beach.jpg")

        assert (rendered.width, rendered.height) == (1600, 1200)
        with _open(rendered.thumb_data) as thumb:
            assert thumb.format == "JPEG"
            assert max(thumb.size) == 480
        with _open(rendered.full_data) as full:
            assert full.format == "JPEG"
            assert full.size == (1600, 1200)

    def test_png_with_alpha_becomes_rgb_jpeg(self, png_bytes):
        rendered = ImageThumbnailGenerator().render(png_bytes, "logo.png")

        with _open(rendered.full_data) as full:
            assert full.format == "JPEG"
            assert full.mode == "RGB"

    def test_exif_orientation_is_applied(self):
        img = Image.new("RGB", (400, 200), "white")
        exif = Image.Exif()
        exif[0x0112] = 6  # rotate 90 clockwise on display
        buffer = BytesIO()
        img.save(buffer, "JPEG", exif=exif)

        rendered = ImageThumbnailGenerator().render(buffer.getvalue(), "rotated.jpg")

        assert (rendered.width, rendered.height) == (200, 400)

    def test_garbage_raises_decode_failure(self):
        with pytest.raises(DecodeFailureError):
            ImageThumbnailGenerator().render(b"not an image", "broken.jpg")


@pytest.mark.thumbnail
class TestVideoPosterGenerator:
    def test_renders_poster_and_duration(self, make_clip):
        data = make_clip(frames=12, fps=6.0)

        poster = VideoPosterGenerator().render(data, "mp4", "clip.mp4")

        assert poster.duration_seconds == 2
        with _open(poster.thumb_data) as thumb:
            assert thumb.format == "JPEG"
            assert thumb.size == (480, 270)

    def test_single_frame_clip_falls_back_to_first_frame(self, make_clip):
        data = make_clip(frames=1, fps=30.0)

        poster = VideoPosterGenerator(seek_seconds=5.0).render(data, "mp4", "short.mp4")

        assert poster.thumb_data

    @pytest.mark.parametrize(
        "duration, expected",
        [(None, 5.0), (10.0, 5.0), (1 / 30, 0.0), (0.5, 0.5 - 1 / 30)],
    )
    def test_seek_target_stays_on_last_frame(self, duration, expected):
        cap = Mock()
        cap.get.return_value = 30.0

        target = VideoPosterGenerator(seek_seconds=5.0)._seek_target(cap, duration)

        assert target == pytest.approx(expected)

    def test_failed_seek_rereads_from_a_fresh_capture(self):
        frame = np.zeros((360, 640, 3), dtype=np.uint8)
        seeked = Mock()
        seeked.get.return_value = 30.0
        seeked.read.return_value = (False, None)
        fresh = Mock()
        fresh.read.return_value = (True, frame)

        with patch.object(cv2, "VideoCapture", return_value=fresh) as opener:
            grabbed = VideoPosterGenerator()._grab_frame(seeked, "/tmp/clip.mp4", 1 / 30)

        assert grabbed is frame
        opener.assert_called_once_with("/tmp/clip.mp4")
        fresh.release.assert_called_once()

    def test_garbage_raises_decode_failure_and_cleans_up(self):
        before = set(os.listdir(tempfile.gettempdir()))

        with pytest.raises(DecodeFailureError):
            VideoPosterGenerator().render(b"\x00" * 64, "mp4", "broken.mp4")

        leftovers = {
            name
            for name in set(os.listdir(tempfile.gettempdir())) - before
            if name.startswith("poster-")
        }
        assert leftovers == set()


@pytest.mark.thumbnail
class TestThumbnailPipeline:
    @pytest.mark.asyncio
    async def test_image_source(self):
        rendered = await ThumbnailPipeline().generate(make_source("beach.png", make_jpeg()))

        assert rendered.media_type is MediaType.IMAGE
        assert rendered.full_content_type == "image/jpeg"
        assert rendered.extension == "jpg"

    @pytest.mark.asyncio
    async def test_video_source_keeps_original_bytes(self, thumbnails):
        source = make_source("clip.MOV", b"movie-bytes", "video/quicktime")

        rendered = await thumbnails.generate(source)

        assert rendered.media_type is MediaType.VIDEO
        assert rendered.full_data == b"movie-bytes"
        assert rendered.full_content_type == "video/quicktime"
        assert rendered.extension == "mov"
        assert rendered.duration_seconds == 12
        thumbnails.generate_video_poster.assert_awaited_once_with(source, "mov")

    @pytest.mark.asyncio
    async def test_unsupported_video_container(self):
        source = make_source("clip.avi", b"avi-bytes", "video/x-msvideo")

        with pytest.raises(UnsupportedMediaError):
            await ThumbnailPipeline().generate(source)
