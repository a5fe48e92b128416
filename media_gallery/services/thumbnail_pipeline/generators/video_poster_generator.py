# media_gallery/services/thumbnail_pipeline/generators/video_poster_generator.py
"""
Video Poster Generator Component

Grabs a representative frame shortly after the start of a video and turns
it into the same bounded JPEG used for image thumbnails.
"""

import os
import tempfile
from dataclasses import dataclass
from typing import Optional

import cv2
from PIL import Image

from ....enums import LoggerName, LogSource
from ....exceptions import DecodeFailureError
from ...logger import get_service_logger
from ..thumbnail_utils import render_bounded_jpeg

logger = get_service_logger(LoggerName.THUMBNAIL_PIPELINE, LogSource.PIPELINE)


@dataclass
class RenderedPoster:
    thumb_data: bytes
    duration_seconds: Optional[int] = None


class VideoPosterGenerator:
    def __init__(
        self, max_edge: int = 480, quality: int = 70, seek_seconds: float = 0.1
    ):
        self.max_edge = max_edge
        self.quality = max(1, min(95, quality))
        self.seek_seconds = max(0.0, seek_seconds)

    @staticmethod
    def _read_duration(cap: cv2.VideoCapture) -> Optional[float]:
        fps = cap.get(cv2.CAP_PROP_FPS)
        frame_count = cap.get(cv2.CAP_PROP_FRAME_COUNT)
        if fps and fps > 0 and frame_count and frame_count > 0:
            return frame_count / fps
        return None

    def _seek_target(self, cap: cv2.VideoCapture, duration: Optional[float]) -> float:
        if duration is None:
            return self.seek_seconds
        # Start of the last frame; seeking to the very end reads nothing
        fps = cap.get(cv2.CAP_PROP_FPS)
        last_frame = max(0.0, duration - 1.0 / fps) if fps and fps > 0 else 0.0
        return min(self.seek_seconds, last_frame)

    def _grab_frame(
        self, cap: cv2.VideoCapture, path: str, duration: Optional[float]
    ):
        cap.set(cv2.CAP_PROP_POS_MSEC, self._seek_target(cap, duration) * 1000)
        ok, frame = cap.read()
        if ok and frame is not None:
            return frame

        # A capture that failed a seek does not always rewind; start fresh
        first = cv2.VideoCapture(path)
        try:
            ok, frame = first.read()
            return frame if ok else None
        finally:
            first.release()

    def render(self, data: bytes, extension: str, file_name: str = "") -> RenderedPoster:
        """
        Extract the poster frame of a video held in memory.

        OpenCV only reads from paths, so the bytes are spilled to a temporary
        file that is removed again whatever the outcome.

        Raises:
            DecodeFailureError: No frame could be decoded
        """
        label = file_name or "<bytes>"
        fd, temp_path = tempfile.mkstemp(suffix=f".{extension}", prefix="poster-")
        cap = None
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(data)

            cap = cv2.VideoCapture(temp_path)
            if not cap.isOpened():
                raise DecodeFailureError(
                    f"Could not open video {label}", operation="poster"
                )

            duration = self._read_duration(cap)
            frame = self._grab_frame(cap, temp_path, duration)
            if frame is None:
                raise DecodeFailureError(
                    f"Could not read a frame from video {label}", operation="poster"
                )

            rgb_frame = cv2.cvtColor(frame, cv2.COLOR_BGR2RGB)
            with Image.fromarray(rgb_frame) as poster:
                thumb_data = render_bounded_jpeg(poster, self.max_edge, self.quality)

            duration_seconds = int(round(duration)) if duration is not None else None
            logger.debug(
                f"Rendered poster for {label}",
                extra_context={"duration_seconds": duration_seconds},
            )
            return RenderedPoster(thumb_data=thumb_data, duration_seconds=duration_seconds)
        except cv2.error as e:
            raise DecodeFailureError(
                f"OpenCV failed on video {label}: {e}", operation="poster"
            ) from e
        finally:
            if cap is not None:
                cap.release()
            try:
                os.unlink(temp_path)
            except FileNotFoundError:
                pass
