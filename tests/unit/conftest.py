# tests/unit/conftest.py
"""Fixtures for the unit suite."""

import os
import tempfile

import cv2
import numpy as np
import pytest


@pytest.fixture
def make_clip():
    """
    Factory for small encoded video clips.

    Usage:
        data = make_clip(frames=12, fps=6.0)

    Skips the test when the local OpenCV build has no mp4v encoder.
    """

    def _make(extension: str = "mp4", frames: int = 12, fps: float = 6.0) -> bytes:
        fd, path = tempfile.mkstemp(suffix=f".{extension}")
        os.close(fd)
        try:
            writer = cv2.VideoWriter(path, cv2.VideoWriter_fourcc(*"mp4v"), fps, (640, 360))
            if not writer.isOpened():
                pytest.skip("OpenCV build cannot encode mp4v")
            for index in range(frames):
                frame = np.full((360, 640, 3), (index * 20) % 255, dtype=np.uint8)
                writer.write(frame)
            writer.release()
            with open(path, "rb") as handle:
                return handle.read()
        finally:
            os.unlink(path)

    return _make
