from __future__ import annotations

import os
from typing import Dict, List

import numpy as np
from PIL import Image

from quatfractal.config import RenderSettings
from quatfractal.util.logging_setup import get_logger


def _check_buffer(buf: np.ndarray) -> None:
    if buf.ndim != 3 or buf.shape[2] != 3:
        raise ValueError(f"Frame buffer must have shape (height, width, 3), got {buf.shape}")
    if buf.dtype != np.uint8:
        raise ValueError(f"Frame buffer must be uint8, got {buf.dtype}")


class FrameSink:
    """Consumer of rendered frames. Buffers arrive in raster order, one per frame."""

    def write_frame(self, frame: int, buf: np.ndarray) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class MemorySink(FrameSink):
    def __init__(self) -> None:
        self.frames: Dict[int, np.ndarray] = {}

    def write_frame(self, frame: int, buf: np.ndarray) -> None:
        _check_buffer(buf)
        self.frames[frame] = buf.copy()


class PpmDirectorySink(FrameSink):
    """Writes each frame as a binary P6 PPM named <prefix>_%03d.ppm."""

    def __init__(self, settings: RenderSettings) -> None:
        self.settings = settings
        self.paths: List[str] = []
        os.makedirs(settings.frames_dir, exist_ok=True)

    def write_frame(self, frame: int, buf: np.ndarray) -> None:
        _check_buffer(buf)
        path = self.settings.frame_path(frame)
        Image.fromarray(buf).save(path, format="PPM")
        self.paths.append(path)
        get_logger().info("Saved frame %s -> %s", frame, path)
