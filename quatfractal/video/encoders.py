from __future__ import annotations

import glob
import os
import shutil
import subprocess
from typing import Iterable, List

from natsort import natsorted

from quatfractal.util.logging_setup import get_logger


def collect_frames(input_dir: str, prefix: str = "fractal") -> List[str]:
    frames = natsorted(glob.glob(os.path.join(input_dir, f"{prefix}_*.ppm")))
    if not frames:
        raise ValueError(f"No {prefix}_*.ppm frames found in {input_dir}")
    return frames


def encode_with_ffmpeg(*, input_pattern: str, output_file: str, fps: int) -> None:
    logger = get_logger()
    exe = shutil.which("ffmpeg")
    if exe is None:
        raise RuntimeError("ffmpeg not found on PATH")
    command = [exe, "-y", "-framerate", str(fps), "-i", input_pattern, output_file]
    logger.info("Encoding %s from %s @ %sfps", output_file, input_pattern, fps)
    r = subprocess.run(command, capture_output=True, text=True)
    if r.returncode != 0:
        logger.error("ffmpeg failed (exit %s): %s", r.returncode, r.stderr.strip())
        raise RuntimeError(f"ffmpeg exited with status {r.returncode}")
    logger.info("Animation written: %s", output_file)


def encode_with_opencv(*, input_dir: str, output_file: str, fps: int, prefix: str = "fractal") -> None:
    logger = get_logger()
    try:
        import cv2  # type: ignore
    except ImportError as e:
        raise RuntimeError(f"OpenCV not installed: {e}") from e
    if not output_file.lower().endswith(".mp4"):
        raise ValueError(f"OpenCV encoder writes mp4 only, got {output_file}")

    frames = collect_frames(input_dir, prefix)
    first = cv2.imread(frames[0])
    if first is None:
        raise RuntimeError(f"Failed to read first frame: {frames[0]}")
    h, w, _ = first.shape

    fourcc = cv2.VideoWriter_fourcc(*"mp4v")
    out = cv2.VideoWriter(output_file, fourcc, fps, (w, h))
    if not out.isOpened():
        raise RuntimeError(f"Failed to open VideoWriter for {output_file}")

    logger.info("Encoding video %s from %s frames (%sx%s @ %sfps)", output_file, len(frames), w, h, fps)
    try:
        for path in frames:
            img = cv2.imread(path)
            if img is None:
                raise RuntimeError(f"Failed to read frame: {path}")
            if img.shape[0] != h or img.shape[1] != w:
                raise RuntimeError(f"Frame {path} is {img.shape[1]}x{img.shape[0]}, expected {w}x{h}")
            out.write(img)
    finally:
        out.release()
    logger.info("Video written: %s", output_file)


def cleanup_frames(paths: Iterable[str]) -> int:
    removed = 0
    for path in paths:
        try:
            os.remove(path)
        except FileNotFoundError:
            continue
        removed += 1
    get_logger().info("Removed %s temporary frames", removed)
    return removed
