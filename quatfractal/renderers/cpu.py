from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

from quatfractal.color import Color, outcome_color
from quatfractal.config import RenderSettings
from quatfractal.newton import iterate
from quatfractal.plane import frame_angle, frame_basis, initial_quaternion, sample_coordinates
from quatfractal.quaternion import Quaternion
from quatfractal.util.logging_setup import get_logger, logging_initialiser

ROW_LOG_EVERY = 128

_G: Dict[str, Any] = {}


def render_pixel(settings: RenderSettings, u0: Quaternion, u1: Quaternion, x: int, y: int) -> Color:
    a0, a1 = sample_coordinates(settings, x, y)
    q = initial_quaternion(u0, u1, a0, a1)
    outcome = iterate(q, max_iters=settings.max_iters, eps_sq=settings.eps_sq)
    return outcome_color(outcome, eps=settings.eps)


def render_band(
    settings: RenderSettings, u0: Quaternion, u1: Quaternion, y0: int, y1: int, frame_id: str = "-"
) -> np.ndarray:
    logger = get_logger()
    width = settings.xsize
    band = np.zeros((y1 - y0, width, 3), dtype=np.uint8)
    for yi, y in enumerate(range(y0, y1)):
        for x in range(width):
            band[yi, x] = render_pixel(settings, u0, u1, x, y)
        if y % ROW_LOG_EVERY == 0:
            logger.debug("[Frame %s] Rendered row %s/%s", frame_id, y, settings.ysize)
    return band


def _init_worker(settings, u0, u1, frame_id, log_queue, log_level):
    _G["settings"] = settings
    _G["u0"] = u0
    _G["u1"] = u1
    _G["frame_id"] = frame_id
    logging_initialiser(log_queue, log_level)


def _render_band_worker(y0_y1: Tuple[int, int]) -> Tuple[int, np.ndarray]:
    y0, y1 = y0_y1
    return y0, render_band(_G["settings"], _G["u0"], _G["u1"], y0, y1, _G["frame_id"])


def split_bands(height: int, band_height: int) -> List[Tuple[int, int]]:
    if band_height < 1:
        raise ValueError("band_height must be >= 1")
    return [(y, min(height, y + band_height)) for y in range(0, height, band_height)]


def render_frame_cpu(
    *,
    settings: RenderSettings,
    frame: int,
    log_queue=None,
    log_level: int = logging.INFO,
    workers: Optional[int] = None,
) -> np.ndarray:
    """
    Renders one animation frame to a (ysize, xsize, 3) uint8 buffer in
    raster order. workers > 1 farms row bands out to a process pool; the
    result does not depend on the worker count.
    """
    logger = get_logger()
    workers = settings.workers if workers is None else workers
    frame_id = f"{frame:03d}"
    angle = frame_angle(frame, settings.n_frames)
    u0, u1 = frame_basis(angle)

    logger.info("[Frame %s] CPU render start angle=%.6f size=%sx%s workers=%s",
                frame_id, angle, settings.xsize, settings.ysize, workers)

    buf = np.zeros((settings.ysize, settings.xsize, 3), dtype=np.uint8)
    bands = split_bands(settings.ysize, settings.band_height)

    if workers <= 1:
        for y0, y1 in bands:
            buf[y0:y1] = render_band(settings, u0, u1, y0, y1, frame_id)
    else:
        with ProcessPoolExecutor(
            max_workers=workers,
            initializer=_init_worker,
            initargs=(settings, u0, u1, frame_id, log_queue, log_level),
        ) as pool:
            for y0, band in pool.map(_render_band_worker, bands):
                buf[y0:y0 + band.shape[0]] = band

    logger.info("[Frame %s] CPU render done", frame_id)
    return buf


def renderer_info(settings: RenderSettings) -> Dict[str, Any]:
    return {
        "resolved": "cpu",
        "workers": settings.workers,
        "band_height": settings.band_height,
        "cpu_count": os.cpu_count(),
    }
