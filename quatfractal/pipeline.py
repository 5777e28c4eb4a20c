from __future__ import annotations

import logging
import time
from typing import Any, Dict, Iterable, Optional

from tqdm import tqdm

from quatfractal.config import RenderSettings
from quatfractal.renderers.cpu import render_frame_cpu
from quatfractal.sink import FrameSink
from quatfractal.util.logging_setup import get_logger


def render_sequence(
    *,
    settings: RenderSettings,
    sink: FrameSink,
    log_queue=None,
    log_level: int = logging.INFO,
    frames: Optional[Iterable[int]] = None,
    progress: bool = True,
) -> Dict[str, Any]:
    logger = get_logger()
    selected = list(range(settings.n_frames)) if frames is None else sorted(set(frames))
    for f in selected:
        if not 0 <= f < settings.n_frames:
            raise ValueError(f"frame {f} outside [0, {settings.n_frames})")

    logger.info("Render start frames=%s/%s size=%sx%s window=[%s, %s] max_iters=%s workers=%s",
                len(selected), settings.n_frames, settings.xsize, settings.ysize,
                settings.start, settings.end, settings.max_iters, settings.workers)

    t0 = time.time()
    for f in tqdm(selected, desc="frames", unit="frame", disable=not progress):
        start = time.time()
        buf = render_frame_cpu(settings=settings, frame=f, log_queue=log_queue, log_level=log_level)
        sink.write_frame(f, buf)
        logger.info("Current frame: %3d  Total: %d  (%.2fs)", f + 1, settings.n_frames, time.time() - start)

    elapsed = time.time() - t0
    logger.info("Render complete in %.2fs", elapsed)
    return {
        "frames": selected,
        "n_frames": settings.n_frames,
        "width": settings.xsize,
        "height": settings.ysize,
        "elapsed": elapsed,
    }
