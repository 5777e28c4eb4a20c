from __future__ import annotations

import json
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

XSIZE = 1024
YSIZE = 1024
START = -3.0
END = 3.0
EPS = 1.0E-8
EPS_SQ = 1.0E-16
MAX_ITERS = 32
N_FRAMES = 100
FPS = 25
FRAME_PREFIX = "fractal"
OUTPUT = "fractal.gif"

DEFAULT_CONFIG: Dict[str, Any] = {
    "xsize": XSIZE,
    "ysize": YSIZE,
    "start": START,
    "end": END,
    "eps": EPS,
    "eps_sq": EPS_SQ,
    "max_iters": MAX_ITERS,
    "n_frames": N_FRAMES,
    "frames_dir": ".",
    "frame_prefix": FRAME_PREFIX,
    "output": OUTPUT,
    "fps": FPS,
    "encoder": "ffmpeg",
    "workers": 1,
    "band_height": 32,
}

ENCODERS = ("ffmpeg", "opencv")


@dataclass(frozen=True)
class RenderSettings:
    xsize: int = XSIZE
    ysize: int = YSIZE
    start: float = START
    end: float = END
    eps: float = EPS
    eps_sq: float = EPS_SQ
    max_iters: int = MAX_ITERS
    n_frames: int = N_FRAMES
    frames_dir: str = "."
    frame_prefix: str = FRAME_PREFIX
    output: str = OUTPUT
    fps: int = FPS
    encoder: str = "ffmpeg"
    workers: int = 1
    band_height: int = 32

    @property
    def pxfact(self) -> float:
        return (self.end - self.start) / (self.xsize - 1)

    @property
    def pyfact(self) -> float:
        return (self.end - self.start) / (self.ysize - 1)

    def frame_path(self, frame: int) -> str:
        return os.path.join(self.frames_dir, f"{self.frame_prefix}_{frame:03d}.ppm")


def load_config(config_path: Optional[str]) -> Dict[str, Any]:
    if not config_path:
        return dict(DEFAULT_CONFIG)
    with open(config_path, "r", encoding="utf-8") as f:
        cfg = json.load(f)
    if not isinstance(cfg, dict):
        raise ValueError("Config JSON must be an object.")
    unknown = sorted(set(cfg) - set(DEFAULT_CONFIG))
    if unknown:
        raise ValueError(f"Unknown config fields: {', '.join(unknown)}")
    out = dict(DEFAULT_CONFIG)
    out.update(cfg)
    return out


def normalise_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    required = ["xsize", "ysize", "start", "end", "max_iters", "n_frames"]
    for r in required:
        if r not in cfg:
            raise ValueError(f"Missing config field: {r}")

    out = dict(DEFAULT_CONFIG)
    out.update(cfg)

    out["xsize"] = int(out["xsize"])
    out["ysize"] = int(out["ysize"])
    out["n_frames"] = int(out["n_frames"])
    if out["xsize"] < 2 or out["ysize"] < 2:
        raise ValueError("xsize/ysize must be at least 2.")
    if out["n_frames"] <= 0:
        raise ValueError("n_frames must be positive.")

    out["start"] = float(out["start"])
    out["end"] = float(out["end"])
    if not out["start"] < out["end"]:
        raise ValueError("start must be less than end.")

    out["eps"] = float(out["eps"])
    out["eps_sq"] = float(out["eps_sq"])
    if out["eps"] <= 0 or out["eps_sq"] <= 0:
        raise ValueError("eps/eps_sq must be positive.")

    out["max_iters"] = int(out["max_iters"])
    if out["max_iters"] < 0:
        raise ValueError("max_iters must not be negative.")

    out["fps"] = int(out["fps"])
    out["workers"] = int(out["workers"])
    out["band_height"] = int(out["band_height"])
    if out["fps"] < 1 or out["workers"] < 1 or out["band_height"] < 1:
        raise ValueError("fps/workers/band_height must be positive.")

    out["frames_dir"] = str(out["frames_dir"])
    out["frame_prefix"] = str(out["frame_prefix"])
    out["output"] = str(out["output"])
    out["encoder"] = str(out["encoder"]).lower()
    if out["encoder"] not in ENCODERS:
        raise ValueError(f"encoder must be one of: {', '.join(ENCODERS)}")
    return out


def settings_from_config(cfg: Dict[str, Any]) -> RenderSettings:
    return RenderSettings(**normalise_config(cfg))
