from __future__ import annotations

import itertools
import math
from typing import Iterator, Tuple

from quatfractal.color import TWO_PI
from quatfractal.config import RenderSettings
from quatfractal.quaternion import Quaternion


def frame_angles(n_frames: int) -> Iterator[float]:
    # The angle advances by repeated addition, not frame * step.
    step = TWO_PI / float(n_frames)
    angle = 0.0
    for _ in range(n_frames):
        yield angle
        angle += step


def frame_angle(frame: int, n_frames: int) -> float:
    if not 0 <= frame < n_frames:
        raise ValueError(f"frame {frame} outside [0, {n_frames})")
    return next(itertools.islice(frame_angles(n_frames), frame, None))


def frame_basis(angle: float) -> Tuple[Quaternion, Quaternion]:
    """u0 and u1 span the sample plane; both trace great circles of the unit sphere."""
    cos_ang = math.cos(angle)
    sin_ang = math.sin(angle)
    u0 = Quaternion(cos_ang, sin_ang, 0.0, 0.0)
    u1 = Quaternion(0.0, 0.0, cos_ang, sin_ang)
    return u0, u1


def sample_coordinates(settings: RenderSettings, x: int, y: int) -> Tuple[float, float]:
    a0 = settings.start + settings.pyfact * y
    a1 = settings.start + settings.pxfact * x
    return a0, a1


def initial_quaternion(u0: Quaternion, u1: Quaternion, a0: float, a1: float) -> Quaternion:
    return u0 * a0 + u1 * a1
