"""
Outcome -> RGB mapping.

Converged points are colored by the direction of their imaginary part:
longitude picks a hue on a six-segment wheel, latitude pushes every channel
toward white (north) or black (south).
"""
from __future__ import annotations

import math
from typing import NamedTuple

from quatfractal.config import EPS
from quatfractal.newton import NewtonOutcome
from quatfractal.quaternion import ONE, Quaternion, dist

HALF_PI = 0.5 * math.pi
ONE_PI = math.pi
TWO_PI = 2.0 * math.pi

SEGMENT = 256
WHEEL_STEPS = 6 * SEGMENT
GRADIENT_FACTOR = (WHEEL_STEPS - 1) / TWO_PI


class Color(NamedTuple):
    red: int
    green: int
    blue: int


WHITE = Color(0xFF, 0xFF, 0xFF)
BLACK = Color(0x00, 0x00, 0x00)
BLUE = Color(0x00, 0x00, 0xFF)


def scale(c: Color, t: float) -> Color:
    return Color(int(t * c.red), int(t * c.green), int(t * c.blue))


GRAY = scale(WHITE, 0.5)


def _ramp(v: float) -> int:
    return min(int(v), 0xFF)


def color_wheel(angle: float) -> Color:
    """
    Maps an angle in [-pi, pi] to a blue -> cyan -> green -> yellow -> red
    -> magenta -> blue gradient. Out-of-range (and NaN) input gives blue.
    """
    val = (angle + ONE_PI) * GRADIENT_FACTOR
    if val < 0.0:
        return BLUE
    if val < 256.0:
        return Color(0x00, _ramp(val), 0xFF)
    if val < 512.0:
        return Color(0x00, 0xFF, _ramp(256.0 - (val - 256.0)))
    if val < 768.0:
        return Color(_ramp(val - 512.0), 0xFF, 0x00)
    if val < 1024.0:
        return Color(0xFF, _ramp(256.0 - (val - 768.0)), 0x00)
    if val < 1280.0:
        return Color(0xFF, 0x00, _ramp(val - 1024.0))
    if val < 1536.0:
        return Color(_ramp(256.0 - (val - 1280.0)), 0x00, 0xFF)
    return BLUE


def clamp(x: float) -> float:
    if x < 0.0:
        return 0.0
    if x > 255.0:
        return 255.0
    return x


def saturate(c: Color, val: float) -> Color:
    return Color(
        int(clamp(c.red + 255.0 * val)),
        int(clamp(c.green + 255.0 * val)),
        int(clamp(c.blue + 255.0 * val)),
    )


def sphere_color(phi: float, theta: float) -> Color:
    s = (phi + HALF_PI) / HALF_PI - 1.0
    return saturate(color_wheel(theta), s)


def root_color(q: Quaternion, *, eps: float = EPS) -> Color:
    if dist(q, ONE) < eps:
        return GRAY
    rho = math.sqrt(q.x * q.x + q.y * q.y)
    phi = math.atan2(q.z, rho)
    theta = math.atan2(q.y, q.x)
    return sphere_color(phi, theta)


def outcome_color(outcome: NewtonOutcome, *, eps: float = EPS) -> Color:
    if not outcome.converged:
        return BLACK
    return root_color(outcome.quaternion, eps=eps)
