"""
Quaternion arithmetic over doubles.

Pure operations return new values. The *_self methods and reciprocate()
mutate in place and exist only as a cheaper path with identical results.
Division by an exactly-zero value follows IEEE semantics (inf/nan) instead
of raising, so singular Newton steps propagate rather than abort a render.
"""
from __future__ import annotations

import math
from typing import Iterator, Tuple, Union

Number = Union[int, float]


def _inverse(r: float) -> float:
    try:
        return 1.0 / r
    except ZeroDivisionError:
        return math.copysign(math.inf, r)


class Quaternion:
    __slots__ = ("a", "x", "y", "z")

    def __init__(self, a: float = 0.0, x: float = 0.0, y: float = 0.0, z: float = 0.0):
        self.a = float(a)
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.a, self.x, self.y, self.z)

    def copy(self) -> "Quaternion":
        return Quaternion(self.a, self.x, self.y, self.z)

    def __iter__(self) -> Iterator[float]:
        return iter(self.as_tuple())

    def __repr__(self) -> str:
        return f"Quaternion({self.a!r}, {self.x!r}, {self.y!r}, {self.z!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Quaternion):
            return NotImplemented
        return self.as_tuple() == other.as_tuple()

    __hash__ = None  # type: ignore[assignment]

    # -- addition / subtraction ---------------------------------------------

    def add(self, q: "Quaternion") -> "Quaternion":
        return Quaternion(self.a + q.a, self.x + q.x, self.y + q.y, self.z + q.z)

    def subtract(self, q: "Quaternion") -> "Quaternion":
        return Quaternion(self.a - q.a, self.x - q.x, self.y - q.y, self.z - q.z)

    def add_real(self, r: Number) -> "Quaternion":
        return Quaternion(self.a + r, self.x, self.y, self.z)

    def subtract_real(self, r: Number) -> "Quaternion":
        return Quaternion(self.a - r, self.x, self.y, self.z)

    # -- scaling ------------------------------------------------------------

    def scale(self, r: Number) -> "Quaternion":
        return Quaternion(r * self.a, r * self.x, r * self.y, r * self.z)

    def divide_real(self, r: Number) -> "Quaternion":
        factor = _inverse(r)
        return Quaternion(self.a * factor, self.x * factor, self.y * factor, self.z * factor)

    # -- products -----------------------------------------------------------

    def multiply(self, q: "Quaternion") -> "Quaternion":
        """Hamilton product self * q. Not commutative."""
        a = self.a * q.a - self.x * q.x - self.y * q.y - self.z * q.z
        x = self.a * q.x + self.x * q.a + self.y * q.z - self.z * q.y
        y = self.a * q.y - self.x * q.z + self.y * q.a + self.z * q.x
        z = self.a * q.z + self.x * q.y - self.y * q.x + self.z * q.a
        return Quaternion(a, x, y, z)

    hamilton_product = multiply

    def square(self) -> "Quaternion":
        a = self.a * self.a - self.x * self.x - self.y * self.y - self.z * self.z
        x = 2.0 * self.a * self.x
        y = 2.0 * self.a * self.y
        z = 2.0 * self.a * self.z
        return Quaternion(a, x, y, z)

    def cube(self) -> "Quaternion":
        """
        Closed form of self**3. With r2 = a^2 and v2 = |v|^2 the real part is
        a*(r2 - 3*v2) and the vector part is (3*r2 - v2)*v.
        """
        rsq = self.a * self.a
        vsq = self.x * self.x + self.y * self.y + self.z * self.z
        factor = 3.0 * rsq - vsq
        return Quaternion((rsq - 3.0 * vsq) * self.a, factor * self.x, factor * self.y, factor * self.z)

    def conjugate(self) -> "Quaternion":
        return Quaternion(self.a, -self.x, -self.y, -self.z)

    def reciprocal(self) -> "Quaternion":
        factor = _inverse(self.norm_sq())
        return Quaternion(factor * self.a, -factor * self.x, -factor * self.y, -factor * self.z)

    def divide(self, q: "Quaternion") -> "Quaternion":
        """self * q^-1, expanded so no intermediate reciprocal is rounded."""
        a = self.a * q.a + self.x * q.x + self.y * q.y + self.z * q.z
        x = -self.a * q.x + self.x * q.a - self.y * q.z + self.z * q.y
        y = -self.a * q.y + self.x * q.z + self.y * q.a - self.z * q.x
        z = -self.a * q.z - self.x * q.y + self.y * q.x + self.z * q.a
        factor = _inverse(q.norm_sq())
        return Quaternion(a * factor, x * factor, y * factor, z * factor)

    # -- metrics ------------------------------------------------------------

    def norm_sq(self) -> float:
        return self.a * self.a + self.x * self.x + self.y * self.y + self.z * self.z

    def norm(self) -> float:
        return math.sqrt(self.norm_sq())

    def distance(self, q: "Quaternion") -> float:
        return dist(self, q)

    def normalize(self) -> "Quaternion":
        factor = _inverse(self.norm())
        return Quaternion(self.a * factor, self.x * factor, self.y * factor, self.z * factor)

    # -- in-place variants --------------------------------------------------

    def square_self(self) -> "Quaternion":
        a = self.a
        two_a = 2.0 * a
        self.a = a * a - self.x * self.x - self.y * self.y - self.z * self.z
        self.x = two_a * self.x
        self.y = two_a * self.y
        self.z = two_a * self.z
        return self

    def cube_self(self) -> "Quaternion":
        rsq = self.a * self.a
        vsq = self.x * self.x + self.y * self.y + self.z * self.z
        factor = 3.0 * rsq - vsq
        self.a = (rsq - 3.0 * vsq) * self.a
        self.x = factor * self.x
        self.y = factor * self.y
        self.z = factor * self.z
        return self

    def conjugate_self(self) -> "Quaternion":
        self.x = -self.x
        self.y = -self.y
        self.z = -self.z
        return self

    def reciprocate(self) -> "Quaternion":
        factor = _inverse(self.norm_sq())
        self.a = factor * self.a
        self.x = -factor * self.x
        self.y = -factor * self.y
        self.z = -factor * self.z
        return self

    # -- operators ----------------------------------------------------------

    def __neg__(self) -> "Quaternion":
        return Quaternion(-self.a, -self.x, -self.y, -self.z)

    def __abs__(self) -> float:
        return self.norm()

    def __add__(self, other):
        if isinstance(other, Quaternion):
            return self.add(other)
        if isinstance(other, (int, float)):
            return self.add_real(other)
        return NotImplemented

    def __radd__(self, other):
        if isinstance(other, (int, float)):
            return self.add_real(other)
        return NotImplemented

    def __sub__(self, other):
        if isinstance(other, Quaternion):
            return self.subtract(other)
        if isinstance(other, (int, float)):
            return self.subtract_real(other)
        return NotImplemented

    def __rsub__(self, other):
        if isinstance(other, (int, float)):
            return Quaternion(other - self.a, -self.x, -self.y, -self.z)
        return NotImplemented

    def __mul__(self, other):
        if isinstance(other, Quaternion):
            return self.multiply(other)
        if isinstance(other, (int, float)):
            return self.scale(other)
        return NotImplemented

    def __rmul__(self, other):
        if isinstance(other, (int, float)):
            return self.scale(other)
        return NotImplemented

    def __truediv__(self, other):
        if isinstance(other, Quaternion):
            return self.divide(other)
        if isinstance(other, (int, float)):
            return self.divide_real(other)
        return NotImplemented


ONE = Quaternion(1.0, 0.0, 0.0, 0.0)


def dist(p: Quaternion, q: Quaternion) -> float:
    da = p.a - q.a
    dx = p.x - q.x
    dy = p.y - q.y
    dz = p.z - q.z
    return math.sqrt(da * da + dx * dx + dy * dy + dz * dz)
