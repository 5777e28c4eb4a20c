from __future__ import annotations

from dataclasses import dataclass

from quatfractal.config import EPS_SQ, MAX_ITERS
from quatfractal.quaternion import Quaternion


@dataclass(frozen=True)
class NewtonOutcome:
    quaternion: Quaternion
    residual: Quaternion
    iterations: int
    converged: bool


def residual(q: Quaternion) -> Quaternion:
    return q.cube() - 1.0


def newton_step(q: Quaternion) -> Quaternion:
    """One Newton update for f(q) = q^3 - 1, i.e. (2q^3 + 1) / (3q^2)."""
    num = q.cube() * 2.0 + 1.0
    den = q.square() * 3.0
    return num / den


def iterate(q: Quaternion, *, max_iters: int = MAX_ITERS, eps_sq: float = EPS_SQ) -> NewtonOutcome:
    p = residual(q)
    iters = 0
    # A NaN residual never passes the convergence test, so singular starts run the full budget.
    while iters < max_iters and not p.norm_sq() < eps_sq:
        q = newton_step(q)
        p = residual(q)
        iters += 1
    return NewtonOutcome(quaternion=q, residual=p, iterations=iters, converged=p.norm_sq() < eps_sq)
