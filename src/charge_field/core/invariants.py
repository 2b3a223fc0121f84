# MIT License (see LICENSE)
"""
Diagnostic quantities for checking integration quality.

With no charges the puck moves ballistically, so its kinetic energy must
stay constant; with charges it is useful for spotting blow-ups near a
source.
"""
from __future__ import annotations
import numpy as np

from ..types import Puck


def kinetic_energy(puck: Puck, mass: float = 1.0) -> float:
    """
    Kinetic energy of the puck, T = 0.5 * m * v².

    The puck carries no mass of its own, so m defaults to 1.
    """
    return 0.5 * mass * float(np.dot(puck.velocity, puck.velocity))


def path_length(points: np.ndarray) -> float:
    """Total length of the polyline through ``points`` (shape (N, 3))."""
    points = np.asarray(points, dtype=np.float64)
    if len(points) < 2:
        return 0.0
    return float(np.linalg.norm(np.diff(points, axis=0), axis=1).sum())
