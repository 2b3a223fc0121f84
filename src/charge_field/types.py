# MIT License (see LICENSE)
"""
Core type definitions for the charge field simulation.

Defines the fundamental data structures:
- ChargeSource: a static point charge owned by the ChargeStore.
- EditGhost: the uncommitted position of a charge being dragged.
- Puck: the single dynamic body pushed around by the field.
- TrailBuffer: positions recorded once per frame while running.
- FieldSample: one arrow glyph of the sampled vector field.

Positions and velocities are float64 numpy arrays of shape (3,).
"""
from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from .constants import PUCK_CHARGE, PUCK_START
from .util import vec3


@dataclass
class ChargeSource:
    """
    A point charge placed in the scene.

    Attributes:
        id: Unique identifier assigned by ChargeStore.add().
        position: Location [x, y, z].
        charge: Signed charge. Negative charges attract a positive puck.
    """
    id: int
    position: np.ndarray | tuple[float, float, float]
    charge: float

    def __post_init__(self) -> None:
        self.position = vec3(self.position)
        self.charge = float(self.charge)


@dataclass(frozen=True)
class EditGhost:
    """
    Transient position override for the charge currently being dragged.

    While active, field evaluation uses ``position`` in place of the
    stored position of charge ``target_id``.
    """
    target_id: int
    position: np.ndarray

    def __post_init__(self) -> None:
        object.__setattr__(self, "position", vec3(self.position))


@dataclass
class Puck:
    """
    The charged test body.

    The puck is massless in the sense that its acceleration is simply
    charge * field * force_scale(n); see core/integrators.py.

    Attributes:
        position: Location [x, y, z].
        velocity: Velocity [vx, vy, vz].
        charge: Signed charge multiplying the field.
    """
    position: np.ndarray | tuple[float, float, float] = PUCK_START
    velocity: np.ndarray | tuple[float, float, float] = (0.0, 0.0, 0.0)
    charge: float = PUCK_CHARGE

    def __post_init__(self) -> None:
        self.position = vec3(self.position)
        self.velocity = vec3(self.velocity)
        self.charge = float(self.charge)

    def copy(self) -> "Puck":
        return Puck(self.position.copy(), self.velocity.copy(), self.charge)


class TrailBuffer:
    """
    Ordered record of puck positions, appended once per integrator call.

    Only used for visualisation. With ``max_points`` set, the oldest points
    are dropped once the buffer is full.
    """

    def __init__(self, max_points: int | None = None) -> None:
        self.max_points = max_points
        self._points: list[np.ndarray] = []

    def append(self, point) -> None:
        self._points.append(vec3(point))
        if self.max_points is not None and len(self._points) > self.max_points:
            del self._points[: len(self._points) - self.max_points]

    def clear(self) -> None:
        self._points.clear()

    def as_array(self) -> np.ndarray:
        """Positions as an (N, 3) array (shape (0, 3) when empty)."""
        if not self._points:
            return np.zeros((0, 3), dtype=np.float64)
        return np.stack(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def __iter__(self):
        return iter(self._points)


@dataclass
class FieldSample:
    """
    One arrow glyph of the sampled field.

    The arrow is drawn as a cylinder from ``origin`` to ``shaft_start``
    and a cone from ``shaft_start`` to ``head_end``, both rotated by
    ``orientation`` (quaternion x, y, z, w taking +Y onto the arrow
    direction).

    Attributes:
        origin: Lattice point the sample was taken at.
        shaft_start: End of the shaft / base of the head.
        head_end: Tip of the arrow.
        orientation: Quaternion (x, y, z, w).
        magnitude: |E| at the lattice point, before arrow scaling.
        opacity: Alpha in [0, 1], fading with distance to the nearest charge.
    """
    origin: np.ndarray
    shaft_start: np.ndarray
    head_end: np.ndarray
    orientation: np.ndarray
    magnitude: float
    opacity: float

    @property
    def length(self) -> float:
        """Rendered arrow length."""
        return float(np.linalg.norm(self.head_end - self.origin))
