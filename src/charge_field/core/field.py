# MIT License (see LICENSE)
"""
Field model: the superposed field of a set of point charges.

Each charge contributes

    E_i = k * q_i * d * factor(r),   d = x - p_i,  r = |d|

    factor(r) = (r/R)^2 / r^(n+1)    if r < R
              = 1 / r^(n+1)          otherwise

where n is the decay exponent and R the softening radius. For n = 2 this
is the Coulomb law outside R. Inside R the quadratic softening keeps the
field finite and continuous while still pointing away from (or towards)
the charge. r is floored at R_EPS, so a query exactly on a charge gives a
zero contribution instead of NaN.

Evaluation is a pure read: nothing here mutates the store or the puck.
"""
from __future__ import annotations
from typing import Iterable

import numpy as np

from ..constants import K_FIELD, SOFTENING_RADIUS, R_EPS, DEFAULT_DECAY_EXPONENT
from ..types import ChargeSource, EditGhost
from ..util import f64


def effective_position(source: ChargeSource, ghost: EditGhost | None) -> np.ndarray:
    """Position of source, with the drag ghost substituted if it targets it."""
    if ghost is not None and ghost.target_id == source.id:
        return ghost.position
    return source.position


def effective_positions(
    sources: Iterable[ChargeSource],
    ghost: EditGhost | None = None,
) -> tuple[np.ndarray, np.ndarray]:
    """
    Pack sources into arrays for the vectorised kernel.

    Returns:
        Tuple (positions, charges) with shapes (M, 3) and (M,).
    """
    sources = list(sources)
    if not sources:
        return np.zeros((0, 3), dtype=np.float64), np.zeros(0, dtype=np.float64)
    positions = np.stack([effective_position(s, ghost) for s in sources])
    charges = np.array([s.charge for s in sources], dtype=np.float64)
    return positions, charges


def field_at(
    points: np.ndarray,
    positions: np.ndarray,
    charges: np.ndarray,
    decay_exponent: float = DEFAULT_DECAY_EXPONENT,
) -> np.ndarray:
    """
    Evaluate the field at many points.

    Complexity is O(N * M) for N points and M charges.

    Args:
        points: Query points, shape (N, 3).
        positions: Charge positions, shape (M, 3).
        charges: Charge values, shape (M,).
        decay_exponent: Falloff exponent n.

    Returns:
        Field vectors, shape (N, 3).
    """
    points = np.atleast_2d(f64(points))
    out = np.zeros_like(points)
    if len(charges) == 0:
        return out

    d = points[:, None, :] - positions[None, :, :]          # (N, M, 3)
    r = np.maximum(np.linalg.norm(d, axis=2), R_EPS)        # (N, M)

    factor = 1.0 / r ** (decay_exponent + 1.0)
    inside = r < SOFTENING_RADIUS
    factor = np.where(inside, (r / SOFTENING_RADIUS) ** 2 * factor, factor)

    weights = K_FIELD * charges[None, :] * factor           # (N, M)
    out += np.einsum("nm,nmk->nk", weights, d)
    return out


def evaluate(
    point,
    sources: Iterable[ChargeSource],
    ghost: EditGhost | None = None,
    decay_exponent: float = DEFAULT_DECAY_EXPONENT,
) -> np.ndarray:
    """
    Field vector at a single point.

    Args:
        point: Query point [x, y, z].
        sources: Charges contributing to the field.
        ghost: Active drag override, if any.
        decay_exponent: Falloff exponent n.

    Returns:
        Field vector [Ex, Ey, Ez]; zero when there are no sources.
    """
    positions, charges = effective_positions(sources, ghost)
    return field_at(f64(point)[None, :], positions, charges, decay_exponent)[0]


def force_scale(decay_exponent: float) -> float:
    """
    Rescaling applied to the raw field before it drives the puck.

    Grows as 10**n so that steeper falloffs, which shrink the field at
    scene distances, still move the puck at a usable rate.
    """
    return 10.0 ** decay_exponent


def min_distances(points: np.ndarray, positions: np.ndarray) -> np.ndarray:
    """
    Distance from each point to its nearest charge.

    Returns +inf for every point when there are no charges.
    """
    points = np.atleast_2d(f64(points))
    if len(positions) == 0:
        return np.full(points.shape[0], np.inf)
    d = points[:, None, :] - positions[None, :, :]
    return np.linalg.norm(d, axis=2).min(axis=1)
