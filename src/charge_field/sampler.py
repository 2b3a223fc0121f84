# MIT License (see LICENSE)
"""
Sampling the field on a fixed lattice for arrow-glyph visualisation.

The lattice spans [-b, b] in X and Z and [0, 2b] in Y with spacing s. At
every lattice point p the field v = E(p) is turned into an arrow:

    scale       = arrow_scale / max(|v|, 1)
    direction   = unit(v * scale)
    length      = |v * scale|              (never more than arrow_scale)
    shaft_start = p + direction * length * shaft_fraction
    head_end    = p + direction * length
    orientation = rotation taking +Y onto direction
    opacity     = min(1, opacity_scale / (dist_to_nearest_charge² + eps))

Sampling the whole lattice is too costly to repeat every frame, so
FieldSampler keeps a dirty flag. The flag is raised by committed store
changes, by a decay-exponent change (invalidate()), and by a drag ghost that
has moved more than ghost_move_threshold since the last recompute.
refresh() only recomputes when the flag is up.
"""
from __future__ import annotations
import logging
from typing import Sequence

import numpy as np

from .config import SimulationConfig
from .constants import ARROW_REFERENCE_AXIS, OPACITY_EPS
from .core.field import effective_positions, field_at, min_distances
from .store import ChargeStore, StoreEvent
from .types import ChargeSource, EditGhost, FieldSample
from .util import f64, quat_rows_from_unit_vectors, unit_rows

logger = logging.getLogger(__name__)


def axis_values(lo: float, hi: float, step: float) -> np.ndarray:
    """Points lo, lo + step, ... up to and including hi (within step/2)."""
    n = int(np.floor((hi - lo) / step + 0.5)) + 1
    return lo + step * np.arange(n, dtype=np.float64)


def lattice_points(bound: float, step: float) -> np.ndarray:
    """
    Lattice of sample points, shape (N, 3).

    X and Z cover [-bound, bound]; Y covers [0, 2 * bound].
    """
    xs = axis_values(-bound, bound, step)
    ys = axis_values(0.0, 2.0 * bound, step)
    zs = axis_values(-bound, bound, step)
    gx, gy, gz = np.meshgrid(xs, ys, zs, indexing="ij")
    return np.stack([gx.ravel(), gy.ravel(), gz.ravel()], axis=1)


def encode_arrows(
    points: np.ndarray,
    vectors: np.ndarray,
    nearest: np.ndarray,
    arrow_scale: float,
    shaft_fraction: float,
    opacity_scale: float,
) -> list[FieldSample]:
    """
    Convert field vectors at ``points`` into arrow glyphs.

    Args:
        points: Lattice points, shape (N, 3).
        vectors: Field at each point, shape (N, 3).
        nearest: Distance to the nearest charge, shape (N,); +inf means
                 there are no charges and glyphs stay fully opaque.
        arrow_scale: Arrow length reached when |E| >= 1.
        shaft_fraction: Fraction of the length taken by the shaft.
        opacity_scale: Numerator of the distance fade.
    """
    magnitude = np.linalg.norm(vectors, axis=1)
    scaled = vectors * (arrow_scale / np.maximum(magnitude, 1.0))[:, None]
    length = np.linalg.norm(scaled, axis=1)
    direction = unit_rows(scaled)

    shaft_start = points + direction * (length * shaft_fraction)[:, None]
    head_end = points + direction * length[:, None]
    orientation = quat_rows_from_unit_vectors(f64(ARROW_REFERENCE_AXIS), direction)

    opacity = np.ones_like(magnitude)
    finite = np.isfinite(nearest)
    opacity[finite] = np.minimum(1.0, opacity_scale / (nearest[finite] ** 2 + OPACITY_EPS))

    return [
        FieldSample(
            origin=points[i].copy(),
            shaft_start=shaft_start[i],
            head_end=head_end[i],
            orientation=orientation[i],
            magnitude=float(magnitude[i]),
            opacity=float(opacity[i]),
        )
        for i in range(points.shape[0])
    ]


class FieldSampler:
    """
    Lattice sampler with a dirty-flag recompute policy.

    Typical usage:
        sampler = FieldSampler(config)
        sampler.watch(store)
        ...
        samples = sampler.refresh(store.sources, store.ghost, decay)
    """

    def __init__(self, config: SimulationConfig | None = None) -> None:
        self.config = config or SimulationConfig()
        self.points = lattice_points(self.config.lattice_bound, self.config.lattice_step)
        self.samples: list[FieldSample] = []
        self.dirty = True
        self.recompute_count = 0
        self._anchor_id: int | None = None
        self._ghost_anchor: np.ndarray | None = None

    def watch(self, store: ChargeStore) -> None:
        """Subscribe to ``store`` so its mutations raise the dirty flag."""
        store.subscribe(self._on_store_event)

    def invalidate(self) -> None:
        """Force a recompute on the next refresh()."""
        self.dirty = True

    def _on_store_event(self, event: StoreEvent, store: ChargeStore) -> None:
        if event.commits or event is StoreEvent.GHOST_CANCEL:
            self.dirty = True
        elif store.ghost is not None:
            ghost = store.ghost
            self.notify_ghost_moved(ghost, store.get(ghost.target_id).position)

    def notify_ghost_moved(self, ghost: EditGhost, stored_position) -> bool:
        """
        Raise the dirty flag if the drag ghost has moved far enough.

        Distance is measured from the position the last recompute used for
        the dragged charge: the ghost position if that recompute saw the same
        ghost, otherwise the charge's stored position.

        Returns:
            True if the flag was raised.
        """
        if self._anchor_id is None:
            anchor = f64(stored_position)
        elif self._anchor_id == ghost.target_id:
            anchor = self._ghost_anchor
        else:
            anchor = None

        if anchor is not None:
            moved = float(np.linalg.norm(ghost.position - anchor))
            if moved <= self.config.ghost_move_threshold:
                return False
        self.dirty = True
        return True

    def recompute(
        self,
        sources: Sequence[ChargeSource],
        ghost: EditGhost | None = None,
        decay_exponent: float | None = None,
    ) -> list[FieldSample]:
        """Sample the whole lattice and clear the dirty flag."""
        if decay_exponent is None:
            decay_exponent = self.config.decay_exponent
        positions, charges = effective_positions(sources, ghost)
        vectors = field_at(self.points, positions, charges, decay_exponent)
        nearest = min_distances(self.points, positions)

        cfg = self.config
        self.samples = encode_arrows(
            self.points, vectors, nearest,
            cfg.arrow_scale, cfg.shaft_fraction, cfg.opacity_scale,
        )
        self._anchor_id = None if ghost is None else ghost.target_id
        self._ghost_anchor = None if ghost is None else ghost.position.copy()
        self.dirty = False
        self.recompute_count += 1
        logger.debug(
            "Sampled %d lattice points against %d charge(s)", len(self.points), len(charges)
        )
        return self.samples

    def refresh(
        self,
        sources: Sequence[ChargeSource],
        ghost: EditGhost | None = None,
        decay_exponent: float | None = None,
    ) -> list[FieldSample]:
        """Recompute if dirty; otherwise return the cached samples."""
        if self.dirty:
            return self.recompute(sources, ghost, decay_exponent)
        return self.samples
