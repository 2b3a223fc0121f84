# MIT License (see LICENSE)
"""
Tunable simulation parameters.

SimulationConfig gathers every value a host application may change
(decay exponent, lattice extent, glyph styling, ...). Values are checked
once, in __post_init__, so the field and integrator kernels can assume
sane inputs. Fixed numerical constants stay in constants.py.
"""
from __future__ import annotations
import dataclasses
import logging
import math
from dataclasses import dataclass

from . import constants as C
from .errors import InvalidConfiguration

logger = logging.getLogger(__name__)


def validate_decay_exponent(value: float) -> float:
    """
    Check a decay exponent supplied from outside the core.

    Negative or non-finite values are rejected; values above
    MAX_DECAY_EXPONENT are clamped.

    Raises:
        InvalidConfiguration: If value is negative, NaN or infinite.
    """
    try:
        n = float(value)
    except (TypeError, ValueError) as exc:
        raise InvalidConfiguration(f"Decay exponent must be a number, got {value!r}") from exc
    if not math.isfinite(n) or n < 0.0:
        raise InvalidConfiguration(f"Decay exponent must be finite and >= 0, got {value!r}")
    if n > C.MAX_DECAY_EXPONENT:
        logger.warning("Decay exponent %.3g clamped to %.3g", n, C.MAX_DECAY_EXPONENT)
        n = C.MAX_DECAY_EXPONENT
    return n


def _require_positive(name: str, value: float) -> None:
    if not math.isfinite(value) or value <= 0.0:
        raise InvalidConfiguration(f"{name} must be a positive number, got {value!r}")


@dataclass(frozen=True)
class SimulationConfig:
    """
    Parameters of one simulation.

    Attributes:
        decay_exponent: Falloff exponent n of the field law (also sets the
                        10**n force rescaling used by the integrator).
        lattice_bound: Half extent of the sampling lattice in X and Z; the
                       Y range is [0, 2 * lattice_bound].
        lattice_step: Spacing between lattice points.
        arrow_scale: Longest arrow drawn (reached when |E| >= 1).
        shaft_fraction: Fraction of the arrow taken by the shaft.
        opacity_scale: Glyphs closer than sqrt(opacity_scale) to a charge
                       are fully opaque.
        ghost_move_threshold: Distance a dragged charge must move before the
                              lattice is resampled.
        max_frame_dt: Upper bound on the time advanced per frame. None
                      disables the clamp.
        puck_charge: Charge of the puck.
        trail_max_points: Trail length limit. None keeps every point.
        initial_charges: (position, charge) pairs placed on reset.
    """
    decay_exponent: float = C.DEFAULT_DECAY_EXPONENT
    lattice_bound: float = C.LATTICE_BOUND
    lattice_step: float = C.LATTICE_STEP
    arrow_scale: float = C.ARROW_SCALE
    shaft_fraction: float = C.SHAFT_FRACTION
    opacity_scale: float = C.OPACITY_SCALE
    ghost_move_threshold: float = C.GHOST_MOVE_THRESHOLD
    max_frame_dt: float | None = C.MAX_FRAME_DT
    puck_charge: float = C.PUCK_CHARGE
    trail_max_points: int | None = None
    initial_charges: tuple = C.DEFAULT_CHARGES

    def __post_init__(self) -> None:
        object.__setattr__(self, "decay_exponent", validate_decay_exponent(self.decay_exponent))
        _require_positive("lattice_bound", self.lattice_bound)
        _require_positive("lattice_step", self.lattice_step)
        if self.lattice_step > 2 * self.lattice_bound:
            raise InvalidConfiguration(
                f"lattice_step {self.lattice_step} exceeds lattice extent {2 * self.lattice_bound}"
            )
        _require_positive("arrow_scale", self.arrow_scale)
        _require_positive("opacity_scale", self.opacity_scale)
        if not 0.0 <= self.shaft_fraction <= 1.0:
            raise InvalidConfiguration(f"shaft_fraction must be in [0, 1], got {self.shaft_fraction!r}")
        if self.ghost_move_threshold < 0.0:
            raise InvalidConfiguration(
                f"ghost_move_threshold must be >= 0, got {self.ghost_move_threshold!r}"
            )
        if self.max_frame_dt is not None:
            _require_positive("max_frame_dt", self.max_frame_dt)
        if self.trail_max_points is not None and self.trail_max_points < 1:
            raise InvalidConfiguration(f"trail_max_points must be >= 1, got {self.trail_max_points!r}")

        charges = tuple((tuple(float(c) for c in pos), float(q)) for pos, q in self.initial_charges)
        for pos, _ in charges:
            if len(pos) != 3:
                raise InvalidConfiguration(f"Initial charge position must be 3D, got {pos!r}")
        object.__setattr__(self, "initial_charges", charges)

    def replace(self, **changes) -> "SimulationConfig":
        """Return a copy with some fields changed (validated again)."""
        return dataclasses.replace(self, **changes)
