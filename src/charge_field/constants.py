# MIT License (see LICENSE)
"""
Numerical constants used throughout the simulation.

The field law is a scaled, softened inverse-power law rather than SI
Coulomb electrostatics, so these values are in arbitrary scene units.
Tunable values (decay exponent, lattice size, ...) live in config.py;
the ones here are fixed.
"""
from __future__ import annotations

# Field scale constant k in  E = k * q * d * factor(r).
K_FIELD: float = 10.0

# Softening radius R. Inside it the per-source factor becomes
# (r/R)^2 / r^(n+1), which matches 1 / r^(n+1) exactly at r = R.
SOFTENING_RADIUS: float = 0.5

# Floor applied to |d| so r == 0 never divides by zero.
R_EPS: float = 1e-9

# Decay exponent n. The default reproduces an inverse-square falloff.
DEFAULT_DECAY_EXPONENT: float = 2.0
MAX_DECAY_EXPONENT: float = 6.0

# -----------------------------------------------------------------------------
# Integrator
# -----------------------------------------------------------------------------

# Substep h = max(H_MIN, STEP_DISTANCE / max(SPEED_FLOOR, |v|)):
# the puck travels at most ~STEP_DISTANCE per substep.
STEP_DISTANCE: float = 0.01
SPEED_FLOOR: float = 0.1
H_MIN: float = 1e-4

# Kick-drift-kick iterations per substep.
LEAPFROG_ITERATIONS: int = 2

# Remaining time below this is treated as zero.
TIME_EPS: float = 1e-12

# -----------------------------------------------------------------------------
# Field sampling
# -----------------------------------------------------------------------------

LATTICE_BOUND: float = 5.0
LATTICE_STEP: float = 1.0
ARROW_SCALE: float = 25.0
SHAFT_FRACTION: float = 0.4
OPACITY_SCALE: float = 4.0
OPACITY_EPS: float = 1e-6

# Ghost must move this far from the position used by the previous
# recompute before the lattice is sampled again.
GHOST_MOVE_THRESHOLD: float = 0.1

# Glyph meshes are modelled along +Y.
ARROW_REFERENCE_AXIS: tuple[float, float, float] = (0.0, 1.0, 0.0)

# -----------------------------------------------------------------------------
# Clock and default scenario
# -----------------------------------------------------------------------------

MAX_FRAME_DT: float = 0.1

PUCK_CHARGE: float = 1.0
PUCK_START: tuple[float, float, float] = (0.0, 0.0, 0.0)

# (position, charge) of each charge present after a reset.
DEFAULT_CHARGES: tuple[tuple[tuple[float, float, float], float], ...] = (
    ((0.0, 2.0, 0.0), -0.001),
)
