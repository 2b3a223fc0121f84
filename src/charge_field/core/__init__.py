# MIT License (see LICENSE)
"""
Core numerical components.

This subpackage provides:
    - Field model: softened inverse-power superposition of point charges.
    - Integrator: adaptive-substep leapfrog advance of the puck.
    - Invariants: kinetic energy and path length diagnostics.

Typical usage:
    from charge_field.core import evaluate, leapfrog_advance

    E = evaluate((0, 0, 0), store.sources, store.ghost, decay_exponent=2.0)
    puck = leapfrog_advance(puck, dt=1/60, sources=store.sources)
"""
from .field import (
    evaluate,
    effective_position,
    effective_positions,
    field_at,
    force_scale,
    min_distances,
)
from .integrators import leapfrog_advance, leapfrog_step, substep_size
from .invariants import kinetic_energy, path_length

__all__ = [
    # Field
    "evaluate",
    "effective_position",
    "effective_positions",
    "field_at",
    "force_scale",
    "min_distances",
    # Integrators
    "leapfrog_advance",
    "leapfrog_step",
    "substep_size",
    # Diagnostics
    "kinetic_energy",
    "path_length",
]
