# MIT License (see LICENSE)
"""
charge_field - A charged puck moving through the field of placed charges.

This package provides the numerical core of an interactive field
visualiser: a softened inverse-power field law, an adaptive-substep
leapfrog integrator for the puck, and a lattice sampler that turns the
field into arrow glyphs.

Main entry points:
    - Simulation: The world; owns charges, puck, trail, sampler and clock.
    - SimulationConfig: Tunable parameters.
    - ChargeStore: Charge editing, including drag ghosts.
    - ManualFrameScheduler: Headless frame source.

Submodules:
    - core: Field model, integrator and diagnostics.
    - renderer: Optional visualization adapters.

Example:
    from charge_field import Simulation, ManualFrameScheduler

    scheduler = ManualFrameScheduler()
    sim = Simulation(scheduler=scheduler)
    sim.play()
    scheduler.run_frames(60, 1/60)
    print(sim.puck_position)
"""
from .simulation import Simulation
from .config import SimulationConfig
from .store import ChargeStore, StoreEvent
from .sampler import FieldSampler
from .clock import SimulationClock, ManualFrameScheduler, ClockState
from .types import ChargeSource, EditGhost, Puck, TrailBuffer, FieldSample
from .errors import ChargeFieldError, InvalidReference, InvalidConfiguration

__all__ = [
    # World
    "Simulation",
    "SimulationConfig",
    # Components
    "ChargeStore",
    "StoreEvent",
    "FieldSampler",
    "SimulationClock",
    "ManualFrameScheduler",
    "ClockState",
    # Data
    "ChargeSource",
    "EditGhost",
    "Puck",
    "TrailBuffer",
    "FieldSample",
    # Errors
    "ChargeFieldError",
    "InvalidReference",
    "InvalidConfiguration",
]
