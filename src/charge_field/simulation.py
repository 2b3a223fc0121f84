# MIT License (see LICENSE)
"""
The simulation world and its input/output surface.

Simulation wires the components together:
- ChargeStore: the placed charges and the drag ghost.
- Puck + TrailBuffer: the integrated body and its recorded path.
- FieldSampler: lattice arrows, recomputed only when dirty.
- SimulationClock: Idle/Running frame loop over a FrameScheduler.

Each running frame:
    1. Take a (sources, ghost) snapshot of the store.
    2. Advance the puck with leapfrog_advance, appending to the trail.
    3. Refresh the field samples if they are shown and dirty.

UI code calls the inbound methods (play, stop, reset, set_decay_exponent,
set_show_field, set_show_trail and the charge editing methods) between
frames and reads puck_position, trail_points, field_samples and charges to
draw the scene.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass, field

import numpy as np

from .clock import FrameScheduler, ManualFrameScheduler, SimulationClock
from .config import SimulationConfig, validate_decay_exponent
from .core.integrators import leapfrog_advance
from .profiler import Profiler
from .sampler import FieldSampler
from .store import ChargeStore
from .types import ChargeSource, EditGhost, FieldSample, Puck, TrailBuffer

logger = logging.getLogger(__name__)


@dataclass
class Simulation:
    """
    Charge field world.

    Attributes:
        config: Tunable parameters; reset() restores its initial state.
        scheduler: Host frame scheduler (a ManualFrameScheduler by default).
        profiler: Optional Profiler timing "integrate" and "sample".
        show_field: Whether field samples are produced.
        show_trail: Whether trail points are exposed.
    """
    config: SimulationConfig = field(default_factory=SimulationConfig)
    scheduler: FrameScheduler = field(default_factory=ManualFrameScheduler)
    profiler: Profiler | None = None
    show_field: bool = True
    show_trail: bool = True

    # Internal state
    time: float = field(default=0.0, init=False)

    def __post_init__(self) -> None:
        self.store = ChargeStore(self.config.initial_charges)
        self.puck = Puck(charge=self.config.puck_charge)
        self.trail = TrailBuffer(self.config.trail_max_points)
        self.decay_exponent = self.config.decay_exponent

        self.sampler = FieldSampler(self.config)
        self.sampler.watch(self.store)

        self.clock = SimulationClock(
            self.scheduler,
            on_step=self.step,
            on_reset=self._restore_initial_state,
            max_frame_dt=self.config.max_frame_dt,
        )
        if self.show_field:
            self._sample()

    # -------------------------------------------------------------------------
    # Clock
    # -------------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self.clock.running

    def play(self) -> None:
        self.clock.play()

    def stop(self) -> None:
        self.clock.stop()

    def reset(self) -> None:
        """
        Stop and rebuild the initial state from configuration.

        The puck returns to the origin at rest, the trail empties, the drag
        ghost is dropped, the default charges replace the current ones and
        the decay exponent returns to its configured value.
        """
        self.clock.reset()

    def _restore_initial_state(self) -> None:
        self.puck = Puck(charge=self.config.puck_charge)
        self.trail.clear()
        self.time = 0.0
        self.decay_exponent = self.config.decay_exponent
        self.store.reset(self.config.initial_charges)
        self.sampler.invalidate()
        if self.show_field:
            self._sample()
        logger.info("Simulation reset")

    def step(self, dt: float) -> None:
        """
        Advance one frame of ``dt`` seconds.

        Called by the clock while running; may also be called directly to
        drive the simulation without a scheduler. A non-positive ``dt``
        changes nothing.
        """
        if dt <= 0.0:
            return
        sources, ghost = self.store.snapshot()

        if self.profiler is not None:
            with self.profiler.section("integrate"):
                self.puck = leapfrog_advance(
                    self.puck, dt, sources, ghost, self.decay_exponent, self.trail
                )
        else:
            self.puck = leapfrog_advance(
                self.puck, dt, sources, ghost, self.decay_exponent, self.trail
            )
        self.time += dt

        if self.show_field:
            self._refresh(sources, ghost)

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def set_decay_exponent(self, value: float) -> None:
        """
        Change the falloff exponent.

        Raises:
            InvalidConfiguration: If value is negative or not finite.
        """
        n = validate_decay_exponent(value)
        if n == self.decay_exponent:
            return
        self.decay_exponent = n
        self.sampler.invalidate()
        logger.debug("Decay exponent set to %g", n)

    def set_show_field(self, show: bool) -> None:
        self.show_field = bool(show)

    def set_show_trail(self, show: bool) -> None:
        self.show_trail = bool(show)

    # -------------------------------------------------------------------------
    # Charge editing (forwarded to the store)
    # -------------------------------------------------------------------------

    def add_charge(self, position, charge: float) -> int:
        return self.store.add(position, charge)

    def move_charge(self, charge_id: int, position) -> None:
        self.store.move(charge_id, position)

    def remove_charge(self, charge_id: int) -> bool:
        return self.store.remove(charge_id)

    def begin_drag(self, charge_id: int, position=None) -> EditGhost:
        return self.store.begin_ghost(charge_id, position)

    def update_drag(self, position) -> bool:
        return self.store.update_ghost(position)

    def commit_drag(self) -> bool:
        return self.store.commit_ghost()

    def cancel_drag(self) -> bool:
        return self.store.cancel_ghost()

    # -------------------------------------------------------------------------
    # Outputs
    # -------------------------------------------------------------------------

    @property
    def puck_position(self) -> np.ndarray:
        return self.puck.position.copy()

    @property
    def charges(self) -> tuple[ChargeSource, ...]:
        """Committed charges (drawn at the ghost position while dragged)."""
        return self.store.sources

    @property
    def trail_points(self) -> np.ndarray:
        """Recorded puck path, shape (N, 3); empty while the trail is hidden."""
        if not self.show_trail:
            return np.zeros((0, 3), dtype=np.float64)
        return self.trail.as_array()

    @property
    def field_samples(self) -> list[FieldSample]:
        """Arrow glyphs, refreshed if dirty; empty while the field is hidden."""
        if not self.show_field:
            return []
        sources, ghost = self.store.snapshot()
        return self._refresh(sources, ghost)

    def _refresh(self, sources, ghost) -> list[FieldSample]:
        if not self.sampler.dirty:
            return self.sampler.samples
        return self._sample(sources, ghost)

    def _sample(self, sources=None, ghost=None) -> list[FieldSample]:
        if sources is None:
            sources, ghost = self.store.snapshot()
        if self.profiler is not None:
            with self.profiler.section("sample"):
                return self.sampler.recompute(sources, ghost, self.decay_exponent)
        return self.sampler.recompute(sources, ghost, self.decay_exponent)
