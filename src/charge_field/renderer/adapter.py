# MIT License (see LICENSE)
"""
Renderer adapters for the charge field simulation.

The simulation core has no graphics dependency. A renderer consumes the
outbound data of a Simulation (puck position, charges, trail, field arrows)
through the RendererAdapter interface; these adapters are optional.
"""
from __future__ import annotations
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, TextIO
import sys

import numpy as np

from ..types import ChargeSource, FieldSample

if TYPE_CHECKING:
    from ..simulation import Simulation


class RendererAdapter(ABC):
    """
    Abstract base class for renderer implementations.

    Subclasses integrate with a graphics backend (matplotlib, a 3D engine,
    a web frontend, ...).

    Usage:
        renderer.begin_frame(sim.time)
        renderer.draw_puck(sim.puck_position)
        ghost = sim.store.ghost
        for charge in sim.charges:
            if ghost is not None and ghost.target_id == charge.id:
                renderer.draw_charge(charge, ghost.position)
            else:
                renderer.draw_charge(charge, charge.position)
        renderer.draw_trail(sim.trail_points)
        renderer.draw_field(sim.field_samples)
        renderer.end_frame()

    Or use the convenience method:
        renderer.render_simulation(sim)
    """

    @abstractmethod
    def begin_frame(self, time: float) -> None:
        """Begin a new frame at simulation time ``time``."""
        ...

    @abstractmethod
    def draw_puck(self, position: np.ndarray) -> None:
        ...

    @abstractmethod
    def draw_charge(self, charge: ChargeSource, position: np.ndarray) -> None:
        """
        Draw one charge marker.

        Args:
            charge: The committed charge.
            position: Where to draw it (the ghost position while dragged).
        """
        ...

    @abstractmethod
    def draw_trail(self, points: np.ndarray) -> None:
        """Draw the puck trail, shape (N, 3). Not called when hidden."""
        ...

    @abstractmethod
    def draw_field(self, samples: list[FieldSample]) -> None:
        """Draw the arrow glyphs. Not called when hidden."""
        ...

    @abstractmethod
    def end_frame(self) -> None:
        ...

    def render_simulation(self, sim: "Simulation") -> None:
        """Draw everything the simulation currently exposes."""
        self.begin_frame(sim.time)
        self.draw_puck(sim.puck_position)
        ghost = sim.store.ghost
        for charge in sim.charges:
            if ghost is not None and ghost.target_id == charge.id:
                self.draw_charge(charge, ghost.position)
            else:
                self.draw_charge(charge, charge.position)
        if sim.show_trail:
            self.draw_trail(sim.trail_points)
        if sim.show_field:
            self.draw_field(sim.field_samples)
        self.end_frame()


class DebugRenderer(RendererAdapter):
    """
    Console/text renderer for development.

    Output:
        === Frame t=0.5000 ===
        puck @ (0.00, 0.03, 0.00)
        [1] q=-0.001 @ (0.00, 2.00, 0.00)
        trail: 30 point(s)
        field: 1331 arrow(s), max |E|=0.040
    """

    def __init__(self, output: TextIO | None = None, verbose: bool = True):
        self.output = output or sys.stdout
        self.verbose = verbose

    def begin_frame(self, time: float) -> None:
        self.output.write(f"=== Frame t={time:.4f} ===\n")

    def draw_puck(self, position: np.ndarray) -> None:
        x, y, z = position
        self.output.write(f"puck @ ({x:.2f}, {y:.2f}, {z:.2f})\n")

    def draw_charge(self, charge: ChargeSource, position: np.ndarray) -> None:
        x, y, z = position
        self.output.write(f"[{charge.id}] q={charge.charge:g} @ ({x:.2f}, {y:.2f}, {z:.2f})\n")

    def draw_trail(self, points: np.ndarray) -> None:
        if self.verbose:
            self.output.write(f"trail: {len(points)} point(s)\n")

    def draw_field(self, samples: list[FieldSample]) -> None:
        if self.verbose:
            peak = max((s.magnitude for s in samples), default=0.0)
            self.output.write(f"field: {len(samples)} arrow(s), max |E|={peak:.3f}\n")

    def end_frame(self) -> None:
        self.output.write("\n")
        self.output.flush()


class NullRenderer(RendererAdapter):
    """No-op renderer, for timing the simulation without drawing."""

    def begin_frame(self, time: float) -> None:
        pass

    def draw_puck(self, position: np.ndarray) -> None:
        pass

    def draw_charge(self, charge: ChargeSource, position: np.ndarray) -> None:
        pass

    def draw_trail(self, points: np.ndarray) -> None:
        pass

    def draw_field(self, samples: list[FieldSample]) -> None:
        pass

    def end_frame(self) -> None:
        pass


class BufferedRenderer(RendererAdapter):
    """
    Renderer that records plain-Python frame data.

    Example:
        renderer = BufferedRenderer()
        for _ in range(100):
            scheduler.tick(1/60)
            renderer.render_simulation(sim)

        for frame in renderer.frames:
            print(frame["time"], frame["puck"])
    """

    def __init__(self):
        self.frames: list[dict] = []
        self._current_frame: dict | None = None

    def begin_frame(self, time: float) -> None:
        self._current_frame = {
            "time": time,
            "puck": None,
            "charges": [],
            "trail": [],
            "arrows": [],
        }

    def draw_puck(self, position: np.ndarray) -> None:
        if self._current_frame is not None:
            self._current_frame["puck"] = position.tolist()

    def draw_charge(self, charge: ChargeSource, position: np.ndarray) -> None:
        if self._current_frame is None:
            return
        self._current_frame["charges"].append({
            "id": charge.id,
            "position": position.tolist(),
            "charge": charge.charge,
        })

    def draw_trail(self, points: np.ndarray) -> None:
        if self._current_frame is not None:
            self._current_frame["trail"] = points.tolist()

    def draw_field(self, samples: list[FieldSample]) -> None:
        if self._current_frame is None:
            return
        self._current_frame["arrows"] = [
            {
                "origin": s.origin.tolist(),
                "shaft_start": s.shaft_start.tolist(),
                "head_end": s.head_end.tolist(),
                "orientation": s.orientation.tolist(),
                "opacity": s.opacity,
            }
            for s in samples
        ]

    def end_frame(self) -> None:
        if self._current_frame is not None:
            self.frames.append(self._current_frame)
            self._current_frame = None

    def clear(self) -> None:
        self.frames.clear()
