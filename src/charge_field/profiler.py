# MIT License (see LICENSE)
"""
Lightweight timing of simulation phases.

A Simulation with a Profiler attached records how long each frame spends
integrating the puck ("integrate") and sampling the lattice ("sample").

Example:
    profiler = Profiler()
    sim = Simulation(profiler=profiler)
    ...
    print(profiler.stats.summary()["sample"]["mean_ms"])
"""
from __future__ import annotations
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator


@dataclass
class ProfileStats:
    """Timing samples (seconds) keyed by section name."""
    samples: dict[str, list[float]] = field(default_factory=dict)

    def add(self, name: str, seconds: float) -> None:
        self.samples.setdefault(name, []).append(seconds)

    def total(self, name: str) -> float:
        """Total seconds recorded for a section (0 if never timed)."""
        return float(sum(self.samples.get(name, ())))

    def summary(self) -> dict[str, dict[str, float]]:
        """
        Per-section statistics.

        Returns:
            Dict mapping section name to {'n', 'mean_ms', 'max_ms'}.
        """
        return {
            name: {
                "n": len(times),
                "mean_ms": 1e3 * sum(times) / len(times),
                "max_ms": 1e3 * max(times),
            }
            for name, times in self.samples.items()
            if times
        }

    def clear(self) -> None:
        self.samples.clear()


class Profiler:
    """Times named sections with a context manager."""

    def __init__(self) -> None:
        self.stats = ProfileStats()

    @contextmanager
    def section(self, name: str) -> Iterator[None]:
        t0 = time.perf_counter()
        try:
            yield
        finally:
            self.stats.add(name, time.perf_counter() - t0)
