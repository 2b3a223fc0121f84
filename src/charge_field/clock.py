# MIT License (see LICENSE)
"""
Frame scheduling for the simulation.

The host application owns the actual timer (a browser animation frame, a
GUI idle callback, a game loop, ...). It is reached through the small
FrameScheduler protocol: register a callback for the next frame, or cancel a
pending registration. SimulationClock only decides *when* to register.

While running, each frame callback receives a monotonic timestamp, turns it
into the elapsed time since the previous frame, hands that to the step hook
and registers itself again. Stopping cancels the pending registration; there
is never any in-flight work, since a callback always runs to completion
before the next one is scheduled.
"""
from __future__ import annotations
import enum
import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


class FrameScheduler(Protocol):
    """Host-provided source of frame callbacks."""

    def register(self, callback: FrameCallback) -> int:
        """Run ``callback(timestamp)`` on the next frame; return a handle."""
        ...

    def cancel(self, handle: int) -> None:
        """Drop a pending registration. Unknown handles are ignored."""
        ...


class ManualFrameScheduler:
    """
    Deterministic scheduler driven by explicit tick() calls.

    Used for headless runs and tests: time only advances when the caller
    says so.

    Example:
        scheduler = ManualFrameScheduler()
        sim = Simulation(scheduler=scheduler)
        sim.play()
        scheduler.run_frames(60, 1/60)
    """

    def __init__(self, start_time: float = 0.0) -> None:
        self.now = start_time
        self._pending: dict[int, FrameCallback] = {}
        self._next_handle = 1

    def register(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        """Number of callbacks waiting for the next frame."""
        return len(self._pending)

    def tick(self, dt: float) -> int:
        """
        Advance time by ``dt`` and fire the callbacks registered so far.

        Callbacks registered while firing wait for the next tick.

        Returns:
            Number of callbacks fired.
        """
        self.now += dt
        due, self._pending = self._pending, {}
        for callback in due.values():
            callback(self.now)
        return len(due)

    def run_frames(self, n: int, dt: float) -> None:
        """Tick ``n`` frames of ``dt`` seconds each."""
        for _ in range(n):
            self.tick(dt)


class ClockState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"


class SimulationClock:
    """
    Idle/Running state machine over a FrameScheduler.

    Args:
        scheduler: Source of frame callbacks.
        on_step: Called with the elapsed seconds of every running frame.
        on_reset: Called by reset() after the clock has stopped.
        max_frame_dt: Clamp on the elapsed time of a single frame. None
                      disables the clamp.
    """

    def __init__(
        self,
        scheduler: FrameScheduler,
        on_step: Callable[[float], None],
        on_reset: Callable[[], None] | None = None,
        max_frame_dt: float | None = None,
    ) -> None:
        self.scheduler = scheduler
        self.on_step = on_step
        self.on_reset = on_reset
        self.max_frame_dt = max_frame_dt
        self.state = ClockState.IDLE
        self.frames = 0
        self._handle: int | None = None
        self._last_time: float | None = None

    @property
    def running(self) -> bool:
        return self.state is ClockState.RUNNING

    def play(self) -> None:
        """Start (or resume) running. No-op when already running."""
        if self.running:
            return
        self.state = ClockState.RUNNING
        # The first frame after a (re)start only records its timestamp, so
        # time spent paused is never integrated.
        self._last_time = None
        self._handle = self.scheduler.register(self._on_frame)
        logger.info("Clock started")

    def stop(self) -> None:
        """Stop running and cancel the pending frame callback."""
        if not self.running:
            return
        self.state = ClockState.IDLE
        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None
        logger.info("Clock stopped after %d frame(s)", self.frames)

    def reset(self) -> None:
        """Stop, then invoke the reset hook."""
        self.stop()
        self.frames = 0
        if self.on_reset is not None:
            self.on_reset()

    def _on_frame(self, now: float) -> None:
        self._handle = None
        if not self.running:
            return

        elapsed = 0.0 if self._last_time is None else now - self._last_time
        self._last_time = now
        if self.max_frame_dt is not None and elapsed > self.max_frame_dt:
            logger.debug("Frame time %.4fs clamped to %.4fs", elapsed, self.max_frame_dt)
            elapsed = self.max_frame_dt

        if elapsed > 0.0:
            self.frames += 1
            self.on_step(elapsed)

        # on_step may have stopped (or restarted) the clock
        if self.running and self._handle is None:
            self._handle = self.scheduler.register(self._on_frame)
