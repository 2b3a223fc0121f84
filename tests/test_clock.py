import pytest
from charge_field.clock import ClockState, ManualFrameScheduler, SimulationClock


def _clock(max_frame_dt=None):
    scheduler = ManualFrameScheduler()
    steps = []
    resets = []
    clock = SimulationClock(
        scheduler,
        on_step=steps.append,
        on_reset=lambda: resets.append(True),
        max_frame_dt=max_frame_dt,
    )
    return scheduler, clock, steps, resets


def test_idle_until_play():
    scheduler, clock, steps, _ = _clock()
    assert clock.state is ClockState.IDLE
    scheduler.run_frames(5, 0.1)
    assert steps == []
    assert scheduler.pending == 0


def test_running_frames_report_elapsed_time():
    scheduler, clock, steps, _ = _clock()
    clock.play()
    assert clock.state is ClockState.RUNNING
    assert scheduler.pending == 1

    # First frame only records the timestamp
    scheduler.tick(0.5)
    assert steps == []

    scheduler.tick(0.02)
    scheduler.tick(0.03)
    assert steps == pytest.approx([0.02, 0.03])
    assert clock.frames == 2
    assert scheduler.pending == 1


def test_play_twice_registers_once():
    scheduler, clock, _, _ = _clock()
    clock.play()
    clock.play()
    assert scheduler.pending == 1


def test_stop_cancels_pending_callback():
    scheduler, clock, steps, _ = _clock()
    clock.play()
    scheduler.run_frames(3, 0.1)
    clock.stop()
    assert clock.state is ClockState.IDLE
    assert scheduler.pending == 0

    n = len(steps)
    scheduler.run_frames(3, 0.1)
    assert len(steps) == n


def test_resume_does_not_count_paused_time():
    scheduler, clock, steps, _ = _clock()
    clock.play()
    scheduler.run_frames(3, 0.1)
    clock.stop()

    # Ten seconds pass while paused
    scheduler.tick(10.0)
    clock.play()
    scheduler.tick(0.05)
    scheduler.tick(0.05)

    assert max(steps) < 1.0
    assert sum(steps) == pytest.approx(0.1 + 0.1 + 0.05)


def test_max_frame_dt_clamp():
    scheduler, clock, steps, _ = _clock(max_frame_dt=0.1)
    clock.play()
    scheduler.tick(0.0)
    scheduler.tick(2.0)
    assert steps == [0.1]


def test_reset_stops_and_calls_hook():
    scheduler, clock, steps, resets = _clock()
    clock.play()
    scheduler.run_frames(4, 0.1)
    clock.reset()
    assert resets == [True]
    assert clock.state is ClockState.IDLE
    assert clock.frames == 0
    assert scheduler.pending == 0


def test_step_hook_may_stop_clock():
    scheduler = ManualFrameScheduler()
    clock = None

    def on_step(dt):
        clock.stop()

    clock = SimulationClock(scheduler, on_step=on_step)
    clock.play()
    scheduler.tick(0.1)
    scheduler.tick(0.1)
    assert clock.state is ClockState.IDLE
    assert scheduler.pending == 0


def test_step_hook_may_restart_clock():
    scheduler = ManualFrameScheduler()
    clock = None
    steps = []

    def on_step(dt):
        steps.append(dt)
        if len(steps) == 1:
            clock.stop()
            clock.play()

    clock = SimulationClock(scheduler, on_step=on_step)
    clock.play()
    scheduler.tick(0.1)  # records the timestamp
    scheduler.tick(0.1)  # first step restarts the clock
    assert clock.running
    assert scheduler.pending == 1

    assert scheduler.tick(0.1) == 1  # restart frame only records the timestamp
    assert scheduler.tick(0.1) == 1
    assert len(steps) == 2
    clock.stop()
    assert scheduler.pending == 0
