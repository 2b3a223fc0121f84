import numpy as np
import pytest
from charge_field import InvalidConfiguration, ManualFrameScheduler, Simulation, SimulationConfig
from charge_field.profiler import Profiler


def _sim(**kwargs):
    scheduler = ManualFrameScheduler()
    sim = Simulation(scheduler=scheduler, **kwargs)
    return scheduler, sim


def _assert_initial_state(sim):
    assert np.array_equal(sim.puck.position, np.zeros(3))
    assert np.array_equal(sim.puck.velocity, np.zeros(3))
    assert len(sim.trail) == 0
    assert sim.store.ghost is None
    charges = sim.charges
    assert len(charges) == 1
    assert charges[0].id == 1
    assert np.allclose(charges[0].position, (0.0, 2.0, 0.0))
    assert charges[0].charge == -0.001


def test_initial_state():
    _, sim = _sim()
    _assert_initial_state(sim)
    assert not sim.running
    assert sim.decay_exponent == 2.0
    # Field is sampled once at construction
    assert sim.sampler.recompute_count == 1
    assert len(sim.field_samples) == len(sim.sampler.points)


def test_play_moves_puck_towards_charge():
    scheduler, sim = _sim()
    sim.play()
    scheduler.run_frames(61, 1 / 60)

    print("puck", sim.puck_position, "t", sim.time)
    assert sim.time == pytest.approx(1.0)
    assert sim.puck_position[1] > 0.1
    # One trail point per integrated frame
    assert len(sim.trail) == 60
    assert np.allclose(sim.trail_points[-1], sim.puck_position)


def test_stop_freezes_puck():
    scheduler, sim = _sim()
    sim.play()
    scheduler.run_frames(10, 1 / 60)
    sim.stop()
    frozen = sim.puck_position
    scheduler.run_frames(10, 1 / 60)
    assert np.array_equal(sim.puck_position, frozen)


def test_reset_restores_initial_state():
    scheduler, sim = _sim()
    sim.add_charge((1.0, 1.0, 1.0), 0.004)
    sim.remove_charge(1)
    sim.set_decay_exponent(3.0)
    sim.begin_drag(2, (2.0, 2.0, 2.0))
    sim.play()
    scheduler.run_frames(30, 1 / 60)

    sim.reset()
    assert not sim.running
    assert sim.time == 0.0
    assert sim.decay_exponent == 2.0
    _assert_initial_state(sim)
    assert not sim.sampler.dirty

    # Resetting twice is harmless
    sim.reset()
    _assert_initial_state(sim)


def test_decay_exponent_validation():
    _, sim = _sim()
    with pytest.raises(InvalidConfiguration):
        sim.set_decay_exponent(-1.0)
    with pytest.raises(InvalidConfiguration):
        sim.set_decay_exponent(float("nan"))
    assert sim.decay_exponent == 2.0

    sim.set_decay_exponent(3.0)
    assert sim.sampler.dirty
    sim.field_samples
    assert not sim.sampler.dirty


def test_field_recomputed_only_on_changes():
    scheduler, sim = _sim()
    sim.play()
    scheduler.run_frames(20, 1 / 60)
    assert sim.sampler.recompute_count == 1

    sim.add_charge((1.0, 3.0, 0.0), 0.002)
    scheduler.run_frames(5, 1 / 60)
    assert sim.sampler.recompute_count == 2


def test_hidden_field_is_not_sampled():
    scheduler, sim = _sim(show_field=False)
    assert sim.sampler.recompute_count == 0
    assert sim.field_samples == []

    sim.play()
    scheduler.run_frames(5, 1 / 60)
    assert sim.sampler.recompute_count == 0

    sim.set_show_field(True)
    assert len(sim.field_samples) > 0
    assert sim.sampler.recompute_count == 1


def test_hidden_trail_still_records():
    scheduler, sim = _sim()
    sim.set_show_trail(False)
    sim.play()
    scheduler.run_frames(5, 1 / 60)
    assert sim.trail_points.shape == (0, 3)
    assert len(sim.trail) == 4

    sim.set_show_trail(True)
    assert sim.trail_points.shape == (4, 3)


def test_drag_affects_puck_before_commit():
    """A dragged charge pulls the puck from its ghost position."""
    _, sim = _sim()
    sim.begin_drag(1, (2.0, 0.0, 0.0))
    sim.step(0.5)
    assert sim.puck_position[0] > 0.0
    assert abs(sim.puck_position[1]) < 1e-12
    assert np.allclose(sim.charges[0].position, (0.0, 2.0, 0.0))

    sim.commit_drag()
    assert np.allclose(sim.charges[0].position, (2.0, 0.0, 0.0))


def test_drag_resamples_past_threshold():
    _, sim = _sim()
    sim.begin_drag(1)
    sim.update_drag((0.0, 2.05, 0.0))
    sim.field_samples
    assert sim.sampler.recompute_count == 1
    sim.update_drag((0.0, 2.5, 0.0))
    sim.field_samples
    assert sim.sampler.recompute_count == 2
    sim.cancel_drag()
    sim.field_samples
    assert sim.sampler.recompute_count == 3


def test_config_controls_initial_charges():
    cfg = SimulationConfig(initial_charges=(((1.0, 1.0, 0.0), 0.5), ((-1.0, 1.0, 0.0), -0.5)))
    _, sim = _sim(config=cfg)
    assert [c.id for c in sim.charges] == [1, 2]
    sim.remove_charge(1)
    sim.reset()
    assert [c.id for c in sim.charges] == [1, 2]


def test_profiler_sections():
    profiler = Profiler()
    scheduler, sim = _sim(profiler=profiler)
    sim.play()
    scheduler.run_frames(6, 1 / 60)
    summary = profiler.stats.summary()
    assert summary["integrate"]["n"] == 5
    assert summary["sample"]["n"] == 1
    assert profiler.stats.total("integrate") > 0.0


@pytest.mark.parametrize("dt", [0.0, -0.1])
def test_non_positive_step_changes_nothing(dt):
    _, sim = _sim()
    sim.step(0.1)
    t, pos = sim.time, sim.puck_position
    points = len(sim.trail)
    sim.step(dt)
    assert sim.time == t
    assert np.array_equal(sim.puck_position, pos)
    assert len(sim.trail) == points
