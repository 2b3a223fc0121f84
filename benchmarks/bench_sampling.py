"""
Microbenchmark: frame cost vs lattice resolution and number of charges.
Run:
  python benchmarks/bench_sampling.py
"""
import numpy as np
from charge_field import ManualFrameScheduler, Simulation, SimulationConfig
from charge_field.profiler import Profiler


def run(step: float, n_charges: int, frames: int = 120):
    rng = np.random.default_rng(12345)  # determinism
    charges = tuple(
        (tuple(rng.uniform(-4.0, 4.0, 3) + (0.0, 5.0, 0.0)), float(rng.choice([-1.0, 1.0]) * 1e-3))
        for _ in range(n_charges)
    )
    prof = Profiler()
    scheduler = ManualFrameScheduler()
    sim = Simulation(
        config=SimulationConfig(lattice_step=step, initial_charges=charges),
        scheduler=scheduler,
        profiler=prof,
    )
    sim.play()
    for _ in range(frames):
        # Force a resample every frame: worst case, a charge being dragged
        sim.sampler.invalidate()
        scheduler.tick(1 / 60)
    return len(sim.sampler.points), prof.stats.summary()


if __name__ == "__main__":
    for step in [1.0, 0.5]:
        for n in [1, 10, 50]:
            points, summary = run(step, n)
            print(f"lattice={points:6d}  charges={n:3d}")
            for k in ["integrate", "sample"]:
                if k in summary:
                    print(" ", k, summary[k])
            print()
