import logging

import numpy as np
from charge_field import ManualFrameScheduler, Simulation, SimulationConfig

logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

# A dipole: the puck is pushed off the + charge and drawn towards the - charge.
cfg = SimulationConfig(
    initial_charges=(
        ((-1.5, 1.0, 0.0), 0.002),
        ((1.5, 1.0, 0.0), -0.002),
    ),
    lattice_bound=3.0,
    lattice_step=0.5,
)
scheduler = ManualFrameScheduler()
sim = Simulation(config=cfg, scheduler=scheduler)
sim.play()
scheduler.run_frames(120, 1 / 60)

# Drag the negative charge in a small arc; the lattice is only resampled
# once the ghost has moved far enough.
sim.begin_drag(2)
for angle in np.linspace(0.0, np.pi / 2, 40):
    sim.update_drag((1.5 * np.cos(angle), 1.0 + 1.5 * np.sin(angle), 0.0))
    scheduler.tick(1 / 60)
sim.commit_drag()
scheduler.run_frames(60, 1 / 60)

samples = sim.field_samples
strongest = max(samples, key=lambda s: s.magnitude)
print("lattice resampled", sim.sampler.recompute_count, "times")
print("strongest arrow at", strongest.origin, "|E| =", strongest.magnitude)
print("puck pos", sim.puck_position)
