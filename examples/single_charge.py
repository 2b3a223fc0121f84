from charge_field import ManualFrameScheduler, Simulation
from charge_field.core.invariants import kinetic_energy, path_length
from charge_field.renderer import DebugRenderer

# Default scenario: puck at rest at the origin, one charge q=-0.001 at (0, 2, 0).
# The puck falls towards the charge, passes through the softened core and
# swings back and forth along the Y axis.
scheduler = ManualFrameScheduler()
sim = Simulation(scheduler=scheduler)
renderer = DebugRenderer(verbose=False)

sim.play()
for frame in range(600):
    scheduler.tick(1 / 60)
    if frame % 120 == 0:
        renderer.render_simulation(sim)

print("puck pos", sim.puck_position, "v", sim.puck.velocity)
print("kinetic energy", kinetic_energy(sim.puck))
print("path length", path_length(sim.trail_points))
