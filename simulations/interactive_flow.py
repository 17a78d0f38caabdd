"""
Interactive Flow Window

Drag the mouse across the window to stir the fluid. The circular obstacle
sits in the middle of the domain, the left and right columns are walls,
top and bottom wrap around.

Keys:
    r       reset the simulation
    v       cycle through color variants
    + / -   brightness
"""

import argparse
import time
import sys
import os

import matplotlib.pyplot as plt
import matplotlib.animation as animation

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbm_fluid.colorize import COLORIZERS, colorize
from lbm_fluid.config import StepConfig
from lbm_fluid.diagnostics import check_finite
from lbm_fluid.lattice import WALL
from lbm_fluid.solver import InteractiveLBMSolver


class CursorTracker:
    """Collects mouse positions in cell coordinates between frames."""

    def __init__(self):
        self.x = None
        self.y = None
        self.prev_x = None
        self.prev_y = None
        self.pressed = False

    def on_press(self, event):
        if event.inaxes is None:
            return
        self.pressed = True
        self.x = self.prev_x = event.xdata
        self.y = self.prev_y = event.ydata

    def on_release(self, event):
        self.pressed = False

    def on_move(self, event):
        if event.inaxes is None or event.xdata is None:
            return
        self.x = event.xdata
        self.y = event.ydata

    def take(self, ny, brightness):
        """Build the StepConfig for the next step and advance the cursor."""
        if not self.pressed or self.x is None:
            return StepConfig.idle(brightness)

        config = StepConfig.from_pixels(
            self.x, self.y, self.prev_x, self.prev_y, ny, brightness=brightness
        )
        self.prev_x = self.x
        self.prev_y = self.y
        return config


def run_interactive(nx, ny, steps_per_frame=4, variant="velocity_hsl", use_fast=True):
    """Open a window and run until it is closed."""
    solver = InteractiveLBMSolver(nx, ny, use_fast=use_fast)
    solver.step(StepConfig.initial())

    print(f"Grid: {nx} x {ny}, kernel: {'numba' if use_fast else 'numpy'}")
    print(f"Wall cells: {int((solver.cell_type == WALL).sum())}")

    cursor = CursorTracker()
    settings = {"brightness": 4.0, "variant": variant}
    variants = sorted(COLORIZERS)

    fig, ax = plt.subplots(figsize=(10, 10 * ny / nx))
    image = ax.imshow(
        colorize(solver.f, solver.cell_type, settings["brightness"], variant),
        origin="lower", interpolation="nearest",
    )
    ax.set_axis_off()
    title = ax.set_title(variant)

    def on_key(event):
        if event.key == "r":
            solver.step(StepConfig.initial())
        elif event.key == "v":
            index = variants.index(settings["variant"])
            settings["variant"] = variants[(index + 1) % len(variants)]
            title.set_text(settings["variant"])
        elif event.key in ("+", "="):
            settings["brightness"] *= 1.25
        elif event.key == "-":
            settings["brightness"] /= 1.25

    fig.canvas.mpl_connect("button_press_event", cursor.on_press)
    fig.canvas.mpl_connect("button_release_event", cursor.on_release)
    fig.canvas.mpl_connect("motion_notify_event", cursor.on_move)
    fig.canvas.mpl_connect("key_press_event", on_key)

    def update(frame):
        config = cursor.take(ny, settings["brightness"])
        solver.step(config)
        for _ in range(steps_per_frame - 1):
            solver.step(StepConfig.idle(settings["brightness"]))

        image.set_data(
            colorize(solver.f, solver.cell_type, config.brightness, settings["variant"])
        )
        return image, title

    anim = animation.FuncAnimation(fig, update, interval=16, blit=False,
                                   cache_frame_data=False)
    plt.show()
    return anim


def run_headless(nx, ny, num_steps, use_fast=True):
    """Run with a scripted stroke across the obstacle and report MLUPS."""
    solver = InteractiveLBMSolver(nx, ny, use_fast=use_fast)
    solver.step(StepConfig.initial())

    mass_initial = solver.get_total_mass()
    start = time.perf_counter()

    for step in range(num_steps):
        # Horizontal stroke through the lower third, once per 200 steps
        phase = (step % 200) / 200.0
        x = 0.1 * nx + 0.8 * nx * phase
        prev_x = x - 0.8 * nx / 200.0
        config = StepConfig.from_pixels(x, ny / 3.0, prev_x, ny / 3.0, ny)
        solver.step(config)

        if (step + 1) % 500 == 0:
            check_finite(solver.f, solver.cell_type)
            print(f"Step {step + 1}: mass={solver.get_total_mass():.6f}")

    elapsed = time.perf_counter() - start
    mlups = num_steps * nx * ny / elapsed / 1e6

    print(f"\nMass: {mass_initial:.6f} -> {solver.get_total_mass():.6f}")
    print(f"Done: {elapsed:.1f}s, {mlups:.2f} MLUPS")
    return solver


def main():
    parser = argparse.ArgumentParser(description="Interactive LBM fluid")
    parser.add_argument("--nx", type=int, default=320)
    parser.add_argument("--ny", type=int, default=180)
    parser.add_argument("--variant", choices=sorted(COLORIZERS), default="velocity_hsl")
    parser.add_argument("--steps-per-frame", type=int, default=4)
    parser.add_argument("--numpy", action="store_true", help="use the NumPy kernel")
    parser.add_argument("--headless", type=int, metavar="STEPS",
                        help="run without a window for STEPS steps")
    args = parser.parse_args()

    if args.headless:
        run_headless(args.nx, args.ny, args.headless, use_fast=not args.numpy)
    else:
        run_interactive(args.nx, args.ny, args.steps_per_frame, args.variant,
                        use_fast=not args.numpy)


if __name__ == "__main__":
    main()
