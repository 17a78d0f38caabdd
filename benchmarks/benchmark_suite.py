"""
Benchmark Suite

Compares the NumPy reference step and the fused Numba kernel across grid
sizes, with and without an active brush stroke.
"""

import time
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from lbm_fluid.config import StepConfig
from lbm_fluid.solver import InteractiveLBMSolver


MODES = ("idle", "stirring")


def benchmark_solver(nx, ny, num_steps, use_fast, warmup_steps=20, stirring=False):
    """
    Benchmark one solver configuration.

    Returns
    -------
    mlups : float
        Million Lattice Updates Per Second
    """
    solver = InteractiveLBMSolver(nx, ny, use_fast=use_fast)
    solver.step(StepConfig.initial())

    if stirring:
        config = StepConfig(cursor_position=(0.25 * nx / ny, 0.5), cursor_delta=(0.01, 0.0))
    else:
        config = StepConfig.idle()

    # Warmup (JIT compilation)
    for _ in range(warmup_steps):
        solver.step(config)

    start = time.perf_counter()
    for _ in range(num_steps):
        solver.step(config)
    elapsed = time.perf_counter() - start

    return num_steps * nx * ny / elapsed / 1e6


def run_full_benchmark(grid_sizes=None, num_steps=200):
    """
    Run the benchmark for both kernels.

    Every grid size is timed idle and with a brush stroke held in the
    middle of the domain.

    Returns
    -------
    results : dict
        {kernel name: {(nx, ny, mode): mlups}}
    """
    if grid_sizes is None:
        grid_sizes = [
            (64, 64),
            (128, 128),
            (256, 256),
            (512, 512),
        ]

    print("=" * 60)
    print("Interactive LBM Benchmark")
    print("=" * 60)
    print(f"Steps: {num_steps}")
    print()

    results = {}
    for name, use_fast in (("numpy", False), ("numba", True)):
        print(f"Benchmarking {name} kernel...")
        print("-" * 40)
        results[name] = {}
        for nx, ny in grid_sizes:
            for mode in MODES:
                mlups = benchmark_solver(nx, ny, num_steps, use_fast,
                                         stirring=(mode == "stirring"))
                results[name][(nx, ny, mode)] = mlups
                print(f"  {nx:4d} x {ny:4d} {mode:>8}: {mlups:8.2f} MLUPS")
        print()

    print("=" * 60)
    print(f"{'Grid':<12} {'Mode':>9} {'NumPy':>10} {'Numba':>10} {'Speedup':>10}")
    print("-" * 60)
    for nx, ny in grid_sizes:
        for mode in MODES:
            slow = results["numpy"][(nx, ny, mode)]
            fast = results["numba"][(nx, ny, mode)]
            speedup = f"{fast / slow:.1f}x" if slow > 0 else "N/A"
            print(f"{nx:4d}x{ny:<4d}    {mode:>9} {slow:>10.2f} {fast:>10.2f} {speedup:>10}")
    print("=" * 60)

    return results


if __name__ == "__main__":
    run_full_benchmark()
