"""
Numerical Health Checks

The solver itself never raises on numerical trouble: a velocity reaching
the equilibrium singularity shows up as non-finite values, and the zero
floor in the collision silently removes negative occupations. These helpers
make both visible without changing what the step computes.
"""

import warnings
from dataclasses import dataclass

import numpy as np
from .lattice import FLUID


@dataclass
class StepDiagnostics:
    """
    Counters accumulated over instrumented steps.

    Attributes
    ----------
    steps : int
        Number of recorded steps
    negative_before_clamp : int
        FLUID values the zero floor had to lift
    forced_cells : int
        Cells that received the brush kick
    non_finite : int
        Non-finite post-collision FLUID values
    """
    steps: int = 0
    negative_before_clamp: int = 0
    forced_cells: int = 0
    non_finite: int = 0

    def record(self, f_relaxed, fluid, forced):
        values = f_relaxed[:, fluid]
        self.steps += 1
        self.negative_before_clamp += int(np.count_nonzero(values < 0.0))
        self.non_finite += int(np.count_nonzero(~np.isfinite(values)))
        self.forced_cells += int(np.count_nonzero(forced))

    @property
    def clean(self):
        """True if neither the floor nor a singularity was hit."""
        return self.negative_before_clamp == 0 and self.non_finite == 0


def check_finite(f, cell_type, warn=True):
    """
    Count non-finite distribution values in FLUID cells.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)
    cell_type : ndarray
        Type mask, shape (ny, nx)
    warn : bool
        Emit a RuntimeWarning when anything is found

    Returns
    -------
    count : int
    """
    count = int(np.count_nonzero(~np.isfinite(f[:, cell_type == FLUID])))
    if count and warn:
        warnings.warn(
            f"{count} non-finite distribution values in fluid cells. "
            f"A velocity component probably reached |u| = 1; "
            f"reduce the forcing strength or brush radius.",
            RuntimeWarning,
        )
    return count
