"""
NumPy Step Engine

Vectorized reference implementation of one steady step:
moments -> forcing -> collision -> streaming with bounce-back.

Reads only `f_in` and writes only `f_out`; the two must not share
memory.
"""

import numpy as np

from ..collision import collide
from ..config import SolverParameters
from ..forcing import apply_forcing
from ..lattice import FLUID
from ..observables import compute_macroscopic
from ..streaming import stream_with_bounce_back


def lbm_step(f_in, f_out, cell_type, config, params=None, diagnostics=None):
    """
    Advance the distribution field by one step.

    Parameters
    ----------
    f_in : ndarray
        Current generation, shape (Q, ny, nx). Not modified.
    f_out : ndarray
        Next generation, shape (Q, ny, nx). Written in place.
    cell_type : ndarray
        Type mask, shape (ny, nx)
    config : StepConfig
        Cursor input for this step
    params : SolverParameters, optional
        Physical constants, defaults if None
    diagnostics : StepDiagnostics, optional
        Collects floor/non-finite counters when given

    Returns
    -------
    f_out : ndarray
    """
    if np.shares_memory(f_in, f_out):
        raise ValueError("f_in and f_out must not share memory")
    if params is None:
        params = SolverParameters()

    fluid = cell_type == FLUID

    rho, px, py = compute_macroscopic(f_in)

    # Non-fluid cells are never streamed; give them a harmless state
    rho = np.where(fluid, rho, 1.0)
    px = np.where(fluid, px, 0.0)
    py = np.where(fluid, py, 0.0)

    px, py, forced = apply_forcing(
        rho, px, py, fluid,
        config.cursor_position, config.cursor_delta,
        radius=params.brush_radius,
        strength=params.force_strength,
        threshold=params.alignment_threshold,
    )

    f_post, f_relaxed = collide(f_in, rho, px, py, params.beta)

    if diagnostics is not None:
        diagnostics.record(f_relaxed, fluid, forced)

    return stream_with_bounce_back(f_post, cell_type, f_out)
