"""
Interactive LBM Solver

Host-side orchestration: owns both generations and the type mask,
dispatches initialization vs. steady steps, and swaps generations.
"""

import time

from .config import SolverParameters, StepConfig
from .grid import GridState
from .initializer import initialize_grid
from .kernels.cpu_numba import lbm_step_fast
from .kernels.cpu_numpy import lbm_step
from .lattice import EX, EY
from .observables import compute_fluid_mass, compute_macroscopic_fast, compute_velocity


class InteractiveLBMSolver:
    """
    D2Q9 solver with cursor forcing, an obstacle disk and wall columns.

    Parameters
    ----------
    nx : int
        Number of lattice points in x-direction
    ny : int
        Number of lattice points in y-direction
    params : SolverParameters, optional
        Physical constants
    use_fast : bool
        Use the Numba kernel (default True)

    Attributes
    ----------
    state : GridState
        Distribution generations and type mask
    step_count : int
        Steady steps taken since the last initialization
    """

    def __init__(self, nx, ny, params=None, use_fast=True):
        self.nx = nx
        self.ny = ny
        self.params = params if params is not None else SolverParameters()
        self.use_fast = use_fast

        self.state = GridState(nx, ny)
        self.initialized = False

        # Arguments of the last initialize(), replayed by init-flag resets
        self.initial_conditions = {}

        # Statistics
        self.step_count = 0
        self.total_time = 0.0

    @property
    def f(self):
        """Current generation, shape (Q, ny, nx)."""
        return self.state.current

    @property
    def cell_type(self):
        return self.state.cell_type

    def initialize(self, type_mask=None, ux=None, uy=None):
        """
        Reset to the resting reference state.

        The arguments are remembered, so a later `step(StepConfig(init=True))`
        restores the same classification and initial velocity.

        Parameters
        ----------
        type_mask : ndarray, optional
            Explicit classification; default obstacle + side walls
        ux, uy : ndarray, optional
            Initial velocity field
        """
        initialize_grid(
            self.state, type_mask=type_mask, ux=ux, uy=uy,
            obstacle_radius=self.params.obstacle_radius,
        )
        self.initial_conditions = {"type_mask": type_mask, "ux": ux, "uy": uy}
        self.initialized = True
        self.step_count = 0
        self.total_time = 0.0

    def step(self, config=None, diagnostics=None):
        """
        Process one invocation.

        With `config.init` set the grid is (re)initialized with the arguments
        of the last `initialize` call (the default geometry at rest if there
        was none) and nothing is advanced. Otherwise one steady step is
        taken and the generations are swapped.

        Parameters
        ----------
        config : StepConfig, optional
            Cursor input; idle if None
        diagnostics : StepDiagnostics, optional
            Instrumentation, forces the NumPy kernel

        Returns
        -------
        dt : float
            Time taken (seconds)
        """
        if config is None:
            config = StepConfig.idle()

        start = time.perf_counter()

        if config.init:
            self.initialize(**self.initial_conditions)
            return time.perf_counter() - start

        if not self.initialized:
            raise RuntimeError("solver must be initialized before stepping")

        f_in = self.state.current
        f_out = self.state.next

        if self.use_fast and diagnostics is None:
            lbm_step_fast(f_in, f_out, self.state.cell_type, config, self.params)
        else:
            lbm_step(f_in, f_out, self.state.cell_type, config, self.params,
                     diagnostics=diagnostics)

        self.state.swap()

        dt = time.perf_counter() - start
        self.step_count += 1
        self.total_time += dt

        return dt

    def run(self, num_steps, config=None, verbose=True, report_interval=100):
        """
        Run a number of steady steps with a fixed input.

        Returns
        -------
        mlups : float
            Performance in Million Lattice Updates Per Second
        """
        if config is None:
            config = StepConfig.idle()

        start = time.perf_counter()

        for step in range(num_steps):
            self.step(config)

            if verbose and (step + 1) % report_interval == 0:
                elapsed = time.perf_counter() - start
                mlups = (step + 1) * self.nx * self.ny / elapsed / 1e6
                print(f"Step {step + 1}/{num_steps}, MLUPS: {mlups:.2f}")

        total = time.perf_counter() - start
        mlups = num_steps * self.nx * self.ny / total / 1e6 if total > 0 else 0.0

        if verbose:
            print(f"Completed {num_steps} steps in {total:.2f}s")
            print(f"Performance: {mlups:.2f} MLUPS")

        return mlups

    def get_macroscopic(self):
        """Return density and momentum fields of the current generation."""
        return compute_macroscopic_fast(self.f)

    def get_velocity(self):
        """Return velocity fields of the current generation."""
        return compute_velocity(self.f)

    def get_total_mass(self):
        """Return total FLUID mass."""
        return compute_fluid_mass(self.f, self.cell_type)

    def get_total_momentum(self):
        """Return total FLUID momentum."""
        fluid = self.state.fluid_mask()
        f = self.f[:, fluid]
        return float(EX @ f.sum(axis=1)), float(EY @ f.sum(axis=1))
