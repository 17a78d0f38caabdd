"""
Interactive D2Q9 lattice-Boltzmann fluid simulation.
"""

from .config import SolverParameters, StepConfig
from .grid import GridState
from .initializer import initialize_grid
from .solver import InteractiveLBMSolver

__version__ = "0.1.0"

__all__ = [
    "GridState",
    "InteractiveLBMSolver",
    "SolverParameters",
    "StepConfig",
    "initialize_grid",
]
