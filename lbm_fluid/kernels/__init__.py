"""Step engine implementations (NumPy reference and fused Numba kernel)."""

from .cpu_numba import lbm_step_fast
from .cpu_numpy import lbm_step

__all__ = ["lbm_step", "lbm_step_fast"]
