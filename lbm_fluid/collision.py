"""
Collision Operator

Over-relaxation toward the closed-form equilibrium with a zero floor:

    f_out = max(0, f + 2 * beta * (f_eq - f))

beta = 0.5 is plain relaxation onto equilibrium, beta -> 1 approaches the
inviscid limit. With beta = 0.99 the solver runs at almost zero viscosity.

The floor keeps every occupation non-negative. It is a deliberate
stabilizer; when it engages, mass is no longer conserved at that site.
"""

import numpy as np
from .equilibrium import compute_equilibrium

# Relaxation constant
RELAXATION_BETA = 0.99


def relax(f, f_eq, beta=RELAXATION_BETA):
    """
    Unclamped over-relaxation, f + 2 * beta * (f_eq - f).

    Parameters
    ----------
    f : ndarray
        Distribution functions
    f_eq : ndarray
        Equilibrium distribution, same shape
    beta : float
        Relaxation constant

    Returns
    -------
    f_relaxed : ndarray
    """
    return f + 2.0 * beta * (f_eq - f)


def collide(f, rho, px, py, beta=RELAXATION_BETA):
    """
    Collision with zero floor.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)
    rho : ndarray
        Density field, shape (ny, nx)
    px, py : ndarray
        Momentum fields (after forcing), shape (ny, nx)
    beta : float
        Relaxation constant

    Returns
    -------
    f_out : ndarray
        Post-collision distribution, shape (Q, ny, nx)
    f_relaxed : ndarray
        Values before the floor was applied
    """
    f_eq = compute_equilibrium(rho, px, py)
    f_relaxed = relax(f, f_eq, beta)
    return np.maximum(f_relaxed, 0.0), f_relaxed
