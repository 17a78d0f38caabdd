"""
Macroscopic Observable Extraction

Compute density, momentum, and derived quantities from distributions.

In LBM, macroscopic quantities are moments of the distribution function:
    - Density (0th moment): rho = sum_i(f_i)
    - Momentum (1st moment): p = sum_i(f_i * e_i)
    - Second moment trace: sum_i(f_i * |e_i|^2)
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, Q, FLUID


def compute_density(f):
    """
    Compute density field from distribution functions.

    rho = sum_i(f_i)

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    rho : ndarray
        Density field, shape (ny, nx)
    """
    return np.sum(f, axis=0)


def compute_momentum(f):
    """
    Compute momentum field from distribution functions.

    p = sum_i(f_i * e_i)

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    px, py : ndarray
        Momentum components, shape (ny, nx)
    """
    q, ny, nx = f.shape
    px = np.zeros((ny, nx), dtype=np.float64)
    py = np.zeros((ny, nx), dtype=np.float64)

    for i in range(Q):
        px += f[i] * EX[i]
        py += f[i] * EY[i]

    return px, py


def compute_velocity(f, rho=None):
    """
    Compute velocity field u = p / rho.

    Sites with vanishing density (walls that were never written, for
    instance) get zero velocity.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)
    rho : ndarray, optional
        Density field, shape (ny, nx). If None, computed from f.

    Returns
    -------
    ux, uy : ndarray
        Velocity fields, shape (ny, nx)
    """
    if rho is None:
        rho = compute_density(f)

    px, py = compute_momentum(f)

    # Avoid division by zero
    rho_safe = np.where(rho > 1e-10, rho, 1.0)

    ux = np.where(rho > 1e-10, px / rho_safe, 0.0)
    uy = np.where(rho > 1e-10, py / rho_safe, 0.0)

    return ux, uy


def compute_macroscopic(f):
    """
    Compute density and momentum from distribution functions.

    Returns
    -------
    rho : ndarray
        Density field, shape (ny, nx)
    px, py : ndarray
        Momentum fields, shape (ny, nx)
    """
    rho = compute_density(f)
    px, py = compute_momentum(f)
    return rho, px, py


@njit(parallel=True, cache=True)
def compute_macroscopic_numba(f, rho, px, py, ex, ey):
    """
    Numba-accelerated density and momentum computation.

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)
    rho : ndarray
        Output density field, shape (ny, nx)
    px, py : ndarray
        Output momentum fields, shape (ny, nx)
    ex, ey : ndarray
        Lattice velocity components
    """
    q, ny, nx = f.shape

    for j in prange(ny):
        for i in range(nx):
            rho_local = 0.0
            px_local = 0.0
            py_local = 0.0

            for k in range(q):
                f_k = f[k, j, i]
                rho_local += f_k
                px_local += f_k * ex[k]
                py_local += f_k * ey[k]

            rho[j, i] = rho_local
            px[j, i] = px_local
            py[j, i] = py_local


def compute_macroscopic_fast(f):
    """
    Fast density and momentum computation using Numba.

    Returns
    -------
    rho, px, py : ndarray
        Shape (ny, nx) each
    """
    q, ny, nx = f.shape
    rho = np.zeros((ny, nx), dtype=np.float64)
    px = np.zeros((ny, nx), dtype=np.float64)
    py = np.zeros((ny, nx), dtype=np.float64)

    ex = EX.astype(np.float64)
    ey = EY.astype(np.float64)

    compute_macroscopic_numba(np.ascontiguousarray(f), rho, px, py, ex, ey)

    return rho, px, py


def compute_second_moment(f):
    """
    Trace of the second moment, sum_i(f_i * |e_i|^2).

    Parameters
    ----------
    f : ndarray
        Distribution functions, shape (Q, ny, nx)

    Returns
    -------
    m2 : ndarray
        Shape (ny, nx)
    """
    c_sq = (EX * EX + EY * EY).astype(np.float64)
    return np.tensordot(c_sq, f, axes=(0, 0))


def compute_fluid_mass(f, cell_type):
    """Total mass held by FLUID cells."""
    return float(np.sum(f[:, cell_type == FLUID]))
