"""
Equilibrium Distribution Functions

Closed-form equilibrium for the D2Q9 lattice.

The equilibrium is the product of two exact one-dimensional equilibria,
one per axis:

    f_i^eq = w_i * rho * prod_{a in (x, y)} (2 - s_a) * ((2*u_a + s_a) / (1 - u_a))^(e_ia)

with s_a = sqrt(1 + 3*u_a^2). Unlike the second-order polynomial form, its
zeroth and first moments are exactly rho and rho*u for any |u_a| < 1.

The formula is singular at u_a = +-1. Callers are responsible for keeping
velocities inside the open interval; outside it the result is non-finite.
"""

import numpy as np
from numba import njit, prange
from .lattice import EX, EY, W, Q


def _axis_factors(u):
    s = np.sqrt(1.0 + 3.0 * u * u)
    return 2.0 - s, (2.0 * u + s) / (1.0 - u)


def equilibrium_direction(i, rho, px, py):
    """
    Equilibrium occupation for a single direction.

    Parameters
    ----------
    i : int
        Direction index in [0, 8]
    rho : float
        Density (> 0)
    px, py : float
        Momentum components

    Returns
    -------
    f_eq_i : float
    """
    ux = px / rho
    uy = py / rho
    base_x, ratio_x = _axis_factors(ux)
    base_y, ratio_y = _axis_factors(uy)
    return (W[i] * rho * base_x * base_y
            * ratio_x ** float(EX[i]) * ratio_y ** float(EY[i]))


def equilibrium_single_site(rho, px, py):
    """
    Compute the equilibrium distribution for a single lattice site.

    Parameters
    ----------
    rho : float
        Density at the site
    px, py : float
        Momentum at the site

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q,)
    """
    f_eq = np.zeros(Q, dtype=np.float64)
    for i in range(Q):
        f_eq[i] = equilibrium_direction(i, rho, px, py)
    return f_eq


def compute_equilibrium(rho, px, py):
    """
    Compute equilibrium distribution for all lattice sites.

    Parameters
    ----------
    rho : ndarray
        Density field, shape (ny, nx)
    px : ndarray
        X-momentum field, shape (ny, nx)
    py : ndarray
        Y-momentum field, shape (ny, nx)

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q, ny, nx)
    """
    ny, nx = rho.shape
    f_eq = np.zeros((Q, ny, nx), dtype=np.float64)

    base_x, ratio_x = _axis_factors(px / rho)
    base_y, ratio_y = _axis_factors(py / rho)
    scale = rho * base_x * base_y

    for i in range(Q):
        f_eq[i] = W[i] * scale * ratio_x ** float(EX[i]) * ratio_y ** float(EY[i])

    return f_eq


@njit(cache=True, error_model="numpy")
def equilibrium_numba(k, rho, px, py, ex, ey, w):
    """
    Equilibrium for direction k at one site, callable from other kernels.
    """
    ux = px / rho
    uy = py / rho
    sx = np.sqrt(1.0 + 3.0 * ux * ux)
    sy = np.sqrt(1.0 + 3.0 * uy * uy)
    value = w[k] * rho * (2.0 - sx) * (2.0 - sy)
    value *= ((2.0 * ux + sx) / (1.0 - ux)) ** ex[k]
    value *= ((2.0 * uy + sy) / (1.0 - uy)) ** ey[k]
    return value


@njit(parallel=True, cache=True)
def compute_equilibrium_numba(rho, px, py, f_eq, ex, ey, w):
    """
    Numba-accelerated equilibrium computation.

    Parameters
    ----------
    rho : ndarray
        Density field, shape (ny, nx)
    px, py : ndarray
        Momentum fields, shape (ny, nx)
    f_eq : ndarray
        Output equilibrium distribution, shape (Q, ny, nx)
    ex, ey : ndarray
        Lattice velocity components (float64)
    w : ndarray
        Lattice weights
    """
    q, ny, nx = f_eq.shape

    for j in prange(ny):
        for i in range(nx):
            for k in range(q):
                f_eq[k, j, i] = equilibrium_numba(
                    k, rho[j, i], px[j, i], py[j, i], ex, ey, w
                )


def compute_equilibrium_fast(rho, px, py):
    """
    Fast equilibrium computation using Numba.

    Returns
    -------
    f_eq : ndarray
        Equilibrium distribution, shape (Q, ny, nx)
    """
    ny, nx = rho.shape
    f_eq = np.zeros((Q, ny, nx), dtype=np.float64)

    ex = EX.astype(np.float64)
    ey = EY.astype(np.float64)
    w = W.copy()

    compute_equilibrium_numba(
        np.ascontiguousarray(rho, dtype=np.float64),
        np.ascontiguousarray(px, dtype=np.float64),
        np.ascontiguousarray(py, dtype=np.float64),
        f_eq, ex, ey, w,
    )

    return f_eq
