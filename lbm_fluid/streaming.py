"""
Streaming Step

Propagation of post-collision distributions along lattice velocities,
push scheme with toroidal addressing:

    f_i(x + e_i mod (nx, ny), t + 1) = f_i^out(x, t)

The neighbor's type decides where the value lands:
- FLUID neighbor: its slot i (standard streaming)
- WALL neighbor: the source cell's own slot opp(i) (bounce-back)
- anything else (reserved SINK): nowhere, the value is dropped

Every (cell, direction) slot of the output has at most one writer: slot i
of cell X is written either by the stream from X - e_i or by the
bounce-back of X itself toward X - e_i, never both. Slots without a writer
keep whatever the output buffer already held.
"""

import numpy as np
from numba import njit
from .lattice import EX, EY, Q, OPPOSITE, FLUID, WALL


@njit(cache=True)
def wrap_neighbor(x, y, k, nx, ny, ex, ey):
    """Periodically wrapped neighbor of (x, y) along direction k."""
    return (x + ex[k] + nx) % nx, (y + ey[k] + ny) % ny


def neighbor_of(x, y, k, nx, ny):
    """Python-level convenience for `wrap_neighbor` with the D2Q9 tables."""
    xn, yn = wrap_neighbor(x, y, k, nx, ny, EX.copy(), EY.copy())
    return int(xn), int(yn)


def stream_with_bounce_back(f_post, cell_type, f_out):
    """
    Stream post-collision values of FLUID cells into the next generation.

    Parameters
    ----------
    f_post : ndarray
        Post-collision distribution, shape (Q, ny, nx). Only FLUID cells
        are read.
    cell_type : ndarray
        Type mask, shape (ny, nx)
    f_out : ndarray
        Next generation, shape (Q, ny, nx). Written in place.

    Returns
    -------
    f_out : ndarray
    """
    source = cell_type == FLUID

    for i in range(Q):
        shift = (int(EY[i]), int(EX[i]))

        # Type of the cell each source points to
        neighbor_type = np.roll(cell_type, (-shift[0], -shift[1]), axis=(0, 1))

        # Standard streaming: value moves to the neighbor's slot i
        streams = source & (neighbor_type == FLUID)
        target = np.roll(streams, shift, axis=(0, 1))
        moved = np.roll(f_post[i], shift, axis=(0, 1))
        f_out[i][target] = moved[target]

        # Bounce-back: value returns to the source's opposite slot
        bounces = source & (neighbor_type == WALL)
        f_out[OPPOSITE[i]][bounces] = f_post[i][bounces]

    return f_out


@njit(cache=True)
def stream_cell_numba(f_out, values, x, y, cell_type, ex, ey, opposite):
    """
    Push the post-collision values of one FLUID cell.

    Parameters
    ----------
    f_out : ndarray
        Next generation, shape (Q, ny, nx)
    values : ndarray
        Post-collision values of the cell, shape (Q,)
    x, y : int
        Cell coordinates
    cell_type : ndarray
        Type mask, shape (ny, nx)
    ex, ey, opposite : ndarray
        Lattice tables (int)
    """
    q, ny, nx = f_out.shape

    for k in range(q):
        xn, yn = wrap_neighbor(x, y, k, nx, ny, ex, ey)
        neighbor = cell_type[yn, xn]

        if neighbor == FLUID:
            f_out[k, yn, xn] = values[k]
        elif neighbor == WALL:
            f_out[opposite[k], y, x] = values[k]
