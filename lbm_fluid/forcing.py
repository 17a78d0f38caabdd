"""
Interactive Forcing

Cursor-driven momentum injection. Cells within the brush radius of the
cursor receive a velocity kick proportional to the cursor displacement:

    du = F * cursor_delta
    p += rho * du       if  dot(u, du) / |du| < threshold

The alignment guard refuses to push a cell that already moves fast in the
kick direction, which keeps |u| away from the singularity of the
equilibrium at |u_a| = 1.
"""

import numpy as np
from numba import njit
from .boundary import normalized_positions

# Brush radius in normalized units
BRUSH_RADIUS = 0.04

# Velocity kick per unit of normalized cursor displacement
FORCE_STRENGTH = 5.0

# Maximum velocity component along the kick direction that may still be forced
ALIGNMENT_THRESHOLD = 0.5


def velocity_kick(cursor_delta, strength=FORCE_STRENGTH):
    """Candidate perturbation du = strength * cursor_delta."""
    return strength * float(cursor_delta[0]), strength * float(cursor_delta[1])


def brush_mask(nx, ny, cursor_position, radius=BRUSH_RADIUS):
    """
    Cells whose normalized position lies within the brush radius.

    Returns
    -------
    mask : ndarray
        Boolean, shape (ny, nx)
    """
    X, Y = normalized_positions(nx, ny)
    dx = X - cursor_position[0]
    dy = Y - cursor_position[1]
    return dx * dx + dy * dy < radius * radius


def apply_forcing(rho, px, py, candidates, cursor_position, cursor_delta,
                  radius=BRUSH_RADIUS, strength=FORCE_STRENGTH,
                  threshold=ALIGNMENT_THRESHOLD):
    """
    Apply the brush kick to a momentum field.

    Parameters
    ----------
    rho : ndarray
        Density field, shape (ny, nx)
    px, py : ndarray
        Momentum fields, shape (ny, nx). Not modified.
    candidates : ndarray
        Boolean mask of cells allowed to be forced (the FLUID cells)
    cursor_position, cursor_delta : tuple of float
        Normalized cursor position and displacement
    radius, strength, threshold : float
        Brush radius, forcing strength, alignment threshold

    Returns
    -------
    px, py : ndarray
        Forced momentum fields (new arrays)
    forced : ndarray
        Boolean mask of cells that received the kick
    """
    ny, nx = rho.shape
    dux, duy = velocity_kick(cursor_delta, strength)
    du_norm = np.hypot(dux, duy)

    if du_norm == 0.0:
        return px.copy(), py.copy(), np.zeros((ny, nx), dtype=bool)

    inside = candidates & brush_mask(nx, ny, cursor_position, radius)

    rho_safe = np.where(inside, rho, 1.0)
    alignment = (px * dux + py * duy) / rho_safe / du_norm
    forced = inside & (alignment < threshold)

    px = px + np.where(forced, rho * dux, 0.0)
    py = py + np.where(forced, rho * duy, 0.0)

    return px, py, forced


@njit(cache=True, error_model="numpy")
def forced_momentum_numba(x, y, ny, rho, px, py, cursor_x, cursor_y,
                          dux, duy, radius, threshold):
    """
    Brush kick for a single cell, returns the (possibly) updated momentum.
    """
    du_norm = np.sqrt(dux * dux + duy * duy)
    if du_norm == 0.0:
        return px, py

    dx = x / ny - cursor_x
    dy = y / ny - cursor_y
    if dx * dx + dy * dy >= radius * radius:
        return px, py

    alignment = (px * dux + py * duy) / rho / du_norm
    if alignment < threshold:
        px += rho * dux
        py += rho * duy

    return px, py
