"""
Cell Classification

Builds the type mask consumed by the step kernels:
- circular obstacle in the middle of the domain
- wall columns on the left and right edges

Walls are handled by bounce-back during streaming (see streaming.py); this
module only decides which cells are walls.
"""

import numpy as np
from .lattice import FLUID, WALL


# Obstacle radius in normalized units (fraction of the grid height)
OBSTACLE_RADIUS = 0.05


def normalized_positions(nx, ny):
    """
    Normalized cell positions, pixel index divided by ny on both axes.

    Returns
    -------
    X, Y : ndarray
        Shape (ny, nx) each
    """
    x = np.arange(nx, dtype=np.float64) / ny
    y = np.arange(ny, dtype=np.float64) / ny
    return np.meshgrid(x, y)


def create_obstacle_mask(nx, ny, radius=OBSTACLE_RADIUS):
    """
    Create a solid mask for the circular obstacle.

    The disk is centred at the geometric middle of the grid,
    (nx / (2 ny), 0.5) in normalized units.

    Parameters
    ----------
    nx, ny : int
        Grid dimensions
    radius : float
        Disk radius in normalized units

    Returns
    -------
    mask : ndarray
        Boolean mask (True for solid), shape (ny, nx)
    """
    X, Y = normalized_positions(nx, ny)
    cx = 0.5 * nx / ny
    cy = 0.5

    distance = np.sqrt((X - cx)**2 + (Y - cy)**2)
    return distance < radius


def create_side_walls(nx, ny):
    """
    Create solid masks for the first and last columns.

    Parameters
    ----------
    nx, ny : int
        Grid dimensions

    Returns
    -------
    wall_mask : ndarray
        Boolean mask, shape (ny, nx)
    """
    wall_mask = np.zeros((ny, nx), dtype=bool)
    wall_mask[:, 0] = True
    wall_mask[:, -1] = True
    return wall_mask


def classify_cells(nx, ny, obstacle_radius=OBSTACLE_RADIUS):
    """
    Default cell classification: obstacle disk and side walls are WALL,
    everything else FLUID.

    Returns
    -------
    cell_type : ndarray
        uint8 codes, shape (ny, nx)
    """
    solid = create_obstacle_mask(nx, ny, obstacle_radius) | create_side_walls(nx, ny)
    return np.where(solid, WALL, FLUID).astype(np.uint8)
