"""
Grid State Store

Two generations of the distribution field (ping/pong) and the per-cell
type mask. A step reads the current generation and writes the other one;
`swap` then makes the freshly written generation current.
"""

import numpy as np
from .lattice import Q, FLUID


class GridState:
    """
    Double-buffered distribution storage.

    Parameters
    ----------
    nx : int
        Number of cells in x-direction
    ny : int
        Number of cells in y-direction

    Attributes
    ----------
    buffers : ndarray
        Both generations, shape (2, Q, ny, nx)
    cell_type : ndarray
        Type mask, uint8, shape (ny, nx)
    current_index : int
        Generation currently readable (0 or 1)
    """

    def __init__(self, nx, ny):
        if nx < 1 or ny < 1:
            raise ValueError(f"grid dimensions must be positive, got {nx} x {ny}")

        self.nx = nx
        self.ny = ny
        self.buffers = np.zeros((2, Q, ny, nx), dtype=np.float64)
        self.cell_type = np.full((ny, nx), FLUID, dtype=np.uint8)
        self.current_index = 0

    @property
    def shape(self):
        return (self.ny, self.nx)

    @property
    def current(self):
        """Generation read by the next step."""
        return self.buffers[self.current_index]

    @property
    def next(self):
        """Generation written by the next step."""
        return self.buffers[1 - self.current_index]

    def swap(self):
        """Make the generation just written the current one."""
        self.current_index = 1 - self.current_index

    def set_cell_type(self, cell_type):
        cell_type = np.asarray(cell_type)
        if cell_type.shape != self.shape:
            raise ValueError(
                f"type mask shape {cell_type.shape} does not match grid {self.shape}"
            )
        self.cell_type[:] = cell_type

    def fluid_mask(self):
        return self.cell_type == FLUID
