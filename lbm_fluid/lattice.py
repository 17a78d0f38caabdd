"""
D2Q9 Lattice Constants

Defines the D2Q9 lattice model and the cell classification codes.
"""
import numpy as np

# D2Q9 lattice velocities
#     6   2   5
#       \ | /
#     3 - 0 - 1
#       / | \
#     8   4   7
#
# Order: center, E, N, W, S, NE, NW, SE, SW


def _frozen(values, dtype):
    array = np.array(values, dtype=dtype)
    array.setflags(write=False)
    return array


# Lattice velocity components
EX = _frozen([0, 1, 0, -1, 0, 1, -1, 1, -1], np.int32)
EY = _frozen([0, 0, 1, 0, -1, 1, 1, -1, -1], np.int32)

# Lattice weights
W = _frozen([4/9, 1/9, 1/9, 1/9, 1/9, 1/36, 1/36, 1/36, 1/36], np.float64)

# Opposite direction indices (for bounce-back)
OPPOSITE = _frozen([0, 3, 4, 1, 2, 8, 7, 6, 5], np.int32)

# Number of lattice velocities
Q = 9

# Cell classification codes
FLUID = 0
WALL = 1
SINK = 6  # reserved, never produced by the initializer
