"""
Simulation configuration.

`StepConfig` carries the per-invocation input of one solver call (cursor,
init flag, display brightness). `SolverParameters` groups the fixed
physical constants so a run can override them in one place.
"""

from dataclasses import dataclass

import numpy as np

from .collision import RELAXATION_BETA
from .forcing import ALIGNMENT_THRESHOLD, BRUSH_RADIUS, FORCE_STRENGTH
from .boundary import OBSTACLE_RADIUS


def _as_vector(value, name):
    vector = tuple(float(v) for v in value)
    if len(vector) != 2:
        raise ValueError(f"{name} must have two components, got {value!r}")
    return vector


@dataclass(frozen=True)
class StepConfig:
    """
    Input of a single solver invocation.

    Attributes
    ----------
    cursor_position : tuple of float
        Cursor position in normalized cell units (pixel index / ny).
    cursor_delta : tuple of float
        Cursor displacement since the previous step, same units.
    init : bool
        Run the initializer instead of a steady step.
    brightness : float
        Display scale, read by the colorizers only.
    dissipation : float
        Reserved. No formula reads it.
    """
    cursor_position: tuple = (0.0, 0.0)
    cursor_delta: tuple = (0.0, 0.0)
    init: bool = False
    brightness: float = 1.0
    dissipation: float = 0.0

    def __post_init__(self):
        object.__setattr__(
            self, "cursor_position", _as_vector(self.cursor_position, "cursor_position")
        )
        object.__setattr__(
            self, "cursor_delta", _as_vector(self.cursor_delta, "cursor_delta")
        )

    @classmethod
    def idle(cls, brightness=1.0):
        """Steady step without cursor input."""
        return cls(brightness=brightness)

    @classmethod
    def initial(cls, brightness=1.0):
        """Initialization request."""
        return cls(init=True, brightness=brightness)

    @classmethod
    def from_pixels(cls, x, y, prev_x, prev_y, ny, **kwargs):
        """
        Build a config from cursor coordinates given in cells.

        Both axes are divided by the grid height, the same normalization
        used for cell positions.
        """
        return cls(
            cursor_position=(x / ny, y / ny),
            cursor_delta=((x - prev_x) / ny, (y - prev_y) / ny),
            **kwargs,
        )

    @property
    def has_motion(self):
        return bool(np.hypot(*self.cursor_delta) > 0.0)


@dataclass
class SolverParameters:
    """Physical constants of the update; defaults are the tuned values."""
    beta: float = RELAXATION_BETA
    brush_radius: float = BRUSH_RADIUS
    force_strength: float = FORCE_STRENGTH
    alignment_threshold: float = ALIGNMENT_THRESHOLD
    obstacle_radius: float = OBSTACLE_RADIUS

    def __post_init__(self):
        if not 0.0 < self.beta < 1.0:
            raise ValueError(f"beta must be in (0, 1), got {self.beta}")
        if self.brush_radius < 0.0:
            raise ValueError(f"brush_radius must be >= 0, got {self.brush_radius}")
        if self.obstacle_radius < 0.0:
            raise ValueError(f"obstacle_radius must be >= 0, got {self.obstacle_radius}")
