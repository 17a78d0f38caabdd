"""
Colorization

Turns a finished distribution generation into per-pixel RGBA for display.
Each variant reduces the distributions to one or two scalars, applies a
power-law tone curve scaled by the brightness, and maps the result through
an HSV or HSL color model. Wall cells get a flat color.
"""

import numpy as np
from matplotlib.colors import hsv_to_rgb

from .lattice import WALL
from .observables import compute_density, compute_second_moment, compute_velocity

WALL_COLOR = (0.35, 0.35, 0.35, 1.0)

# Trace of the second moment of a resting equilibrium, per unit density
REST_SECOND_MOMENT = 2.0 / 3.0


def tone_curve(s, brightness, exponent):
    """clip(brightness * s, 0, 1) ** exponent"""
    return np.clip(brightness * s, 0.0, 1.0) ** exponent


def hsl_to_rgb(hsl):
    """
    Vectorized HSL -> RGB, all channels in [0, 1].

    Parameters
    ----------
    hsl : ndarray
        Shape (..., 3)

    Returns
    -------
    rgb : ndarray
        Shape (..., 3)
    """
    h, s, l = hsl[..., 0], hsl[..., 1], hsl[..., 2]
    a = s * np.minimum(l, 1.0 - l)

    channels = []
    for n in (0.0, 8.0, 4.0):
        k = (n + 12.0 * h) % 12.0
        channels.append(l - a * np.clip(np.minimum(k - 3.0, 9.0 - k), -1.0, 1.0))

    return np.stack(channels, axis=-1)


def density_hsv(f, brightness):
    """Density deviation: red for compression, blue for rarefaction."""
    rho = compute_density(f)
    deviation = rho - 1.0

    hue = np.where(deviation >= 0.0, 0.0, 0.62)
    value = tone_curve(np.abs(deviation), brightness, 1.5)

    hsv = np.stack([hue, np.ones_like(value), value], axis=-1)
    return hsv_to_rgb(hsv)


def velocity_hsl(f, brightness):
    """Flow direction as hue, speed as lightness."""
    ux, uy = compute_velocity(f)
    speed = np.hypot(ux, uy)

    hue = (np.arctan2(uy, ux) / (2.0 * np.pi)) % 1.0
    lightness = 0.5 * tone_curve(speed, brightness, 1.3)

    hsl = np.stack([hue, np.ones_like(hue), lightness], axis=-1)
    return hsl_to_rgb(hsl)


def energy_hsv(f, brightness):
    """Second moment in excess of rest, blue (calm) to red (agitated)."""
    rho = compute_density(f)
    excess = np.abs(compute_second_moment(f) - REST_SECOND_MOMENT * rho)

    value = tone_curve(excess, brightness, 1.5)
    hue = 0.62 * (1.0 - value)

    hsv = np.stack([hue, np.full_like(value, 0.85), value], axis=-1)
    return hsv_to_rgb(hsv)


COLORIZERS = {
    "density_hsv": density_hsv,
    "velocity_hsl": velocity_hsl,
    "energy_hsv": energy_hsv,
}


def colorize(f, cell_type, brightness=1.0, variant="velocity_hsl"):
    """
    Render a distribution generation.

    Parameters
    ----------
    f : ndarray
        Finished generation, shape (Q, ny, nx)
    cell_type : ndarray
        Type mask, shape (ny, nx)
    brightness : float
        Tone-curve scale
    variant : str
        Key of COLORIZERS

    Returns
    -------
    rgba : ndarray
        Shape (ny, nx, 4), values in [0, 1]
    """
    try:
        colorizer = COLORIZERS[variant]
    except KeyError:
        raise KeyError(
            f"unknown variant {variant!r}, expected one of {sorted(COLORIZERS)}"
        ) from None

    ny, nx = cell_type.shape
    rgba = np.ones((ny, nx, 4), dtype=np.float64)

    with np.errstate(invalid="ignore", over="ignore"):
        rgba[..., :3] = np.clip(np.nan_to_num(colorizer(f, brightness)), 0.0, 1.0)

    rgba[cell_type == WALL] = WALL_COLOR
    return rgba
