"""HSL gradient coloring of escape results."""

from __future__ import annotations

import numpy as np
from matplotlib.colors import hsv_to_rgb

from .escape import HORIZON

INSIDE_COLOR = (255, 255, 255)

# Empirical gradient shaping constant: hue turns per unit of iterations * |z|^2.
HUE_SCALE = 800.0

SATURATION = 1.0
LIGHTNESS = 0.5


def hsl_to_rgb(h, s, l) -> np.ndarray:
    """Convert HSL values to RGB floats in ``[0, 1]``.

    ``h`` is measured in turns and wraps, so any real value is accepted.
    Inputs broadcast against each other; the result gains a trailing
    channel axis of length 3.
    """

    h = np.mod(np.asarray(h, dtype=np.float64), 1.0)
    s = np.asarray(s, dtype=np.float64)
    l = np.asarray(l, dtype=np.float64)

    v = l + s * np.minimum(l, 1.0 - l)
    with np.errstate(divide="ignore", invalid="ignore"):
        s_v = np.where(v > 0, 2.0 * (1.0 - l / v), 0.0)

    h, s_v, v = np.broadcast_arrays(h, s_v, v)
    hsv = np.stack((h, np.clip(s_v, 0.0, 1.0), np.clip(v, 0.0, 1.0)), axis=-1)
    return hsv_to_rgb(hsv)


def colorize_array(magnitude: np.ndarray, iterations: np.ndarray, max_iterations: int) -> np.ndarray:
    """Map escape results to an ``(..., 3)`` uint8 RGB array."""

    magnitude = np.asarray(magnitude, dtype=np.float64)
    iterations = np.asarray(iterations)
    inside = np.logical_or(magnitude <= HORIZON, iterations >= max_iterations)

    hue = np.where(inside, 0.0, iterations / HUE_SCALE * magnitude)
    rgb = np.rint(hsl_to_rgb(hue, SATURATION, LIGHTNESS) * 255)
    rgb = np.clip(rgb, 0, 255).astype(np.uint8)
    rgb[inside] = INSIDE_COLOR
    return rgb


def colorize(magnitude_squared: float, iterations: int, max_iterations: int) -> tuple[int, int, int]:
    """Color a single escape result; points that never escaped are white."""

    rgb = colorize_array(np.array([magnitude_squared]), np.array([iterations]), max_iterations)[0]
    return int(rgb[0]), int(rgb[1]), int(rgb[2])
