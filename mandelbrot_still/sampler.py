"""Stochastic supersampling of output pixels."""

from __future__ import annotations

from typing import Optional

import numpy as np

from .color import colorize, colorize_array
from .config import RenderConfig
from .escape import evaluate, evaluate_batch

OPAQUE = 255


def average_colors(samples) -> tuple[int, int, int, int]:
    """Average an ``(S, 3)`` set of colors channel-wise into one opaque RGBA.

    The mean is truncated toward zero rather than rounded.
    """

    samples = np.asarray(samples, dtype=np.int64)
    if samples.ndim != 2 or samples.shape[1] != 3 or samples.shape[0] == 0:
        raise ValueError(f"expected a non-empty (S, 3) sample set, got shape {samples.shape}")
    r, g, b = samples.sum(axis=0) // samples.shape[0]
    return int(r), int(g), int(b), OPAQUE


def sample_pixel(x: int, y: int, config: RenderConfig, rng) -> tuple[int, int, int, int]:
    """Render pixel ``(x, y)`` from ``config.samples`` jittered evaluations.

    ``rng`` must provide ``random(size)`` returning uniform floats in
    ``[0, 1)``, as :class:`numpy.random.Generator` does.
    """

    offsets = rng.random((config.samples, 2))
    colors = []
    for ox, oy in offsets:
        cx = config.plane_x(x + float(ox))
        cy = config.plane_y(y + float(oy))
        colors.append(colorize(*evaluate(cx, cy, config.max_iterations), config.max_iterations))
    return average_colors(colors)


def sample_row(y: int, config: RenderConfig, rng, *, device: Optional[str] = None) -> np.ndarray:
    """Render every pixel of row ``y`` in one batched evaluation.

    Offsets are drawn as a ``(width, samples, 2)`` block, which consumes the
    generator in the same order as calling :func:`sample_pixel` for each
    column in turn. Returns a ``(width, 4)`` uint8 RGBA array.
    """

    width, samples = config.width, config.samples
    offsets = rng.random((width, samples, 2))
    columns = np.arange(width, dtype=np.float64)[:, np.newaxis]

    cx = config.plane_x(columns + offsets[..., 0])
    cy = config.plane_y(y + offsets[..., 1])

    magnitude, iterations = evaluate_batch(cx.reshape(-1), cy.reshape(-1), config.max_iterations, device=device)
    colors = colorize_array(magnitude, iterations, config.max_iterations).reshape(width, samples, 3)

    row = np.empty((width, 4), dtype=np.uint8)
    row[:, :3] = colors.astype(np.int64).sum(axis=1) // samples
    row[:, 3] = OPAQUE
    return row
