"""Render configuration for a single still Mandelbrot image."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional

ENGINES = ("tensorflow", "python")


@dataclass(frozen=True)
class RenderConfig:
    """Parameters that describe one supersampled render.

    ``x_min`` and ``y_min`` locate the top-left corner of the view in the
    complex plane; ``size`` is the span added across both axes.
    """

    x_min: float = -0.5557506
    y_min: float = -0.55560
    size: float = 0.000000001
    width: int = 1920
    height: int = 1080
    max_iterations: int = 1000
    samples: int = 25
    show_progress: bool = True
    seed: Optional[int] = None
    engine: str = "tensorflow"
    workers: Optional[int] = None

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"image dimensions must be positive, got {self.width}x{self.height}")
        if self.max_iterations < 0:
            raise ValueError(f"max_iterations must be >= 0, got {self.max_iterations}")
        if self.samples < 1:
            raise ValueError(f"samples must be >= 1, got {self.samples}")
        if self.size < 0:
            raise ValueError(f"size must be >= 0, got {self.size}")
        if self.engine not in ENGINES:
            raise ValueError(f"Unknown engine '{self.engine}'. Valid choices: {', '.join(ENGINES)}.")
        if self.workers is not None and self.workers < 1:
            raise ValueError(f"workers must be >= 1, got {self.workers}")

    def plane_x(self, x: float) -> float:
        return self.size * (x / self.width) + self.x_min

    def plane_y(self, y: float) -> float:
        return self.size * (y / self.height) + self.y_min


PRESETS = {
    "deep": RenderConfig(),
    "overview": RenderConfig(x_min=-2.0, y_min=-1.2, size=2.5),
}


def preset(name: str, **overrides) -> RenderConfig:
    """Return the named preset with ``overrides`` applied."""

    try:
        base = PRESETS[name]
    except KeyError:
        raise ValueError(f"Unknown preset '{name}'. Valid choices: {', '.join(sorted(PRESETS))}.") from None
    return replace(base, **overrides)
