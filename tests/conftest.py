import numpy as np
import pytest

from mandelbrot_still import Framebuffer, RenderConfig


class ConstantRandom:
    """Stand-in generator returning the same offset for every draw."""

    def __init__(self, value=0.0):
        self.value = value

    def random(self, size):
        return np.full(size, self.value, dtype=np.float64)


class CountingFramebuffer(Framebuffer):
    """Framebuffer that records how often each pixel was written."""

    def __init__(self, width, height):
        super().__init__(width, height)
        self.writes = np.zeros((height, width), dtype=np.int64)

    def set_pixel(self, x, y, color):
        self.writes[y, x] += 1
        super().set_pixel(x, y, color)

    def set_row(self, y, row):
        self.writes[y] += 1
        super().set_row(y, row)


@pytest.fixture
def zero_rng():
    return ConstantRandom(0.0)


@pytest.fixture
def small_config():
    return RenderConfig(
        x_min=-2.0,
        y_min=-1.2,
        size=2.5,
        width=12,
        height=8,
        max_iterations=50,
        samples=3,
        seed=1234,
    )
