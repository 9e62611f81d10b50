"""RGBA framebuffer shared by the row workers."""

from __future__ import annotations

import numpy as np
import PIL.Image


class Framebuffer:
    """A ``height x width`` RGBA raster.

    Workers may write concurrently without locking as long as each row is
    written by exactly one worker.
    """

    def __init__(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.pixels = np.zeros((height, width, 4), dtype=np.uint8)

    @property
    def shape(self) -> tuple[int, int]:
        return self.height, self.width

    def set_pixel(self, x: int, y: int, color) -> None:
        self.pixels[y, x] = color

    def set_row(self, y: int, row: np.ndarray) -> None:
        if row.shape != (self.width, 4):
            raise ValueError(f"row must have shape ({self.width}, 4), got {row.shape}")
        self.pixels[y] = row

    def to_image(self) -> PIL.Image.Image:
        return PIL.Image.fromarray(self.pixels)
