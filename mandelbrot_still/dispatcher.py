"""Parallel rendering of a framebuffer, one task per image row."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional

import numpy as np

from .config import RenderConfig
from .framebuffer import Framebuffer
from .progress import ProgressReporter
from .sampler import sample_pixel, sample_row


def row_generators(seed: Optional[int], rows: int) -> list[np.random.Generator]:
    """Independent generators, one per row, spawned from a common seed."""

    return [np.random.default_rng(child) for child in np.random.SeedSequence(seed).spawn(rows)]


def _render_row(
    y: int,
    framebuffer: Framebuffer,
    config: RenderConfig,
    rng,
    device: Optional[str],
) -> None:
    if config.engine == "python":
        for x in range(config.width):
            framebuffer.set_pixel(x, y, sample_pixel(x, y, config, rng))
    else:
        framebuffer.set_row(y, sample_row(y, config, rng, device=device))


def render(
    framebuffer: Framebuffer,
    config: RenderConfig,
    *,
    progress: Optional[ProgressReporter] = None,
    rng_factory: Optional[Callable[[int], object]] = None,
    device: Optional[str] = None,
) -> None:
    """Fill every pixel of ``framebuffer`` exactly once.

    Each row is submitted as its own task and owns that row of the buffer
    exclusively, so no locking is needed. ``progress`` receives one signal
    per finished row and is closed only once every task has completed.
    Exceptions raised by a worker propagate to the caller.
    """

    if framebuffer.shape != (config.height, config.width):
        raise ValueError(
            f"framebuffer is {framebuffer.width}x{framebuffer.height}, "
            f"config expects {config.width}x{config.height}"
        )

    if rng_factory is None:
        generators = row_generators(config.seed, config.height)
        rng_factory = generators.__getitem__

    def work(y: int) -> None:
        _render_row(y, framebuffer, config, rng_factory(y), device)
        if progress is not None:
            progress.signal()

    if progress is not None:
        progress.start()
    try:
        with ThreadPoolExecutor(max_workers=config.workers) as executor:
            futures = [executor.submit(work, y) for y in range(config.height)]
            try:
                for future in futures:
                    future.result()
            except BaseException:
                executor.shutdown(wait=True, cancel_futures=True)
                raise
    finally:
        if progress is not None:
            progress.close()
