import io
import time
from dataclasses import replace

import numpy as np
import pytest

from conftest import ConstantRandom, CountingFramebuffer
from mandelbrot_still import Framebuffer, ProgressReporter, RenderConfig, render, row_generators


@pytest.mark.parametrize("engine", ["tensorflow", "python"])
def test_every_pixel_written_exactly_once(small_config, engine):
    config = replace(small_config, engine=engine, workers=4)
    framebuffer = CountingFramebuffer(config.width, config.height)

    render(framebuffer, config)

    assert (framebuffer.writes == 1).all()
    assert (framebuffer.pixels[..., 3] == 255).all()


def test_outside_view_renders_no_white_pixels():
    # Every sample lies at |c| > 2 and escapes on the second check.
    config = RenderConfig(x_min=3.0, y_min=3.0, size=4.0, width=4, height=4, max_iterations=2, samples=1)
    framebuffer = Framebuffer(4, 4)

    render(framebuffer, config, rng_factory=lambda row: ConstantRandom(0.0))

    rgb = framebuffer.pixels[..., :3].reshape(-1, 3)
    assert not (rgb == 255).all(axis=1).any()


@pytest.mark.parametrize("engine", ["tensorflow", "python"])
def test_zero_span_renders_all_white(engine):
    config = RenderConfig(x_min=0.0, y_min=0.0, size=0.0, width=5, height=3, max_iterations=20, samples=3, engine=engine)
    framebuffer = Framebuffer(5, 3)

    render(framebuffer, config)

    assert (framebuffer.pixels == 255).all()


def test_seeded_renders_are_reproducible(small_config):
    first = Framebuffer(small_config.width, small_config.height)
    second = Framebuffer(small_config.width, small_config.height)

    render(first, small_config)
    render(second, replace(small_config, workers=1))

    np.testing.assert_array_equal(first.pixels, second.pixels)


def test_engines_agree_for_the_same_seed(small_config):
    batched = Framebuffer(small_config.width, small_config.height)
    scalar = Framebuffer(small_config.width, small_config.height)

    render(batched, replace(small_config, engine="tensorflow"))
    render(scalar, replace(small_config, engine="python"))

    np.testing.assert_array_equal(batched.pixels, scalar.pixels)


def test_row_generators_are_independent():
    generators = row_generators(99, 3)
    draws = [g.random(4).tolist() for g in generators]
    assert len({tuple(d) for d in draws}) == 3
    assert [g.random(4).tolist() for g in row_generators(99, 3)] == draws


def test_progress_emits_one_signal_per_row(small_config):
    stream = io.StringIO()
    progress = ProgressReporter(small_config.height, stream=stream)

    render(Framebuffer(small_config.width, small_config.height), small_config, progress=progress)

    assert progress.completed == small_config.height
    assert progress.percentages == sorted(progress.percentages)
    assert progress.percentages[-1] == 100
    assert stream.getvalue().endswith(f"\r{small_config.height}/{small_config.height} (100%)\n")


def test_framebuffer_size_mismatch_is_rejected(small_config):
    with pytest.raises(ValueError):
        render(Framebuffer(small_config.width + 1, small_config.height), small_config)


def test_worker_errors_propagate_and_close_progress(small_config):
    class Exploding:
        def random(self, size):
            raise RuntimeError("boom")

    progress = ProgressReporter(small_config.height, stream=io.StringIO())
    with pytest.raises(RuntimeError, match="boom"):
        render(
            Framebuffer(small_config.width, small_config.height),
            small_config,
            progress=progress,
            rng_factory=lambda row: Exploding(),
        )
    assert progress.completed == 0


def test_worker_error_cancels_queued_rows():
    config = RenderConfig(x_min=-2.0, y_min=-1.2, size=2.5, width=2, height=40, max_iterations=5, samples=1, workers=1)
    started = []

    class SlowRandom(ConstantRandom):
        def random(self, size):
            time.sleep(0.02)
            return super().random(size)

    def factory(row):
        started.append(row)
        if row == 0:
            raise RuntimeError("row failed")
        return SlowRandom(0.0)

    with pytest.raises(RuntimeError, match="row failed"):
        render(Framebuffer(config.width, config.height), config, rng_factory=factory)

    assert len(started) < config.height
