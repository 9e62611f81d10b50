"""Public API for still Mandelbrot rendering."""

from .color import colorize, colorize_array, hsl_to_rgb
from .config import PRESETS, RenderConfig, preset
from .dispatcher import render, row_generators
from .escape import evaluate, evaluate_batch
from .framebuffer import Framebuffer
from .output import OutputError, resolve_output_path, write_png
from .progress import ProgressReporter
from .sampler import average_colors, sample_pixel, sample_row

__all__ = [
    "Framebuffer",
    "OutputError",
    "PRESETS",
    "ProgressReporter",
    "RenderConfig",
    "average_colors",
    "colorize",
    "colorize_array",
    "evaluate",
    "evaluate_batch",
    "hsl_to_rgb",
    "preset",
    "render",
    "resolve_output_path",
    "row_generators",
    "sample_pixel",
    "sample_row",
    "write_png",
]
