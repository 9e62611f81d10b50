import os
import sys
import time
import warnings
from argparse import ArgumentParser
from pathlib import Path

_VERBOSE_FLAGS = {"--verbose", "-v"}
_cli_verbose = any(arg in _VERBOSE_FLAGS for arg in sys.argv[1:])
_env_log_level = os.environ.get("TF_CPP_MIN_LOG_LEVEL")
_suppress_messages = (not _cli_verbose) and _env_log_level != "0"

if _suppress_messages and _env_log_level is None:
    os.environ["TF_CPP_MIN_LOG_LEVEL"] = "3"

if _suppress_messages:
    warnings.filterwarnings(
        "ignore",
        message=r"Protobuf gencode version .* is exactly one major version older than the runtime version .*",
        category=UserWarning,
        module="google.protobuf",
    )

VERBOSE = _cli_verbose


def log(message, *args, **kwargs):
    """Print a timestamped stage line."""

    stamp = time.strftime("%Y/%m/%d %H:%M:%S")
    print(stamp, message, *args, **kwargs)


def debug(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


import tensorflow as tf

if _suppress_messages:
    tf.get_logger().setLevel("ERROR")
    for handler in tf.get_logger().handlers:
        handler.setLevel("ERROR")

from mandelbrot_still import (
    PRESETS,
    Framebuffer,
    OutputError,
    ProgressReporter,
    RenderConfig,
    preset,
    render,
    resolve_output_path,
    write_png,
)
from mandelbrot_still.config import ENGINES


def select_device() -> str:
    """Use the first visible GPU when TensorFlow can see one."""

    debug("TensorFlow version: %s" % tf.__version__)
    gpus = tf.config.list_physical_devices('GPU')
    if not gpus:
        debug("No GPU found, using CPU")
        return '/CPU:0'
    try:
        for gpu in gpus:
            tf.config.experimental.set_memory_growth(gpu, True)
    except RuntimeError as e:
        debug(e)
        return '/CPU:0'
    debug("GPU found, using %s" % gpus[0].name)
    return '/GPU:0'


def build_parser():
    parser = ArgumentParser(description='Render a supersampled still of the Mandelbrot set to a PNG file.')

    parser.add_argument('filename', nargs='?', default=None,
                        help='output file name, relative to the home directory (default: fractal.png)')

    parser.add_argument('--preset', choices=sorted(PRESETS), default='deep',
                        help='starting view and quality settings')

    parser.add_argument('--x-min', type=float, dest='x_min', metavar='X_MIN', default=None,
                        help='real coordinate of the left edge of the view')

    parser.add_argument('--y-min', type=float, dest='y_min', metavar='Y_MIN', default=None,
                        help='imaginary coordinate of the top edge of the view')

    parser.add_argument('--size', type=float, dest='size', metavar='SIZE', default=None,
                        help='span of the view in the complex plane')

    parser.add_argument('--width', type=int, dest='width', metavar='WIDTH', default=None,
                        help='image width in pixels')

    parser.add_argument('--height', type=int, dest='height', metavar='HEIGHT', default=None,
                        help='image height in pixels')

    parser.add_argument('--max-iterations', type=int, dest='max_iterations', metavar='MAX_ITERATIONS', default=None,
                        help='maximum number of iterations before a point counts as inside the set')

    parser.add_argument('--samples', type=int, dest='samples', metavar='SAMPLES', default=None,
                        help='jittered samples averaged per pixel')

    parser.add_argument('--seed', type=int, default=None,
                        help='base seed for the per-row random generators; fixes the output image')

    parser.add_argument('--engine', choices=ENGINES, default=None,
                        help='row worker implementation')

    parser.add_argument('--workers', type=int, default=None,
                        help='number of worker threads (default: executor default)')

    parser.add_argument('--no-progress', action='store_false', dest='show_progress', default=None,
                        help='do not print the live row counter')

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including TensorFlow and hardware diagnostics.')

    return parser


_OVERRIDES = (
    "x_min", "y_min", "size", "width", "height", "max_iterations",
    "samples", "seed", "engine", "workers", "show_progress",
)


def resolve_config(opt, parser: ArgumentParser) -> RenderConfig:
    overrides = {name: getattr(opt, name) for name in _OVERRIDES if getattr(opt, name, None) is not None}
    try:
        return preset(opt.preset, **overrides)
    except ValueError as exc:
        parser.error(str(exc))


def _elapsed(start: float) -> str:
    return f"{time.perf_counter() - start:.3f}s"


def run(config: RenderConfig, output_path: Path, *, device=None) -> Framebuffer:
    """Render ``config`` and write the result to ``output_path``."""

    log("Allocating image...")
    framebuffer = Framebuffer(config.width, config.height)

    log("Rendering...")
    start = time.perf_counter()
    progress = ProgressReporter(config.height) if config.show_progress else None
    render(framebuffer, config, progress=progress, device=device)
    log("Done rendering in", _elapsed(start))

    log("Encoding image...")
    write_png(framebuffer.to_image(), output_path)
    log("Done! in", _elapsed(start))
    return framebuffer


def main(argv=None):
    parser = build_parser()
    opt = parser.parse_args(argv)

    global VERBOSE
    VERBOSE = bool(opt.verbose)

    config = resolve_config(opt, parser)
    debug(config)

    try:
        output_path = resolve_output_path(opt.filename)
    except OutputError as exc:
        sys.exit(f"fatal: {exc}")
    debug("Writing to %s" % output_path)

    device = select_device()

    try:
        run(config, output_path, device=device)
    except OutputError as exc:
        sys.exit(f"fatal: {exc}")


if __name__ == '__main__':
    main()
