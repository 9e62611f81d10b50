"""Output path resolution and PNG persistence."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Optional

import PIL.Image

DEFAULT_FILENAME = "fractal.png"


class OutputError(RuntimeError):
    """Fatal failure locating or writing the output image."""


def resolve_output_path(filename: Optional[str] = None) -> Path:
    """Place ``filename`` (or the default) inside the user's home directory.

    Absolute filenames are used as given.
    """

    try:
        home = Path.home()
    except (RuntimeError, KeyError) as exc:
        raise OutputError(f"cannot determine home directory: {exc}") from exc
    return home / (filename or DEFAULT_FILENAME)


def write_png(image: PIL.Image.Image, output_path: Path) -> None:
    """Encode ``image`` as PNG at ``output_path``.

    The image is written to a temporary file next to the target and moved
    into place only once encoding has succeeded, so a failure never leaves a
    truncated file behind.
    """

    output_path = Path(output_path)
    tmp_name = None
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{output_path.stem}-", suffix=".png", dir=output_path.parent)
        with os.fdopen(fd, "wb") as handle:
            image.save(handle, format="PNG")
        os.chmod(tmp_name, 0o644)
        os.replace(tmp_name, output_path)
        tmp_name = None
    except (OSError, ValueError) as exc:
        raise OutputError(f"cannot write {output_path}: {exc}") from exc
    finally:
        if tmp_name is not None and os.path.exists(tmp_name):
            os.unlink(tmp_name)
