from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options").resolve()
BASE_ARGS = ["--width", "160", "--height", "90", "--samples", "4", "--seed", "7", "--no-progress"]


@dataclass
class Example:
    name: str
    args: list[str]
    output: Path

    def full_args(self) -> list[str]:
        # Absolute output paths bypass the home directory.
        return [sys.executable, "fractal.py", str(self.output), *self.args]


EXAMPLES: list[Example] = [
    Example(
        name="deep",
        args=[*BASE_ARGS, "--max-iterations", "1000"],
        output=EXAMPLES_ROOT / "deep" / "deep-zoom.png",
    ),
    Example(
        name="overview",
        args=[*BASE_ARGS, "--preset", "overview", "--max-iterations", "200"],
        output=EXAMPLES_ROOT / "overview" / "whole-set.png",
    ),
    Example(
        name="samples",
        args=[*BASE_ARGS, "--preset", "overview", "--max-iterations", "200", "--samples", "1"],
        output=EXAMPLES_ROOT / "samples" / "aliased.png",
    ),
    Example(
        name="python-engine",
        args=[*BASE_ARGS, "--preset", "overview", "--max-iterations", "100", "--engine", "python"],
        output=EXAMPLES_ROOT / "python-engine" / "reference.png",
    ),
    Example(
        name="verbose",
        args=[*BASE_ARGS, "--preset", "overview", "--max-iterations", "100", "--verbose"],
        output=EXAMPLES_ROOT / "verbose" / "diagnostic.png",
    ),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            shutil.rmtree(path)


def _verify(example: Example) -> None:
    if not example.output.is_file():
        raise RuntimeError(f"Expected file {example.output} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean([example.output.parent])
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
