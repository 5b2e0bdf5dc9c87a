from __future__ import annotations

import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

EXAMPLES_ROOT = Path("examples/cli-options")
BASE_ARGS = ["--width", "160", "--height", "120", "--max-iterations", "200", "--no-progress"]


@dataclass
class Example:
    name: str
    args: list[str]
    expected: Path

    def full_args(self) -> list[str]:
        return [sys.executable, "render.py", *self.args, "--output", str(self.expected)]


def _example(name: str, filename: str, *args: str) -> Example:
    return Example(name=name, args=[*BASE_ARGS, *args], expected=EXAMPLES_ROOT / name / filename)


EXAMPLES: list[Example] = [
    _example("max-iterations", "high-iterations.png", "--max-iterations", "2000"),
    _example("width", "wide.png", "--width", "240"),
    _example("height", "tall.png", "--height", "200"),
    _example("x-center", "period-three.png", "--x-center", "-1.7548", "--x-width", "0.05"),
    _example("y-center", "upper-plane.png", "--y-center", "0.35"),
    _example("x-width", "narrow-window.png", "--x-width", "0.6"),
    _example("bounds", "classic-window.png", "--x-min", "-2.5", "--x-max", "1.0"),
    _example("escape-radius", "large-radius.png", "--escape-radius", "64"),
    _example("palette", "inferno.png", "--palette", "inferno"),
    _example("classic", "classic.png", "--palette", "classic"),
    _example("invert", "inverted.png", "--invert"),
    _example("color-period", "banded.png", "--color-period", "16"),
    _example("gamma", "bright.png", "--gamma", "0.5"),
    _example("inside-color", "custom-interior.png", "--inside-color", "#0a3ba0"),
    _example("workers", "sequential.png", "--workers", "1"),
    _example("rows-per-task", "single-rows.png", "--rows-per-task", "1"),
    _example("format", "original.ppm", "--format", "ppm"),
    _example("verbose", "diagnostic.png", "--verbose"),
]


def _ensure_clean(paths: Iterable[Path]) -> None:
    for path in paths:
        if path.exists():
            if path.is_dir():
                shutil.rmtree(path)
            else:
                path.unlink()


def _verify(example: Example) -> None:
    if not example.expected.is_file():
        raise RuntimeError(f"Expected file {example.expected} was not created")


def main() -> None:
    EXAMPLES_ROOT.mkdir(parents=True, exist_ok=True)
    for example in EXAMPLES:
        print(f"\n[cli-example] {example.name}")
        _ensure_clean([example.expected.parent])
        example.expected.parent.mkdir(parents=True, exist_ok=True)
        subprocess.run(example.full_args(), check=True)
        _verify(example)
    print("\nAll CLI examples generated successfully.")


if __name__ == "__main__":
    main()
