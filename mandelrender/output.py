"""Image encoding for rendered RGB grids."""

from __future__ import annotations

from pathlib import Path

import numpy as np
import PIL.Image


def pil_format_name(ext: str) -> str:
    upper = ext.upper().lstrip(".")
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def to_image(rgb: np.ndarray) -> PIL.Image.Image:
    """Wrap a ``(height, width, 3)`` ``uint8`` grid as a Pillow image."""

    if rgb.ndim != 3 or rgb.shape[2] != 3 or rgb.dtype != np.uint8:
        raise ValueError(f"expected a (height, width, 3) uint8 array, got {rgb.shape} {rgb.dtype}")
    return PIL.Image.fromarray(rgb)


def write_image(rgb: np.ndarray, output_path: Path, image_format: str = "png") -> Path:
    """Encode ``rgb`` and write it to ``output_path``.

    Encoding and filesystem errors propagate to the caller untouched.
    """

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    to_image(rgb).save(str(output_path), format=pil_format_name(image_format))
    return output_path
