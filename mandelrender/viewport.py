"""Mapping between pixel space and the complex plane."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace

import numpy as np

from .errors import ConfigurationError


@dataclass(frozen=True)
class Viewport:
    """Rectangle of the complex plane described by its centre and extents."""

    x_center: float
    y_center: float
    x_width: float
    y_width: float

    @classmethod
    def for_image(cls, x_center: float, y_center: float, x_width: float, width: int, height: int) -> "Viewport":
        """Build a viewport whose aspect ratio matches a ``width`` x ``height`` image."""

        _check_resolution(width, height)
        y_width = np.float64(x_width) * np.float64(height) / np.float64(width)
        return cls(x_center=float(x_center), y_center=float(y_center), x_width=float(x_width), y_width=float(y_width))

    @classmethod
    def from_bounds(cls, x_min: float, x_max: float, y_center: float, width: int, height: int) -> "Viewport":
        x_center = (np.float64(x_min) + np.float64(x_max)) / 2.0
        return cls.for_image(float(x_center), y_center, float(np.float64(x_max) - np.float64(x_min)), width, height)

    def lock_aspect(self, width: int, height: int) -> "Viewport":
        _check_resolution(width, height)
        new_y_width = np.float64(self.x_width) * np.float64(height) / np.float64(width)
        return replace(self, y_width=float(new_y_width))

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Return ``(x_min, x_max, y_min, y_max)``."""

        x_half = np.float64(self.x_width) / 2.0
        y_half = np.float64(self.y_width) / 2.0
        return (
            float(self.x_center - x_half),
            float(self.x_center + x_half),
            float(self.y_center - y_half),
            float(self.y_center + y_half),
        )

    def validate(self) -> None:
        values = (self.x_center, self.y_center, self.x_width, self.y_width)
        if not all(math.isfinite(v) for v in values):
            raise ConfigurationError(f"viewport values must be finite, got {values}")
        if self.x_width <= 0 or self.y_width <= 0:
            raise ConfigurationError(
                f"viewport extents must be positive, got x_width={self.x_width}, y_width={self.y_width}"
            )


@dataclass(frozen=True)
class SamplingMetadata:
    """Metadata describing the sampling grid for a rendered frame."""

    x_min: float
    y_min: float
    x_step: float
    y_step: float
    x_res: int
    y_res: int

    @property
    def x_max(self) -> float:
        return self.x_min + self.x_step * self.x_res

    @property
    def y_max(self) -> float:
        return self.y_min + self.y_step * self.y_res


def _check_resolution(width: int, height: int) -> None:
    if int(width) <= 0 or int(height) <= 0:
        raise ConfigurationError(f"image dimensions must be positive, got {width}x{height}")


def compute_metadata(viewport: Viewport, width: int, height: int) -> SamplingMetadata:
    """Derive the affine pixel -> plane transform for ``viewport``."""

    _check_resolution(width, height)
    viewport.validate()
    x_min, _, y_min, _ = viewport.bounds
    x_step = np.float64(viewport.x_width) / np.float64(width)
    y_step = np.float64(viewport.y_width) / np.float64(height)
    if x_step == 0.0 or y_step == 0.0:
        raise ConfigurationError("viewport is too small to separate neighbouring pixels")
    return SamplingMetadata(
        x_min=x_min,
        y_min=y_min,
        x_step=float(x_step),
        y_step=float(y_step),
        x_res=int(width),
        y_res=int(height),
    )


def pixel_to_complex(metadata: SamplingMetadata, x: int, y: int) -> complex:
    """Return the sample point at the centre of pixel ``(x, y)``."""

    re = np.float64(metadata.x_min) + (np.float64(x) + 0.5) * np.float64(metadata.x_step)
    im = np.float64(metadata.y_min) + (np.float64(y) + 0.5) * np.float64(metadata.y_step)
    return complex(float(re), float(im))


def row_samples(metadata: SamplingMetadata, y: int) -> tuple[np.ndarray, np.ndarray]:
    """Real and imaginary sample coordinates for every pixel of row ``y``."""

    cols = np.arange(metadata.x_res, dtype=np.float64)
    cr = np.float64(metadata.x_min) + (cols + 0.5) * np.float64(metadata.x_step)
    ci = np.full(metadata.x_res, np.float64(metadata.y_min) + (np.float64(y) + 0.5) * np.float64(metadata.y_step))
    return cr, ci


def complex_to_pixel(metadata: SamplingMetadata, c: complex) -> tuple[int, int]:
    """Return the pixel nearest to ``c``, clamped into the grid."""

    col = math.floor((c.real - metadata.x_min) / metadata.x_step)
    row = math.floor((c.imag - metadata.y_min) / metadata.y_step)
    col = min(max(col, 0), metadata.x_res - 1)
    row = min(max(row, 0), metadata.y_res - 1)
    return int(col), int(row)
