"""Rendering primitives for Mandelbrot images."""

from __future__ import annotations

import os
from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, Optional

import numpy as np

from .errors import ConfigurationError
from .escape import (
    DEFAULT_ESCAPE_RADIUS,
    EscapeResult,
    Escaped,
    Interior,
    check_iteration_settings,
    escape_row,
    normalize,
    smooth_values,
)
from .palette import Palette
from .viewport import SamplingMetadata, Viewport, compute_metadata, row_samples

ProgressCallback = Callable[[int], None]


@dataclass(frozen=True)
class RenderParameters:
    """Parameters that describe a single render of the Mandelbrot set."""

    width: int
    height: int
    viewport: Viewport
    max_iterations: int
    escape_radius: float = DEFAULT_ESCAPE_RADIUS

    def validate(self) -> SamplingMetadata:
        """Check every setting and return the sampling grid they describe."""

        check_iteration_settings(self.max_iterations, self.escape_radius)
        return compute_metadata(self.viewport, self.width, self.height)


@dataclass(frozen=True)
class RenderResult:
    """Container for the numerical results of a Mandelbrot render."""

    smooth: np.ndarray
    iterations: np.ndarray
    magnitude: np.ndarray
    interior: np.ndarray
    metadata: SamplingMetadata
    max_iterations: int
    escape_radius: float

    @property
    def shape(self) -> tuple[int, int]:
        return self.interior.shape

    def outcome(self, x: int, y: int) -> EscapeResult:
        height, width = self.interior.shape
        if not (0 <= x < width and 0 <= y < height):
            raise IndexError(f"pixel ({x}, {y}) is outside the {width}x{height} image")
        if self.interior[y, x]:
            return Interior()
        return Escaped(iteration=int(self.iterations[y, x]), magnitude_squared=float(self.magnitude[y, x]))


def resolve_workers(workers: Optional[int]) -> int:
    if workers is None:
        return max(os.cpu_count() or 1, 1)
    if int(workers) < 1:
        raise ConfigurationError(f"workers must be at least 1, got {workers}")
    return int(workers)


def row_bands(height: int, rows_per_task: int) -> list[tuple[int, int]]:
    """Split ``height`` rows into contiguous ``[start, stop)`` bands."""

    if int(rows_per_task) < 1:
        raise ConfigurationError(f"rows_per_task must be at least 1, got {rows_per_task}")
    return [(start, min(start + rows_per_task, height)) for start in range(0, height, rows_per_task)]


def render_band(
    metadata: SamplingMetadata,
    start: int,
    stop: int,
    max_iterations: int,
    escape_radius: float,
) -> tuple[int, np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
    """Compute rows ``start`` to ``stop``; runs inside a worker process."""

    rows = stop - start
    iterations = np.zeros((rows, metadata.x_res), dtype=np.int32)
    magnitude = np.empty((rows, metadata.x_res), dtype=np.float64)
    interior = np.empty((rows, metadata.x_res), dtype=bool)
    for offset, y in enumerate(range(start, stop)):
        cr, ci = row_samples(metadata, y)
        iterations[offset], magnitude[offset], interior[offset] = escape_row(cr, ci, max_iterations, escape_radius)
    smooth = smooth_values(iterations, magnitude, interior, escape_radius)
    return start, smooth, iterations, magnitude, interior


def render_frame(
    params: RenderParameters,
    *,
    workers: Optional[int] = None,
    rows_per_task: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
) -> RenderResult:
    """Render a Mandelbrot frame given the supplied parameters.

    Row bands are distributed over a pool of ``workers`` processes (all CPUs
    by default; ``1`` computes in-process). Each band is written to its own
    slice of the output arrays, so the result does not depend on scheduling.
    ``progress`` receives the running count of completed pixels.
    """

    metadata = params.validate()
    workers = resolve_workers(workers)
    width, height = metadata.x_res, metadata.y_res
    if rows_per_task is None:
        rows_per_task = max(1, height // (workers * 4))
    bands = row_bands(height, rows_per_task)

    smooth = np.empty((height, width), dtype=np.float64)
    iterations = np.empty((height, width), dtype=np.int32)
    magnitude = np.empty((height, width), dtype=np.float64)
    interior = np.empty((height, width), dtype=bool)
    completed = 0

    def store(band: tuple[int, np.ndarray, np.ndarray, np.ndarray, np.ndarray]) -> None:
        nonlocal completed
        start, band_smooth, band_iterations, band_magnitude, band_interior = band
        stop = start + band_interior.shape[0]
        smooth[start:stop] = band_smooth
        iterations[start:stop] = band_iterations
        magnitude[start:stop] = band_magnitude
        interior[start:stop] = band_interior
        completed += band_interior.size
        if progress is not None:
            progress(completed)

    if workers == 1:
        for start, stop in bands:
            store(render_band(metadata, start, stop, params.max_iterations, params.escape_radius))
    else:
        pool = ProcessPoolExecutor(max_workers=workers)
        try:
            futures = [
                pool.submit(render_band, metadata, start, stop, params.max_iterations, params.escape_radius)
                for start, stop in bands
            ]
            for future in as_completed(futures):
                store(future.result())
        except BaseException:
            pool.shutdown(wait=False, cancel_futures=True)
            raise
        pool.shutdown()

    return RenderResult(
        smooth=smooth,
        iterations=iterations,
        magnitude=magnitude,
        interior=interior,
        metadata=metadata,
        max_iterations=int(params.max_iterations),
        escape_radius=float(params.escape_radius),
    )


def colorize(
    result: RenderResult,
    palette: Palette,
    *,
    inside_color: tuple[int, int, int] = (0, 0, 0),
    period: Optional[float] = None,
    gamma: float = 1.0,
) -> np.ndarray:
    """Turn a render into a ``(height, width, 3)`` ``uint8`` RGB grid."""

    v = normalize(result.smooth, result.interior, result.max_iterations, period=period, gamma=gamma)
    rgb = np.array(palette(v), dtype=np.float64, copy=True)
    inside_rgb = np.asarray(inside_color, dtype=np.float64) / 255.0
    for k in (0, 1, 2):
        rgb[..., k] = np.where(result.interior, inside_rgb[k], rgb[..., k])
    return np.uint8(np.clip(np.rint(rgb * 255), 0, 255))
