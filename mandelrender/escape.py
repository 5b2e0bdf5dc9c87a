"""Escape-time iteration and smooth colouring values."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Union

import numpy as np

from .errors import ConfigurationError

DEFAULT_ESCAPE_RADIUS = 2.0
MIN_ESCAPE_RADIUS = 2.0

_LOG2 = math.log(2.0)


@dataclass(frozen=True)
class Interior:
    """The point stayed bounded for the whole iteration budget."""


@dataclass(frozen=True)
class Escaped:
    """The point left the escape radius after ``iteration`` updates."""

    iteration: int
    magnitude_squared: float


EscapeResult = Union[Interior, Escaped]


def check_iteration_settings(max_iterations: int, escape_radius: float) -> None:
    if int(max_iterations) <= 0:
        raise ConfigurationError(f"max_iterations must be positive, got {max_iterations}")
    if not math.isfinite(escape_radius) or escape_radius < MIN_ESCAPE_RADIUS:
        raise ConfigurationError(
            f"escape_radius must be a finite value >= {MIN_ESCAPE_RADIUS}, got {escape_radius}"
        )
    if not math.isfinite(float(escape_radius) * float(escape_radius)):
        raise ConfigurationError(f"escape_radius {escape_radius} is too large to square in double precision")


def check_tone_settings(period: Optional[float], gamma: float) -> None:
    if period is not None and not (period > 0 and math.isfinite(period)):
        raise ConfigurationError(f"color period must be positive, got {period}")
    if not (gamma > 0 and math.isfinite(gamma)):
        raise ConfigurationError(f"gamma must be positive, got {gamma}")


def escape_time(c: complex, max_iterations: int, escape_radius: float = DEFAULT_ESCAPE_RADIUS) -> EscapeResult:
    """Iterate ``z <- z**2 + c`` from ``z = 0`` and classify ``c``."""

    check_iteration_settings(max_iterations, escape_radius)
    cr = float(c.real)
    ci = float(c.imag)
    bailout = float(escape_radius) * float(escape_radius)
    zr = 0.0
    zi = 0.0
    for n in range(1, int(max_iterations) + 1):
        zr, zi = zr * zr - zi * zi + cr, 2.0 * zr * zi + ci
        m = zr * zr + zi * zi
        if m > bailout:
            return Escaped(iteration=n, magnitude_squared=m)
    return Interior()


def smooth_escape(result: EscapeResult, escape_radius: float = DEFAULT_ESCAPE_RADIUS) -> float:
    """Continuous escape count ``nu`` for an escaped point, within ``[n, n + 1)``."""

    if not isinstance(result, Escaped):
        raise TypeError("interior points have no smooth escape value")
    values = smooth_values(
        np.array([result.iteration], dtype=np.int32),
        np.array([result.magnitude_squared], dtype=np.float64),
        np.array([False]),
        escape_radius,
    )
    return float(values[0])


def escape_row(
    cr: np.ndarray,
    ci: np.ndarray,
    max_iterations: int,
    escape_radius: float = DEFAULT_ESCAPE_RADIUS,
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """Run the escape-time iteration for a row of sample points.

    Performs the same floating point operations as :func:`escape_time` for
    each element, so classifications and iteration counts agree exactly.

    Returns ``(iterations, magnitude, interior)``: the escape iteration (0 for
    interior points), the squared magnitude at escape (NaN for interior points)
    and the interior mask.
    """

    cr = np.asarray(cr, dtype=np.float64)
    ci = np.asarray(ci, dtype=np.float64)
    bailout = np.float64(escape_radius) * np.float64(escape_radius)

    zr = np.zeros_like(cr)
    zi = np.zeros_like(ci)
    iterations = np.zeros(cr.shape, dtype=np.int32)
    magnitude = np.full(cr.shape, np.nan, dtype=np.float64)
    active = np.ones(cr.shape, dtype=bool)

    # Escaped points are frozen, so their values never grow past one step.
    with np.errstate(over="ignore", invalid="ignore"):
        for n in range(1, int(max_iterations) + 1):
            new_zr = zr * zr - zi * zi + cr
            new_zi = 2.0 * zr * zi + ci
            zr = np.where(active, new_zr, zr)
            zi = np.where(active, new_zi, zi)
            m = zr * zr + zi * zi
            escaped = np.logical_and(active, m > bailout)
            iterations[escaped] = n
            magnitude[escaped] = m[escaped]
            active = np.logical_and(active, ~escaped)
            if not active.any():
                break

    return iterations, magnitude, active


def smooth_values(
    iterations: np.ndarray,
    magnitude: np.ndarray,
    interior: np.ndarray,
    escape_radius: float = DEFAULT_ESCAPE_RADIUS,
) -> np.ndarray:
    """Apply the logarithmic correction ``nu = n + 1 - log2(log|z| / log R)``."""

    ns = iterations.astype(np.float64)
    safe_m = np.where(interior, np.float64(escape_radius) ** 2, magnitude)
    with np.errstate(over="ignore", invalid="ignore", divide="ignore"):
        log_abs = 0.5 * np.log(safe_m)
        ratio = log_abs / np.log(np.float64(escape_radius))
        nu = ns + 1.0 - np.log(ratio) / _LOG2
    upper = np.nextafter(ns + 1.0, ns)
    nu = np.clip(nu, ns, upper)
    return np.where(interior, np.nan, nu)


def normalize(
    smooth: np.ndarray,
    interior: np.ndarray,
    max_iterations: int,
    period: Optional[float] = None,
    gamma: float = 1.0,
) -> np.ndarray:
    """Map smooth escape values into ``[0, 1)``; interior pixels become 0."""

    check_tone_settings(period, gamma)
    v = np.where(interior, 0.0, smooth)
    if period is None:
        t = v / np.float64(int(max_iterations) + 1)
    else:
        t = np.mod(v, np.float64(period)) / np.float64(period)
    t = np.clip(t, 0.0, np.nextafter(1.0, 0.0))
    if gamma != 1.0:
        t = np.minimum(t ** gamma, np.nextafter(1.0, 0.0))
    return np.where(interior, 0.0, t)
