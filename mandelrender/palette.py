"""Colour gradients that map normalised escape values to RGB."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence

import numpy as np
from matplotlib import colormaps as _mpl_colormaps

from .errors import ConfigurationError

DEFAULT_PALETTE = "twilight_shifted"


class Palette(Protocol):
    """Anything that maps an array of values in ``[0, 1)`` to RGB floats in ``[0, 1]``."""

    def __call__(self, t: np.ndarray) -> np.ndarray:
        ...


@dataclass(frozen=True)
class ColormapPalette:
    """Palette backed by a named matplotlib colormap."""

    name: str
    invert: bool = False
    _cmap: object = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        try:
            cmap = _mpl_colormaps[self.name]
        except (KeyError, ValueError) as exc:
            raise ConfigurationError(f"unknown colormap '{self.name}'") from exc
        object.__setattr__(self, "_cmap", cmap)

    def __call__(self, t: np.ndarray) -> np.ndarray:
        t = np.asarray(t, dtype=np.float64)
        if self.invert:
            t = 1.0 - t
        rgba = np.asarray(self._cmap(t), dtype=np.float64)
        return rgba[..., :3]


@dataclass(frozen=True)
class GradientPalette:
    """Piecewise-linear gradient through ``colors`` placed at ``positions``."""

    positions: Sequence[float]
    colors: Sequence[tuple[int, int, int]]
    invert: bool = False

    def __post_init__(self) -> None:
        if len(self.positions) != len(self.colors) or len(self.positions) < 2:
            raise ConfigurationError("a gradient needs at least two stops with one colour per position")
        positions = np.asarray(self.positions, dtype=np.float64)
        if np.any(np.diff(positions) <= 0) or positions[0] != 0.0 or positions[-1] != 1.0:
            raise ConfigurationError("gradient positions must increase strictly from 0.0 to 1.0")

    def __call__(self, t: np.ndarray) -> np.ndarray:
        t = np.asarray(t, dtype=np.float64)
        if self.invert:
            t = 1.0 - t
        positions = np.asarray(self.positions, dtype=np.float64)
        stops = np.asarray(self.colors, dtype=np.float64) / 255.0
        channels = [np.interp(t, positions, stops[:, k]) for k in range(3)]
        return np.stack(channels, axis=-1)


# Dark blue through white and orange back to dark blue, closing the cycle.
CLASSIC_STOPS = (
    (0.0, (0, 7, 100)),
    (0.16, (32, 107, 203)),
    (0.42, (237, 255, 255)),
    (0.6425, (255, 170, 0)),
    (0.8575, (0, 2, 0)),
    (1.0, (0, 7, 100)),
)


def classic_palette(invert: bool = False) -> GradientPalette:
    return GradientPalette(
        positions=tuple(p for p, _ in CLASSIC_STOPS),
        colors=tuple(c for _, c in CLASSIC_STOPS),
        invert=invert,
    )


def get_palette(name: str, invert: bool = False) -> Palette:
    """Resolve a palette by name: ``classic`` or any matplotlib colormap."""

    if name == "classic":
        return classic_palette(invert=invert)
    return ColormapPalette(name, invert=invert)


def parse_hex_color(hex_color: str) -> tuple[int, int, int]:
    """Parse ``#RRGGBB`` into an RGB tuple of ints."""

    value = hex_color.lstrip('#')
    if len(value) != 6:
        raise ConfigurationError('inside color must be in the form #RRGGBB.')
    try:
        return tuple(int(value[i:i + 2], 16) for i in (0, 2, 4))  # type: ignore[return-value]
    except ValueError as exc:
        raise ConfigurationError('inside color must contain only hexadecimal digits.') from exc
