"""Public API for Mandelbrot rendering utilities."""

from .errors import ConfigurationError
from .escape import (
    Escaped,
    EscapeResult,
    Interior,
    escape_row,
    escape_time,
    normalize,
    smooth_escape,
    smooth_values,
)
from .output import to_image, write_image
from .palette import ColormapPalette, GradientPalette, Palette, get_palette, parse_hex_color
from .renderer import RenderParameters, RenderResult, colorize, render_frame
from .viewport import SamplingMetadata, Viewport, complex_to_pixel, compute_metadata, pixel_to_complex

__all__ = [
    "ColormapPalette",
    "ConfigurationError",
    "EscapeResult",
    "Escaped",
    "GradientPalette",
    "Interior",
    "Palette",
    "RenderParameters",
    "RenderResult",
    "SamplingMetadata",
    "Viewport",
    "colorize",
    "complex_to_pixel",
    "compute_metadata",
    "escape_row",
    "escape_time",
    "get_palette",
    "normalize",
    "parse_hex_color",
    "pixel_to_complex",
    "render_frame",
    "smooth_escape",
    "smooth_values",
    "to_image",
    "write_image",
]
