import numpy as np
import pytest

from mandelrender import ColormapPalette, ConfigurationError, GradientPalette, get_palette, parse_hex_color
from mandelrender.palette import classic_palette


def test_colormap_palette_returns_rgb():
    palette = ColormapPalette("viridis")
    rgb = palette(np.linspace(0.0, 0.99, 12).reshape(3, 4))
    assert rgb.shape == (3, 4, 3)
    assert rgb.min() >= 0.0 and rgb.max() <= 1.0


def test_colormap_invert_reverses_lookup():
    t = np.array([0.1, 0.5, 0.9])
    plain = ColormapPalette("inferno")
    inverted = ColormapPalette("inferno", invert=True)
    assert inverted(t) == pytest.approx(plain(1.0 - t))


def test_unknown_colormap_rejected():
    with pytest.raises(ConfigurationError):
        get_palette("definitely-not-a-colormap")


def test_gradient_interpolates_between_stops():
    palette = GradientPalette(positions=(0.0, 1.0), colors=((0, 0, 0), (255, 0, 255)))
    assert palette(np.array([0.5]))[0] == pytest.approx([0.5, 0.0, 0.5])


@pytest.mark.parametrize(
    "positions, colors",
    [
        ((0.0,), ((0, 0, 0),)),
        ((0.0, 1.0), ((0, 0, 0),)),
        ((0.0, 0.6, 0.4, 1.0), ((0, 0, 0),) * 4),
        ((0.1, 1.0), ((0, 0, 0), (1, 1, 1))),
    ],
)
def test_bad_gradient_rejected(positions, colors):
    with pytest.raises(ConfigurationError):
        GradientPalette(positions=positions, colors=colors)


def test_classic_palette_is_cyclic():
    palette = classic_palette()
    assert palette(np.array([0.0]))[0] == pytest.approx(palette(np.array([1.0]))[0])


def test_get_palette_resolves_names():
    assert isinstance(get_palette("classic"), GradientPalette)
    assert isinstance(get_palette("twilight_shifted"), ColormapPalette)


def test_parse_hex_color():
    assert parse_hex_color("#0a3ba0") == (10, 59, 160)
    assert parse_hex_color("FFFFFF") == (255, 255, 255)


@pytest.mark.parametrize("value", ["#fff", "#12345g", ""])
def test_parse_hex_color_rejects_malformed(value):
    with pytest.raises(ConfigurationError):
        parse_hex_color(value)
