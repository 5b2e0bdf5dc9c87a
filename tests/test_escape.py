import numpy as np
import pytest

from mandelrender import ConfigurationError, Escaped, Interior, escape_row, escape_time, normalize, smooth_escape
from mandelrender.escape import smooth_values


@pytest.mark.parametrize("max_iterations", [1, 10, 1000])
def test_origin_is_interior(max_iterations):
    assert escape_time(0j, max_iterations) == Interior()


@pytest.mark.parametrize("max_iterations", [1, 2, 50, 5000])
def test_far_point_escapes_immediately(max_iterations):
    result = escape_time(3 + 0j, max_iterations)
    assert isinstance(result, Escaped)
    assert result.iteration in (1, 2)


def test_escape_records_squared_magnitude():
    result = escape_time(1 + 0j, 100)
    # z: 1, 2, 5 -> |z_3|^2 = 25
    assert result == Escaped(iteration=3, magnitude_squared=25.0)


def test_raising_budget_keeps_escape_iteration():
    points = [0.3 + 0.5j, -0.75 + 0.1j, 0.26 + 0.0j, -1.3 + 0.07j, 0.4 - 0.3j]
    for c in points:
        low = escape_time(c, 60)
        high = escape_time(c, 120)
        if isinstance(low, Escaped):
            assert high == low
        if isinstance(high, Interior):
            assert isinstance(low, Interior)


def test_larger_escape_radius_is_accepted():
    result = escape_time(0.5 + 0.5j, 200, escape_radius=100.0)
    assert isinstance(result, Escaped)
    assert result.magnitude_squared > 100.0 ** 2


@pytest.mark.parametrize("radius", [1.0, 1.999, float("nan"), float("inf")])
def test_invalid_escape_radius(radius):
    with pytest.raises(ConfigurationError):
        escape_time(1j, 10, escape_radius=radius)


@pytest.mark.parametrize("radius", [1e155, 1e200, 1.7e308])
def test_escape_radius_too_large_to_square(radius):
    with pytest.raises(ConfigurationError):
        escape_time(3 + 0j, 100, escape_radius=radius)


def test_very_large_escape_radius_still_escapes():
    result = escape_time(3 + 0j, 1000, escape_radius=1e100)
    assert isinstance(result, Escaped)
    assert result.magnitude_squared > 1e200


@pytest.mark.parametrize("max_iterations", [0, -5])
def test_invalid_max_iterations(max_iterations):
    with pytest.raises(ConfigurationError):
        escape_time(1j, max_iterations)


@pytest.mark.parametrize("c", [3 + 0j, 1 + 0j, 0.5 + 0.5j, -2.1 + 0.01j, 0.251 + 0j, 50 + 50j])
@pytest.mark.parametrize("radius", [2.0, 3.5, 1000.0])
def test_smooth_value_within_unit_interval(c, radius):
    result = escape_time(c, 500, escape_radius=radius)
    assert isinstance(result, Escaped)
    nu = smooth_escape(result, radius)
    assert result.iteration <= nu < result.iteration + 1


def test_smooth_value_non_decreasing_in_iteration():
    magnitudes = np.full(6, 9.0)
    iterations = np.arange(1, 7, dtype=np.int32)
    nus = smooth_values(iterations, magnitudes, np.zeros(6, dtype=bool))
    assert np.all(np.diff(nus) >= 0)


def test_smooth_escape_rejects_interior():
    with pytest.raises(TypeError):
        smooth_escape(Interior())


def test_escape_row_matches_scalar_iteration():
    cr = np.linspace(-2.2, 0.8, 37)
    ci = np.full(37, 0.31)
    iterations, magnitude, interior = escape_row(cr, ci, 80)
    for k in range(37):
        expected = escape_time(complex(cr[k], ci[k]), 80)
        if isinstance(expected, Interior):
            assert interior[k]
            assert iterations[k] == 0
            assert np.isnan(magnitude[k])
        else:
            assert not interior[k]
            assert iterations[k] == expected.iteration
            assert magnitude[k] == expected.magnitude_squared


def test_escape_row_handles_huge_samples():
    cr = np.array([1e200, 0.0])
    ci = np.array([1e200, 0.0])
    iterations, _, interior = escape_row(cr, ci, 10)
    assert list(interior) == [False, True]
    assert iterations[0] == 1


def test_normalize_budget_mode_in_unit_interval():
    smooth = np.array([1.2, 99.9, np.nan])
    interior = np.array([False, False, True])
    t = normalize(smooth, interior, 100)
    assert t[0] == pytest.approx(1.2 / 101)
    assert 0.0 <= t[1] < 1.0
    assert t[2] == 0.0


def test_normalize_cycle_mode_wraps():
    smooth = np.array([3.0, 19.0, 35.0])
    t = normalize(smooth, np.zeros(3, dtype=bool), 1000, period=16.0)
    assert t == pytest.approx([3 / 16, 3 / 16, 3 / 16])


def test_normalize_gamma():
    t = normalize(np.array([25.0]), np.array([False]), 99, gamma=0.5)
    assert t[0] == pytest.approx(0.5)


@pytest.mark.parametrize("period, gamma", [(0.0, 1.0), (-3.0, 1.0), (None, 0.0), (None, float("nan"))])
def test_normalize_rejects_bad_tone_settings(period, gamma):
    with pytest.raises(ConfigurationError):
        normalize(np.zeros(1), np.zeros(1, dtype=bool), 10, period=period, gamma=gamma)
