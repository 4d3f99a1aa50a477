import numpy as np
import pytest

from bandfields.interpolation import (
    EpsilonFileFunction,
    linear_interpolate,
    wrap_to_unit,
)


def test_uniform_data_gives_constant():
    data = np.full((3, 4, 5), 2.5)
    for r in [(0.0, 0.0, 0.0), (0.3, 0.7, 0.1), (1.0, 1.0, 1.0), (0.5, 0.5, 0.5)]:
        assert linear_interpolate(*r, data) == pytest.approx(2.5)


def test_pixel_centres_return_stored_values():
    rng = np.random.default_rng(1)
    data = rng.random((4, 3, 2))
    nx, ny, nz = data.shape
    for i in range(nx):
        for j in range(ny):
            for k in range(nz):
                r = ((i + 0.5) / nx, (j + 0.5) / ny, (k + 0.5) / nz)
                assert linear_interpolate(*r, data) == pytest.approx(data[i, j, k])


def test_boundary_between_pixels_is_average():
    data = np.array([[[1.0]], [[3.0]]])
    value = linear_interpolate(0.5, 0.5, 0.5, data)
    assert value == pytest.approx((data[0, 0, 0] + data[1, 0, 0]) / 2)


def test_mirror_reflection_below_zero():
    rng = np.random.default_rng(2)
    data = rng.random((5, 4, 3))
    assert linear_interpolate(-0.07, 0.3, 0.4, data) == pytest.approx(
        linear_interpolate(0.07, 0.3, 0.4, data)
    )


def test_value_between_neighbours():
    data = np.array([1.0, 4.0, 2.0, 8.0])
    value = linear_interpolate(0.4, 0.0, 0.0, data)
    assert min(data[1], data[2]) <= value <= max(data[1], data[2])


def test_one_dimensional_data_accepted():
    data = [1.0, 2.0, 3.0, 4.0]
    assert linear_interpolate(0.125, 0.9, 0.2, data) == pytest.approx(1.0)


def test_empty_data_raises():
    with pytest.raises(ValueError):
        linear_interpolate(0.5, 0.5, 0.5, [])


@pytest.mark.parametrize("r", [-3.75, -1.0, -0.25, 0.0, 0.5, 0.999, 1.0, 1.25, 7.5])
def test_wrap_to_unit_in_range_and_shift_by_integer(r):
    w = wrap_to_unit(r)
    assert 0.0 <= w < 1.0
    assert (r - w) == pytest.approx(round(r - w))


def test_wrap_to_unit_leaves_unit_values():
    assert wrap_to_unit(0.375) == 0.375


def test_file_function_shape_pads_dimensions():
    func = EpsilonFileFunction(np.ones((6, 7)))
    assert func.shape == (6, 7, 1)


def test_file_function_returns_inverse_pair():
    rng = np.random.default_rng(3)
    data = 1.0 + rng.random((4, 4, 4))
    func = EpsilonFileFunction(data)
    eps, eps_inv = func((0.3, 0.6, 0.9))
    assert np.allclose(eps @ eps_inv, np.eye(3))
    assert eps[0, 1] == 0.0 and eps[1, 2] == 0.0
    assert eps[0, 0] == eps[1, 1] == eps[2, 2]


def test_file_function_is_periodic():
    rng = np.random.default_rng(4)
    data = 1.0 + rng.random((5, 3, 2))
    func = EpsilonFileFunction(data)
    eps_a, _ = func((0.2, 0.7, 0.4))
    eps_b, _ = func((-0.8, 1.7, 2.4))
    assert np.allclose(eps_a, eps_b)


def test_file_function_matches_interpolation():
    rng = np.random.default_rng(5)
    data = 1.0 + rng.random((4, 3, 2))
    func = EpsilonFileFunction(data)
    eps, _ = func((0.6, 0.2, 0.3))
    assert eps[0, 0] == pytest.approx(linear_interpolate(0.6, 0.2, 0.3, data))


def test_file_function_rejects_empty():
    with pytest.raises(ValueError):
        EpsilonFileFunction(np.zeros((0,)))