"""Trilinear interpolation of gridded dielectric data and a file-backed epsilon function."""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np


def _as_grid3(data) -> np.ndarray:
    """Return ``data`` as a float array of rank 3, padding missing dimensions with 1."""
    array = np.asarray(data, dtype=float)
    if array.ndim == 0 or array.size == 0:
        raise ValueError("couldn't find dataset in dielectric data")
    if array.ndim > 3:
        raise ValueError("dielectric data must have at most three dimensions")
    return array.reshape(array.shape + (1,) * (3 - array.ndim))


def _mirror(r: float) -> float:
    if r < 0.0:
        return -r
    if r > 1.0:
        return 1.0 - r
    return r


def _cell(r: float, n: int) -> Tuple[int, int, float]:
    """Grid index, neighbouring index and weight of the neighbour along one axis."""
    i = int(r * n)
    if i == n:
        i -= 1
    d = r * n - i - 0.5
    i2 = i + 1 if d >= 0.0 else i - 1
    if i2 < 0:
        i2 += 1
    elif i2 == n:
        i2 -= 1
    return i, i2, abs(d)


def linear_interpolate(rx: float, ry: float, rz: float, data) -> float:
    """Trilinearly interpolate ``data`` at fractional coordinates in [0, 1].

    Data points sit at pixel centres. Coordinates just outside [0, 1]
    are mirror-reflected back, and neighbours beyond the edge are
    clamped, giving mirror boundary conditions.
    """
    grid = _as_grid3(data)
    nx, ny, nz = grid.shape
    x, x2, dx = _cell(_mirror(rx), nx)
    y, y2, dy = _cell(_mirror(ry), ny)
    z, z2, dz = _cell(_mirror(rz), nz)

    def plane(zi: int) -> float:
        return (grid[x, y, zi] * (1.0 - dx) + grid[x2, y, zi] * dx) * (1.0 - dy) + (
            grid[x, y2, zi] * (1.0 - dx) + grid[x2, y2, zi] * dx
        ) * dy

    return float(plane(z) * (1.0 - dz) + plane(z2) * dz)


def wrap_to_unit(r: float) -> float:
    """Shift a lattice coordinate by whole periods into [0, 1)."""
    if r < 0.0:
        r = r + (1 + int(-r))
    if r >= 1.0:
        r = r - int(r)
    return r


class EpsilonFileFunction:
    """An isotropic dielectric function sampled from a 1-, 2- or 3-d data grid."""

    def __init__(self, data) -> None:
        self._data = _as_grid3(data)

    @property
    def shape(self) -> Tuple[int, int, int]:
        """Grid dimensions (nx, ny, nz) of the stored data."""
        nx, ny, nz = self._data.shape
        return nx, ny, nz

    def __call__(self, r: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
        """Return the 3x3 dielectric tensor and its inverse at lattice coordinates ``r``.

        The data are treated as periodic with the lattice cell.
        """
        rx, ry, rz = (wrap_to_unit(float(c)) for c in r)
        value = linear_interpolate(rx, ry, rz, self._data)
        eps = np.eye(3) * value
        eps_inv = np.eye(3) * (1.0 / value)
        return eps, eps_inv