"""Integrals of energy densities and fields over the cell or over a region of it."""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Sequence

import numpy as np

from bandfields.field import Field, FieldKind
from bandfields.grid import Grid, Vector3
from bandfields.tensor import SymmetricMatrix, mean_medium_from_matrix

_ENERGY_TYPES = "DHBR"
_VECTOR_TYPES = "dhbecv"


def _grid_for(field: Field, lattice_size: Optional[Sequence[float]]) -> Grid:
    if lattice_size is None:
        return field.grid
    g = field.grid
    return Grid(g.nx, g.ny, g.nz, tuple(float(s) for s in lattice_size))


def _volume_for(grid: Grid, volume: Optional[float]) -> float:
    if volume is not None:
        return float(volume)
    return float(np.prod(grid.lattice_size))


def _is_energy(field: Field) -> bool:
    return field.kind is FieldKind.RSCALAR and field.type_char in _ENERGY_TYPES


def _is_vector(field: Field) -> bool:
    return field.kind is FieldKind.CVECTOR and field.type_char in _VECTOR_TYPES


def _mean_epsilons(
    eps_inv: Optional[Sequence[SymmetricMatrix]], count: int
) -> List[float]:
    if eps_inv is None:
        return [1.0] * count
    matrices = list(eps_inv)
    if len(matrices) != count:
        raise ValueError(
            f"eps_inv needs one tensor per grid point ({count}), got {len(matrices)}"
        )
    return [mean_medium_from_matrix(m) for m in matrices]


def energy_in_region(
    energy: Field,
    contains: Callable[[Vector3], bool],
    lattice_size: Optional[Sequence[float]] = None,
    volume: Optional[float] = None,
) -> float:
    """Integral of an energy density over the points for which ``contains(p)`` is true.

    ``p`` is the Cartesian position of each grid point, with the origin at
    the cell centre. The sum is weighted by the cell volume over the number
    of points.
    """
    if not _is_energy(energy):
        raise ValueError("The D or H energy density must be loaded first.")
    grid = _grid_for(energy, lattice_size)
    total = sum(float(energy.data[index]) for index, p in grid.positions() if contains(p))
    return total * _volume_for(grid, volume) / grid.count()


def compute_field_integral(
    func: Callable[..., Any],
    field: Field,
    eps_inv: Optional[Sequence[SymmetricMatrix]] = None,
    kvector: Sequence[float] = (0.0, 0.0, 0.0),
    lattice_size: Optional[Sequence[float]] = None,
    volume: Optional[float] = None,
) -> complex:
    """Integrate ``func(value, epsilon, p)`` over the cell.

    For an energy density (type D, H, B or R) ``value`` is the density at
    the point and only the real part of ``func`` is summed. For a vector
    field ``value`` is the 3-tuple of complex components multiplied by the
    Bloch phase of ``kvector`` (ignored for a non-Bloch ``v`` field).
    ``epsilon`` is the mean dielectric constant at the point; without
    ``eps_inv`` it is 1.
    """
    integrate_energy = _is_energy(field)
    if not integrate_energy and not _is_vector(field):
        raise ValueError("The D or H energy/field must be loaded first.")
    grid = _grid_for(field, lattice_size)
    epsilons = _mean_epsilons(eps_inv, grid.count())
    k = (0.0, 0.0, 0.0) if field.type_char == "v" else tuple(float(c) for c in kvector)

    integral = 0j
    for index, p in grid.positions():
        epsilon = epsilons[index]
        if integrate_energy:
            integral += float(func(float(field.data[index]), epsilon, p))
        else:
            phase = grid.bloch_phase(k, p)
            value = tuple(complex(c) * phase for c in field.data[index])
            integral += complex(func(value, epsilon, p))
    return integral * _volume_for(grid, volume) / grid.count()


def compute_energy_integral(
    func: Callable[..., Any],
    field: Field,
    eps_inv: Optional[Sequence[SymmetricMatrix]] = None,
    lattice_size: Optional[Sequence[float]] = None,
    volume: Optional[float] = None,
) -> float:
    """Integrate ``func(energy, epsilon, p)`` over the cell for an energy density."""
    if not _is_energy(field):
        raise ValueError("The D or H energy density must be loaded first.")
    return compute_field_integral(
        func, field, eps_inv, lattice_size=lattice_size, volume=volume
    ).real