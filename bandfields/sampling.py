"""Values of epsilon, energy densities and fields at arbitrary points, and output file names."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from bandfields.field import Field, FieldKind
from bandfields.grid import Grid
from bandfields.tensor import SymmetricMatrix, mean_medium_from_matrix

Number = Union[float, complex]

_VECTOR_TYPES = "dhbecv"
_ENERGY_TYPES = "DHBR"


def _pad_rank3(array: np.ndarray, trailing: int = 0) -> np.ndarray:
    """Reshape so the leading spatial dimensions have rank 3."""
    spatial = array.ndim - trailing
    if spatial < 1 or spatial > 3:
        raise ValueError("gridded data must have one to three spatial dimensions")
    shape = array.shape[:spatial] + (1,) * (3 - spatial) + array.shape[spatial:]
    return array.reshape(shape)


def _fraction(x: float, size: float) -> float:
    """Fractional lattice coordinate in [0, 1), with the origin at the cell centre."""
    if size == 0:
        raise ValueError("lattice size must be nonzero along every axis")
    r = math.fmod(x / size + 0.5, 1.0)
    if r < 0:
        r += 1.0
    return r


def _axis(r: float, n: int) -> Tuple[int, int, float]:
    scaled = r * n
    i = int(scaled)
    d = scaled - i
    i %= n
    return i, (i + 1) % n, abs(d)


def _interpolate3(p: Sequence[float], grid: np.ndarray, size: Sequence[float]):
    px, py, pz = (float(c) for c in p)
    sx, sy, sz = (float(s) for s in size)
    nx, ny, nz = grid.shape[:3]
    x, x2, dx = _axis(_fraction(px, sx), nx)
    y, y2, dy = _axis(_fraction(py, sy), ny)
    z, z2, dz = _axis(_fraction(pz, sz), nz)

    def plane(zi: int):
        return (grid[x, y, zi] * (1.0 - dx) + grid[x2, y, zi] * dx) * (1.0 - dy) + (
            grid[x, y2, zi] * (1.0 - dx) + grid[x2, y2, zi] * dx
        ) * dy

    return plane(z) * (1.0 - dz) + plane(z2) * dz


def _check_point(p: Sequence[float]) -> Tuple[float, float, float]:
    coords = tuple(float(c) for c in p)
    if len(coords) != 3:
        raise ValueError("a point needs three coordinates")
    return coords  # type: ignore[return-value]


def _check_size(lattice_size: Sequence[float]) -> Tuple[float, float, float]:
    size = tuple(float(s) for s in lattice_size)
    if len(size) != 3:
        raise ValueError("lattice_size must have three components")
    return size  # type: ignore[return-value]


def periodic_interpolate(p: Sequence[float], data, lattice_size: Sequence[float]) -> Number:
    """Trilinearly interpolate periodic gridded ``data`` at Cartesian point ``p``.

    Grid point (i, j, k) sits at ``(i/nx - 1/2) * size_x`` and so on, so the
    cell is centred on the origin. Complex data give a complex result.
    """
    array = np.asarray(data)
    if array.size == 0:
        raise ValueError("no data to interpolate")
    dtype = complex if np.iscomplexobj(array) else float
    grid = _pad_rank3(array.astype(dtype))
    value = _interpolate3(_check_point(p), grid, _check_size(lattice_size))
    return complex(value) if dtype is complex else float(value)


def epsilon_inverse_at_point(eps_inv, p: Sequence[float], lattice_size: Sequence[float]) -> SymmetricMatrix:
    """Interpolate a grid of inverse dielectric tensors at point ``p``.

    ``eps_inv`` is a 1-, 2- or 3-d nested arrangement of SymmetricMatrix
    values, one per grid point.
    """
    matrices = np.empty(0, dtype=object)
    matrices = np.asarray(eps_inv, dtype=object)
    if matrices.size == 0:
        raise ValueError("no dielectric data to interpolate")
    flat = matrices.ravel()
    for m in flat:
        if not isinstance(m, SymmetricMatrix):
            raise TypeError("eps_inv must hold SymmetricMatrix values")
    components = np.array(
        [[m.m00, m.m11, m.m22, m.m01, m.m02, m.m12] for m in flat], dtype=complex
    ).reshape(matrices.shape + (6,))
    grid = _pad_rank3(components, trailing=1)
    point = _check_point(p)
    size = _check_size(lattice_size)
    values = [_interpolate3(point, grid[..., c], size) for c in range(6)]
    return SymmetricMatrix(
        values[0].real, values[1].real, values[2].real, values[3], values[4], values[5]
    )


def epsilon_at_point(eps_inv, p: Sequence[float], lattice_size: Sequence[float]) -> float:
    """Mean dielectric constant at point ``p`` from the interpolated inverse tensor."""
    return mean_medium_from_matrix(epsilon_inverse_at_point(eps_inv, p, lattice_size))


def _size_for(field: Field, lattice_size: Optional[Sequence[float]]) -> Tuple[float, float, float]:
    if lattice_size is None:
        return field.grid.lattice_size  # type: ignore[return-value]
    return _check_size(lattice_size)


def _spatial(field: Field) -> np.ndarray:
    g = field.grid
    return field.data.reshape(g.shape + field.data.shape[1:])


def _phase(field: Field, size, kvector: Optional[Sequence[float]], p) -> complex:
    k = (0.0, 0.0, 0.0) if kvector is None else tuple(float(c) for c in kvector)
    g = field.grid
    return Grid(g.nx, g.ny, g.nz, size).bloch_phase(k, p)


def energy_at_point(field: Field, p: Sequence[float], lattice_size: Optional[Sequence[float]] = None) -> float:
    """Interpolated energy density at point ``p``."""
    if field.kind is not FieldKind.RSCALAR or field.type_char not in _ENERGY_TYPES:
        raise ValueError("compute-field-energy must be called before get-energy-point")
    return float(_interpolate3(_check_point(p), _spatial(field), _size_for(field, lattice_size)))


def bloch_field_at_point(
    field: Field, p: Sequence[float], lattice_size: Optional[Sequence[float]] = None
) -> Tuple[complex, complex, complex]:
    """Interpolated periodic (Bloch) part of a vector field at point ``p``."""
    if field.kind is not FieldKind.CVECTOR or field.type_char not in _VECTOR_TYPES:
        raise ValueError("field must be loaded before get-*field*-point")
    point = _check_point(p)
    size = _size_for(field, lattice_size)
    grid = _spatial(field)
    x, y, z = (complex(_interpolate3(point, grid[..., c], size)) for c in range(3))
    return x, y, z


def field_at_point(
    field: Field,
    p: Sequence[float],
    lattice_size: Optional[Sequence[float]] = None,
    kvector: Optional[Sequence[float]] = None,
) -> Tuple[complex, complex, complex]:
    """Vector field at ``p``, including the Bloch phase of ``kvector``.

    A non-Bloch field (type ``v``) carries no wavevector, so no phase is applied.
    """
    values = bloch_field_at_point(field, p, lattice_size)
    if field.type_char == "v":
        return values
    phase = _phase(field, _size_for(field, lattice_size), kvector, _check_point(p))
    x, y, z = (v * phase for v in values)
    return x, y, z


def cscalar_at_point(
    field: Field,
    p: Sequence[float],
    lattice_size: Optional[Sequence[float]] = None,
    kvector: Optional[Sequence[float]] = None,
) -> complex:
    """Complex scalar field at ``p``; a ``C`` field is multiplied by the Bloch phase."""
    if field.kind is not FieldKind.CSCALAR:
        raise ValueError("invalid argument to cscalar-field-get-point")
    point = _check_point(p)
    size = _size_for(field, lattice_size)
    value = complex(_interpolate3(point, _spatial(field), size))
    if field.type_char == "C":
        value *= _phase(field, size, kvector, point)
    return value


def rscalar_at_point(field: Field, p: Sequence[float], lattice_size: Optional[Sequence[float]] = None) -> float:
    """Interpolated value of a real scalar field at point ``p``."""
    if field.kind is not FieldKind.RSCALAR:
        raise ValueError("invalid argument to rscalar-field-get-point")
    return float(_interpolate3(_check_point(p), _spatial(field), _size_for(field, lattice_size)))


def output_filename(
    type_char: str,
    kpoint: int = 0,
    band: int = 0,
    component: Optional[int] = None,
    prefix: str = "",
    parity: str = "",
) -> str:
    """File name under which a field of the given type is written.

    Vector fields are named like ``e.k01.b02`` (with ``.x``/``.y``/``.z``
    for a single component), complex scalars like ``C.k01.b02``, energy
    densities like ``dpwr.k01.b02``; epsilon and mu have fixed names and
    no parity suffix. ``prefix`` is prepended and a non-empty ``parity``
    is appended after a dot.
    """
    if len(type_char) != 1:
        raise ValueError("a field type character must be a single character")
    with_parity = True
    if type_char in _VECTOR_TYPES:
        name = f"{type_char}.k{kpoint:02d}.b{band:02d}"
        if component is not None and component >= 0:
            if component > 2:
                raise ValueError("component must be 0, 1 or 2")
            name += "." + "xyz"[component]
    elif type_char == "C":
        name = f"{type_char}.k{kpoint:02d}.b{band:02d}"
    elif type_char == "n":
        name = "epsilon"
        with_parity = False
    elif type_char == "m":
        name = "mu"
        with_parity = False
    elif type_char in _ENERGY_TYPES:
        name = f"{type_char.lower()}pwr.k{kpoint:02d}.b{band:02d}"
    else:
        raise ValueError("unknown field type!")
    result = (prefix or "") + name
    if with_parity and parity:
        result += "." + parity
    return result