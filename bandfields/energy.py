"""Field energy densities, component fractions, phase fixing and energy in a region."""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from bandfields.field import Field, FieldKind
from bandfields.tensor import SymmetricMatrix, mean_medium_from_matrix


@dataclass(frozen=True)
class EnergyResult:
    """Result of replacing a D, H or B field by its energy density.

    ``total`` is the integral of the energy density over the cell.
    ``components`` holds the fractions of the energy in the real and
    imaginary parts of the x, y and z components, in the order
    (x.re, x.im, y.re, y.im, z.re, z.im). ``density`` is the
    energy-density field itself.
    """

    total: float
    components: Tuple[float, float, float, float, float, float]
    density: Field

    @property
    def axis_fractions(self) -> Tuple[float, float, float]:
        """Fraction of the energy in the x, y and z components."""
        c = self.components
        return (c[0] + c[1], c[2] + c[3], c[4] + c[5])


def _cell_volume(field: Field, volume: Optional[float]) -> float:
    if volume is not None:
        return float(volume)
    return float(np.prod(field.grid.lattice_size))


def _tensor_stack(matrices: Sequence[SymmetricMatrix], count: int, name: str) -> np.ndarray:
    matrices = list(matrices)
    if len(matrices) != count:
        raise ValueError(f"{name} needs one tensor per grid point ({count}), got {len(matrices)}")
    return np.stack([m.to_array() for m in matrices])


def _require_vector(field: Field, allowed: str, message: str) -> None:
    if field.kind is not FieldKind.CVECTOR or field.type_char not in allowed:
        raise ValueError(message)


def _component_products(field: Field, tensors: Optional[np.ndarray]) -> np.ndarray:
    """Per-point products (re*re, im*im) for each axis, shape (N, 6)."""
    cur = field.data
    weighted = cur if tensors is None else np.einsum("nij,nj->ni", tensors, cur)
    products = np.empty((cur.shape[0], 6), dtype=float)
    products[:, 0::2] = weighted.real * cur.real
    products[:, 1::2] = weighted.imag * cur.imag
    return products


def compute_field_energy(
    field: Field,
    eps_inv: Optional[Sequence[SymmetricMatrix]] = None,
    mu_inv: Optional[Sequence[SymmetricMatrix]] = None,
    volume: Optional[float] = None,
) -> EnergyResult:
    """Energy density of a D, H or B field and its distribution over components.

    The density is D*.eps_inv.D for a D field, B*.mu_inv.B for a B field
    when a permeability is given, and |F|^2 otherwise. Missing tensors
    stand for vacuum. With a permeability, an H field is rejected: B must
    be used instead.
    """
    _require_vector(field, "dhb", "The D or H field must be loaded first.")
    if field.type_char == "h" and mu_inv is not None:
        raise ValueError("B, not H, must be loaded if we have mu.")

    count = field.grid.count()
    tensors = None
    if field.type_char == "d" and eps_inv is not None:
        tensors = _tensor_stack(eps_inv, count, "eps_inv")
    elif field.type_char == "b" and mu_inv is not None:
        tensors = _tensor_stack(mu_inv, count, "mu_inv")

    products = _component_products(field, tensors)
    density_values = products.sum(axis=1)
    energy_sum = float(density_values.sum())
    comp_sum = products.sum(axis=0)
    divisor = 1.0 if energy_sum == 0 else energy_sum
    components = tuple(float(c) / divisor for c in comp_sum)

    density = Field(FieldKind.RSCALAR, field.grid, density_values, field.type_char.upper())
    total = energy_sum * _cell_volume(field, volume) / count
    return EnergyResult(total=total, components=components, density=density)  # type: ignore[arg-type]


def compute_field_squared(field: Field) -> Field:
    """|F|^2 at every point of a vector field, as a generic real scalar field."""
    _require_vector(field, "dhbecv", "A vector field must be loaded first.")
    values = _component_products(field, None).sum(axis=1)
    return Field(FieldKind.RSCALAR, field.grid, values, "R")


def fix_field_phase(field: Field) -> complex:
    """Multiply a vector field in place by a canonical phase and return that phase.

    The phase first maximises the sum of the squares of the real parts.
    The overall sign then makes positive the real part at the last point
    (in storage order) whose |real part| is at least half the maximum.
    """
    _require_vector(field, "dhbecv", "The D/H/E field must be loaded first.")
    values = field.data.reshape(-1)

    square_sum = complex(np.sum(values * values))
    theta = 0.5 * math.atan2(-square_sum.imag, square_sum.real)
    phase = cmath.exp(1j * theta)

    real_parts = (values * phase).real
    maxabs = float(np.max(np.abs(real_parts))) if real_parts.size else 0.0
    sign = 1
    for r in reversed(real_parts):
        if abs(r) >= 0.5 * maxabs:
            sign = -1 if r < 0 else 1
            break

    phase *= sign
    field.data *= phase
    return phase


def energy_in_dielectric(
    energy: Field,
    eps_inv: Sequence[SymmetricMatrix],
    eps_low: float,
    eps_high: float,
    volume: Optional[float] = None,
) -> float:
    """Integral of an energy density over the points whose mean epsilon lies in [eps_low, eps_high]."""
    if energy.kind is not FieldKind.RSCALAR or energy.type_char not in "DHBR":
        raise ValueError("The D or H energy density must be loaded first.")
    count = energy.grid.count()
    matrices = list(eps_inv)
    if len(matrices) != count:
        raise ValueError(
            f"eps_inv needs one tensor per grid point ({count}), got {len(matrices)}"
        )
    total = sum(
        float(value)
        for value, m in zip(energy.data, matrices)
        if eps_low <= mean_medium_from_matrix(m) <= eps_high
    )
    return total * _cell_volume(energy, volume) / count