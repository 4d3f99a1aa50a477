"""Dielectric tensors: Hermitian 3x3 matrices, materials and sub-pixel averaging."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np

_OFFDIAG = {(0, 1): "m01", (0, 2): "m02", (1, 2): "m12"}


@dataclass(frozen=True)
class SymmetricMatrix:
    """A Hermitian 3x3 tensor: a real diagonal and complex upper off-diagonal entries."""

    m00: float
    m11: float
    m22: float
    m01: complex = 0j
    m02: complex = 0j
    m12: complex = 0j

    def __post_init__(self) -> None:
        for name in ("m00", "m11", "m22"):
            object.__setattr__(self, name, float(getattr(self, name)))
        for name in ("m01", "m02", "m12"):
            object.__setattr__(self, name, complex(getattr(self, name)))

    @classmethod
    def isotropic(cls, value: float) -> "SymmetricMatrix":
        """A scalar multiple of the identity."""
        return cls(value, value, value)

    @classmethod
    def from_array(cls, array) -> "SymmetricMatrix":
        """Build from a 3x3 Hermitian array; raises ValueError if it is not one."""
        a = np.asarray(array, dtype=complex)
        if a.shape != (3, 3):
            raise ValueError("a symmetric matrix needs a 3x3 array")
        if not np.allclose(a, a.conj().T, rtol=1e-10, atol=1e-12):
            raise ValueError("array is not Hermitian")
        return cls(
            a[0, 0].real, a[1, 1].real, a[2, 2].real, a[0, 1], a[0, 2], a[1, 2]
        )

    def to_array(self) -> np.ndarray:
        """The full 3x3 complex matrix."""
        return np.array(
            [
                [self.m00, self.m01, self.m02],
                [self.m01.conjugate(), self.m11, self.m12],
                [self.m02.conjugate(), self.m12.conjugate(), self.m22],
            ],
            dtype=complex,
        )

    def inverse(self) -> "SymmetricMatrix":
        """The matrix inverse; raises ValueError for a singular matrix."""
        try:
            inv = np.linalg.inv(self.to_array())
        except np.linalg.LinAlgError as exc:
            raise ValueError("singular dielectric tensor") from exc
        inv = 0.5 * (inv + inv.conj().T)
        return SymmetricMatrix.from_array(inv)

    def eigenvalues(self) -> Tuple[float, float, float]:
        """The three real eigenvalues in ascending order."""
        eigs = np.linalg.eigvalsh(self.to_array())
        return float(eigs[0]), float(eigs[1]), float(eigs[2])

    def rotated(self, rot) -> "SymmetricMatrix":
        """Return ``rot @ self @ rot.T`` for a real rotation matrix ``rot``."""
        r = np.asarray(rot, dtype=float)
        if r.shape != (3, 3):
            raise ValueError("rotation must be a 3x3 array")
        m = r @ self.to_array() @ r.T
        return SymmetricMatrix.from_array(0.5 * (m + m.conj().T))

    def component(self, c1: int, c2: int, imag: bool = False) -> float:
        """Real (or imaginary) part of entry (c1, c2); diagonal entries are always real."""
        if c1 not in (0, 1, 2) or c2 not in (0, 1, 2):
            raise ValueError("tensor component indices must be 0, 1 or 2")
        if c1 == c2:
            return (self.m00, self.m11, self.m22)[c1]
        if c1 < c2:
            value = getattr(self, _OFFDIAG[(c1, c2)])
        else:
            value = getattr(self, _OFFDIAG[(c2, c1)]).conjugate()
        return value.imag if imag else value.real

    def is_positive_definite(self) -> bool:
        return self.eigenvalues()[0] > 0.0


@dataclass(frozen=True)
class Medium:
    """An isotropic material of dielectric constant ``epsilon``."""

    epsilon: float = 1.0


@dataclass(frozen=True)
class AnisotropicMedium:
    """A material with a general Hermitian dielectric tensor."""

    epsilon_diag: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    epsilon_offdiag: Tuple[complex, complex, complex] = (0j, 0j, 0j)
    epsilon_offdiag_imag: Tuple[float, float, float] = (0.0, 0.0, 0.0)


def material_epsilon(material) -> Tuple[SymmetricMatrix, SymmetricMatrix]:
    """Return the dielectric tensor of a material and its inverse.

    Raises TypeError for anything other than a fixed medium.
    """
    if isinstance(material, Medium):
        value = float(material.epsilon)
        return SymmetricMatrix.isotropic(value), SymmetricMatrix.isotropic(1.0 / value)
    if isinstance(material, AnisotropicMedium):
        off = [complex(c) for c in material.epsilon_offdiag]
        extra = [float(c) for c in material.epsilon_offdiag_imag]
        m01, m02, m12 = (complex(o.real, o.imag + e) for o, e in zip(off, extra))
        dx, dy, dz = material.epsilon_diag
        eps = SymmetricMatrix(dx, dy, dz, m01, m02, m12)
        return eps, eps.inverse()
    raise TypeError(f"invalid use of material {type(material).__name__}")


def mean_medium_from_matrix(eps_inv: SymmetricMatrix) -> float:
    """Mean epsilon from an effective inverse tensor.

    The largest eigenvalue of the inverse tensor corresponds to the
    harmonic mean, so it is ignored and the other two are averaged.
    """
    eigs = eps_inv.eigenvalues()
    return 2.0 / (eigs[0] + eigs[1])


def rotation_matrix(normal: Sequence[float]) -> np.ndarray:
    """An orthonormal rotation whose first row is the unit vector along ``normal``."""
    n = np.asarray(normal, dtype=float)
    if n.shape != (3,):
        raise ValueError("normal must have three components")
    norm = float(np.linalg.norm(n))
    if norm == 0.0:
        raise ValueError("normal vector must be nonzero")
    n = n / norm
    helper = np.array([1.0, 0.0, 0.0]) if abs(n[0]) < 0.9 else np.array([0.0, 1.0, 0.0])
    u = np.cross(n, helper)
    u /= np.linalg.norm(u)
    v = np.cross(n, u)
    return np.array([n, u, v])


def kottke_average(
    eps1: SymmetricMatrix, eps2: SymmetricMatrix, normal: Sequence[float], fill: float
) -> SymmetricMatrix:
    """Effective tensor of a pixel split by a planar interface.

    ``fill`` is the fraction of the pixel occupied by ``eps1`` and
    ``normal`` the Cartesian interface normal. The tensors are rotated
    into the interface frame, the appropriate combinations of their
    components are averaged, and the result is rotated back.
    """
    rot = rotation_matrix(normal)
    a = eps1.rotated(rot)
    b = eps2.rotated(rot)

    def avg(expr) -> complex:
        return fill * expr(a) + (1.0 - fill) * expr(b)

    d00 = avg(lambda e: -1.0 / e.m00).real
    d11 = avg(lambda e: e.m11 - abs(e.m01) ** 2 / e.m00).real
    d22 = avg(lambda e: e.m22 - abs(e.m02) ** 2 / e.m00).real
    d01 = avg(lambda e: e.m01 / e.m00)
    d02 = avg(lambda e: e.m02 / e.m00)
    d12 = avg(lambda e: e.m12 - e.m02 * e.m01.conjugate() / e.m00)

    mean = SymmetricMatrix(
        -1.0 / d00,
        d11 - abs(d01) ** 2 / d00,
        d22 - abs(d02) ** 2 / d00,
        -d01 / d00,
        -d02 / d00,
        d12 - d02 * d01.conjugate() / d00,
    )
    return mean.rotated(rot.T)


@dataclass(frozen=True)
class EpsilonStats:
    """Summary statistics of a dielectric function over a grid."""

    values: Tuple[float, ...]
    low: float
    high: float
    mean: float
    harmonic_mean: float
    percent_above_one: float
    fill_percent: float

    def __str__(self) -> str:
        return 'epsilon: %g-%g, mean %g, harm. mean %g, %g%% > 1, %g%% "fill"' % (
            self.low,
            self.high,
            self.mean,
            self.harmonic_mean,
            self.percent_above_one,
            self.fill_percent,
        )


def epsilon_statistics(eps_inv_values: Iterable[SymmetricMatrix]) -> EpsilonStats:
    """Mean epsilon at each point and statistics over all points."""
    values = tuple(mean_medium_from_matrix(m) for m in eps_inv_values)
    if not values:
        raise ValueError("no dielectric data to analyse")
    count = len(values)
    low, high = min(values), max(values)
    mean = sum(values) / count
    harmonic = count / sum(1.0 / v for v in values)
    above = sum(1 for v in values if v > 1.0001)
    fill = 100.0 if high == low else 100.0 * (mean - low) / (high - low)
    return EpsilonStats(
        values=values,
        low=low,
        high=high,
        mean=mean,
        harmonic_mean=harmonic,
        percent_above_one=100.0 * above / count,
        fill_percent=fill,
    )


def epsilon_tensor_component(
    eps_inv_values: Iterable[SymmetricMatrix],
    c1: int,
    c2: int,
    imag: bool = False,
    inverse: bool = False,
) -> List[float]:
    """One component of epsilon (or of its inverse) at every point."""
    if c1 not in (0, 1, 2) or c2 not in (0, 1, 2):
        raise ValueError("tensor component indices must be 0, 1 or 2")
    return [
        (m if inverse else m.inverse()).component(c1, c2, imag) for m in eps_inv_values
    ]