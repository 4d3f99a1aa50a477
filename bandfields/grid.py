"""Real-space grid geometry: point enumeration, coordinates and Bloch phases."""

from __future__ import annotations

import cmath
import math
from dataclasses import dataclass
from typing import Iterator, Sequence, Tuple

Vector3 = Tuple[float, float, float]


@dataclass(frozen=True)
class Grid:
    """A periodic nx x ny x nz grid spanning a lattice cell of the given size.

    Points are stored in row-major order, so the flat index of point
    (i1, i2, i3) is ``(i1 * ny + i2) * nz + i3``.
    """

    nx: int
    ny: int = 1
    nz: int = 1
    lattice_size: Vector3 = (1.0, 1.0, 1.0)

    def __post_init__(self) -> None:
        for name in ("nx", "ny", "nz"):
            if getattr(self, name) < 1:
                raise ValueError(f"grid dimension {name} must be at least 1")
        size = tuple(float(s) for s in self.lattice_size)
        if len(size) != 3:
            raise ValueError("lattice_size must have three components")
        object.__setattr__(self, "lattice_size", size)

    @property
    def shape(self) -> Tuple[int, int, int]:
        return (self.nx, self.ny, self.nz)

    def rank(self) -> int:
        """Number of non-trivial dimensions, counted from the last one."""
        if self.nz == 1:
            return 1 if self.ny == 1 else 2
        return 3

    def count(self) -> int:
        """Total number of grid points."""
        return self.nx * self.ny * self.nz

    def indices(self) -> Iterator[Tuple[int, int, int, int]]:
        """Yield ``(flat_index, i1, i2, i3)`` for every grid point in storage order."""
        index = 0
        for i1 in range(self.nx):
            for i2 in range(self.ny):
                for i3 in range(self.nz):
                    yield index, i1, i2, i3
                    index += 1

    def _spacing_and_offset(self) -> Tuple[Vector3, Vector3]:
        sizes = self.lattice_size
        counts = self.shape
        spacing = tuple(s / n for s, n in zip(sizes, counts))
        offset = tuple(0.0 if n <= 1 else s * 0.5 for s, n in zip(sizes, counts))
        return spacing, offset  # type: ignore[return-value]

    def position(self, i1: int, i2: int, i3: int) -> Vector3:
        """Cartesian position of a grid point, with the origin at the cell centre."""
        spacing, offset = self._spacing_and_offset()
        return (
            i1 * spacing[0] - offset[0],
            i2 * spacing[1] - offset[1],
            i3 * spacing[2] - offset[2],
        )

    def positions(self) -> Iterator[Tuple[int, Vector3]]:
        """Yield ``(flat_index, position)`` for every grid point in storage order."""
        spacing, offset = self._spacing_and_offset()
        for index, i1, i2, i3 in self.indices():
            yield index, (
                i1 * spacing[0] - offset[0],
                i2 * spacing[1] - offset[1],
                i3 * spacing[2] - offset[2],
            )

    def bloch_phase(self, kvector: Sequence[float], p: Sequence[float]) -> complex:
        """Phase exp(i 2 pi k . p) with k in reciprocal-lattice units and p in real units."""
        phi = 2.0 * math.pi * sum(
            k * (x / s) for k, x, s in zip(kvector, p, self.lattice_size)
        )
        return cmath.exp(1j * phi)