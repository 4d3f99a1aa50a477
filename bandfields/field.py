"""Grid fields: real scalar, complex scalar and complex vector data on a grid."""

from __future__ import annotations

import enum
from typing import Any, Callable, Optional, Sequence

import numpy as np

from bandfields.grid import Grid


class FieldKind(enum.Enum):
    """What a field holds at each grid point."""

    RSCALAR = "real scalar field"
    CVECTOR = "complex vector field"
    CSCALAR = "complex scalar field"

    @property
    def default_type_char(self) -> str:
        return _DEFAULT_TYPE_CHARS[self]


_DEFAULT_TYPE_CHARS = {
    FieldKind.RSCALAR: "R",
    FieldKind.CSCALAR: "C",
    FieldKind.CVECTOR: "c",
}

_UNLOADED = "-"


def kind_for_type_char(type_char: str) -> FieldKind:
    """Field kind implied by a type character; raises ValueError for unknown ones.

    ``d h b e c v`` are complex vector fields, ``D H B n R`` real scalar
    fields (energy densities, epsilon, generic) and ``C`` a complex scalar field.
    """
    if len(type_char) != 1:
        raise ValueError("a field type character must be a single character")
    if type_char in "dhbecv":
        return FieldKind.CVECTOR
    if type_char in "DHBnR":
        return FieldKind.RSCALAR
    if type_char == "C":
        return FieldKind.CSCALAR
    raise ValueError(f"wrong type argument: {type_char!r} is not a field type")


def _shape_for(kind: FieldKind, count: int):
    return (count, 3) if kind is FieldKind.CVECTOR else (count,)


def _dtype_for(kind: FieldKind):
    return float if kind is FieldKind.RSCALAR else complex


class Field:
    """Values of one kind at every point of a grid, in the grid's storage order."""

    def __init__(
        self,
        kind: FieldKind,
        grid: Grid,
        data: Any,
        type_char: Optional[str] = None,
    ) -> None:
        kind = FieldKind(kind)
        shape = _shape_for(kind, grid.count())
        array = np.array(data, dtype=_dtype_for(kind))
        if array.size != int(np.prod(shape)):
            raise ValueError(
                f"{kind.value} on a {grid.nx}x{grid.ny}x{grid.nz} grid "
                f"needs {int(np.prod(shape))} values, got {array.size}"
            )
        if type_char is None:
            type_char = kind.default_type_char
        elif type_char != _UNLOADED and kind_for_type_char(type_char) is not kind:
            raise ValueError(f"type character {type_char!r} does not match {kind.value}")
        self.kind = kind
        self.grid = grid
        self.data = array.reshape(shape)
        self.type_char = type_char

    @classmethod
    def zeros(cls, kind: FieldKind, grid: Grid) -> "Field":
        """A zero field of the given kind on ``grid``."""
        kind = FieldKind(kind)
        return cls(kind, grid, np.zeros(_shape_for(kind, grid.count()), dtype=_dtype_for(kind)))

    def make_like(self, kind: Optional[FieldKind] = None) -> "Field":
        """A new zero field on the same grid, of ``kind`` or of this field's kind."""
        return Field.zeros(self.kind if kind is None else kind, self.grid)

    def conforms(self, other: "Field") -> bool:
        """True if both fields live on grids of the same dimensions."""
        return self.grid.shape == other.grid.shape

    def set_from(self, other: "Field") -> "Field":
        """Copy the values and type of ``other`` into this field."""
        if self.kind is not other.kind or not self.conforms(other):
            raise ValueError("fields for field-set! must conform")
        if other.type_char == _UNLOADED:
            raise ValueError("must load field for field-set!")
        self.data[...] = other.data
        self.type_char = other.type_char
        return self

    def mark_nonbloch(self) -> "Field":
        """Mark the field as carrying no Bloch wavevector."""
        self.type_char = "v"
        return self

    def _value(self, index: int):
        if self.kind is FieldKind.RSCALAR:
            return float(self.data[index])
        if self.kind is FieldKind.CSCALAR:
            return complex(self.data[index])
        return tuple(complex(c) for c in self.data[index])

    def _store(self, index: int, result) -> None:
        if self.kind is FieldKind.RSCALAR:
            self.data[index] = float(result)
        elif self.kind is FieldKind.CSCALAR:
            self.data[index] = complex(result)
        else:
            components = [complex(c) for c in result]
            if len(components) != 3:
                raise ValueError("a vector field value needs three components")
            self.data[index] = components

    def map_from(self, func: Callable[..., Any], *args: "Field") -> "Field":
        """Set each point to ``func`` applied to the values of ``args`` at that point.

        Real scalars are passed as floats, complex scalars as complex numbers
        and vectors as 3-tuples of complex numbers.
        """
        for source in args:
            if not self.conforms(source):
                raise ValueError("fields for field-map! must conform")
        for index in range(self.grid.count()):
            self._store(index, func(*(source._value(index) for source in args)))
        if len(args) == 1 and args[0].kind is self.kind:
            self.type_char = args[0].type_char
        elif len(args) > 1:
            self.type_char = self.kind.default_type_char
        return self

    def __repr__(self) -> str:
        g = self.grid
        return f"#<field {g.nx}x{g.ny}x{g.nz} {self.kind.value}>"


def integrate_fields(
    func: Callable[..., Any],
    fields: Sequence[Field],
    lattice_size: Optional[Sequence[float]] = None,
) -> complex:
    """Integrate ``func(p, *values)`` over the cell.

    ``p`` is the Cartesian position of each grid point (origin at the
    cell centre) and ``values`` the fields' values there. The sum is
    weighted by the cell volume over the number of points.
    """
    fields = list(fields)
    if not fields:
        raise ValueError("integrate-fields needs at least one field")
    first = fields[0]
    for field in fields:
        if not first.conforms(field):
            raise ValueError("fields for integrate-fields must conform")
    size = first.grid.lattice_size if lattice_size is None else tuple(lattice_size)
    grid = Grid(first.grid.nx, first.grid.ny, first.grid.nz, size)
    integral = 0j
    for index, p in grid.positions():
        integral += complex(func(p, *(field._value(index) for field in fields)))
    volume = float(np.prod(grid.lattice_size))
    return integral * volume / grid.count()