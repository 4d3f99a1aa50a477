import numpy as np
import pytest

from bandfields.field import Field, FieldKind, integrate_fields, kind_for_type_char
from bandfields.grid import Grid


@pytest.fixture
def grid():
    return Grid(4, 2, 1, (2.0, 3.0, 1.0))


@pytest.mark.parametrize(
    "char, kind",
    [
        ("d", FieldKind.CVECTOR),
        ("v", FieldKind.CVECTOR),
        ("D", FieldKind.RSCALAR),
        ("n", FieldKind.RSCALAR),
        ("R", FieldKind.RSCALAR),
        ("C", FieldKind.CSCALAR),
    ],
)
def test_kind_for_type_char(char, kind):
    assert kind_for_type_char(char) is kind


def test_kind_for_unknown_char_raises():
    with pytest.raises(ValueError):
        kind_for_type_char("x")


def test_zeros_shapes_and_type_chars(grid):
    r = Field.zeros(FieldKind.RSCALAR, grid)
    c = Field.zeros(FieldKind.CSCALAR, grid)
    v = Field.zeros(FieldKind.CVECTOR, grid)
    assert r.data.shape == (8,) and r.type_char == "R"
    assert c.data.shape == (8,) and c.type_char == "C"
    assert v.data.shape == (8, 3) and v.type_char == "c"
    assert not np.any(v.data)


def test_init_rejects_wrong_size(grid):
    with pytest.raises(ValueError):
        Field(FieldKind.RSCALAR, grid, [1.0, 2.0])


def test_make_like_keeps_grid_and_changes_kind(grid):
    r = Field(FieldKind.RSCALAR, grid, np.arange(8.0))
    v = r.make_like(FieldKind.CVECTOR)
    same = r.make_like()
    assert v.kind is FieldKind.CVECTOR and v.grid == grid
    assert same.kind is FieldKind.RSCALAR and not np.any(same.data)


def test_conforms(grid):
    a = Field.zeros(FieldKind.RSCALAR, grid)
    b = Field.zeros(FieldKind.CSCALAR, grid)
    c = Field.zeros(FieldKind.RSCALAR, Grid(3))
    assert a.conforms(b)
    assert not a.conforms(c)


def test_set_from_copies_values_and_type(grid):
    src = Field(FieldKind.RSCALAR, grid, np.arange(8.0), type_char="D")
    dst = Field.zeros(FieldKind.RSCALAR, grid)
    dst.set_from(src)
    assert np.array_equal(dst.data, src.data)
    assert dst.type_char == "D"
    src.data[0] = 99.0
    assert dst.data[0] == 0.0


def test_set_from_mismatched_kind_raises(grid):
    with pytest.raises(ValueError):
        Field.zeros(FieldKind.RSCALAR, grid).set_from(Field.zeros(FieldKind.CSCALAR, grid))


def test_set_from_unloaded_raises(grid):
    src = Field(FieldKind.RSCALAR, grid, np.zeros(8), type_char="-")
    with pytest.raises(ValueError):
        Field.zeros(FieldKind.RSCALAR, grid).set_from(src)


def test_mark_nonbloch(grid):
    v = Field.zeros(FieldKind.CVECTOR, grid)
    assert v.mark_nonbloch().type_char == "v"


def test_map_from_single_source_inherits_type(grid):
    src = Field(FieldKind.RSCALAR, grid, np.arange(8.0), type_char="D")
    dst = Field.zeros(FieldKind.RSCALAR, grid)
    dst.map_from(lambda x: 2 * x, src)
    assert np.allclose(dst.data, 2 * src.data)
    assert dst.type_char == "D"


def test_map_from_two_sources_resets_type(grid):
    a = Field(FieldKind.RSCALAR, grid, np.arange(8.0), type_char="D")
    b = Field(FieldKind.CSCALAR, grid, 1j * np.arange(8.0))
    dst = Field.zeros(FieldKind.CSCALAR, grid)
    dst.type_char = "-"
    dst.map_from(lambda x, y: x + y, a, b)
    assert np.allclose(dst.data, a.data + b.data)
    assert dst.type_char == "C"


def test_map_from_vector_values(grid):
    v = Field(FieldKind.CVECTOR, grid, np.ones((8, 3)) * (1 + 1j))
    out = Field.zeros(FieldKind.CVECTOR, grid)
    out.map_from(lambda f: tuple(c.conjugate() for c in f), v)
    assert np.allclose(out.data, np.conj(v.data))


def test_map_from_nonconforming_raises(grid):
    with pytest.raises(ValueError):
        Field.zeros(FieldKind.RSCALAR, grid).map_from(
            lambda x: x, Field.zeros(FieldKind.RSCALAR, Grid(3))
        )


def test_repr(grid):
    assert repr(Field.zeros(FieldKind.CVECTOR, grid)) == "#<field 4x2x1 complex vector field>"
    assert repr(Field.zeros(FieldKind.RSCALAR, grid)) == "#<field 4x2x1 real scalar field>"


def test_integrate_constant_gives_volume(grid):
    ones = Field(FieldKind.RSCALAR, grid, np.ones(8))
    result = integrate_fields(lambda p, f: f, [ones])
    assert result == pytest.approx(2.0 * 3.0 * 1.0)


def test_integrate_is_linear(grid):
    f = Field(FieldKind.CSCALAR, grid, np.arange(8.0) + 1j)
    base = integrate_fields(lambda p, x: x, [f])
    doubled = integrate_fields(lambda p, x: 2 * x, [f])
    assert doubled == pytest.approx(2 * base)
    assert base.imag == pytest.approx(grid.lattice_size[0] * grid.lattice_size[1])


def test_integrate_with_override_size(grid):
    ones = Field(FieldKind.RSCALAR, grid, np.ones(8))
    assert integrate_fields(lambda p, f: f, [ones], (1.0, 1.0, 1.0)) == pytest.approx(1.0)


def test_integrate_requires_fields():
    with pytest.raises(ValueError):
        integrate_fields(lambda p: 1.0, [])


def test_integrate_nonconforming_raises(grid):
    with pytest.raises(ValueError):
        integrate_fields(
            lambda p, a, b: a,
            [Field.zeros(FieldKind.RSCALAR, grid), Field.zeros(FieldKind.RSCALAR, Grid(3))],
        )