# bandfields

Tools for dielectric tensors and electromagnetic fields sampled on a periodic
grid: the steps that come before and after solving for photonic band
structures.

## Modules

- `bandfields.grid`: `Grid` describes an `nx × ny × nz` periodic grid over a
  lattice cell of a given size. `Grid.indices()` yields flat and 3-d indices
  in row-major order, `Grid.position()` and `Grid.positions()` give Cartesian
  coordinates with the origin at the cell centre, `Grid.rank()` and
  `Grid.count()` describe its size, and `Grid.bloch_phase(kvector, p)` returns
  `exp(i 2π k·p)` with `k` in reciprocal-lattice units.
- `bandfields.interpolation`: `linear_interpolate(rx, ry, rz, data)`
  trilinearly interpolates gridded data at fractional coordinates, with data
  points at pixel centres and mirror boundaries. `wrap_to_unit` shifts a
  lattice coordinate into `[0, 1)`. `EpsilonFileFunction` wraps a 1-, 2- or
  3-d array of dielectric values; calling it with lattice coordinates returns
  the isotropic 3×3 tensor and its inverse as numpy arrays, treating the data
  as periodic.
- `bandfields.tensor`: `SymmetricMatrix` is a Hermitian 3×3 tensor (real
  diagonal, complex off-diagonal) with `inverse`, `eigenvalues`, `rotated`,
  `component` and `is_positive_definite`. `Medium` and `AnisotropicMedium`
  are materials; `material_epsilon` returns a material's tensor and its
  inverse and raises `TypeError` for anything else.
  `mean_medium_from_matrix` gives the mean epsilon from an inverse tensor,
  `rotation_matrix` builds a frame from an interface normal, and
  `kottke_average(eps1, eps2, normal, fill)` gives the effective tensor of a
  pixel split by a planar interface. `epsilon_statistics` summarises a set of
  inverse tensors as an `EpsilonStats` (low, high, mean, harmonic mean,
  percentage above 1 and fill percentage), and `epsilon_tensor_component`
  extracts one component of epsilon or of its inverse at every point.
- `bandfields.field`: `Field` holds a real scalar, complex scalar or complex
  vector field (`FieldKind`) on a `Grid`, tagged with a type character such as
  `d`, `h`, `e`, `D`, `R` or `C`. It supports `zeros`, `make_like`,
  `conforms`, `set_from`, `mark_nonbloch` and point-wise `map_from`.
  `kind_for_type_char` maps a type character to its kind, and
  `integrate_fields(func, fields)` integrates `func(p, *values)` over the cell.
- `bandfields.energy`: `compute_field_energy` turns a D, H or B field into its
  energy density and returns an `EnergyResult` with the total, the fractions
  in the real and imaginary parts of each component, and the density field.
  `compute_field_squared` gives `|F|²`, `fix_field_phase` multiplies a vector
  field in place by a canonical phase and returns it, and
  `energy_in_dielectric` integrates an energy density over the points whose
  mean epsilon lies in a given range.
- `bandfields.integrals`: `compute_field_integral` integrates
  `func(value, epsilon, p)` over the cell for an energy density or a vector
  field (with its Bloch phase), `compute_energy_integral` does the same for
  energy densities and returns the real part, and `energy_in_region`
  integrates an energy density over the points for which a predicate is true.
- `bandfields.sampling`: periodic trilinear sampling at arbitrary Cartesian
  points with `periodic_interpolate`, `epsilon_inverse_at_point`,
  `epsilon_at_point`, `energy_at_point`, `bloch_field_at_point`,
  `field_at_point`, `cscalar_at_point` and `rscalar_at_point`.
  `output_filename` builds names such as `e.k01.b02.x`, `dpwr.k01.b02` or
  `epsilon`, with an optional prefix and parity suffix.

Invalid input, such as non-conforming fields, a field of the wrong type or a
singular tensor, raises `ValueError`.

## Example

```python
import numpy as np
from bandfields.interpolation import linear_interpolate
from bandfields.tensor import SymmetricMatrix, mean_medium_from_matrix

data = np.arange(8, dtype=float).reshape(2, 2, 2)
print(linear_interpolate(0.5, 0.5, 0.5, data))

eps = SymmetricMatrix.isotropic(12.0)
print(mean_medium_from_matrix(eps.inverse()))  # 12.0
```

## What it does not do

The package does not solve for band structures or eigenmodes: fields are
supplied by the caller. It has no geometry description, so regions are given
as predicates, and it writes no field files; `output_filename` only builds the
names. It has no command-line program.

## Installing and testing

```
pip install .
pip install .[test]
pytest
```