"""Dielectric tensors, subpixel averaging, grid fields, energies, integrals and point sampling on periodic grids."""

__version__ = "0.1.0"
__all__ = ["grid", "interpolation", "tensor", "field", "energy", "integrals", "sampling"]