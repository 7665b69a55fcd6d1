"""Numba-compiled kernels.

Small, *stateless* computational kernels designed to run in Numba's
``nopython`` mode. They take and return scalars only; the element keeps all
Python objects (friction law, materials, state) on its side of the call.
"""

from .kernels_slider import radial_return_2d

__all__ = [
    "radial_return_2d",
]
