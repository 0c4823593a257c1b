"""Kernels for analytic ellipse projections.

This subpackage contains the numba-compiled CPU kernel and the coefficient
setup shared with the PyTorch backend.
"""

from .ellipse import (
    _ellipse_coefficients,
    _ellipse_sino_kernel,
)

__all__ = [
    '_ellipse_coefficients',
    '_ellipse_sino_kernel',
]
