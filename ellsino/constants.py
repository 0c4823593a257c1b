"""Global constants and configuration for the ellsino package.

This module defines core constants used throughout the package, including
the sinogram data type, the ellipse parameter layout and the numba JIT
configuration used by the CPU kernels.
"""

import numpy as np
from numba import njit

# ---------------------------------------------------------------------------
# Data Types and Numerical Constants
# ---------------------------------------------------------------------------

_DTYPE = np.float32
"""Data type of every returned sinogram (numpy.float32)."""

_WORK_DTYPE = np.float64
"""Data type used for per-ellipse intermediate quantities."""

# ---------------------------------------------------------------------------
# Ellipse Parameter Layout
# ---------------------------------------------------------------------------

_ELLIPSE_COLUMNS = ("cx", "cy", "rx", "ry", "angle", "amplitude")
"""Column order of an ellipse parameter table; angle is in degrees."""

_N_ELLIPSE_PARAMS = len(_ELLIPSE_COLUMNS)
"""Number of parameters per ellipse (6)."""

# ---------------------------------------------------------------------------
# JIT Decorators
# ---------------------------------------------------------------------------

# Parallel over grid samples; every sample sums the ellipses in order, so the
# result does not depend on the thread count.
_PARALLEL_DECORATOR = njit(cache=True, parallel=True)
"""Numba CPU JIT decorator for the sinogram accumulation kernel."""
