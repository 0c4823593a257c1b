# ellsino/__init__.py
"""ellsino - Analytic Ellipse Sinograms.

Exact parallel-beam, fan-beam and mojette projections of ellipse phantoms,
computed in closed form with numba on numpy arrays or with PyTorch on tensors.
"""

from .projectors import (
    ellipse_sino,
    ellipse_sino_grid,
)

from .ellipses import (
    Ellipse,
    ellipse_table,
    shepp_logan_ellipses,
)

from .geometry import (
    GeometrySource,
    ParallelBeamGeometry,
    FanBeamGeometry,
    MojetteGeometry,
)

from .exceptions import ValidationError
from .utils import downsample2

__version__ = '0.1.0'

__all__ = [
    'ellipse_sino',
    'ellipse_sino_grid',
    'Ellipse',
    'ellipse_table',
    'shepp_logan_ellipses',
    'GeometrySource',
    'ParallelBeamGeometry',
    'FanBeamGeometry',
    'MojetteGeometry',
    'ValidationError',
    'downsample2',
]
