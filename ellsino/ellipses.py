"""Ellipse descriptions and ellipse parameter tables.

An ellipse is described by six scalars ``(cx, cy, rx, ry, angle, amplitude)``
where ``angle`` is the counter-clockwise rotation in degrees. Projection
functions accept any of the forms normalized by :func:`ellipse_table`.
"""

import math
from dataclasses import astuple, dataclass

import numpy as np
import torch

from .constants import _N_ELLIPSE_PARAMS, _WORK_DTYPE
from .exceptions import ValidationError


@dataclass(frozen=True)
class Ellipse:
    """A single ellipse with additive amplitude.

    Parameters
    ----------
    cx, cy : float
        Center coordinates, in the same length units as the sampling grid.
    rx, ry : float
        Semi-axis lengths, both strictly positive.
    angle : float, optional
        Rotation of the ``rx`` axis from the x-axis, in degrees (default: 0).
    amplitude : float, optional
        Value added inside the ellipse; negative values describe holes
        (default: 1).

    Raises
    ------
    ValidationError
        If either semi-axis is not strictly positive.

    Examples
    --------
    >>> Ellipse(0.0, 0.0, 5.0, 5.0)
    Ellipse(cx=0.0, cy=0.0, rx=5.0, ry=5.0, angle=0.0, amplitude=1.0)
    """
    cx: float
    cy: float
    rx: float
    ry: float
    angle: float = 0.0
    amplitude: float = 1.0

    def __post_init__(self):
        if not (self.rx > 0 and self.ry > 0):
            raise ValidationError(
                f"ellipse semi-axes must be positive, got rx={self.rx}, ry={self.ry}"
            )

    def __iter__(self):
        return iter(astuple(self))

    @property
    def area(self):
        """Area of the ellipse, ``pi * rx * ry``."""
        return math.pi * self.rx * self.ry


def ellipse_table(ellipses):
    """Normalize an ellipse collection into an ``(n, 6)`` parameter table.

    Parameters
    ----------
    ellipses : Ellipse, sequence, array-like or torch.Tensor
        A single :class:`Ellipse`, a sequence of ``Ellipse`` objects or rows,
        an ``(n, 6)`` array, or a single row of 6 values. Column order is
        ``cx, cy, rx, ry, angle_degrees, amplitude``.

    Returns
    -------
    numpy.ndarray or torch.Tensor
        Float64 table of shape ``(n, 6)``. Tensors stay tensors (on their
        device, keeping autograd history); everything else becomes numpy.

    Raises
    ------
    ValidationError
        If the table does not have exactly 6 columns, or a semi-axis is not
        strictly positive.
    """
    if isinstance(ellipses, torch.Tensor):
        table = ellipses.to(torch.float64)
        if table.dim() == 1 and table.numel() == 0:
            table = table.reshape(0, _N_ELLIPSE_PARAMS)
        elif table.dim() == 1:
            table = table.unsqueeze(0)
    else:
        if isinstance(ellipses, Ellipse):
            ellipses = [tuple(ellipses)]
        elif isinstance(ellipses, (list, tuple)):
            ellipses = [tuple(e) if isinstance(e, Ellipse) else e for e in ellipses]
        try:
            table = np.asarray(ellipses, dtype=_WORK_DTYPE)
        except (TypeError, ValueError) as err:
            raise ValidationError(f"malformed ellipse parameters: {err}") from err
        if table.ndim == 1 and table.size == 0:
            table = table.reshape(0, _N_ELLIPSE_PARAMS)
        elif table.ndim == 1:
            table = table[np.newaxis, :]

    if table.ndim != 2 or table.shape[1] != _N_ELLIPSE_PARAMS:
        raise ValidationError(
            f"malformed ellipse parameters: expected {_N_ELLIPSE_PARAMS} "
            f"parameters per ellipse, got table of shape {tuple(table.shape)}"
        )
    if not bool((table[:, 2:4] > 0).all()):
        raise ValidationError("malformed ellipse parameters: semi-axes must be positive")
    return table


# ============================================================================
# Shepp-Logan Head Phantom
# ============================================================================

# cx, cy, rx, ry, angle for a field of view of 2 (unit half-width)
_SHEPP_LOGAN_SHAPES = (
    (0.0, 0.0, 0.69, 0.92, 0.0),
    (0.0, -0.0184, 0.6624, 0.874, 0.0),
    (0.22, 0.0, 0.11, 0.31, -18.0),
    (-0.22, 0.0, 0.16, 0.41, 18.0),
    (0.0, 0.35, 0.21, 0.25, 0.0),
    (0.0, 0.1, 0.046, 0.046, 0.0),
    (0.0, -0.1, 0.046, 0.046, 0.0),
    (-0.08, -0.605, 0.046, 0.023, 0.0),
    (0.0, -0.605, 0.023, 0.023, 0.0),
    (0.06, -0.605, 0.023, 0.046, 0.0),
)

_SHEPP_LOGAN_AMPLITUDES = {
    "kak": (2.0, -0.98, -0.02, -0.02, 0.01, 0.01, 0.01, 0.01, 0.01, 0.01),
    "toft": (1.0, -0.8, -0.2, -0.2, 0.1, 0.1, 0.1, 0.1, 0.1, 0.1),
}


def shepp_logan_ellipses(fov=2.0, case="kak"):
    """Ellipse table of the Shepp-Logan head phantom.

    Parameters
    ----------
    fov : float, optional
        Field of view; centers and semi-axes are scaled by ``fov / 2``
        (default: 2.0, i.e. the classic unit-radius layout).
    case : {"kak", "toft"}, optional
        ``"kak"`` gives the original amplitudes, ``"toft"`` the modified
        higher-contrast amplitudes (default: "kak").

    Returns
    -------
    numpy.ndarray
        Table of shape ``(10, 6)``.

    Raises
    ------
    ValidationError
        If ``case`` is unknown or ``fov`` is not positive.

    Examples
    --------
    >>> shepp_logan_ellipses(fov=256).shape
    (10, 6)
    """
    if case not in _SHEPP_LOGAN_AMPLITUDES:
        raise ValidationError(
            f"unknown Shepp-Logan case {case!r}, expected one of "
            f"{sorted(_SHEPP_LOGAN_AMPLITUDES)}"
        )
    if not fov > 0:
        raise ValidationError(f"fov must be positive, got {fov}")

    table = np.zeros((len(_SHEPP_LOGAN_SHAPES), _N_ELLIPSE_PARAMS), dtype=_WORK_DTYPE)
    table[:, :5] = _SHEPP_LOGAN_SHAPES
    table[:, :4] *= fov / 2
    table[:, 5] = _SHEPP_LOGAN_AMPLITUDES[case]
    return table
