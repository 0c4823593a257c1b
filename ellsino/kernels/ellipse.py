"""Kernels for analytic ellipse sinograms.

This module contains the per-ellipse coefficient setup shared by all backends
and the numba CPU kernel that accumulates chord lengths over a sampling grid.
"""

import math

import numpy as np
from numba import prange

from ..constants import _PARALLEL_DECORATOR


# ============================================================================
# Per-Ellipse Coefficients
# ============================================================================

def _ellipse_coefficients(table, xscale=1, yscale=1, xp=np):
    """Derive the quantities each ellipse contributes to the chord formula.

    Parameters
    ----------
    table : numpy.ndarray or torch.Tensor
        Ellipse table of shape ``(n, 6)``.
    xscale, yscale : int, optional
        Axis flips. The rotation angle is negated for ``yscale == -1`` and
        then mirrored to ``pi - angle`` for ``xscale == -1``; the centers are
        multiplied by the scales as given.
    xp : module, optional
        Array namespace, ``numpy`` or ``torch`` (default: numpy).

    Returns
    -------
    numpy.ndarray or torch.Tensor
        Array of shape ``(n, 7)`` with columns
        ``cx, cy, rx, ry, cos(angle), sin(angle), 2 * amplitude * rx * ry``.
    """
    cx = table[:, 0] * xscale
    cy = table[:, 1] * yscale
    rx = table[:, 2]
    ry = table[:, 3]
    angle = xp.deg2rad(table[:, 4])
    if yscale == -1:
        angle = -angle
    if xscale == -1:
        angle = math.pi - angle
    scale = 2 * table[:, 5] * rx * ry
    return xp.stack((cx, cy, rx, ry, xp.cos(angle), xp.sin(angle), scale), 1)


# ============================================================================
# CPU Accumulation Kernel
# ============================================================================

@_PARALLEL_DECORATOR
def _ellipse_sino_kernel(radial, cos_ang, sin_ang, coeffs, sino):
    """Accumulate the line integrals of all ellipses into ``sino``.

    Parameters
    ----------
    radial : numpy.ndarray
        Flattened radial sample positions, float64.
    cos_ang, sin_ang : numpy.ndarray
        Flattened cosine and sine of the angular sample positions, float64.
    coeffs : numpy.ndarray
        Output of :func:`_ellipse_coefficients`, shape ``(n_ell, 7)``.
    sino : numpy.ndarray
        Flattened float32 output, updated in place.

    Notes
    -----
    For view direction ``(c, s)`` the ellipse projects onto the detector as
    an interval of half-width ``rp`` centered at ``sp``, and the chord through
    it at distance ``r - sp`` from that center has length
    ``2 rx ry sqrt(rp^2 - (r - sp)^2) / rp^2``. Rays outside the interval are
    clamped to zero.
    """
    n_ell = coeffs.shape[0]
    for i in prange(radial.shape[0]):
        c = cos_ang[i]
        s = sin_ang[i]
        r = radial[i]
        for ie in range(n_ell):
            cx = coeffs[ie, 0]
            cy = coeffs[ie, 1]
            rx = coeffs[ie, 2]
            ry = coeffs[ie, 3]
            ce = coeffs[ie, 4]
            se = coeffs[ie, 5]
            scale = coeffs[ie, 6]

            # square of projected radius
            a = rx * (c * ce + s * se)
            b = ry * (s * ce - c * se)
            rp2 = a * a + b * b
            sp = cx * c + cy * s  # radial shift
            dis = r - sp
            sino[i] += scale / rp2 * math.sqrt(max(rp2 - dis * dis, 0.0))
