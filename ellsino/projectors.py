"""Analytic sinograms of ellipse phantoms.

This module contains the two projection entry points. :func:`ellipse_sino_grid`
evaluates the exact line integrals of a sum of ellipses at arbitrary
``(radial, angular)`` samples; :func:`ellipse_sino` derives those samples from
a sampling geometry and optionally averages oversampled detector strips.
"""

import logging

import numpy as np
import torch

from .constants import _DTYPE, _WORK_DTYPE
from .ellipses import ellipse_table
from .exceptions import ValidationError
from .kernels import _ellipse_coefficients, _ellipse_sino_kernel
from .utils import DeviceManager, _is_positive_int, _trig_tables, _validate_grid, downsample2

logger = logging.getLogger(__name__)


# ============================================================================
# Grid Projection
# ============================================================================

def ellipse_sino_grid(radial, angular, ellipses, xscale=1, yscale=1):
    """Compute the sinogram of one or more ellipses at arbitrary samples.

    Parameters
    ----------
    radial : array-like or torch.Tensor
        Radial sample positions, any shape, in the length units of the
        ellipse parameters.
    angular : array-like or torch.Tensor
        Angular sample positions in radians, same shape as ``radial``.
    ellipses : Ellipse, sequence, array-like or torch.Tensor
        Ellipses as accepted by :func:`ellsino.ellipse_table`, columns
        ``cx, cy, rx, ry, angle_degrees, amplitude``.
    xscale : int, optional
        Use -1 to flip the phantom in x (default: 1).
    yscale : int, optional
        Use -1 to flip the phantom in y (default: 1).

    Returns
    -------
    sino : numpy.ndarray or torch.Tensor
        float32 line integrals with the shape of ``radial``. A tensor on the
        input device if any input is a tensor, otherwise a numpy array.

    Raises
    ------
    ValidationError
        If the ellipse table does not have 6 columns or non-positive
        semi-axes, or if ``radial`` and ``angular`` shapes differ.

    Notes
    -----
    The projection of an ellipse with semi-axes ``(rx, ry)`` and rotation
    ``theta`` onto view direction ``phi`` has half-width ``rp`` with
    ``rp^2 = (rx cos(phi - theta))^2 + (ry sin(phi - theta))^2`` and is
    centered at ``sp = cx cos(phi) + cy sin(phi)``. The line integral at
    radial position ``r`` is
    ``2 amp rx ry / rp^2 * sqrt(max(rp^2 - (r - sp)^2, 0))``.

    The tensor path is built from differentiable torch operations, so
    gradients flow to a ``requires_grad`` ellipse table.

    Examples
    --------
    >>> ellipse_sino_grid([0.0, 5.0, 10.0], [0.0, 0.0, 0.0], [[0, 0, 5, 5, 0, 1]])
    array([10.,  0.,  0.], dtype=float32)
    """
    device = DeviceManager.find_device(radial, angular, ellipses)
    table = ellipse_table(ellipses)
    shape = _validate_grid(radial, angular)
    logger.debug(
        "projecting %d ellipse(s) onto grid of shape %s (xscale=%s, yscale=%s)",
        table.shape[0], shape, xscale, yscale,
    )

    if device is not None:
        return _ellipse_sino_torch(radial, angular, table, xscale, yscale, device)
    return _ellipse_sino_numpy(radial, angular, table, xscale, yscale)


def _ellipse_sino_numpy(radial, angular, table, xscale, yscale):
    radial = np.asarray(radial, dtype=_WORK_DTYPE)
    cos_ang, sin_ang = _trig_tables(angular)
    coeffs = np.ascontiguousarray(_ellipse_coefficients(table, xscale, yscale, xp=np))

    sino = np.zeros(radial.size, dtype=_DTYPE)
    _ellipse_sino_kernel(
        np.ascontiguousarray(radial.ravel()),
        np.ascontiguousarray(cos_ang.ravel()),
        np.ascontiguousarray(sin_ang.ravel()),
        coeffs,
        sino,
    )
    return sino.reshape(radial.shape)


def _ellipse_sino_torch(radial, angular, table, xscale, yscale, device):
    radial = DeviceManager.ensure_tensor(radial, device)
    angular = DeviceManager.ensure_tensor(angular, device)
    table = DeviceManager.ensure_tensor(table, device)
    cangs, sangs = _trig_tables(angular)
    coeffs = _ellipse_coefficients(table, xscale, yscale, xp=torch)

    sino = torch.zeros(radial.shape, dtype=torch.float64, device=device)
    for cx, cy, rx, ry, ce, se, scale in coeffs:
        # square of projected radius
        rp2 = (rx * (cangs * ce + sangs * se)) ** 2 + (ry * (sangs * ce - cangs * se)) ** 2
        sp = cx * cangs + cy * sangs  # radial shift
        dis2 = (radial - sp) ** 2
        chord2 = rp2 - dis2
        inside = chord2 > 0
        # sqrt only where positive so the gradient stays finite at the edge
        chord = torch.where(
            inside,
            torch.sqrt(torch.where(inside, chord2, torch.ones_like(chord2))),
            torch.zeros_like(chord2),
        )
        sino = sino + scale / rp2 * chord
    return sino.to(torch.float32)


# ============================================================================
# Geometry Projection
# ============================================================================

def ellipse_sino(geometry, ellipses, oversample=1, xscale=1, yscale=1, downsample=downsample2):
    """Compute the sinogram of one or more ellipses for a sampling geometry.

    Works for parallel-beam, fan-beam and mojette geometries, or any object
    implementing :class:`ellsino.geometry.GeometrySource`.

    Parameters
    ----------
    geometry : GeometrySource
        Sampling geometry exposing ``oversample(k)`` and ``grid()``.
    ellipses : Ellipse, sequence, array-like or torch.Tensor
        Ellipses as accepted by :func:`ellsino.ellipse_table`.
    oversample : int, optional
        Number of rays per detector sample, emulating detector strips
        (default: 1, one ray per sample).
    xscale, yscale : int, optional
        Use -1 to flip the phantom in x or y (default: 1).
    downsample : callable, optional
        ``downsample(sino, (oversample, 1))`` reducing the oversampled
        sinogram along the detector axis; only called when
        ``oversample > 1`` (default: :func:`ellsino.utils.downsample2`).

    Returns
    -------
    sino : numpy.ndarray or torch.Tensor
        float32 sinogram with the shape of ``geometry.grid()``.

    Raises
    ------
    ValidationError
        If ``oversample`` is not a positive integer, or on any failure of
        :func:`ellipse_sino_grid`.

    Examples
    --------
    >>> from ellsino import ParallelBeamGeometry, shepp_logan_ellipses
    >>> geom = ParallelBeamGeometry(nb=256, na=180, d=1.0)
    >>> sino = ellipse_sino(geom, shepp_logan_ellipses(fov=256), oversample=4)
    >>> sino.shape
    (256, 180)
    """
    if not _is_positive_int(oversample):
        raise ValidationError(f"oversample must be a positive integer, got {oversample!r}")

    radial, angular = geometry.oversample(oversample).grid()
    sino = ellipse_sino_grid(radial, angular, ellipses, xscale=xscale, yscale=yscale)
    if oversample > 1:
        logger.debug("downsampling oversampled sinogram of shape %s by (%d, 1)", tuple(sino.shape), oversample)
        sino = downsample(sino, (oversample, 1))
    return sino
