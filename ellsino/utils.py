"""Utility classes and helper functions for the ellsino package.

This module provides device handling for tensor inputs, trigonometric table
generation for sampling grids and the block-averaging downsampler used after
oversampled projection.
"""

import numbers

import numpy as np
import torch

from .constants import _WORK_DTYPE
from .exceptions import ValidationError


# ============================================================================
# Device Management Utilities
# ============================================================================

class DeviceManager:
    """Utilities for moving mixed numpy / PyTorch inputs onto one device."""

    @staticmethod
    def find_device(*arrays):
        """Return the device of the first tensor among ``arrays``.

        Parameters
        ----------
        *arrays : array-like or torch.Tensor
            Candidate inputs.

        Returns
        -------
        torch.device or None
            Device of the first tensor, or None if no input is a tensor.

        Examples
        --------
        >>> DeviceManager.find_device(np.zeros(3), torch.zeros(3))
        device(type='cpu')
        """
        for array in arrays:
            if isinstance(array, torch.Tensor):
                return array.device
        return None

    @staticmethod
    def ensure_tensor(array, device, dtype=torch.float64):
        """Return ``array`` as a tensor of ``dtype`` on ``device``.

        Tensors are moved and cast without breaking autograd history;
        anything else is converted with ``torch.as_tensor``.
        """
        if isinstance(array, torch.Tensor):
            return array.to(device=device, dtype=dtype)
        return torch.as_tensor(np.asarray(array), dtype=dtype, device=device)


# ============================================================================
# Trigonometric Table Generation
# ============================================================================

def _trig_tables(angles):
    """Compute cosine and sine tables for sampling-grid angles.

    Computed once per projection call and shared by every ellipse.

    Parameters
    ----------
    angles : numpy.ndarray or torch.Tensor
        Angular sample positions in radians, any shape.

    Returns
    -------
    cos, sin : numpy.ndarray or torch.Tensor
        Tables with the shape of ``angles``, float64. Tensors stay on their
        device.
    """
    if isinstance(angles, torch.Tensor):
        angles = angles.to(torch.float64)
        return torch.cos(angles), torch.sin(angles)
    angles = np.asarray(angles, dtype=_WORK_DTYPE)
    return np.cos(angles), np.sin(angles)


# ============================================================================
# Grid Validation
# ============================================================================

def _validate_grid(radial, angular):
    """Check that the radial and angular sample arrays pair up element-wise.

    Raises
    ------
    ValidationError
        If the two arrays do not have identical shapes.
    """
    radial_shape = tuple(np.shape(radial))
    angular_shape = tuple(np.shape(angular))
    if radial_shape != angular_shape:
        raise ValidationError(
            f"grid shape mismatch: radial has shape {radial_shape}, "
            f"angular has shape {angular_shape}"
        )
    return radial_shape


def _is_positive_int(value):
    return (
        isinstance(value, numbers.Integral)
        and not isinstance(value, bool)
        and value > 0
    )


# ============================================================================
# Downsampling
# ============================================================================

def downsample2(x, factors):
    """Downsample a 2D array by averaging non-overlapping blocks.

    Each dimension is first truncated to a multiple of its factor, so an
    ``(m1 * n1 + r1, m2 * n2 + r2)`` input yields an ``(n1, n2)`` output.

    Parameters
    ----------
    x : numpy.ndarray or torch.Tensor
        2D input, e.g. an oversampled sinogram of shape ``(nb * k, na)``.
    factors : tuple of int
        Positive block sizes ``(m1, m2)`` along each dimension.

    Returns
    -------
    numpy.ndarray or torch.Tensor
        Block means, same array type as ``x``; floating inputs keep their
        dtype.

    Raises
    ------
    ValidationError
        If ``x`` is not 2D or a factor is not a positive integer.

    Examples
    --------
    >>> downsample2(np.arange(8.0).reshape(4, 2), (2, 1))
    array([[1., 2.],
           [5., 6.]])
    """
    if len(x.shape) != 2:
        raise ValidationError(f"downsample2 expects a 2D array, got shape {tuple(x.shape)}")
    factors = tuple(factors)
    if len(factors) != 2 or not all(_is_positive_int(m) for m in factors):
        raise ValidationError(f"downsample factors must be two positive integers, got {factors}")

    m1, m2 = (int(m) for m in factors)
    n1, n2 = x.shape[0] // m1, x.shape[1] // m2
    blocks = x[: n1 * m1, : n2 * m2].reshape(n1, m1, n2, m2)
    if isinstance(x, torch.Tensor):
        return blocks.mean(dim=(1, 3))
    return blocks.mean(axis=(1, 3))
