"""Sinogram sampling geometries.

This module defines the :class:`GeometrySource` contract consumed by
:func:`ellsino.ellipse_sino` and three implementations of it: parallel-beam,
fan-beam and mojette sampling. Every geometry describes ``nb`` detector
samples by ``na`` views and returns grids of shape ``(nb, na)``.
"""

import math
from dataclasses import dataclass, replace
from typing import Protocol, Tuple, runtime_checkable

import numpy as np

from .constants import _WORK_DTYPE
from .exceptions import ValidationError
from .utils import _is_positive_int


@runtime_checkable
class GeometrySource(Protocol):
    """Anything that can be oversampled and report its sampling grid."""

    def oversample(self, factor: int) -> "GeometrySource":
        """Return a geometry with ``factor`` times finer radial sampling."""
        ...

    def grid(self) -> Tuple[np.ndarray, np.ndarray]:
        """Return ``(radial, angular)`` sample positions of equal shape."""
        ...


# ============================================================================
# Shared Detector / Orbit Description
# ============================================================================

@dataclass(frozen=True)
class _SinoGeometry:
    nb: int
    na: int
    d: float = 1.0
    offset: float = 0.0
    orbit: float = 180.0
    orbit_start: float = 0.0

    def __post_init__(self):
        if not _is_positive_int(self.nb) or not _is_positive_int(self.na):
            raise ValidationError(
                f"nb and na must be positive integers, got nb={self.nb}, na={self.na}"
            )
        if not self.d > 0:
            raise ValidationError(f"detector spacing d must be positive, got {self.d}")

    @property
    def w(self):
        """Index of the detector sample at radial position zero."""
        return (self.nb - 1) / 2 + self.offset

    @property
    def s(self):
        """Detector sample positions, shape ``(nb,)``."""
        return (np.arange(self.nb, dtype=_WORK_DTYPE) - self.w) * self.d

    @property
    def angles(self):
        """View angles in radians, shape ``(na,)``."""
        degrees = self.orbit_start + np.arange(self.na, dtype=_WORK_DTYPE) / self.na * self.orbit
        return np.deg2rad(degrees)

    def oversample(self, factor):
        """Return a copy with ``factor`` detector samples per original sample.

        The mean position of each block of ``factor`` consecutive samples
        equals the position of the corresponding original sample; angles are
        unchanged.

        Parameters
        ----------
        factor : int
            Positive oversampling factor.

        Returns
        -------
        Same type as ``self``.
        """
        if not _is_positive_int(factor):
            raise ValidationError(f"oversample factor must be a positive integer, got {factor!r}")
        if factor == 1:
            return self
        return replace(self, nb=self.nb * factor, d=self.d / factor, offset=self.offset * factor)


@dataclass(frozen=True)
class ParallelBeamGeometry(_SinoGeometry):
    """Parallel-beam sampling.

    Parameters
    ----------
    nb : int
        Number of detector samples.
    na : int
        Number of views.
    d : float, optional
        Detector sample spacing (default: 1.0).
    offset : float, optional
        Detector offset in units of samples (default: 0.0).
    orbit : float, optional
        Angular range covered by the views, in degrees (default: 180).
    orbit_start : float, optional
        First view angle, in degrees (default: 0).

    Examples
    --------
    >>> geom = ParallelBeamGeometry(nb=128, na=90, d=0.5)
    >>> radial, angular = geom.grid()
    >>> radial.shape
    (128, 90)
    """

    def grid(self):
        """Return ``(radial, angular)`` arrays of shape ``(nb, na)``."""
        radial, angular = np.meshgrid(self.s, self.angles, indexing="ij")
        return radial, angular


@dataclass(frozen=True)
class FanBeamGeometry(_SinoGeometry):
    """Fan-beam sampling with an arc, flat or general curved detector.

    Parameters
    ----------
    nb, na, d, offset, orbit_start : see :class:`ParallelBeamGeometry`
    orbit : float, optional
        Angular range of the source orbit, in degrees (default: 360).
    dsd : float, optional
        Source-to-detector distance (default: 949.075).
    dod : float, optional
        Isocenter-to-detector distance (default: 408.075).
    dfs : float, optional
        Distance from the detector focal point to the source: 0 for an arc
        detector centered on the source, ``inf`` for a flat detector
        (default: 0).
    source_offset : float, optional
        Lateral offset of the source from the central ray (default: 0).

    Notes
    -----
    The fan angle ``gamma`` of each detector sample is mapped to parallel
    coordinates by ``r = dso sin(gamma) + source_offset cos(gamma)`` and
    ``phi = beta + gamma``, where ``beta`` is the source angle and
    ``dso = dsd - dod``.
    """
    orbit: float = 360.0
    dsd: float = 949.075
    dod: float = 408.075
    dfs: float = 0.0
    source_offset: float = 0.0

    def __post_init__(self):
        super().__post_init__()
        if not self.dsd > 0 or not self.dod >= 0 or not self.dso > 0:
            raise ValidationError(
                f"fan-beam distances must satisfy dsd > dod >= 0, got dsd={self.dsd}, dod={self.dod}"
            )
        if not self.dfs >= 0:
            raise ValidationError(f"dfs must be non-negative, got {self.dfs}")

    @property
    def dso(self):
        """Source-to-isocenter distance."""
        return self.dsd - self.dod

    @property
    def gamma(self):
        """Fan angle of each detector sample in radians, shape ``(nb,)``."""
        s = self.s
        if self.dfs == 0:
            return s / self.dsd
        if math.isinf(self.dfs):
            return np.arctan(s / self.dsd)
        dfd = self.dsd + self.dfs
        return np.arctan2(dfd * np.sin(s / dfd), dfd * np.cos(s / dfd) - self.dfs)

    def grid(self):
        """Return parallel-equivalent ``(radial, angular)`` of shape ``(nb, na)``."""
        gamma, beta = np.meshgrid(self.gamma, self.angles, indexing="ij")
        radial = self.dso * np.sin(gamma) + self.source_offset * np.cos(gamma)
        return radial, beta + gamma


@dataclass(frozen=True)
class MojetteGeometry(_SinoGeometry):
    """Mojette sampling: parallel beams whose detector spacing depends on view.

    At view angle ``phi`` the effective sample spacing is
    ``d * max(|cos phi|, |sin phi|)``. Parameters are those of
    :class:`ParallelBeamGeometry`.
    """

    def grid(self):
        """Return ``(radial, angular)`` arrays of shape ``(nb, na)``."""
        angles = self.angles
        d_phi = np.maximum(np.abs(np.cos(angles)), np.abs(np.sin(angles)))
        index, phi = np.meshgrid(np.arange(self.nb, dtype=_WORK_DTYPE) - self.w, angles, indexing="ij")
        return index * self.d * d_phi[np.newaxis, :], phi
