"""Tests for sinogram sampling geometries."""

import math

import numpy as np
import pytest

from ellsino import (
    FanBeamGeometry,
    GeometrySource,
    MojetteGeometry,
    ParallelBeamGeometry,
    ValidationError,
)


class TestParallelBeamGeometry:

    def test_grid_shape_and_positions(self):
        geom = ParallelBeamGeometry(nb=5, na=4, d=2.0)

        radial, angular = geom.grid()

        assert radial.shape == angular.shape == (5, 4)
        np.testing.assert_allclose(radial[:, 0], [-4.0, -2.0, 0.0, 2.0, 4.0])
        np.testing.assert_allclose(angular[0], np.deg2rad([0.0, 45.0, 90.0, 135.0]))

    def test_offset_and_orbit_start(self):
        geom = ParallelBeamGeometry(nb=4, na=2, d=1.0, offset=0.5, orbit=360, orbit_start=90)

        radial, angular = geom.grid()

        np.testing.assert_allclose(radial[:, 0], [-2.0, -1.0, 0.0, 1.0])
        np.testing.assert_allclose(angular[0], [math.pi / 2, 3 * math.pi / 2])

    @pytest.mark.parametrize("offset", [0.0, 0.25, -1.0])
    def test_oversample_preserves_block_means(self, offset):
        geom = ParallelBeamGeometry(nb=6, na=3, d=1.5, offset=offset)

        over = geom.oversample(4)
        radial, angular = over.grid()

        assert over.nb == 24
        assert radial.shape == (24, 3)
        np.testing.assert_allclose(radial.reshape(6, 4, 3).mean(axis=1), geom.grid()[0], atol=1e-12)
        np.testing.assert_allclose(angular[:6], geom.grid()[1][:6])

    def test_oversample_one_is_identity(self):
        geom = ParallelBeamGeometry(nb=6, na=3)

        assert geom.oversample(1) is geom

    def test_oversample_does_not_mutate(self):
        geom = ParallelBeamGeometry(nb=6, na=3, d=1.5)

        geom.oversample(3)

        assert (geom.nb, geom.d) == (6, 1.5)

    @pytest.mark.parametrize("factor", [0, -1, 2.0, True])
    def test_invalid_oversample(self, factor):
        with pytest.raises(ValidationError, match="oversample"):
            ParallelBeamGeometry(nb=6, na=3).oversample(factor)

    @pytest.mark.parametrize("kwargs", [
        dict(nb=0, na=3),
        dict(nb=4, na=-1),
        dict(nb=4.0, na=3),
        dict(nb=4, na=3, d=0.0),
    ])
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ValidationError):
            ParallelBeamGeometry(**kwargs)

    def test_satisfies_protocol(self):
        assert isinstance(ParallelBeamGeometry(nb=2, na=2), GeometrySource)
        assert isinstance(FanBeamGeometry(nb=2, na=2), GeometrySource)
        assert isinstance(MojetteGeometry(nb=2, na=2), GeometrySource)


class TestFanBeamGeometry:

    def test_default_orbit_is_full_circle(self):
        geom = FanBeamGeometry(nb=3, na=4)

        np.testing.assert_allclose(geom.angles, np.deg2rad([0.0, 90.0, 180.0, 270.0]))

    def test_arc_detector(self):
        geom = FanBeamGeometry(nb=5, na=2, d=10.0, dsd=500, dod=200)

        radial, angular = geom.grid()

        gamma = geom.s / 500
        np.testing.assert_allclose(geom.gamma, gamma)
        np.testing.assert_allclose(radial[:, 1], 300 * np.sin(gamma))
        np.testing.assert_allclose(angular[:, 1], math.pi + gamma)

    def test_flat_detector(self):
        geom = FanBeamGeometry(nb=5, na=2, d=10.0, dsd=500, dod=200, dfs=math.inf)

        np.testing.assert_allclose(geom.gamma, np.arctan(geom.s / 500))

    def test_finite_focal_distance_between_arc_and_flat(self):
        arc = FanBeamGeometry(nb=9, na=1, d=40.0, dsd=500, dod=200, dfs=0)
        near_flat = FanBeamGeometry(nb=9, na=1, d=40.0, dsd=500, dod=200, dfs=1e9)
        flat = FanBeamGeometry(nb=9, na=1, d=40.0, dsd=500, dod=200, dfs=math.inf)
        curved = FanBeamGeometry(nb=9, na=1, d=40.0, dsd=500, dod=200, dfs=300)

        np.testing.assert_allclose(near_flat.gamma, flat.gamma, atol=1e-6)
        assert flat.gamma[-1] < curved.gamma[-1] < arc.gamma[-1]

    def test_source_offset(self):
        geom = FanBeamGeometry(nb=3, na=1, d=5.0, dsd=500, dod=200, source_offset=0.7)

        radial, _ = geom.grid()

        gamma = geom.gamma
        np.testing.assert_allclose(radial[:, 0], 300 * np.sin(gamma) + 0.7 * np.cos(gamma))

    def test_oversample_keeps_distances(self):
        geom = FanBeamGeometry(nb=8, na=5, d=2.0, dsd=600, dod=250, dfs=math.inf, offset=0.25)

        over = geom.oversample(2)

        assert (over.nb, over.d, over.offset) == (16, 1.0, 0.5)
        assert (over.dsd, over.dod, over.dfs) == (600, 250, math.inf)
        assert over.grid()[0].shape == (16, 5)

    @pytest.mark.parametrize("kwargs", [
        dict(dsd=0.0, dod=0.0),
        dict(dsd=500, dod=-1.0),
        dict(dsd=500, dod=500),
        dict(dsd=500, dod=200, dfs=-1.0),
    ])
    def test_invalid_distances(self, kwargs):
        with pytest.raises(ValidationError):
            FanBeamGeometry(nb=4, na=4, **kwargs)


class TestMojetteGeometry:

    def test_spacing_depends_on_view(self):
        geom = MojetteGeometry(nb=3, na=4, d=2.0)

        radial, angular = geom.grid()

        np.testing.assert_allclose(radial[:, 0], [-2.0, 0.0, 2.0])
        np.testing.assert_allclose(radial[:, 1], [-math.sqrt(2), 0.0, math.sqrt(2)])
        np.testing.assert_allclose(radial[:, 2], [-2.0, 0.0, 2.0])
        np.testing.assert_allclose(angular[0], np.deg2rad([0.0, 45.0, 90.0, 135.0]))

    def test_oversample_preserves_block_means(self):
        geom = MojetteGeometry(nb=4, na=6, d=1.0)

        radial, _ = geom.oversample(3).grid()

        np.testing.assert_allclose(radial.reshape(4, 3, 6).mean(axis=1), geom.grid()[0], atol=1e-12)
