"""Tests for ellipse descriptions and parameter tables."""

import math

import numpy as np
import pytest
import torch

from ellsino import Ellipse, ValidationError, ellipse_table, shepp_logan_ellipses


class TestEllipse:

    def test_defaults(self):
        ell = Ellipse(1.0, 2.0, 3.0, 4.0)

        assert tuple(ell) == (1.0, 2.0, 3.0, 4.0, 0.0, 1.0)
        assert ell.area == pytest.approx(12 * math.pi)

    def test_immutable(self):
        ell = Ellipse(0, 0, 1, 1)

        with pytest.raises(AttributeError):
            ell.rx = 2

    @pytest.mark.parametrize("rx, ry", [(0.0, 1.0), (1.0, -2.0), (float("nan"), 1.0)])
    def test_non_positive_axes(self, rx, ry):
        with pytest.raises(ValidationError, match="semi-axes"):
            Ellipse(0, 0, rx, ry)

    def test_negative_amplitude_allowed(self):
        assert Ellipse(0, 0, 1, 1, amplitude=-0.5).amplitude == -0.5


class TestEllipseTable:

    def test_from_ellipses(self):
        table = ellipse_table([Ellipse(1, 2, 3, 4, 5, 6), Ellipse(0, 0, 1, 1)])

        np.testing.assert_array_equal(table, [[1, 2, 3, 4, 5, 6], [0, 0, 1, 1, 0, 1]])
        assert table.dtype == np.float64

    def test_single_ellipse_and_single_row(self):
        expected = [[1, 2, 3, 4, 5, 6]]

        np.testing.assert_array_equal(ellipse_table(Ellipse(1, 2, 3, 4, 5, 6)), expected)
        np.testing.assert_array_equal(ellipse_table([1, 2, 3, 4, 5, 6]), expected)

    def test_mixed_rows(self):
        table = ellipse_table([Ellipse(1, 2, 3, 4), (0, 0, 2, 2, 10, -1)])

        assert table.shape == (2, 6)

    def test_empty(self):
        assert ellipse_table([]).shape == (0, 6)
        assert ellipse_table(torch.zeros(0)).shape == (0, 6)

    @pytest.mark.parametrize("ellipses", [
        [[0, 0, 1, 1, 0]],
        [1, 2, 3, 4, 5, 6, 7],
        np.zeros((2, 3, 6)),
        [[0, 0, 1, 1, 0, 1], [0, 0, 1]],
        "ellipse",
    ])
    def test_malformed(self, ellipses):
        with pytest.raises(ValidationError, match="malformed ellipse parameters"):
            ellipse_table(ellipses)

    def test_non_positive_axes(self):
        with pytest.raises(ValidationError, match="semi-axes"):
            ellipse_table([[0, 0, 1, 1, 0, 1], [0, 0, 1, -1, 0, 1]])

    def test_nan_axes(self):
        with pytest.raises(ValidationError, match="semi-axes"):
            ellipse_table([[0, 0, float("nan"), 1, 0, 1]])
        with pytest.raises(ValidationError, match="semi-axes"):
            ellipse_table(torch.tensor([[0.0, 0.0, 1.0, float("nan"), 0.0, 1.0]]))

    def test_tensor_keeps_autograd(self):
        params = torch.tensor([[0.0, 0.0, 2.0, 3.0, 0.0, 1.0]], requires_grad=True)

        table = ellipse_table(params)

        assert isinstance(table, torch.Tensor)
        assert table.dtype == torch.float64
        assert table.requires_grad

    def test_tensor_single_row(self):
        assert ellipse_table(torch.tensor([0.0, 0.0, 2.0, 3.0, 0.0, 1.0])).shape == (1, 6)

    def test_tensor_malformed(self):
        with pytest.raises(ValidationError, match="malformed ellipse parameters"):
            ellipse_table(torch.zeros(2, 5))


class TestSheppLogan:

    def test_default_layout(self):
        table = shepp_logan_ellipses()

        assert table.shape == (10, 6)
        np.testing.assert_allclose(table[0], [0.0, 0.0, 0.69, 0.92, 0.0, 2.0])
        np.testing.assert_allclose(table[:, 5].sum(), 2.0 - 0.98 - 0.04 + 0.06)

    def test_fov_scaling(self):
        unit = shepp_logan_ellipses()
        scaled = shepp_logan_ellipses(fov=256)

        np.testing.assert_allclose(scaled[:, :4], unit[:, :4] * 128)
        np.testing.assert_array_equal(scaled[:, 4:], unit[:, 4:])

    def test_toft_amplitudes(self):
        table = shepp_logan_ellipses(case="toft")

        np.testing.assert_allclose(table[:4, 5], [1.0, -0.8, -0.2, -0.2])

    def test_unknown_case(self):
        with pytest.raises(ValidationError, match="Shepp-Logan"):
            shepp_logan_ellipses(case="modified")

    def test_invalid_fov(self):
        with pytest.raises(ValidationError, match="fov"):
            shepp_logan_ellipses(fov=0)

    def test_is_valid_table(self):
        table = shepp_logan_ellipses(fov=10)

        np.testing.assert_array_equal(ellipse_table(table), table)
