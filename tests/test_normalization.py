"""Tests for normalization by broadcast."""
import numpy as np
import pytest

from multilinear.domain.entities.tensor import Tensor
from multilinear.domain.errors import IndexOutOfRangeError, ShapeMismatchError
from multilinear.domain.use_cases.normalization import normalize


class TestNormalize:
    """Tests for normalize."""

    def test_columns(self):
        samples = Tensor([3, 2], [1, 2, 3, 4, 5, 6])
        result = normalize(samples, [0])

        deviation = np.sqrt(8 / 3)
        np.testing.assert_allclose(result.mean.values, [3, 4])
        np.testing.assert_allclose(result.standard_deviation.values, [deviation, deviation])
        np.testing.assert_allclose(
            result.normalized.values, np.array([-2, -2, 0, 0, 2, 2]) / deviation
        )

    def test_matches_numpy_for_inner_mode(self):
        """Normalizing over a middle mode keeps the tensor's mode order."""
        data = np.random.default_rng(0).normal(size=(2, 3, 4))
        result = normalize(Tensor.from_array(data), [1])

        mean = data.mean(axis=1)
        deviation = data.std(axis=1)
        assert result.normalized.mode_sizes == (2, 3, 4)
        assert result.mean.mode_sizes == (2, 4)
        np.testing.assert_allclose(result.mean.to_array(), mean)
        np.testing.assert_allclose(result.standard_deviation.to_array(), deviation)
        np.testing.assert_allclose(
            result.normalized.to_array(), (data - mean[:, None, :]) / deviation[:, None, :]
        )

    def test_several_modes(self):
        data = np.random.default_rng(1).normal(size=(3, 2, 4))
        result = normalize(Tensor.from_array(data), [2, 0])

        mean = data.mean(axis=(0, 2))
        deviation = data.std(axis=(0, 2))
        np.testing.assert_allclose(result.mean.values, mean)
        np.testing.assert_allclose(
            result.normalized.to_array(),
            (data - mean[None, :, None]) / deviation[None, :, None],
        )

    def test_zero_deviation_is_only_centered(self):
        constant = Tensor([3, 2], [1, 5, 1, 6, 1, 7])
        result = normalize(constant, [0])
        normalized = result.normalized.to_array()
        np.testing.assert_allclose(normalized[:, 0], [0, 0, 0])
        np.testing.assert_allclose(normalized[:, 1], np.array([-1, 0, 1]) / np.std([5, 6, 7]))

    def test_singleton_modes_are_kept(self):
        data = np.arange(6, dtype=float).reshape(3, 1, 2)
        result = normalize(Tensor.from_array(data), [0])
        assert result.normalized.mode_sizes == (3, 1, 2)
        assert result.mean.mode_sizes == (2,)

    def test_all_modes(self):
        """Normalizing over every mode yields scalar statistics."""
        result = normalize(Tensor([2, 2], [1, 2, 3, 4]), [0, 1])
        assert result.mean.mode_sizes == ()
        assert result.mean.values.tolist() == [2.5]

    def test_needs_modes(self, matrix_2x3):
        with pytest.raises(ShapeMismatchError):
            normalize(matrix_2x3, [])
        with pytest.raises(ShapeMismatchError):
            normalize(matrix_2x3, [0, 0])

    def test_unknown_mode(self, matrix_2x3):
        with pytest.raises(IndexOutOfRangeError):
            normalize(matrix_2x3, [3])
