"""Tests for the mode reorder engine."""
import itertools
from unittest.mock import patch

import numpy as np
import pytest

from multilinear.domain.entities.tensor import Tensor
from multilinear.domain.errors import InvalidPermutationError
from multilinear.domain.operations import reordering
from multilinear.domain.operations.reordering import (
    contiguous_run_length,
    inverse_permutation,
    reorder_complexity,
)

ALL_PERMUTATIONS = list(itertools.permutations(range(3)))


class TestReorderModes:
    """Tests for reorder_modes."""

    def test_transpose(self):
        """Swapping the modes of a 2x2 matrix transposes it."""
        matrix = Tensor([2, 2], [1, 2, 3, 4])
        assert matrix.reorder_modes([1, 0]) == Tensor([2, 2], [1, 3, 2, 4])

    def test_identity_returns_input(self, tensor_2x3x4):
        """The identity permutation does not copy."""
        assert tensor_2x3x4.reorder_modes([0, 1, 2]) is tensor_2x3x4

    @pytest.mark.parametrize("permutation", ALL_PERMUTATIONS)
    def test_matches_numpy_transpose(self, tensor_2x3x4, permutation):
        reordered = tensor_2x3x4.reorder_modes(permutation)
        expected = np.transpose(np.arange(24).reshape(2, 3, 4), permutation)
        assert reordered.mode_sizes == expected.shape
        np.testing.assert_array_equal(reordered.to_array(), expected)

    @pytest.mark.parametrize("permutation", ALL_PERMUTATIONS)
    def test_inverse_restores_tensor(self, tensor_2x3x4, permutation):
        reordered = tensor_2x3x4.reorder_modes(permutation)
        assert reordered.reorder_modes(inverse_permutation(permutation)) == tensor_2x3x4

    def test_result_owns_its_buffer(self, tensor_2x3x4):
        reordered = tensor_2x3x4.reorder_modes([1, 0, 2])
        reordered[0] = 100
        assert tensor_2x3x4[0] == 0

    @pytest.mark.parametrize("permutation", [[0, 0, 1], [0, 1], [0, 1, 3], []])
    def test_invalid_permutation(self, tensor_2x3x4, permutation):
        with pytest.raises(InvalidPermutationError):
            tensor_2x3x4.reorder_modes(permutation)


class TestCopyRuns:
    """The engine copies whole contiguous runs."""

    @pytest.mark.parametrize("permutation", ALL_PERMUTATIONS)
    def test_one_copy_per_run(self, tensor_2x3x4, permutation):
        """The number of block copies equals the reorder complexity."""
        with patch(
            "multilinear.domain.operations.reordering._copy_block",
            wraps=reordering._copy_block,
        ) as copy_block:
            tensor_2x3x4.reorder_modes(permutation)

        assert copy_block.call_count == tensor_2x3x4.reorder_complexity(permutation)
        run_length = tensor_2x3x4.contiguous_run_length(permutation)
        for call in copy_block.call_args_list:
            assert call.args[4] == run_length

    def test_trailing_modes_copied_as_one_block(self, tensor_2x3x4):
        """Swapping the first two modes moves rows of 4 elements."""
        with patch(
            "multilinear.domain.operations.reordering._copy_block",
            wraps=reordering._copy_block,
        ) as copy_block:
            tensor_2x3x4.reorder_modes([1, 0, 2])
        assert copy_block.call_count == 6


class TestReorderComplexity:
    """Tests for the static reordering cost proxy."""

    def test_identity(self):
        assert reorder_complexity([2, 3, 4], [0, 1, 2]) == 0
        assert contiguous_run_length([2, 3, 4], [0, 1, 2]) == 24

    def test_leading_swap(self):
        assert reorder_complexity([2, 3, 4], [1, 0, 2]) == 6
        assert contiguous_run_length([2, 3, 4], [1, 0, 2]) == 4

    def test_last_mode_moves(self):
        assert reorder_complexity([2, 3, 4], [0, 2, 1]) == 24
        assert contiguous_run_length([2, 3, 4], [0, 2, 1]) == 1

    @pytest.mark.parametrize("permutation", ALL_PERMUTATIONS[1:])
    def test_runs_cover_every_element(self, permutation):
        sizes = [2, 3, 4]
        runs = reorder_complexity(sizes, permutation)
        assert runs * contiguous_run_length(sizes, permutation) == 24

    def test_invalid_permutation(self):
        with pytest.raises(InvalidPermutationError):
            reorder_complexity([2, 3], [1, 1])


class TestInversePermutation:
    def test_inverse(self):
        assert inverse_permutation([2, 0, 1]) == [1, 2, 0]

    def test_not_a_bijection(self):
        with pytest.raises(InvalidPermutationError):
            inverse_permutation([1, 2])
