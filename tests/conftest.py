"""Pytest configuration and shared fixtures."""
import numpy as np
import pytest

from multilinear.domain.entities.tensor import Tensor


@pytest.fixture
def matrix_2x3():
    """
    Provide the 2x3 matrix [[1, 2, 3], [4, 5, 6]].

    Returns:
        Tensor: Tensor of mode sizes (2, 3) holding 1..6 in row-major order.
    """
    return Tensor([2, 3], [1, 2, 3, 4, 5, 6])


@pytest.fixture
def tensor_2x3x4():
    """
    Provide a 3-mode tensor whose values equal their flat offsets.

    Returns:
        Tensor: Tensor of mode sizes (2, 3, 4) holding 0..23.
    """
    return Tensor([2, 3, 4], np.arange(24))
