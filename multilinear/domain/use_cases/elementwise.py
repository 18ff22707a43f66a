"""
Broadcasting elementwise arithmetic.

Every operation pairs a slice of ``a`` with a slice of ``b`` for each
combination of their outer modes and applies a numpy ufunc to the two
slices. The slices must have the same shape; the result has the outer modes
of ``a``, then the outer modes of ``b``, then the slice modes.

Example: ``subtract(samples, [0], column_mean, [])`` subtracts a per-column
mean from every row of a ``samples`` matrix.
"""
import logging
from collections.abc import Callable, Sequence

import numpy as np

from multilinear.domain.entities.slice_subscript import ALL, Range
from multilinear.domain.entities.tensor import Tensor
from multilinear.domain.errors import ShapeMismatchError
from multilinear.domain.operations.combine import combine

logger = logging.getLogger(__name__)


def combine_elementwise(
    a: Tensor,
    outer_modes_a: Sequence[int],
    b: Tensor,
    outer_modes_b: Sequence[int],
    operation: Callable[[np.ndarray, np.ndarray], np.ndarray],
) -> Tensor:
    """
    Apply ``operation`` to matching slices of ``a`` and ``b``.

    Parameters
    ----------
    a, b : Tensor
        Operands.
    outer_modes_a, outer_modes_b : Sequence[int]
        Modes iterated coordinate by coordinate; the remaining modes of each
        operand form the slices that are combined.
    operation : Callable[[np.ndarray, np.ndarray], np.ndarray]
        Elementwise binary function on flat value arrays, e.g. ``np.add``.

    Returns
    -------
    Tensor
        New tensor of mode sizes ``[a outer sizes] + [b outer sizes] + slice sizes``.

    Raises
    ------
    ShapeMismatchError
        If the slices of ``a`` and ``b`` do not have the same shape.
    """
    outer_sizes = [a.mode_sizes[m] for m in outer_modes_a] + [
        b.mode_sizes[m] for m in outer_modes_b
    ]
    result: Tensor | None = None

    def combine_slices(subscripts_a: list[Range], subscripts_b: list[Range]) -> None:
        nonlocal result
        slice_a = a.read_slice(subscripts_a)
        slice_b = b.read_slice(subscripts_b)
        if slice_a.mode_sizes != slice_b.mode_sizes:
            raise ShapeMismatchError(
                f"cannot combine slices of mode sizes {list(slice_a.mode_sizes)} "
                f"and {list(slice_b.mode_sizes)}"
            )

        combined = np.asarray(operation(slice_a.values, slice_b.values))
        if result is None:
            result = Tensor.filled(
                outer_sizes + list(slice_a.mode_sizes), 0, dtype=combined.dtype
            )

        target = [subscripts_a[m] for m in outer_modes_a] + [
            subscripts_b[m] for m in outer_modes_b
        ]
        target += [ALL] * slice_a.mode_count
        result.write_slice(target, Tensor(slice_a.mode_sizes, combined))

    combine(a, outer_modes_a, b, outer_modes_b, combine_slices)
    logger.debug(f"Combined {list(a.mode_sizes)} with {list(b.mode_sizes)}")
    return result


def add(a: Tensor, outer_modes_a: Sequence[int], b: Tensor, outer_modes_b: Sequence[int]) -> Tensor:
    return combine_elementwise(a, outer_modes_a, b, outer_modes_b, np.add)


def subtract(a: Tensor, outer_modes_a: Sequence[int], b: Tensor, outer_modes_b: Sequence[int]) -> Tensor:
    return combine_elementwise(a, outer_modes_a, b, outer_modes_b, np.subtract)


def multiply(a: Tensor, outer_modes_a: Sequence[int], b: Tensor, outer_modes_b: Sequence[int]) -> Tensor:
    return combine_elementwise(a, outer_modes_a, b, outer_modes_b, np.multiply)


def divide(a: Tensor, outer_modes_a: Sequence[int], b: Tensor, outer_modes_b: Sequence[int]) -> Tensor:
    return combine_elementwise(a, outer_modes_a, b, outer_modes_b, np.true_divide)
