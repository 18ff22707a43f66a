"""Unfolding (matricization) of a tensor along one mode."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np

from multilinear.domain.entities.coordinates import element_count
from multilinear.domain.errors import IndexOutOfRangeError
from multilinear.domain.operations.reordering import reorder_complexity

if TYPE_CHECKING:
    from multilinear.domain.entities.tensor import Tensor

logger = logging.getLogger(__name__)


@dataclass
class Matricization:
    """A tensor unfolded into a row-major matrix."""

    values: np.ndarray
    rows: int
    columns: int
    transposed: bool

    def as_tensor(self) -> Tensor:
        from multilinear.domain.entities.tensor import Tensor

        return Tensor([self.rows, self.columns], self.values)


def matrix_with_mode(tensor: Tensor, mode: int, allow_transpose: bool = True) -> Matricization:
    """
    Unfold ``tensor`` into a matrix whose rows run along ``mode``.

    The columns enumerate every combination of the remaining modes, in their
    original order. If ``allow_transpose`` is set and moving ``mode`` to the
    back instead needs fewer contiguous copies, the transposed matrix is
    returned and flagged, leaving the compensation to the caller.

    Parameters
    ----------
    tensor : Tensor
        Tensor to unfold.
    mode : int
        Mode that becomes the rows (or the columns, if transposed).
    allow_transpose : bool
        Whether the cheaper transposed orientation may be returned.

    Returns
    -------
    Matricization
        Flat row-major values, matrix size, and whether it is transposed.

    Raises
    ------
    IndexOutOfRangeError
        If ``mode`` is not a mode of ``tensor``.
    """
    if not 0 <= mode < tensor.mode_count:
        raise IndexOutOfRangeError(
            f"mode {mode} not available in tensor with {tensor.mode_count} modes"
        )

    remaining_modes = [m for m in tensor.mode_array if m != mode]
    default_order = [mode] + remaining_modes
    rows = tensor.mode_sizes[mode]
    columns = element_count([tensor.mode_sizes[m] for m in remaining_modes])

    if allow_transpose:
        transpose_order = remaining_modes + [mode]
        complexity_default = reorder_complexity(tensor.mode_sizes, default_order)
        complexity_transpose = reorder_complexity(tensor.mode_sizes, transpose_order)
        if complexity_transpose < complexity_default:
            logger.debug(
                f"Unfolding mode {mode} transposed "
                f"({complexity_transpose} < {complexity_default} copies)"
            )
            return Matricization(
                _owned_values(tensor, transpose_order), columns, rows, True
            )

    return Matricization(_owned_values(tensor, default_order), rows, columns, False)


def _owned_values(tensor: Tensor, new_to_old: list[int]) -> np.ndarray:
    reordered = tensor.reorder_modes(new_to_old)
    if reordered is tensor:
        return tensor.values.copy()
    return reordered.values
