"""Mode reorder engine.

A reordering is described by ``new_to_old``: mode ``d`` of the result is
mode ``new_to_old[d]`` of the source. Modes after the last one that moves
keep both their order and their contiguity, so the engine copies whole runs
of ``product(mode_sizes[last_changed + 1:])`` elements at once instead of
single elements.
"""
from __future__ import annotations

import logging
import operator
from collections.abc import Sequence
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

from multilinear.domain.entities.coordinates import element_count, flat_offset
from multilinear.domain.errors import InvalidPermutationError

if TYPE_CHECKING:
    from multilinear.domain.entities.tensor import Tensor

logger = logging.getLogger(__name__)


class _Layout(NamedTuple):
    old_sizes: tuple[int, ...]
    new_sizes: tuple[int, ...]
    old_to_new: list[int]
    last_changed_mode: int
    run_length: int


def inverse_permutation(new_to_old: Sequence[int]) -> list[int]:
    """
    Invert a mode permutation.

    Parameters
    ----------
    new_to_old : Sequence[int]
        Mapping from new mode positions to old ones.

    Returns
    -------
    list[int]
        ``old_to_new``, such that ``old_to_new[new_to_old[d]] == d``.

    Raises
    ------
    InvalidPermutationError
        If ``new_to_old`` is not a bijection over ``0..len(new_to_old)``.
    """
    permutation = _checked_permutation(new_to_old, len(new_to_old))
    old_to_new = [0] * len(permutation)
    for new_mode, old_mode in enumerate(permutation):
        old_to_new[old_mode] = new_mode
    return old_to_new


def last_changed_mode(new_to_old: Sequence[int]) -> int:
    """Highest mode whose position changes, or -1 for the identity."""
    last = -1
    for d, old_mode in enumerate(new_to_old):
        if old_mode != d:
            last = d
    return last


def contiguous_run_length(mode_sizes: Sequence[int], new_to_old: Sequence[int]) -> int:
    """Number of elements that stay contiguous under the reordering."""
    permutation = _checked_permutation(new_to_old, len(mode_sizes))
    return element_count(mode_sizes[last_changed_mode(permutation) + 1:])


def reorder_complexity(mode_sizes: Sequence[int], new_to_old: Sequence[int]) -> int:
    """
    Number of separate contiguous copies the reordering needs.

    0 means the permutation is the identity and nothing has to be copied.
    Only useful to compare candidate orderings of the same tensor: lower is
    cheaper.
    """
    permutation = _checked_permutation(new_to_old, len(mode_sizes))
    last = last_changed_mode(permutation)
    if last < 0:
        return 0
    return element_count(mode_sizes[:last + 1])


def reorder_modes(tensor: Tensor, new_to_old: Sequence[int]) -> Tensor:
    """
    Return a tensor with the same values and permuted modes.

    The result has mode sizes ``[tensor.mode_sizes[m] for m in new_to_old]``.
    The identity permutation returns ``tensor`` itself without copying.
    """
    permutation = _checked_permutation(new_to_old, tensor.mode_count)
    last = last_changed_mode(permutation)
    if last < 0:
        return tensor

    old_sizes = tuple(tensor.mode_sizes)
    layout = _Layout(
        old_sizes=old_sizes,
        new_sizes=tuple(old_sizes[m] for m in permutation),
        old_to_new=inverse_permutation(permutation),
        last_changed_mode=last,
        run_length=element_count(old_sizes[last + 1:]),
    )
    logger.debug(
        f"Reordering modes {list(old_sizes)} -> {list(layout.new_sizes)}: "
        f"{element_count(old_sizes[:last + 1])} runs of {layout.run_length} elements"
    )

    buffer = np.empty(tensor.element_count, dtype=tensor.dtype)
    old_index = [0] * len(old_sizes)
    new_index = [0] * len(old_sizes)
    _copy_runs(tensor.values, buffer, layout, 0, old_index, new_index)

    result = tensor._spawn(layout.new_sizes, buffer, tensor.mode_array)
    result.new_mode_order(permutation)
    return result


def _copy_runs(source, destination, layout: _Layout, old_mode, old_index, new_index):
    new_mode = layout.old_to_new[old_mode]
    for i in range(layout.old_sizes[old_mode]):
        old_index[old_mode] = i
        new_index[new_mode] = i
        if old_mode < layout.last_changed_mode:
            _copy_runs(source, destination, layout, old_mode + 1, old_index, new_index)
        else:
            _copy_block(
                source,
                destination,
                flat_offset(layout.old_sizes, old_index),
                flat_offset(layout.new_sizes, new_index),
                layout.run_length,
            )


def _copy_block(source, destination, source_offset, destination_offset, length):
    destination[destination_offset:destination_offset + length] = source[
        source_offset:source_offset + length
    ]


def _checked_permutation(new_to_old: Sequence[int], mode_count: int) -> list[int]:
    permutation = [operator.index(m) for m in new_to_old]
    if sorted(permutation) != list(range(mode_count)):
        raise InvalidPermutationError(
            f"{permutation} is not a permutation of the {mode_count} modes"
        )
    return permutation
