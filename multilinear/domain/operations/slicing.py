"""Slice copy engine: structural copies between a tensor and one of its slices.

Reading and writing walk the same recursion. The source cursor follows the
selected coordinates of every mode while the slice cursor only advances in
modes that select more than one coordinate; those single-coordinate modes
are dropped from the slice shape on read and reinstated on write.
"""
from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING

import numpy as np

from multilinear.domain.entities.coordinates import element_count, flat_offset
from multilinear.domain.entities.slice_subscript import (
    DiscreteList,
    Range,
    SliceSubscript,
    complete_subscripts,
)
from multilinear.domain.errors import ShapeMismatchError

if TYPE_CHECKING:
    from multilinear.domain.entities.tensor import Tensor


def read_slice(tensor: Tensor, subscripts: Sequence[SliceSubscript]) -> Tensor:
    """
    Copy the selected elements of ``tensor`` into a new, smaller tensor.

    Parameters
    ----------
    tensor : Tensor
        Source tensor.
    subscripts : Sequence[SliceSubscript]
        One selection per mode; missing trailing modes select everything.

    Returns
    -------
    Tensor
        Independent tensor holding the selection. Its shape lists the
        selection sizes of the modes selecting more than one coordinate.
    """
    selections = complete_subscripts(subscripts, tensor.mode_sizes)
    kept_modes = [m for m, selection in enumerate(selections) if selection.size > 1]
    slice_sizes = [selections[m].size for m in kept_modes]

    buffer = np.empty(element_count(slice_sizes), dtype=tensor.dtype)
    for source_offsets, slice_offsets in _synchronized_offsets(
        tensor.mode_sizes, selections, slice_sizes
    ):
        buffer[slice_offsets] = tensor.values[source_offsets]

    return tensor._spawn(slice_sizes, buffer, kept_modes)


def write_slice(tensor: Tensor, subscripts: Sequence[SliceSubscript], value: Tensor) -> None:
    """
    Write ``value`` into the region of ``tensor`` selected by ``subscripts``.

    Raises
    ------
    ShapeMismatchError
        If ``value`` does not have the shape ``read_slice`` would return for
        the same subscripts.
    """
    selections = complete_subscripts(subscripts, tensor.mode_sizes)
    slice_sizes = [selection.size for selection in selections if selection.size > 1]
    if tuple(value.mode_sizes) != tuple(slice_sizes):
        raise ShapeMismatchError(
            f"cannot write a slice of mode sizes {list(value.mode_sizes)} "
            f"into a selection of mode sizes {slice_sizes}"
        )

    source = value.values
    if np.shares_memory(source, tensor.values):
        source = source.copy()

    for source_offsets, slice_offsets in _synchronized_offsets(
        tensor.mode_sizes, selections, slice_sizes
    ):
        tensor.values[source_offsets] = source[slice_offsets]


def _synchronized_offsets(
    mode_sizes: Sequence[int],
    selections: Sequence[Range | DiscreteList],
    slice_sizes: Sequence[int],
) -> Iterator[tuple[np.ndarray, np.ndarray]]:
    """Yield matching (tensor offsets, slice offsets) runs, one per innermost vector."""
    if not mode_sizes:
        yield np.zeros(1, dtype=np.intp), np.zeros(1, dtype=np.intp)
        return

    source_index = [0] * len(mode_sizes)
    slice_index = [0] * len(slice_sizes)
    yield from _recurse(mode_sizes, selections, slice_sizes, 0, 0, source_index, slice_index)


def _recurse(mode_sizes, selections, slice_sizes, mode, slice_mode, source_index, slice_index):
    selection = selections[mode].coordinates
    kept = len(selection) > 1

    if mode == len(mode_sizes) - 1:
        # last mode is contiguous in both buffers
        source_index[mode] = 0
        if kept:
            slice_index[slice_mode] = 0
        source_start = flat_offset(mode_sizes, source_index)
        slice_start = flat_offset(slice_sizes, slice_index)
        yield (
            source_start + np.asarray(selection, dtype=np.intp),
            slice_start + np.arange(len(selection), dtype=np.intp),
        )
        return

    for position, coordinate in enumerate(selection):
        source_index[mode] = coordinate
        if kept:
            slice_index[slice_mode] = position
        yield from _recurse(
            mode_sizes,
            selections,
            slice_sizes,
            mode + 1,
            slice_mode + 1 if kept else slice_mode,
            source_index,
            slice_index,
        )
