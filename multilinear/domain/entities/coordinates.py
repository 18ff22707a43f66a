"""Coordinate model: row-major translation between multi-indices and flat offsets.

The last mode varies fastest. All functions are pure and take the shape
(``mode_sizes``) explicitly.
"""
from collections.abc import Sequence

from multilinear.domain.entities.slice_subscript import DiscreteList, Range
from multilinear.domain.errors import IndexOutOfRangeError, ShapeMismatchError


def element_count(mode_sizes: Sequence[int]) -> int:
    """Product of the mode sizes (1 for a tensor without modes)."""
    count = 1
    for size in mode_sizes:
        count *= size
    return count


def flat_offset(mode_sizes: Sequence[int], index: Sequence[int]) -> int:
    """
    Convert a multi-index into a flat offset.

    Parameters
    ----------
    mode_sizes : Sequence[int]
        Shape of the tensor.
    index : Sequence[int]
        One coordinate per mode.

    Returns
    -------
    int
        Position of the element in the row-major buffer.

    Raises
    ------
    ShapeMismatchError
        If ``index`` does not have one coordinate per mode.
    IndexOutOfRangeError
        If a coordinate lies outside its mode.
    """
    if len(index) != len(mode_sizes):
        raise ShapeMismatchError(
            f"wrong number of modes in {list(index)}, {len(mode_sizes)} indices needed"
        )

    offset = 0
    for d, size in enumerate(mode_sizes):
        coordinate = index[d]
        if not 0 <= coordinate < size:
            raise IndexOutOfRangeError(
                f"coordinate {coordinate} out of range for mode {d} of size {size}"
            )
        offset = offset * size + coordinate
    return offset


def multi_index(mode_sizes: Sequence[int], offset: int) -> list[int]:
    """Convert a flat offset back into one coordinate per mode."""
    if not 0 <= offset < element_count(mode_sizes):
        raise IndexOutOfRangeError(
            f"flat offset {offset} out of range for {element_count(mode_sizes)} elements"
        )

    index = [0] * len(mode_sizes)
    for d in reversed(range(len(mode_sizes))):
        offset, index[d] = divmod(offset, mode_sizes[d])
    return index


def move_offset(mode_sizes: Sequence[int], offset: int, delta: int, mode: int) -> int:
    """Return ``offset`` shifted by ``delta`` steps along ``mode`` only."""
    if not 0 <= mode < len(mode_sizes):
        raise IndexOutOfRangeError(
            f"mode {mode} not available in tensor with {len(mode_sizes)} modes"
        )

    stride = 1
    for size in mode_sizes[mode + 1:]:
        stride *= size
    return offset + delta * stride


def enumerate_offsets(
    mode_sizes: Sequence[int], subscripts: Sequence[Range | DiscreteList]
) -> list[int]:
    """
    Flat offsets of every selected element, in row-major order.

    ``subscripts`` must already be resolved (one ``Range`` or
    ``DiscreteList`` per mode, see ``complete_subscripts``). The result is
    built mode by mode from the last one: every offset collected so far is
    shifted by each further selected coordinate of the current mode.
    """
    if len(subscripts) != len(mode_sizes):
        raise ShapeMismatchError(
            f"{len(subscripts)} subscripts given for {len(mode_sizes)} modes"
        )

    selections = [list(s.coordinates) for s in subscripts]
    offsets = [flat_offset(mode_sizes, [selection[0] for selection in selections])]

    for mode in reversed(range(len(mode_sizes))):
        selection = selections[mode]
        base = list(offsets)
        for coordinate in selection[1:]:
            delta = coordinate - selection[0]
            offsets.extend(move_offset(mode_sizes, o, delta, mode) for o in base)
    return offsets
