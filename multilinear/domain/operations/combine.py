"""Outer-mode iteration over one or two tensors.

``combine`` is the substrate of every broadcasting elementwise operation:
it walks all coordinate combinations of a chosen set of "outer" modes and
hands the callback one subscript list per tensor, pinning the outer modes
and leaving every other mode at its full range.
"""
from __future__ import annotations

import itertools
from collections.abc import Callable, Iterator, Sequence
from typing import TYPE_CHECKING

from multilinear.domain.entities.slice_subscript import Range
from multilinear.domain.errors import IndexOutOfRangeError, ShapeMismatchError

if TYPE_CHECKING:
    from multilinear.domain.entities.tensor import Tensor


def combine(
    a: Tensor,
    outer_modes_a: Sequence[int],
    b: Tensor,
    outer_modes_b: Sequence[int],
    combine_function: Callable[[list[Range], list[Range]], None],
    index_update: Callable[[int, int, bool, int], None] | None = None,
) -> None:
    """
    Call ``combine_function`` once per combination of outer coordinates.

    The outer modes of ``a`` vary slowest, the last outer mode of ``b``
    fastest. With no outer modes at all, ``combine_function`` runs once with
    full-range subscripts for both tensors.

    Parameters
    ----------
    a, b : Tensor
        The tensors to combine.
    outer_modes_a, outer_modes_b : Sequence[int]
        Modes of ``a`` and ``b`` iterated coordinate by coordinate.
    combine_function : Callable[[list[Range], list[Range]], None]
        Receives the subscripts selecting the current slice of ``a`` and of ``b``.
    index_update : Callable[[int, int, bool, int], None] | None
        Called with ``(index_number, mode, mode_is_a, i)`` whenever an outer
        coordinate changes, before ``combine_function`` runs. ``index_number``
        counts the outer modes of ``a`` and ``b`` together.
    """
    _check_outer_modes(a, outer_modes_a)
    _check_outer_modes(b, outer_modes_b)

    outer = [(m, True) for m in outer_modes_a] + [(m, False) for m in outer_modes_b]
    extents = [(a if is_a else b).mode_sizes[m] for m, is_a in outer]
    subscripts_a = [Range(0, size) for size in a.mode_sizes]
    subscripts_b = [Range(0, size) for size in b.mode_sizes]

    for changed, index in _walk(extents):
        for index_number in range(changed, len(outer)):
            mode, is_a = outer[index_number]
            i = index[index_number]
            (subscripts_a if is_a else subscripts_b)[mode] = Range(i, i + 1)
            if index_update is not None:
                index_update(index_number, mode, is_a, i)
        combine_function(list(subscripts_a), list(subscripts_b))


def perform(
    tensor: Tensor,
    action: Callable[[list[Range]], None],
    for_modes: Sequence[int],
    index_update: Callable[[int, int, int], None] | None = None,
) -> None:
    """
    Call ``action`` for every coordinate combination of ``for_modes``.

    ``index_update`` receives ``(index_number, mode, i)`` whenever the
    coordinate of ``for_modes[index_number]`` changes.
    """
    _check_outer_modes(tensor, for_modes)

    subscripts = [Range(0, size) for size in tensor.mode_sizes]
    extents = [tensor.mode_sizes[m] for m in for_modes]

    for changed, index in _walk(extents):
        for index_number in range(changed, len(for_modes)):
            mode = for_modes[index_number]
            i = index[index_number]
            subscripts[mode] = Range(i, i + 1)
            if index_update is not None:
                index_update(index_number, mode, i)
        action(list(subscripts))


def _walk(extents: Sequence[int]) -> Iterator[tuple[int, tuple[int, ...]]]:
    """
    Row-major walk over ``product(range(e) for e in extents)``.

    Also yields the position of the first coordinate that changed since the
    previous step; every coordinate after it restarted as well.
    """
    previous = None
    for index in itertools.product(*(range(extent) for extent in extents)):
        if previous is None:
            changed = 0
        else:
            changed = next(k for k, (i, j) in enumerate(zip(index, previous)) if i != j)
        yield changed, index
        previous = index


def _check_outer_modes(tensor: Tensor, modes: Sequence[int]) -> None:
    if len(set(modes)) != len(modes):
        raise ShapeMismatchError(f"outer modes {list(modes)} contain duplicates")
    for mode in modes:
        if not 0 <= mode < tensor.mode_count:
            raise IndexOutOfRangeError(
                f"mode {mode} not available in tensor with {tensor.mode_count} modes"
            )
