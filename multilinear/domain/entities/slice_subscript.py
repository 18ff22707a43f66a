"""Slice subscripts - which coordinates of one mode a slice selects."""
import operator
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Union

import numpy as np

from multilinear.domain.errors import (
    EmptyTensorError,
    IndexOutOfRangeError,
    ShapeMismatchError,
)


@dataclass(frozen=True)
class Range:
    """All coordinates in ``[lo, hi)``, in ascending order."""

    lo: int
    hi: int

    def __post_init__(self):
        object.__setattr__(self, "lo", operator.index(self.lo))
        object.__setattr__(self, "hi", operator.index(self.hi))

    @property
    def size(self) -> int:
        return max(self.hi - self.lo, 0)

    @property
    def coordinates(self) -> range:
        return range(self.lo, self.hi)


@dataclass(frozen=True)
class DiscreteList:
    """An explicit, order-significant list of coordinates."""

    indices: tuple[int, ...]

    def __post_init__(self):
        object.__setattr__(
            self, "indices", tuple(operator.index(i) for i in self.indices)
        )

    @property
    def size(self) -> int:
        return len(self.indices)

    @property
    def coordinates(self) -> tuple[int, ...]:
        return self.indices


class All:
    """The full range of a mode. Use the ``ALL`` instance."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALL"


ALL = All()

SliceSubscript = Union[Range, DiscreteList, All]


def resolve_subscript(subscript: SliceSubscript, mode_size: int) -> Range | DiscreteList:
    """
    Resolve ``ALL`` against a mode and check the selection bounds.

    Parameters
    ----------
    subscript : SliceSubscript
        Selection for one mode.
    mode_size : int
        Extent of that mode.

    Returns
    -------
    Range | DiscreteList
        A concrete selection lying inside ``[0, mode_size)``.

    Raises
    ------
    IndexOutOfRangeError
        If any selected coordinate is outside the mode.
    EmptyTensorError
        If the selection is empty.
    """
    if isinstance(subscript, All):
        return Range(0, mode_size)

    if isinstance(subscript, Range):
        if subscript.lo < 0 or subscript.hi > mode_size:
            raise IndexOutOfRangeError(
                f"range {subscript.lo}..<{subscript.hi} exceeds mode of size {mode_size}"
            )
        if subscript.hi <= subscript.lo:
            raise EmptyTensorError(
                f"range {subscript.lo}..<{subscript.hi} selects no coordinates"
            )
        return subscript

    if isinstance(subscript, DiscreteList):
        if not subscript.indices:
            raise EmptyTensorError("discrete list selects no coordinates")
        for i in subscript.indices:
            if not 0 <= i < mode_size:
                raise IndexOutOfRangeError(
                    f"index {i} out of range for mode of size {mode_size}"
                )
        return subscript

    raise TypeError(f"not a slice subscript: {subscript!r}")


def complete_subscripts(
    subscripts: Sequence[SliceSubscript], mode_sizes: Sequence[int]
) -> list[Range | DiscreteList]:
    """
    Pad missing trailing modes with ``ALL`` and resolve every entry.

    Raises
    ------
    ShapeMismatchError
        If more subscripts than modes are given.
    """
    if len(subscripts) > len(mode_sizes):
        raise ShapeMismatchError(
            f"{len(subscripts)} subscripts given for {len(mode_sizes)} modes"
        )
    padded = list(subscripts) + [ALL] * (len(mode_sizes) - len(subscripts))
    return [resolve_subscript(s, size) for s, size in zip(padded, mode_sizes)]


def as_subscript(item, mode_size: int) -> SliceSubscript:
    """
    Convert a Python indexing item into a slice subscript.

    ints pin a single coordinate, ``:`` and ``...`` select the whole mode,
    ``start:stop`` becomes a ``Range`` and a stepped slice, a sequence of
    ints or a 1-D integer array becomes a ``DiscreteList``. Negative
    coordinates are not wrapped.
    """
    if isinstance(item, (Range, DiscreteList, All)):
        return item
    if item is Ellipsis:
        return ALL
    if isinstance(item, slice):
        return _from_slice(item, mode_size)
    if isinstance(item, (list, tuple, range)):
        return DiscreteList(tuple(item))
    if isinstance(item, np.ndarray):
        if item.ndim != 1 or not np.issubdtype(item.dtype, np.integer):
            raise TypeError(f"expected a 1-D integer array, got {item.ndim}-D {item.dtype}")
        return DiscreteList(tuple(item.tolist()))
    i = operator.index(item)
    return Range(i, i + 1)


def _from_slice(item: slice, mode_size: int) -> SliceSubscript:
    step = 1 if item.step is None else operator.index(item.step)
    if step == 0:
        raise ValueError("slice step cannot be zero")
    for bound in (item.start, item.stop):
        if bound is not None and operator.index(bound) < 0:
            raise IndexOutOfRangeError(f"negative slice bound {bound} is not supported")

    if step > 0:
        start = 0 if item.start is None else operator.index(item.start)
        stop = mode_size if item.stop is None else operator.index(item.stop)
        if step == 1:
            if start == 0 and stop == mode_size:
                return ALL
            return Range(start, stop)
        return DiscreteList(tuple(range(start, stop, step)))

    start = mode_size - 1 if item.start is None else operator.index(item.start)
    stop = -1 if item.stop is None else operator.index(item.stop)
    return DiscreteList(tuple(range(start, stop, step)))
