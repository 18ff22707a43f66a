"""Tensor entity - homogeneous elements in one flat row-major buffer."""
import operator
from collections.abc import Callable, Iterable, Sequence

import numpy as np

from multilinear.domain.entities import coordinates
from multilinear.domain.entities.slice_subscript import (
    SliceSubscript,
    as_subscript,
    complete_subscripts,
)
from multilinear.domain.errors import (
    EmptyTensorError,
    IndexOutOfRangeError,
    ShapeMismatchError,
)
from multilinear.domain.operations import combine, reordering, slicing, unfolding


class Tensor:
    """
    Multidimensional collection of elements of one type.

    The elements are stored in a flat numpy array but addressed with one
    integer coordinate per mode, the last mode varying fastest. The shape
    is fixed at construction; slicing and mode reordering return new
    tensors that own their own buffer.

    Indexing follows three forms:

    - ``t[k]`` reads the element at flat offset ``k``.
    - ``t[i, j, ...]`` with one int per mode reads a single element.
    - Anything containing a slice subscript (``Range``, ``DiscreteList``,
      ``ALL``, a Python slice, ``...`` or a list of ints) reads a slice.
      Modes selecting a single coordinate are dropped from the result and
      missing trailing modes select their full range.

    All three forms support assignment.
    """

    def __init__(self, mode_sizes: Iterable[int], values, dtype=None):
        """
        Parameters
        ----------
        mode_sizes : Iterable[int]
            Size of each mode.
        values : array-like
            Flat sequence of ``product(mode_sizes)`` elements in row-major order.
            The values are copied.
        dtype : numpy dtype, optional
            Element type. Inferred from ``values`` when omitted.

        Raises
        ------
        ShapeMismatchError
            If the number of values does not match the shape, or a mode size is negative.
        EmptyTensorError
            If a mode has size zero.
        """
        sizes = _checked_mode_sizes(mode_sizes)
        buffer = np.array(values, dtype=dtype)
        if buffer.ndim != 1:
            raise ShapeMismatchError(
                f"values must be a flat sequence, got an array with {buffer.ndim} dimensions"
            )
        expected = coordinates.element_count(sizes)
        if buffer.size != expected:
            raise ShapeMismatchError(
                f"{buffer.size} values given for mode sizes {list(sizes)} ({expected} elements)"
            )
        self._mode_sizes = sizes
        self._values = buffer

    @classmethod
    def filled(cls, mode_sizes: Iterable[int], fill_value, dtype=float) -> "Tensor":
        """Create a tensor with every element set to ``fill_value``."""
        sizes = _checked_mode_sizes(mode_sizes)
        return cls(sizes, np.full(coordinates.element_count(sizes), fill_value, dtype=dtype))

    @classmethod
    def from_array(cls, array) -> "Tensor":
        """Create a tensor from an n-dimensional array-like, keeping its shape."""
        array = np.asarray(array)
        return cls(array.shape, array.reshape(-1))

    @classmethod
    def _wrap(cls, mode_sizes: Sequence[int], buffer: np.ndarray) -> "Tensor":
        tensor = cls.__new__(cls)
        tensor._mode_sizes = tuple(mode_sizes)
        tensor._values = buffer
        return tensor

    def _spawn(self, mode_sizes: Sequence[int], buffer: np.ndarray, source_modes: Sequence[int]) -> "Tensor":
        """
        Build a result tensor around a freshly filled buffer.

        ``source_modes`` names, for each mode of the result, the mode of this
        tensor it was taken from. Subclasses carrying per-mode metadata
        override this to carry it over.
        """
        return Tensor._wrap(mode_sizes, buffer)

    def new_mode_order(self, new_to_old: Sequence[int]) -> None:
        """Called after a mode reordering produced this tensor. Nothing to do here."""

    @property
    def mode_sizes(self) -> tuple[int, ...]:
        return self._mode_sizes

    @property
    def values(self) -> np.ndarray:
        return self._values

    @property
    def dtype(self) -> np.dtype:
        return self._values.dtype

    @property
    def mode_count(self) -> int:
        return len(self._mode_sizes)

    @property
    def element_count(self) -> int:
        return coordinates.element_count(self._mode_sizes)

    @property
    def mode_array(self) -> list[int]:
        return list(range(self.mode_count))

    def flat_offset(self, index: Sequence[int]) -> int:
        return coordinates.flat_offset(self._mode_sizes, index)

    def multi_index(self, offset: int) -> list[int]:
        return coordinates.multi_index(self._mode_sizes, offset)

    def move_offset(self, offset: int, delta: int, mode: int) -> int:
        return coordinates.move_offset(self._mode_sizes, offset, delta, mode)

    def offsets(self, subscripts: Sequence[SliceSubscript]) -> list[int]:
        """Flat offsets of the selected elements, in row-major order."""
        return coordinates.enumerate_offsets(
            self._mode_sizes, complete_subscripts(subscripts, self._mode_sizes)
        )

    def get_flat(self, offset: int):
        return self._values[self._checked_offset(offset)]

    def set_flat(self, offset: int, value) -> None:
        self._values[self._checked_offset(offset)] = value

    def get(self, index: Sequence[int]):
        return self._values[self.flat_offset(index)]

    def set(self, index: Sequence[int], value) -> None:
        self._values[self.flat_offset(index)] = value

    def read_slice(self, subscripts: Sequence[SliceSubscript]) -> "Tensor":
        return slicing.read_slice(self, subscripts)

    def write_slice(self, subscripts: Sequence[SliceSubscript], value: "Tensor") -> None:
        slicing.write_slice(self, subscripts, value)

    def reorder_modes(self, new_to_old: Sequence[int]) -> "Tensor":
        return reordering.reorder_modes(self, new_to_old)

    def reorder_complexity(self, new_to_old: Sequence[int]) -> int:
        return reordering.reorder_complexity(self._mode_sizes, new_to_old)

    def contiguous_run_length(self, new_to_old: Sequence[int]) -> int:
        return reordering.contiguous_run_length(self._mode_sizes, new_to_old)

    def matrix_with_mode(self, mode: int, allow_transpose: bool = True) -> unfolding.Matricization:
        return unfolding.matrix_with_mode(self, mode, allow_transpose)

    def perform(
        self,
        action: Callable[[list[SliceSubscript]], None],
        for_modes: Sequence[int],
        index_update: Callable[[int, int, int], None] | None = None,
    ) -> None:
        combine.perform(self, action, for_modes, index_update)

    def copy(self) -> "Tensor":
        return self._spawn(self._mode_sizes, self._values.copy(), self.mode_array)

    def to_array(self) -> np.ndarray:
        """Return a numpy copy shaped like this tensor."""
        return self._values.reshape(self._mode_sizes).copy()

    def __getitem__(self, key):
        kind, target = self._parse_key(key)
        if kind == "flat":
            return self.get_flat(target)
        if kind == "element":
            return self.get(target)
        return self.read_slice(target)

    def __setitem__(self, key, value) -> None:
        kind, target = self._parse_key(key)
        if kind == "flat":
            self.set_flat(target, value)
        elif kind == "element":
            self.set(target, value)
        else:
            if not isinstance(value, Tensor):
                raise TypeError(
                    f"slice assignment needs a Tensor, got {type(value).__name__}"
                )
            self.write_slice(target, value)

    def _parse_key(self, key):
        if not isinstance(key, tuple):
            if _is_integer(key):
                return "flat", operator.index(key)
            key = (key,)
        if all(_is_integer(item) for item in key):
            return "element", [operator.index(item) for item in key]
        if len(key) > self.mode_count:
            raise ShapeMismatchError(
                f"{len(key)} subscripts given for {self.mode_count} modes"
            )
        return "slice", [
            as_subscript(item, size) for item, size in zip(key, self._mode_sizes)
        ]

    def _checked_offset(self, offset: int) -> int:
        offset = operator.index(offset)
        if not 0 <= offset < self._values.size:
            raise IndexOutOfRangeError(
                f"flat offset {offset} out of range for {self._values.size} elements"
            )
        return offset

    def __eq__(self, other):
        if not isinstance(other, Tensor):
            return NotImplemented
        return self._mode_sizes == other._mode_sizes and np.array_equal(
            self._values, other._values
        )

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(mode_sizes={list(self._mode_sizes)}, "
            f"values={self._values.tolist()})"
        )


def _is_integer(item) -> bool:
    return isinstance(item, (int, np.integer))


def _checked_mode_sizes(mode_sizes: Iterable[int]) -> tuple[int, ...]:
    sizes = tuple(operator.index(size) for size in mode_sizes)
    for mode, size in enumerate(sizes):
        if size < 0:
            raise ShapeMismatchError(f"mode {mode} has negative size {size}")
        if size == 0:
            raise EmptyTensorError(f"mode {mode} has size 0")
    return sizes
