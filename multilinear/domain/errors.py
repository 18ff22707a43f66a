"""Errors raised by the tensor engine.

All of them signal contract violations detected at the boundary of an
operation. They are deterministic: retrying the same call fails the same way.
"""


class MultilinearError(Exception):
    """Base class for every error raised by the engine."""


class ShapeMismatchError(MultilinearError, ValueError):
    """An index, subscript or value arity does not match the mode count,
    or an assigned slice does not have the shape of the selected region."""


class IndexOutOfRangeError(MultilinearError, IndexError):
    """A coordinate or subscript falls outside ``[0, mode_sizes[d])``."""


class InvalidPermutationError(MultilinearError, ValueError):
    """A mode permutation is not a bijection over ``0..mode_count``."""


class EmptyTensorError(MultilinearError, ValueError):
    """An operation that needs at least one element was given none."""
