"""
Normalization by broadcast.

Computes the mean and standard deviation of a tensor across a set of modes
(for example across the sample mode of a data set) and scales every slice
to zero mean and unit deviation.
"""
import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np

from multilinear.domain.entities.coordinates import element_count
from multilinear.domain.entities.slice_subscript import Range
from multilinear.domain.entities.tensor import Tensor
from multilinear.domain.errors import IndexOutOfRangeError, ShapeMismatchError
from multilinear.domain.use_cases.elementwise import divide, subtract

logger = logging.getLogger(__name__)


@dataclass
class Normalization:
    """Result of ``normalize``."""

    normalized: Tensor
    mean: Tensor
    standard_deviation: Tensor


def normalize(tensor: Tensor, over_modes: Sequence[int]) -> Normalization:
    """
    Normalize ``tensor`` across ``over_modes``.

    Parameters
    ----------
    tensor : Tensor
        Data to normalize.
    over_modes : Sequence[int]
        Modes whose coordinates are treated as samples.

    Returns
    -------
    Normalization
        ``normalized`` has the shape and mode order of ``tensor``. ``mean``
        and ``standard_deviation`` have the shape of one sample slice (the
        remaining modes of size greater than one). Slices with zero
        deviation are only centered.

    Raises
    ------
    ShapeMismatchError
        If ``over_modes`` is empty or repeats a mode.
    IndexOutOfRangeError
        If ``over_modes`` names a mode the tensor does not have.
    """
    over_modes = list(over_modes)
    if not over_modes or len(set(over_modes)) != len(over_modes):
        raise ShapeMismatchError(f"cannot normalize over modes {over_modes}")
    for mode in over_modes:
        if not 0 <= mode < tensor.mode_count:
            raise IndexOutOfRangeError(
                f"mode {mode} not available in tensor with {tensor.mode_count} modes"
            )

    sample_count = element_count([tensor.mode_sizes[m] for m in over_modes])
    logger.info(
        f"Normalizing tensor of mode sizes {list(tensor.mode_sizes)} "
        f"over modes {over_modes} ({sample_count} samples)"
    )

    total = _accumulate(tensor, over_modes, lambda values: values)
    mean_values = total / sample_count
    squared = _accumulate(tensor, over_modes, lambda values: (values - mean_values) ** 2)
    deviation_values = np.sqrt(squared / sample_count)

    slice_sizes = [
        size for m, size in enumerate(tensor.mode_sizes)
        if m not in over_modes and size > 1
    ]
    mean = Tensor(slice_sizes, mean_values)
    standard_deviation = Tensor(slice_sizes, deviation_values)
    divisor = Tensor(slice_sizes, np.where(deviation_values == 0, 1.0, deviation_values))

    centered = subtract(tensor, over_modes, mean, [])
    scaled = divide(centered, list(range(len(over_modes))), divisor, [])

    return Normalization(
        normalized=_restore_mode_order(scaled, tensor, over_modes),
        mean=mean,
        standard_deviation=standard_deviation,
    )


def _accumulate(tensor: Tensor, over_modes: list[int], transform) -> np.ndarray:
    total = None

    def add_sample(subscripts: list[Range]) -> None:
        nonlocal total
        values = transform(tensor.read_slice(subscripts).values.astype(np.float64))
        total = values if total is None else total + values

    tensor.perform(add_sample, over_modes)
    return total


def _restore_mode_order(scaled: Tensor, original: Tensor, over_modes: list[int]) -> Tensor:
    """Bring the sample modes back to their places and reinstate dropped modes of size one."""
    present_modes = over_modes + [
        m for m, size in enumerate(original.mode_sizes)
        if m not in over_modes and size > 1
    ]
    new_to_old = [present_modes.index(m) for m in sorted(present_modes)]
    reordered = scaled.reorder_modes(new_to_old)
    # modes of size one do not change the row-major layout
    return Tensor(original.mode_sizes, reordered.values)
