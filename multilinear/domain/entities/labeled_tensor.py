"""Tensor carrying one label per mode."""
from collections.abc import Hashable, Iterable, Sequence

import numpy as np

from multilinear.domain.entities.tensor import Tensor
from multilinear.domain.errors import ShapeMismatchError


class LabeledTensor(Tensor):
    """
    Tensor whose modes are named by hashable labels.

    Labels follow their modes: reordering permutes them and slicing keeps
    the labels of the modes that survive in the slice.
    """

    def __init__(
        self,
        mode_sizes: Iterable[int],
        values,
        mode_labels: Sequence[Hashable] | None = None,
        dtype=None,
    ):
        super().__init__(mode_sizes, values, dtype=dtype)
        if mode_labels is None:
            mode_labels = range(self.mode_count)
        self.mode_labels = _checked_labels(mode_labels, self.mode_count)

    def _spawn(self, mode_sizes, buffer: np.ndarray, source_modes) -> "LabeledTensor":
        result = LabeledTensor._wrap(mode_sizes, buffer)
        result.mode_labels = [self.mode_labels[m] for m in source_modes]
        return result

    def new_mode_order(self, new_to_old: Sequence[int]) -> None:
        self.mode_labels = [self.mode_labels[m] for m in new_to_old]

    def mode_with_label(self, label: Hashable) -> int:
        """Return the mode named ``label``."""
        try:
            return self.mode_labels.index(label)
        except ValueError:
            raise KeyError(f"no mode labelled {label!r} in {self.mode_labels}") from None

    def reorder_to_labels(self, labels: Sequence[Hashable]) -> "LabeledTensor":
        """Reorder the modes so that they carry ``labels`` in this order."""
        return self.reorder_modes([self.mode_with_label(label) for label in labels])

    def __eq__(self, other):
        result = super().__eq__(other)
        if result is NotImplemented or not isinstance(other, LabeledTensor):
            return result
        return result and self.mode_labels == other.mode_labels

    __hash__ = None

    def __repr__(self) -> str:
        return (
            f"LabeledTensor(mode_sizes={list(self.mode_sizes)}, "
            f"values={self.values.tolist()}, mode_labels={self.mode_labels})"
        )


def _checked_labels(labels: Iterable[Hashable], mode_count: int) -> list[Hashable]:
    labels = list(labels)
    if len(labels) != mode_count:
        raise ShapeMismatchError(f"{len(labels)} labels given for {mode_count} modes")
    if len(set(labels)) != len(labels):
        raise ShapeMismatchError(f"mode labels {labels} are not unique")
    return labels
