from abc import ABC, abstractmethod
from collections.abc import Sequence

from multilinear.domain.entities.tensor import Tensor


class TensorLoader(ABC):
    """Abstract interface for loading tensors from an external source."""

    @abstractmethod
    def load(self, source: str, mode_sizes: Sequence[int]) -> Tensor:
        """
        Load the values found at `source` into a tensor of the given shape.

        Parameters:
            source (str): Identifier of the data to load, e.g. a file path.
            mode_sizes (Sequence[int]): Shape of the tensor; the values are read in row-major order.

        Returns:
            Tensor: Tensor holding the loaded values.
        """
        pass
