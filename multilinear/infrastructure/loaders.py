"""Tensor loading from plain text files."""
import logging
import os
from collections.abc import Sequence

import numpy as np

from multilinear.domain.entities.tensor import Tensor
from multilinear.domain.interfaces.tensor_loader import TensorLoader

logger = logging.getLogger(__name__)


class TextFileTensorLoader(TensorLoader):
    """Concrete implementation reading numbers separated by whitespace or a delimiter."""

    def __init__(self, delimiter: str | None = None, dtype: str = "float64"):
        """
        Parameters:
            delimiter (str | None): Separator between values; None splits on any whitespace.
            dtype (str): numpy element type of the loaded tensor.
        """
        self.delimiter = delimiter
        self.dtype = dtype

    def load(self, source: str, mode_sizes: Sequence[int]) -> Tensor:
        """
        Read every value of the file at `source`, line by line, into a tensor.

        Parameters:
            source (str): Path to the text file.
            mode_sizes (Sequence[int]): Shape of the tensor.

        Returns:
            Tensor: Tensor holding the values in file order.

        Raises:
            FileNotFoundError: If no file exists at `source`.
            ShapeMismatchError: If the number of values does not match `mode_sizes`.
        """
        if not os.path.exists(source):
            raise FileNotFoundError(f"Tensor file not found at {source}")

        values = np.loadtxt(source, dtype=self.dtype, delimiter=self.delimiter, ndmin=1)
        logger.info(f"Loaded {values.size} values from {source}")
        return Tensor(mode_sizes, values.reshape(-1))
