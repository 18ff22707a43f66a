"""Tests for the text file tensor loader."""
import pytest

from multilinear.domain.entities.tensor import Tensor
from multilinear.domain.errors import ShapeMismatchError
from multilinear.domain.interfaces.tensor_loader import TensorLoader
from multilinear.infrastructure.loaders import TextFileTensorLoader


class TestTextFileTensorLoader:
    """Tests for TextFileTensorLoader."""

    def test_implements_interface(self):
        assert isinstance(TextFileTensorLoader(), TensorLoader)

    def test_load_whitespace_separated(self, tmp_path):
        """Values are read line by line in row-major order."""
        path = tmp_path / "values.txt"
        path.write_text("1 2 3\n4 5 6\n")

        tensor = TextFileTensorLoader().load(str(path), [2, 3])
        assert tensor == Tensor([2, 3], [1, 2, 3, 4, 5, 6])
        assert tensor.dtype == "float64"

    def test_load_single_column(self, tmp_path):
        path = tmp_path / "values.txt"
        path.write_text("1\n2\n3\n4\n")

        tensor = TextFileTensorLoader().load(str(path), [2, 1, 2])
        assert tensor.mode_sizes == (2, 1, 2)
        assert tensor[1, 0, 1] == 4

    def test_load_with_delimiter_and_dtype(self, tmp_path):
        path = tmp_path / "values.csv"
        path.write_text("1,2\n3,4\n")

        tensor = TextFileTensorLoader(delimiter=",", dtype="int64").load(str(path), [4])
        assert tensor.values.tolist() == [1, 2, 3, 4]
        assert tensor.dtype == "int64"

    def test_value_count_must_match(self, tmp_path):
        path = tmp_path / "values.txt"
        path.write_text("1 2 3\n")

        with pytest.raises(ShapeMismatchError):
            TextFileTensorLoader().load(str(path), [2, 2])

    def test_missing_file(self):
        with pytest.raises(FileNotFoundError):
            TextFileTensorLoader().load("/nonexistent/values.txt", [2])
