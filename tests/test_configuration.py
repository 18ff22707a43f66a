"""Tests for configuration module."""
import pytest

from multilinear.infrastructure.configuration import (
    BatchUnfoldConfiguration,
    LoggingConfiguration,
    UnfoldConfiguration,
    _generate_output_path,
)


class TestGenerateOutputPath:
    """Tests for _generate_output_path function."""

    def test_uses_file_stem_and_mode(self):
        result = _generate_output_path("data/faces.txt", mode=2, output_dir="output")
        assert result == "output/faces_mode-2.csv"

    def test_custom_output_dir(self):
        result = _generate_output_path("faces.txt", mode=0, output_dir="custom/path")
        assert result == "custom/path/faces_mode-0.csv"


class TestUnfoldConfiguration:
    """Tests for UnfoldConfiguration class."""

    def test_defaults(self):
        config = UnfoldConfiguration(input="data/x.txt", mode_sizes=[2, 3])
        assert config.mode == 0
        assert config.allow_transpose is True
        assert config.normalize_over is None
        assert config.dtype == "float64"
        assert config.output == "output/x_mode-0.csv"

    def test_post_init_preserves_explicit_output(self):
        config = UnfoldConfiguration(input="x.txt", mode_sizes=[2], output="m.csv")
        assert config.output == "m.csv"

    def test_load_from_toml(self, tmp_path):
        """Test loading configuration from TOML file."""
        config_file = tmp_path / "test_config.toml"
        config_file.write_text("""
[unfold]
input = "data/faces.txt"
mode_sizes = [100, 32, 32]
mode = 1
allow_transpose = false
normalize_over = [0]
delimiter = ","
""")

        config = UnfoldConfiguration.load(str(config_file))
        assert config.input == "data/faces.txt"
        assert config.mode_sizes == [100, 32, 32]
        assert config.mode == 1
        assert config.allow_transpose is False
        assert config.normalize_over == [0]
        assert config.delimiter == ","
        assert config.output == "output/faces_mode-1.csv"

    def test_load_missing_file(self):
        """Test that loading from missing file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            UnfoldConfiguration.load("/nonexistent/path/config.toml")


class TestBatchUnfoldConfiguration:
    """Tests for BatchUnfoldConfiguration class."""

    def test_defaults_are_merged(self, tmp_path):
        config_file = tmp_path / "batch.toml"
        config_file.write_text("""
[batch.defaults]
mode_sizes = [2, 3, 4]
output_dir = "matrices"

[[batch.jobs]]
input = "a.txt"
mode = 0

[[batch.jobs]]
input = "b.txt"
mode = 2
mode_sizes = [4, 3, 2]
""")

        config = BatchUnfoldConfiguration.load(str(config_file))
        assert len(config.jobs) == 2
        assert config.jobs[0].mode_sizes == [2, 3, 4]
        assert config.jobs[0].output == "matrices/a_mode-0.csv"
        assert config.jobs[1].mode_sizes == [4, 3, 2]
        assert config.jobs[1].output == "matrices/b_mode-2.csv"

    def test_empty_batch(self, tmp_path):
        config_file = tmp_path / "batch.toml"
        config_file.write_text("[logging]\nlevel = \"DEBUG\"\n")
        assert BatchUnfoldConfiguration.load(str(config_file)).jobs == []


class TestLoggingConfiguration:
    """Tests for LoggingConfiguration class."""

    def test_default_level(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("")
        assert LoggingConfiguration.load(str(config_file)).level == "INFO"

    def test_level_from_toml(self, tmp_path):
        config_file = tmp_path / "config.toml"
        config_file.write_text("[logging]\nlevel = \"DEBUG\"\n")
        assert LoggingConfiguration.load(str(config_file)).level == "DEBUG"
