import os
import tomllib
from dataclasses import dataclass, field


def _generate_output_path(input_path: str, mode: int, output_dir: str = "output") -> str:
    """
    Generate a descriptive output path for an unfolded matrix.

    Parameters
    ----------
    input_path : str
        Path of the text file the tensor is loaded from.
    mode : int
        Mode along which the tensor is unfolded.
    output_dir : str
        Directory for output files.

    Returns
    -------
    str
        Generated path like "output/faces_mode-0.csv"
    """
    stem = os.path.splitext(os.path.basename(input_path))[0]
    return os.path.join(output_dir, f"{stem}_mode-{mode}.csv")


def _read_toml(config_path: str) -> dict:
    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found at {config_path}")

    with open(config_path, "rb") as f:
        return tomllib.load(f)


@dataclass
class UnfoldConfiguration:
    """Configuration for loading a tensor and unfolding it along one mode."""

    input: str
    mode_sizes: list[int]
    mode: int = 0
    allow_transpose: bool = True
    normalize_over: list[int] | None = None
    delimiter: str | None = None
    dtype: str = "float64"
    output: str | None = None  # Note: After __post_init__, this is always a str
    output_dir: str = "output"

    def __post_init__(self):
        """Generate output path if not provided.

        After this method executes, self.output is guaranteed to be a str.
        """
        if self.output is None:
            self.output = _generate_output_path(
                input_path=self.input,
                mode=self.mode,
                output_dir=self.output_dir,
            )

    @classmethod
    def load(cls, config_path: str) -> "UnfoldConfiguration":
        """
        Load unfold configuration from a TOML file.

        Parameters
        ----------
        config_path : str
            Filesystem path to a TOML file containing an "unfold" table.

        Returns
        -------
        UnfoldConfiguration
            Instance populated from the "unfold" table.

        Raises
        ------
        FileNotFoundError
            If no file exists at `config_path`.
        """
        data = _read_toml(config_path)
        return cls(**data.get("unfold", {}))


@dataclass
class BatchUnfoldConfiguration:
    """Configuration for unfolding several tensors in one run."""

    jobs: list[UnfoldConfiguration] = field(default_factory=list)

    @classmethod
    def load(cls, config_path: str) -> "BatchUnfoldConfiguration":
        """
        Load batch unfold configuration from a TOML file.

        The file should contain a [batch] section with [[batch.jobs]] entries.
        Global defaults can be set in [batch.defaults].

        Parameters
        ----------
        config_path : str
            Filesystem path to a TOML file.

        Returns
        -------
        BatchUnfoldConfiguration
            Instance with list of UnfoldConfiguration objects.

        Raises
        ------
        FileNotFoundError
            If no file exists at `config_path`.
        """
        data = _read_toml(config_path)

        batch_data = data.get("batch", {})
        defaults = batch_data.get("defaults", {})
        jobs = []
        for job_data in batch_data.get("jobs", []):
            # Merge defaults with specific job config
            jobs.append(UnfoldConfiguration(**{**defaults, **job_data}))

        return cls(jobs=jobs)


@dataclass
class LoggingConfiguration:
    level: str = "INFO"

    @classmethod
    def load(cls, config_path: str) -> "LoggingConfiguration":
        """
        Load logging configuration from a TOML file.

        Parameters:
            config_path (str): Filesystem path to a TOML file, optionally containing a "logging" table.

        Returns:
            LoggingConfiguration: Instance populated from the "logging" table; fields not present use their dataclass defaults.

        Raises:
            FileNotFoundError: If no file exists at `config_path`.
        """
        data = _read_toml(config_path)
        return cls(**data.get("logging", {}))
