"""
CLI entry point for unfolding a tensor stored in a text file.

Usage with config file (single tensor):
    python main.py -c configuration.toml

Usage with batch config file (several tensors):
    python main.py -c batch.toml --batch
"""
import argparse
import csv
import logging
import os

from multilinear.domain.interfaces.tensor_loader import TensorLoader
from multilinear.domain.operations.unfolding import Matricization
from multilinear.domain.use_cases.normalization import normalize
from multilinear.infrastructure.configuration import (
    BatchUnfoldConfiguration,
    LoggingConfiguration,
    UnfoldConfiguration,
)
from multilinear.infrastructure.loaders import TextFileTensorLoader
from multilinear.infrastructure.logging import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Load a tensor from a text file and write it unfolded along one mode as CSV."
    )
    parser.add_argument(
        "-c",
        "--config",
        dest="config",
        default="configuration.toml",
        help="Path to unfold configuration TOML file (default: configuration.toml)",
    )
    parser.add_argument(
        "--batch",
        action="store_true",
        help="Enable batch mode (config file must contain [batch] section)",
    )
    return parser.parse_args(argv)


def save_matrix_to_csv(matrix: Matricization, output_path: str) -> None:
    """
    Save an unfolded tensor to a CSV file, one matrix row per line.

    Parameters
    ----------
    matrix : Matricization
        Unfolded tensor.
    output_path : str
        Path to the output CSV file.
    """
    # Ensure output directory exists
    output_dir = os.path.dirname(output_path)
    if output_dir:
        os.makedirs(output_dir, exist_ok=True)

    rows = matrix.values.reshape(matrix.rows, matrix.columns)
    with open(output_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerows(rows.tolist())

    logger.info(f"Matrix saved to {output_path}")


def unfold_single(config: UnfoldConfiguration, loader: TensorLoader | None = None) -> Matricization:
    """
    Load, optionally normalize, unfold and save one tensor.

    Parameters
    ----------
    config : UnfoldConfiguration
        Configuration for this tensor.
    loader : TensorLoader | None
        Source of the tensor. Defaults to a TextFileTensorLoader built from `config`.

    Returns
    -------
    Matricization
        The matrix that was written.
    """
    if loader is None:
        loader = TextFileTensorLoader(delimiter=config.delimiter, dtype=config.dtype)

    tensor = loader.load(config.input, config.mode_sizes)
    if config.normalize_over:
        tensor = normalize(tensor, config.normalize_over).normalized

    matrix = tensor.matrix_with_mode(config.mode, allow_transpose=config.allow_transpose)
    orientation = "transposed" if matrix.transposed else "canonical"
    logger.info(
        f"Unfolded {config.input} along mode {config.mode}: "
        f"{matrix.rows}x{matrix.columns} ({orientation})"
    )

    save_matrix_to_csv(matrix, config.output)
    return matrix


def main(argv=None):
    """
    Main entry point.

    Parameters
    ----------
    argv : list[str] | None
        Command-line arguments. If None, uses sys.argv.
    """
    args = parse_args(argv)
    setup_logging(LoggingConfiguration.load(args.config).level)

    if not args.batch:
        unfold_single(UnfoldConfiguration.load(args.config))
        return

    batch_config = BatchUnfoldConfiguration.load(args.config)
    total = len(batch_config.jobs)
    if total == 0:
        raise ValueError(f"Empty batch configuration in {args.config}")
    logger.info(f"Starting batch unfolding with {total} configurations")

    for i, config in enumerate(batch_config.jobs, start=1):
        logger.info(f"[{i}/{total}] Unfolding {config.input} -> {config.output}")
        try:
            unfold_single(config)
        except Exception as error:
            logger.error(f"Failed to unfold {config.input}: {error}")
            raise error

    logger.info(f"Batch unfolding completed: {total} tensors written")


if __name__ == "__main__":
    main()
