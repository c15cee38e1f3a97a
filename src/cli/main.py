"""Elastic import CLI entry points.
This module exposes the import and run-spec commands.
It maps argparse commands onto SDK calls and exit codes.
"""

from __future__ import annotations

import argparse
from typing import Sequence

from cli.import_command import add_import_command, run_import_command
from cli.run_spec_command import add_run_spec_command, run_run_spec_command
from core.config import ImportConfig
from core.constants import DEFAULT_LOG_LEVEL, SUPPORTED_LOG_LEVELS
from core.errors import ImportToolError
from core.logging_config import configure_logging, get_logger
from store.import_sdk import ImportClient

_LOGGER = get_logger(__name__)


def build_parser(config: ImportConfig) -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Args:
        config: Process defaults used for option defaults.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="elastic-import",
        description="Imports a file from different types into Elasticsearch",
    )
    parser.add_argument(
        "-l",
        "--log",
        default=config.log_level,
        help=f"Log level: {', '.join(SUPPORTED_LOG_LEVELS)}. Default is {DEFAULT_LOG_LEVEL}",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    add_import_command(subparsers, config)
    add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the elastic-import CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    try:
        config = ImportConfig.from_env()
    except ImportToolError as error:
        _log_failure(error)
        return 1
    parser = build_parser(config)
    args = parser.parse_args(argv)
    configure_logging(args.log)
    client = ImportClient(config)
    try:
        if args.command == "import":
            return run_import_command(client, args)
        if args.command == "run-spec":
            return run_run_spec_command(client, args)
    except ImportToolError as error:
        _log_failure(error)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _log_failure(error: ImportToolError) -> None:
    """Log a fatal run error before exiting non-zero."""
    _LOGGER.error("import_failed", error_type=type(error).__name__, error=str(error))
