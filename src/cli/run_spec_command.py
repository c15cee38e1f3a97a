"""Run-spec CLI command wiring.

This module registers the run-spec subcommand and delegates execution to the
shared run-spec engine used by CLI and SDK entry points.
"""

from __future__ import annotations

import argparse
from typing import Any

from cli.import_command import print_import_summary
from store.import_sdk import ImportClient


def add_run_spec_command(subparsers: Any) -> None:
    """Register run-spec subcommand."""
    parser = subparsers.add_parser(
        "run-spec",
        help="Run declarative import jobs from a YAML file",
    )
    parser.add_argument("spec_file", help="Path to YAML run-spec file")


def run_run_spec_command(client: ImportClient, args: argparse.Namespace) -> int:
    """Execute run-spec jobs and print one summary row per job."""
    summaries = client.run_spec(args.spec_file)
    for summary in summaries:
        print_import_summary(summary)
    return 1 if any(summary.aborted for summary in summaries) else 0
