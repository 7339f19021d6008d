"""Argument parser construction for the qodana-ci CLI.

Subcommands:
- qodana-ci github - Run Qodana as a GitHub Actions step
- qodana-ci azure  - Run Qodana as an Azure Pipelines task
- qodana-ci status - Show platform and CLI installation status
"""

from __future__ import annotations

import argparse
from pathlib import Path

from qodana_ci.providers import HOST_NAMES

_HOST_HELP = {
    "github": "Run Qodana as a GitHub Actions step.",
    "azure": "Run Qodana as an Azure Pipelines task.",
}


def _add_global_options(parser: argparse.ArgumentParser) -> None:
    """Add global options available to all commands."""
    parser.add_argument(
        "--version",
        action="store_true",
        help="Show qodana-ci version and exit.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging.",
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Reduce logging output to errors only.",
    )


def _build_host_parser(subparsers: argparse._SubParsersAction, host: str) -> None:
    """Build a subcommand parser running the pipeline on a CI host."""
    host_parser = subparsers.add_parser(
        host,
        help=_HOST_HELP[host],
        description=(
            "Install the Qodana CLI, pull the linter, run the scan and "
            "upload reports and caches using the host's inputs."
        ),
    )
    host_parser.add_argument(
        "--inputs-file",
        type=Path,
        help="YAML file with input values overriding the host's inputs.",
    )
    host_parser.add_argument(
        "--sequential",
        action="store_true",
        help="Run cache and report steps one after another.",
    )
    host_parser.add_argument(
        "scan_args",
        nargs=argparse.REMAINDER,
        help="Explicit `qodana` arguments (after --). Replace the derived scan arguments.",
    )


def _build_status_parser(subparsers: argparse._SubParsersAction) -> None:
    """Build the 'status' subcommand parser."""
    status_parser = subparsers.add_parser(
        "status",
        help="Show platform, pinned CLI version and tool cache status.",
    )
    status_parser.add_argument(
        "--tool-cache",
        type=Path,
        help="Tool cache directory to inspect.",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level argument parser."""
    parser = argparse.ArgumentParser(
        prog="qodana-ci",
        description="qodana-ci: Qodana CLI integration for CI hosts.",
    )
    _add_global_options(parser)

    subparsers = parser.add_subparsers(dest="command", title="commands")
    for host in HOST_NAMES:
        _build_host_parser(subparsers, host)
    _build_status_parser(subparsers)

    return parser
