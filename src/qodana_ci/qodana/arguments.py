"""Argument construction for `qodana pull` and `qodana scan`.

Everything here is pure: the same inputs always produce the same vectors.
"""

from __future__ import annotations

from typing import List, Optional, Sequence

from qodana_ci.core.models import Inputs

# Flags forwarded from the scan arguments to `qodana pull`
_PULL_FLAGS = (
    ("-l", "--linter"),
    ("-i", "--project-dir"),
    ("--config", "--config"),
)


def split_args(raw: str) -> List[str]:
    """Split the comma separated `args` input, dropping empty entries."""
    return [arg.strip() for arg in raw.split(",") if arg.strip()]


def extract_arg(short: str, long: str, args: Sequence[str]) -> str:
    """Return the value following the first occurrence of a flag.

    Args:
        short: Short form of the flag (e.g. "-l").
        long: Long form of the flag (e.g. "--linter").
        args: Argument vector to search.

    Returns:
        The flag's value, or "" if the flag is absent or has no value.
    """
    for i, arg in enumerate(args):
        if arg in (short, long):
            return args[i + 1] if i + 1 < len(args) else ""
    return ""


def get_pull_args(args: Sequence[str]) -> List[str]:
    """Build `qodana pull` arguments from the user's scan arguments."""
    pull_args = ["pull"]
    for short, long in _PULL_FLAGS:
        value = extract_arg(short, long, args)
        if value:
            pull_args.extend([short, value])
    return pull_args


def get_scan_args(args: Sequence[str], results_dir: str, cache_dir: str) -> List[str]:
    """Build `qodana scan` arguments.

    The results and cache directory flags always come first so user
    supplied arguments are appended in their original order.
    """
    return ["scan", "--cache-dir", cache_dir, "--results-dir", results_dir, *args]


def build_scan_args(
    inputs: Inputs,
    pr_base_sha: Optional[str] = None,
    explicit: Optional[Sequence[str]] = None,
) -> List[str]:
    """Build the full scan vector for a run.

    Args:
        inputs: Run configuration.
        pr_base_sha: Base commit of the pull request being analyzed, if any.
        explicit: Caller supplied arguments. When non-empty they are returned
            unchanged and nothing is derived from inputs.

    Returns:
        Argument vector for the CLI.
    """
    if explicit:
        return list(explicit)

    scan_args = get_scan_args(inputs.args, inputs.results_dir, inputs.cache_dir)
    if inputs.pr_mode and pr_base_sha:
        scan_args.extend(["--commit", f"CI{pr_base_sha}"])
    return scan_args
