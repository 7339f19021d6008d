"""Runs the Qodana CLI with non-interactive settings."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Optional, Sequence, Union

from qodana_ci.core.logging import get_logger
from qodana_ci.core.subprocess_runner import run_tool

LOGGER = get_logger(__name__)

# Environment overlay that disables every interactive prompt of the CLI
NONINTERACTIVE_ENV = {"NONINTERACTIVE": "1"}


class QodanaRunner:
    """Executes `qodana` subcommands and returns their exit codes.

    Args:
        executable: Path (or name on PATH) of the CLI.
        base_env: Environment the overlay is applied on top of.
        cwd: Working directory for the CLI (the checked out repository).
    """

    def __init__(
        self,
        executable: Union[str, Path],
        base_env: Mapping[str, str],
        cwd: Optional[Union[str, Path]] = None,
    ) -> None:
        self._executable = str(executable)
        self._env = {**base_env, **NONINTERACTIVE_ENV}
        self._cwd = cwd

    @property
    def env(self) -> Mapping[str, str]:
        return dict(self._env)

    def run(self, args: Sequence[str]) -> int:
        """Run the CLI with the given arguments. Never raises on nonzero exit."""
        return run_tool(
            [self._executable, *args],
            tool_name="qodana",
            env=self._env,
            cwd=self._cwd,
        )

    def pull(self, args: Sequence[str]) -> int:
        LOGGER.info("Pulling the Qodana linter...")
        return self.run(args)

    def scan(self, args: Sequence[str]) -> int:
        LOGGER.info("Running Qodana scan...")
        return self.run(args)
