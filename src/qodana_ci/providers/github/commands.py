"""GitHub Actions workflow commands."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO, Mapping, Optional

from qodana_ci.bootstrap.paths import prepend_to_process_path
from qodana_ci.providers.base import HostCommands


def escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class GitHubLogHandler(logging.Handler):
    """Renders log records as workflow commands.

    WARNING and ERROR records become `::warning::` / `::error::` annotations,
    DEBUG records `::debug::`, everything else a plain line.
    """

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        super().__init__()
        self._stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            if record.levelno >= logging.ERROR:
                line = f"::error::{escape_data(message)}"
            elif record.levelno >= logging.WARNING:
                line = f"::warning::{escape_data(message)}"
            elif record.levelno <= logging.DEBUG:
                line = f"::debug::{escape_data(message)}"
            else:
                line = message
            stream = self._stream if self._stream is not None else sys.stdout
            stream.write(line + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


class GitHubCommands(HostCommands):
    """Host commands for GitHub Actions.

    Args:
        environ: Environment snapshot (GITHUB_PATH is read from it).
        stream: Output stream for workflow commands (default: sys.stdout).
    """

    def __init__(self, environ: Mapping[str, str], stream: Optional[IO[str]] = None) -> None:
        self._path_file = environ.get("GITHUB_PATH")
        self._stream = stream
        self.failed_message: Optional[str] = None

    def _write(self, line: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(line + "\n")
        stream.flush()

    def add_path(self, directory: Path) -> None:
        if self._path_file:
            with open(self._path_file, "a", encoding="utf-8") as f:
                f.write(f"{directory}\n")
        prepend_to_process_path(directory)

    def set_failed(self, message: str) -> None:
        self.failed_message = message
        self._write(f"::error::{escape_data(message)}")

    def log_handler(self) -> logging.Handler:
        return GitHubLogHandler(self._stream)
