"""Azure Pipelines logging commands (`##vso[...]`)."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import IO, Mapping, Optional

from qodana_ci.bootstrap.paths import prepend_to_process_path
from qodana_ci.providers.base import HostCommands


def escape_property(value: str) -> str:
    return (
        value.replace("%", "%AZP25")
        .replace(";", "%3B")
        .replace("\r", "%0D")
        .replace("\n", "%0A")
        .replace("]", "%5D")
    )


def escape_data(value: str) -> str:
    return value.replace("%", "%AZP25").replace("\r", "%0D").replace("\n", "%0A")


def format_command(command: str, data: str, properties: Optional[Mapping[str, str]] = None) -> str:
    """Format a logging command, e.g. `##vso[task.prependpath]/opt/qodana`."""
    props = ""
    if properties:
        props = " " + "".join(f"{k}={escape_property(v)};" for k, v in properties.items())
    return f"##vso[{command}{props}]{escape_data(data)}"


class AzureLogHandler(logging.Handler):
    """Renders WARNING and ERROR records as task issues."""

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        super().__init__()
        self._stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            if record.levelno >= logging.ERROR:
                line = format_command("task.issue", message, {"type": "error"})
            elif record.levelno >= logging.WARNING:
                line = format_command("task.issue", message, {"type": "warning"})
            elif record.levelno <= logging.DEBUG:
                line = f"##[debug]{message}"
            else:
                line = message
            stream = self._stream if self._stream is not None else sys.stdout
            stream.write(line + "\n")
            stream.flush()
        except Exception:
            self.handleError(record)


class AzureCommands(HostCommands):
    """Host commands for Azure Pipelines.

    Args:
        stream: Output stream for logging commands (default: sys.stdout).
    """

    def __init__(self, stream: Optional[IO[str]] = None) -> None:
        self._stream = stream
        self.failed_message: Optional[str] = None

    def write(self, line: str) -> None:
        stream = self._stream if self._stream is not None else sys.stdout
        stream.write(line + "\n")
        stream.flush()

    def add_path(self, directory: Path) -> None:
        self.write(format_command("task.prependpath", str(directory)))
        prepend_to_process_path(directory)

    def set_failed(self, message: str) -> None:
        self.failed_message = message
        self.write(format_command("task.complete", message, {"result": "Failed"}))

    def upload_artifact(self, container_folder: str, path: Path, artifact_name: str) -> None:
        self.write(
            format_command(
                "artifact.upload",
                str(path),
                {"containerfolder": container_folder, "artifactname": artifact_name},
            )
        )

    def log_handler(self) -> logging.Handler:
        return AzureLogHandler(self._stream)
