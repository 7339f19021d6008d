"""Subprocess runner for the Qodana CLI.

Streams the tool's output into the CI log as it is produced and reports the
exit code back to the caller. A nonzero exit code is never turned into an
exception: the caller decides how to react to it.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import IO, Mapping, Optional, Sequence, Union, cast

from qodana_ci.core.errors import ToolExecutionError
from qodana_ci.core.logging import get_logger

LOGGER = get_logger(__name__)


def run_tool(
    cmd: Sequence[str],
    tool_name: str,
    env: Optional[Mapping[str, str]] = None,
    cwd: Optional[Union[str, Path]] = None,
    output: Optional[IO[str]] = None,
) -> int:
    """Run a command, echoing its combined output line by line.

    Args:
        cmd: Command and arguments to run.
        tool_name: Name of the tool (used in log messages).
        env: Full environment for the process. Inherits ours if None.
        cwd: Working directory for the command.
        output: Stream the output is echoed to (default: sys.stdout).

    Returns:
        The process exit code.

    Raises:
        ToolExecutionError: If the process cannot be started.
    """
    sink = output if output is not None else sys.stdout
    LOGGER.debug(f"Running {tool_name}: {' '.join(cmd)}")

    try:
        with subprocess.Popen(
            list(cmd),
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            encoding="utf-8",
            errors="replace",
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
        ) as proc:
            # stdout is always set with stdout=PIPE
            for line in cast(IO[str], proc.stdout):
                sink.write(line)
            sink.flush()
            returncode = proc.wait()
    except OSError as e:
        raise ToolExecutionError(f"Failed to run {tool_name}: {e}") from e

    LOGGER.debug(f"{tool_name} exited with code {returncode}")
    return returncode
