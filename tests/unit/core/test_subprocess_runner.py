"""Tests for the streaming subprocess runner."""

from __future__ import annotations

import io
import sys

import pytest

from qodana_ci.core.errors import ToolExecutionError
from qodana_ci.core.subprocess_runner import run_tool


class TestRunTool:
    def test_echoes_output_and_returns_code(self) -> None:
        sink = io.StringIO()
        code = run_tool(
            [sys.executable, "-c", "import sys; print('hello'); sys.exit(3)"],
            tool_name="python",
            output=sink,
        )
        assert code == 3
        assert "hello" in sink.getvalue()

    def test_stderr_is_merged(self) -> None:
        sink = io.StringIO()
        run_tool(
            [sys.executable, "-c", "import sys; sys.stderr.write('oops\\n')"],
            tool_name="python",
            output=sink,
        )
        assert "oops" in sink.getvalue()

    def test_missing_executable_raises(self, tmp_path) -> None:
        with pytest.raises(ToolExecutionError, match="Failed to run missing"):
            run_tool([str(tmp_path / "does-not-exist")], tool_name="missing")
