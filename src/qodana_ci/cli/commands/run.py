"""Run command: the full Qodana pipeline on a CI host."""

from __future__ import annotations

from argparse import Namespace
from pathlib import Path
from typing import List, Optional

from qodana_ci.bootstrap.install import ToolInstaller
from qodana_ci.bootstrap.paths import ToolCachePaths, resolve_tool_cache_root
from qodana_ci.bootstrap.platform import PlatformInfo, get_platform_info
from qodana_ci.cli.commands import Command
from qodana_ci.cli.exit_codes import (
    EXIT_ANALYSIS_FAILED,
    EXIT_INVALID_USAGE,
    EXIT_SUCCESS,
    EXIT_TOOL_ERROR,
)
from qodana_ci.core.errors import ConfigError, QodanaCIError
from qodana_ci.core.logging import get_logger
from qodana_ci.pipeline.executor import PipelineExecutor, PipelineResult, Stage
from qodana_ci.providers.base import Host

LOGGER = get_logger(__name__)


def explicit_scan_args(args: Namespace) -> List[str]:
    """Return arguments given after `--`, without the separator."""
    scan_args = list(getattr(args, "scan_args", None) or [])
    if scan_args and scan_args[0] == "--":
        scan_args = scan_args[1:]
    return scan_args


class RunCommand(Command):
    """Runs the pipeline on an already assembled host.

    Args:
        host: Providers of the CI host.
        platform_info: Host platform (detected if None).
    """

    def __init__(self, host: Host, platform_info: Optional[PlatformInfo] = None) -> None:
        self._host = host
        self._platform_info = platform_info

    @property
    def name(self) -> str:
        return self._host.name

    def build_installer(self, platform_info: PlatformInfo) -> ToolInstaller:
        context = self._host.context
        root = resolve_tool_cache_root(context.env, context.tool_cache)
        return ToolInstaller(
            platform_info=platform_info,
            cache_paths=ToolCachePaths(root),
            temp_dir=Path(context.temp_dir),
            add_path=self._host.commands.add_path,
        )

    def execute(self, args: Namespace) -> int:
        try:
            inputs = self._host.inputs.get_inputs()
        except ConfigError as e:
            self._host.commands.set_failed(str(e))
            return EXIT_INVALID_USAGE

        try:
            platform_info = self._platform_info or get_platform_info()
        except ValueError as e:
            self._host.commands.set_failed(str(e))
            return EXIT_TOOL_ERROR

        executor = PipelineExecutor(
            self._host,
            self.build_installer(platform_info),
            sequential=getattr(args, "sequential", False),
        )
        try:
            result = executor.execute(inputs, explicit_scan_args(args))
        except QodanaCIError as e:
            self._host.commands.set_failed(str(e))
            return EXIT_TOOL_ERROR
        return self.exit_code(result)

    @staticmethod
    def exit_code(result: PipelineResult) -> int:
        if result.success:
            return EXIT_SUCCESS
        if result.failed_stage in (Stage.SETUP, Stage.INSTALL):
            return EXIT_TOOL_ERROR
        return EXIT_ANALYSIS_FAILED
