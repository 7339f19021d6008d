"""Status command implementation."""

from __future__ import annotations

import os
from argparse import Namespace

from qodana_ci.bootstrap.install import EXECUTABLE, VERSION, get_checksums_url, get_qodana_url
from qodana_ci.bootstrap.paths import ToolCachePaths, resolve_tool_cache_root
from qodana_ci.bootstrap.platform import get_platform_info
from qodana_ci.bootstrap.versions import get_checksums
from qodana_ci.cli.commands import Command
from qodana_ci.cli.exit_codes import EXIT_SUCCESS, EXIT_TOOL_ERROR
from qodana_ci.core.errors import UnsupportedPlatformError


class StatusCommand(Command):
    """Shows platform and Qodana CLI installation status."""

    def __init__(self, version: str):
        """Initialize StatusCommand.

        Args:
            version: Current qodana-ci version string.
        """
        self._version = version

    @property
    def name(self) -> str:
        """Command identifier."""
        return "status"

    def execute(self, args: Namespace) -> int:
        """Print version, platform, download source and cache status."""
        print(f"qodana-ci version: {self._version}")
        try:
            platform_info = get_platform_info()
        except ValueError as e:
            print(f"Platform: {e}")
            return EXIT_TOOL_ERROR
        print(f"Platform: {platform_info.asset_name}")
        print(f"Qodana CLI: v{VERSION}")

        try:
            print(f"Download URL: {get_qodana_url(platform_info)}")
        except UnsupportedPlatformError as e:
            print(f"Unsupported: {e}")
            return EXIT_TOOL_ERROR

        pinned = get_checksums().get(platform_info.asset_name)
        if pinned:
            print(f"Expected SHA-256: {pinned} (pinned)")
        else:
            print(f"Expected SHA-256: from {get_checksums_url()}")

        root = getattr(args, "tool_cache", None) or resolve_tool_cache_root(os.environ)
        cached = ToolCachePaths(root).find(EXECUTABLE, VERSION, platform_info.arch)
        if cached is not None:
            print(f"Tool cache: installed at {cached}")
        else:
            print(f"Tool cache: not installed under {root}")
        return EXIT_SUCCESS
