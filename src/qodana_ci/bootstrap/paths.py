"""Path management for the versioned tool cache.

Uses the layout shared by the GitHub and Azure runner tool caches, so a
Qodana CLI extracted once on a self-hosted runner is reused by later jobs:

    {root}/
        qodana/
            {version}/
                {arch}/            - extracted CLI archive
                {arch}.complete    - marker written after a full copy
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

# Environment variable to override the tool cache root
TOOL_CACHE_ENV = "QODANA_CI_TOOL_CACHE"

# Default directory name under user home
DEFAULT_HOME_DIR_NAME = ".qodana-ci"


def resolve_tool_cache_root(
    environ: Mapping[str, str], host_default: Optional[str] = None
) -> Path:
    """Resolve the tool cache root directory.

    Resolution order:
    1. QODANA_CI_TOOL_CACHE environment variable (if set)
    2. The runner's own tool cache (host_default)
    3. ~/.qodana-ci/tools

    Args:
        environ: Environment snapshot to read from.
        host_default: Tool cache directory provided by the CI host.

    Returns:
        Path to the tool cache root.
    """
    override = environ.get(TOOL_CACHE_ENV)
    if override:
        return Path(override)
    if host_default:
        return Path(host_default)
    return Path.home() / DEFAULT_HOME_DIR_NAME / "tools"


@dataclass(frozen=True)
class ToolCachePaths:
    """Resolves tool directories within the tool cache root."""

    root: Path

    def tool_dir(self, tool: str, version: str, arch: str) -> Path:
        return self.root / tool / version / arch

    def marker(self, tool: str, version: str, arch: str) -> Path:
        return self.root / tool / version / f"{arch}.complete"

    def find(self, tool: str, version: str, arch: str) -> Optional[Path]:
        """Return the cached tool directory if a complete copy exists.

        Args:
            tool: Tool name (e.g. "qodana").
            version: Exact tool version.
            arch: Architecture the tool was built for.

        Returns:
            Path to the cached directory, or None if not cached.
        """
        directory = self.tool_dir(tool, version, arch)
        if directory.is_dir() and self.marker(tool, version, arch).exists():
            return directory
        return None

    def mark_complete(self, tool: str, version: str, arch: str) -> None:
        marker = self.marker(tool, version, arch)
        marker.parent.mkdir(parents=True, exist_ok=True)
        marker.write_text("")


def prepend_to_process_path(directory: Path) -> None:
    """Make an installed tool resolvable by this process and its children."""
    current = os.environ.get("PATH", "")
    os.environ["PATH"] = f"{directory}{os.pathsep}{current}" if current else str(directory)
