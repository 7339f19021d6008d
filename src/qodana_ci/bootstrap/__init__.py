"""Bootstrap module for the Qodana CLI binary.

This module handles:
- Platform detection (OS + architecture)
- Pinned version and checksum lookup
- Download, checksum verification and extraction of the CLI archive
- The versioned tool cache shared with the CI runner
"""

from qodana_ci.bootstrap.platform import get_platform_info, PlatformInfo
from qodana_ci.bootstrap.paths import ToolCachePaths
from qodana_ci.bootstrap.install import ToolInstaller, get_qodana_url

__all__ = [
    "get_platform_info",
    "PlatformInfo",
    "ToolCachePaths",
    "ToolInstaller",
    "get_qodana_url",
]
