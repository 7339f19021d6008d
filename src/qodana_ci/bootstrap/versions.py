"""Centralized Qodana CLI version and checksum pins.

Reads the pinned CLI version and per-platform SHA-256 checksums from
pyproject.toml [tool.qodana_ci.tools] and [tool.qodana_ci.checksums].
Installed packages fall back to the hard-coded version below. Checksums
have no fallback: without a pin the release's checksums.txt is used.
"""

from __future__ import annotations

import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Optional

# Import tomllib (Python 3.11+) or tomli (Python 3.10)
try:
    if sys.version_info >= (3, 11):
        import tomllib

        _tomllib: Any = tomllib
    else:
        import tomli

        _tomllib = tomli
except ImportError:
    _tomllib = None  # Will use fallback pins


# Hardcoded fallback pins (kept in sync with pyproject.toml)
_FALLBACK_VERSIONS: Dict[str, str] = {
    "qodana": "2024.3.4",
}


@lru_cache(maxsize=1)
def _load_pyproject() -> Dict[str, Any]:
    """Load the [tool.qodana_ci] table from the project's pyproject.toml.

    Returns:
        The table contents, or an empty dict when unavailable.
    """
    if _tomllib is None:
        return {}

    # Structure: src/qodana_ci/bootstrap/versions.py -> ../../../pyproject.toml
    pyproject_path = Path(__file__).parent.parent.parent.parent / "pyproject.toml"

    if not pyproject_path.exists():
        # Installed package - pyproject.toml not available
        return {}

    try:
        with open(pyproject_path, "rb") as f:
            data = _tomllib.load(f)
    except (OSError, ValueError):
        return {}

    return data.get("tool", {}).get("qodana_ci", {})


def get_tool_version(tool_name: str = "qodana", default: Optional[str] = None) -> str:
    """Get the pinned version for a tool.

    Args:
        tool_name: Name of the tool.
        default: Optional default version if tool not found.

    Returns:
        Version string for the tool.

    Raises:
        KeyError: If tool not found and no default provided.
    """
    versions = dict(_FALLBACK_VERSIONS)
    versions.update(_load_pyproject().get("tools", {}))

    if tool_name in versions:
        return versions[tool_name]

    if default is not None:
        return default

    raise KeyError(f"Unknown tool: {tool_name}. Available: {list(versions.keys())}")


def get_checksums() -> Dict[str, str]:
    """Get the checksums pinned in [tool.qodana_ci.checksums], keyed by "{os}_{arch}".

    Platforms without a pin are verified against the release's published
    checksums file.
    """
    return dict(_load_pyproject().get("checksums", {}))
