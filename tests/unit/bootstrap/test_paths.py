"""Tests for tool cache path resolution."""

from __future__ import annotations

import os
from pathlib import Path
from unittest.mock import patch

from qodana_ci.bootstrap.paths import (
    TOOL_CACHE_ENV,
    ToolCachePaths,
    prepend_to_process_path,
    resolve_tool_cache_root,
)


class TestResolveToolCacheRoot:
    def test_override_wins(self, tmp_path: Path) -> None:
        root = resolve_tool_cache_root({TOOL_CACHE_ENV: str(tmp_path)}, "/opt/hostedtoolcache")
        assert root == tmp_path

    def test_host_default(self) -> None:
        assert resolve_tool_cache_root({}, "/opt/hostedtoolcache") == Path("/opt/hostedtoolcache")

    def test_home_fallback(self) -> None:
        assert resolve_tool_cache_root({}) == Path.home() / ".qodana-ci" / "tools"


class TestToolCachePaths:
    def test_find_requires_marker(self, tmp_path: Path) -> None:
        paths = ToolCachePaths(tmp_path)
        paths.tool_dir("qodana", "1.0", "arm64").mkdir(parents=True)
        assert paths.find("qodana", "1.0", "arm64") is None

        paths.mark_complete("qodana", "1.0", "arm64")
        assert paths.find("qodana", "1.0", "arm64") == tmp_path / "qodana" / "1.0" / "arm64"

    def test_find_other_version(self, tmp_path: Path) -> None:
        paths = ToolCachePaths(tmp_path)
        paths.tool_dir("qodana", "1.0", "arm64").mkdir(parents=True)
        paths.mark_complete("qodana", "1.0", "arm64")
        assert paths.find("qodana", "2.0", "arm64") is None


class TestPrependToProcessPath:
    def test_prepends(self, tmp_path: Path) -> None:
        with patch.dict(os.environ, {"PATH": "/usr/bin"}):
            prepend_to_process_path(tmp_path)
            assert os.environ["PATH"] == f"{tmp_path}{os.pathsep}/usr/bin"
