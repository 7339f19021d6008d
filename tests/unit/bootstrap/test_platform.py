"""Tests for platform detection functionality."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from qodana_ci.bootstrap.platform import (
    get_platform_info,
    PlatformInfo,
    detect_os,
    detect_arch,
    normalize_arch,
)


class TestDetectOS:
    """Tests for OS detection."""

    def test_detect_os_darwin(self) -> None:
        with patch("platform.system", return_value="Darwin"):
            assert detect_os() == "darwin"

    def test_detect_os_windows(self) -> None:
        with patch("platform.system", return_value="Windows"):
            assert detect_os() == "windows"

    def test_detect_os_unknown_raises(self) -> None:
        with patch("platform.system", return_value="FreeBSD"):
            with pytest.raises(ValueError, match="Unsupported operating system"):
                detect_os()


class TestDetectArch:
    """Tests for architecture detection."""

    def test_detect_arch_amd64_is_x86_64(self) -> None:
        with patch("platform.machine", return_value="AMD64"):
            assert detect_arch() == "x86_64"

    def test_detect_arch_aarch64_is_arm64(self) -> None:
        with patch("platform.machine", return_value="aarch64"):
            assert detect_arch() == "arm64"

    def test_detect_arch_unknown_raises(self) -> None:
        with patch("platform.machine", return_value="mips"):
            with pytest.raises(ValueError, match="Unsupported architecture"):
                detect_arch()

    def test_normalize_unknown(self) -> None:
        assert normalize_arch("riscv64") is None


class TestPlatformInfo:
    """Tests for PlatformInfo."""

    def test_asset_name(self) -> None:
        assert PlatformInfo(os="linux", arch="x86_64").asset_name == "linux_x86_64"

    def test_windows_uses_zip_and_exe(self) -> None:
        info = PlatformInfo(os="windows", arch="x86_64")
        assert info.archive_extension == "zip"
        assert info.executable_name == "qodana.exe"

    def test_unix_uses_tarball(self) -> None:
        info = PlatformInfo(os="darwin", arch="arm64")
        assert info.archive_extension == "tar.gz"
        assert info.executable_name == "qodana"

    def test_get_platform_info(self) -> None:
        with patch("platform.system", return_value="Linux"), patch(
            "platform.machine", return_value="x86_64"
        ):
            info = get_platform_info()
        assert info == PlatformInfo(os="linux", arch="x86_64")
        assert info.is_supported()
