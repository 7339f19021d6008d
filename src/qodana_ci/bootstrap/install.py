"""Qodana CLI acquisition.

Downloads the CLI archive for the host platform, verifies its checksum,
extracts it into the versioned tool cache and exposes the resulting
directory on the search path.
"""

from __future__ import annotations

import shutil
import tarfile
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Mapping, Optional

from qodana_ci.bootstrap.checksum import (
    CHECKSUMS_FILE,
    get_expected_checksum,
    parse_checksums,
    verify_checksum,
)
from qodana_ci.bootstrap.download import download_file
from qodana_ci.bootstrap.paths import ToolCachePaths
from qodana_ci.bootstrap.platform import SUPPORTED_ARCH, SUPPORTED_OS, PlatformInfo
from qodana_ci.bootstrap.versions import get_checksums, get_tool_version
from qodana_ci.core.errors import ExtractionError, ToolInstallError, UnsupportedPlatformError
from qodana_ci.core.logging import get_logger

LOGGER = get_logger(__name__)

EXECUTABLE = "qodana"

# Default version from pyproject.toml [tool.qodana_ci.tools]
VERSION = get_tool_version(EXECUTABLE)

RELEASES_URL = "https://github.com/JetBrains/qodana-cli/releases/download"


def get_qodana_url(platform_info: PlatformInfo, version: str = VERSION) -> str:
    """Construct the release download URL for a platform.

    Args:
        platform_info: Target OS and architecture.
        version: CLI version to download.

    Returns:
        Full URL to the CLI archive.

    Raises:
        UnsupportedPlatformError: If the OS or architecture has no build.
    """
    if platform_info.os not in SUPPORTED_OS:
        raise UnsupportedPlatformError(f"Unsupported platform: {platform_info.os}")
    if platform_info.arch not in SUPPORTED_ARCH:
        raise UnsupportedPlatformError(f"Unsupported architecture: {platform_info.arch}")
    return (
        f"{RELEASES_URL}/v{version}/"
        f"qodana_{platform_info.asset_name}.{platform_info.archive_extension}"
    )


def get_checksums_url(version: str = VERSION) -> str:
    return f"{RELEASES_URL}/v{version}/{CHECKSUMS_FILE}"


def _check_member(dest_dir: Path, name: str) -> None:
    """Reject archive members that would land outside dest_dir."""
    member_path = (dest_dir / name).resolve()
    if not member_path.is_relative_to(dest_dir.resolve()):
        raise ExtractionError(f"Path traversal detected: {name}")


def extract_zip(archive: Path, dest_dir: Path) -> Path:
    dest_dir.mkdir(parents=True, exist_ok=True)
    try:
        with zipfile.ZipFile(archive, "r") as zf:
            for zip_member in zf.namelist():
                _check_member(dest_dir, zip_member)
            zf.extractall(dest_dir)
    except (zipfile.BadZipFile, OSError) as e:
        raise ExtractionError(f"Failed to extract {archive.name}: {e}") from e
    return dest_dir


def extract_tar(archive: Path, dest_dir: Path) -> Path:
    dest_dir.mkdir(parents=True, exist_ok=True)
    try:
        with tarfile.open(archive, "r:gz") as tar:
            for tar_member in tar.getmembers():
                _check_member(dest_dir, tar_member.name)
                tar.extract(tar_member, path=dest_dir)
    except (tarfile.TarError, OSError) as e:
        raise ExtractionError(f"Failed to extract {archive.name}: {e}") from e
    return dest_dir


class ToolInstaller:
    """Installs a pinned Qodana CLI build into the tool cache.

    Args:
        platform_info: Host platform the CLI must run on.
        cache_paths: Tool cache layout.
        temp_dir: Scratch directory for downloads and extraction.
        add_path: Host callback exposing a directory on the search path.
        version: CLI version to install.
        checksums: Checksum table keyed by "{os}_{arch}". Defaults to the pins
            from pyproject.toml, then to the release's published checksums.
        downloader: Download function (url, dest) -> path.
    """

    def __init__(
        self,
        platform_info: PlatformInfo,
        cache_paths: ToolCachePaths,
        temp_dir: Path,
        add_path: Callable[[Path], None],
        version: str = VERSION,
        checksums: Optional[Mapping[str, str]] = None,
        downloader: Callable[[str, Path], Path] = download_file,
    ) -> None:
        self._platform = platform_info
        self._paths = cache_paths
        self._temp_dir = temp_dir
        self._add_path = add_path
        self._version = version
        self._checksums = checksums
        self._downloader = downloader

    @property
    def version(self) -> str:
        return self._version

    def executable_path(self, tool_dir: Path) -> Path:
        return tool_dir / self._platform.executable_name

    def install(self) -> Path:
        """Ensure the CLI is cached and on the search path.

        Returns:
            Path to the CLI executable.

        Raises:
            ToolInstallError: On unsupported platform, download, checksum or
                extraction failure.
        """
        arch = self._platform.arch
        tool_dir = self._paths.find(EXECUTABLE, self._version, arch)
        try:
            if tool_dir is not None:
                LOGGER.info(f"Found Qodana CLI v{self._version} in tool cache: {tool_dir}")
            else:
                tool_dir = self._download_and_cache()
            self._add_path(tool_dir)
        except OSError as e:
            raise ToolInstallError(f"Failed to install Qodana CLI v{self._version}: {e}") from e
        return self.executable_path(tool_dir)

    def _download_and_cache(self) -> Path:
        url = get_qodana_url(self._platform, self._version)

        self._temp_dir.mkdir(parents=True, exist_ok=True)
        work_dir = Path(tempfile.mkdtemp(prefix="qodana-", dir=self._temp_dir))
        try:
            expected = self._expected_checksum(work_dir)
            archive = work_dir / f"qodana.{self._platform.archive_extension}"
            LOGGER.info(f"Downloading Qodana CLI v{self._version} from {url}")
            self._downloader(url, archive)
            verify_checksum(archive, expected)

            extract_root = work_dir / "extracted"
            if self._platform.is_windows:
                extract_zip(archive, extract_root)
            else:
                extract_tar(archive, extract_root)

            return self._cache_dir(extract_root)
        finally:
            shutil.rmtree(work_dir, ignore_errors=True)

    def _expected_checksum(self, work_dir: Path) -> str:
        """Return the pinned checksum, or the one published with the release."""
        asset = self._platform.asset_name
        pins = self._checksums if self._checksums is not None else get_checksums()
        if asset in pins:
            return get_expected_checksum(self._platform, pins)

        url = get_checksums_url(self._version)
        LOGGER.info(f"No pinned checksum for {asset}, using {url}")
        listing = self._downloader(url, work_dir / CHECKSUMS_FILE)
        published = parse_checksums(listing.read_text(encoding="utf-8"))
        archive = f"qodana_{asset}.{self._platform.archive_extension}"
        table = {asset: published[archive]} if archive in published else {}
        return get_expected_checksum(self._platform, table)

    def _cache_dir(self, source: Path) -> Path:
        """Copy an extracted directory into the tool cache by version."""
        arch = self._platform.arch
        dest = self._paths.tool_dir(EXECUTABLE, self._version, arch)
        marker = self._paths.marker(EXECUTABLE, self._version, arch)
        marker.unlink(missing_ok=True)
        if dest.exists():
            shutil.rmtree(dest)
        shutil.copytree(source, dest)

        executable = self.executable_path(dest)
        if executable.exists() and not self._platform.is_windows:
            executable.chmod(0o755)

        self._paths.mark_complete(EXECUTABLE, self._version, arch)
        LOGGER.info(f"Qodana CLI v{self._version} installed to {dest}")
        return dest
