"""GitHub Actions cache provider (cache service v2)."""

from __future__ import annotations

import hashlib
import shutil
import sys
import tarfile
import tempfile
from pathlib import Path
from typing import Callable, Optional, Sequence
from urllib.parse import urlparse

from qodana_ci.core.errors import CacheServiceError, ProviderError
from qodana_ci.core.logging import get_logger
from qodana_ci.providers.base import CacheProvider
from qodana_ci.providers.github.results_api import (
    CACHE_SERVICE,
    ResultsServiceClient,
    check_ok,
    download_blob,
    upload_blob,
)

LOGGER = get_logger(__name__)

COMPRESSION_METHOD = "gzip"
VERSION_SALT = "1.0"

GHES_UNSUPPORTED_MESSAGE = (
    "Cache is not supported on GHES. "
    "See https://github.com/actions/cache/issues/505 for more details"
)


def is_ghes(server_url: str) -> bool:
    """Check if the workflow runs on GitHub Enterprise Server."""
    hostname = urlparse(server_url or "https://github.com").hostname or ""
    return hostname.upper() != "GITHUB.COM"


def get_cache_version(paths: Sequence[str], platform: str = sys.platform) -> str:
    """Compute the cache version the service scopes entries by.

    Entries only match when they were created for the same paths, the same
    compression and (on Windows) the same OS family.
    """
    components = [*paths, COMPRESSION_METHOD]
    if platform == "win32":
        components.append("windows-only")
    components.append(VERSION_SALT)
    return hashlib.sha256("|".join(components).encode("utf-8")).hexdigest()


def create_archive(paths: Sequence[str], archive: Path) -> int:
    """Pack each path under its index into a gzip tarball. Returns its size."""
    with tarfile.open(archive, "w:gz") as tar:
        for index, path in enumerate(paths):
            tar.add(path, arcname=str(index))
    return archive.stat().st_size


def extract_archive(archive: Path, paths: Sequence[str], scratch: Path) -> None:
    """Unpack an archive made by create_archive back into paths."""
    unpack_dir = scratch / "unpacked"
    unpack_dir.mkdir(parents=True, exist_ok=True)
    with tarfile.open(archive, "r:gz") as tar:
        for member in tar.getmembers():
            member_path = (unpack_dir / member.name).resolve()
            if not member_path.is_relative_to(unpack_dir.resolve()):
                raise CacheServiceError(f"Path traversal detected: {member.name}")
            tar.extract(member, path=unpack_dir)

    for index, path in enumerate(paths):
        source = unpack_dir / str(index)
        if source.is_dir():
            shutil.copytree(source, path, dirs_exist_ok=True)
        elif source.is_file():
            Path(path).parent.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, path)


class GitHubCacheProvider(CacheProvider):
    """Saves and restores directories through the Actions cache service.

    Args:
        server_url: GITHUB_SERVER_URL of the run.
        client_factory: Builds the results service client on first use.
        temp_dir: Scratch directory for archives.
    """

    def __init__(
        self,
        server_url: str,
        client_factory: Callable[[], ResultsServiceClient],
        temp_dir: Path,
    ) -> None:
        self._server_url = server_url
        self._client_factory = client_factory
        self._client: Optional[ResultsServiceClient] = None
        self._temp_dir = temp_dir

    @property
    def client(self) -> ResultsServiceClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def is_supported(self) -> bool:
        return not is_ghes(self._server_url)

    def unsupported_reason(self) -> str:
        return GHES_UNSUPPORTED_MESSAGE

    def _scratch(self) -> Path:
        self._temp_dir.mkdir(parents=True, exist_ok=True)
        return Path(tempfile.mkdtemp(prefix="qodana-cache-", dir=self._temp_dir))

    def save(self, paths: Sequence[str], key: str) -> None:
        version = get_cache_version(paths)
        scratch = self._scratch()
        try:
            archive = scratch / "cache.tgz"
            size = create_archive(paths, archive)
            LOGGER.debug(f"Cache archive size: {size} bytes")

            try:
                created = check_ok(
                    self.client.call(
                        CACHE_SERVICE, "CreateCacheEntry", {"key": key, "version": version}
                    ),
                    f"Unable to reserve cache with key {key}, "
                    "another job may be creating this cache.",
                )
                upload_blob(created["signed_upload_url"], archive)
                check_ok(
                    self.client.call(
                        CACHE_SERVICE,
                        "FinalizeCacheEntryUpload",
                        {"key": key, "version": version, "size_bytes": str(size)},
                    ),
                    f"Unable to finalize cache with key {key}",
                )
            except ProviderError as e:
                raise CacheServiceError(str(e)) from e
        finally:
            shutil.rmtree(scratch, ignore_errors=True)

    def restore(
        self, paths: Sequence[str], primary_key: str, restore_keys: Sequence[str]
    ) -> Optional[str]:
        version = get_cache_version(paths)
        try:
            response = self.client.call(
                CACHE_SERVICE,
                "GetCacheEntryDownloadURL",
                {"key": primary_key, "restore_keys": list(restore_keys), "version": version},
            )
        except ProviderError as e:
            raise CacheServiceError(str(e)) from e

        if not response.get("ok") or not response.get("signed_download_url"):
            return None

        matched_key = response.get("matched_key") or primary_key
        scratch = self._scratch()
        try:
            archive = scratch / "cache.tgz"
            download_blob(response["signed_download_url"], archive)
            extract_archive(archive, paths, scratch)
        except (ProviderError, tarfile.TarError, OSError) as e:
            raise CacheServiceError(f"Failed to restore cache {matched_key}: {e}") from e
        finally:
            shutil.rmtree(scratch, ignore_errors=True)
        return matched_key
