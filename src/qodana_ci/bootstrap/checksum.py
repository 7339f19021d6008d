"""SHA-256 verification of downloaded CLI archives."""

from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Dict, Mapping, Optional

from qodana_ci.bootstrap.platform import PlatformInfo
from qodana_ci.bootstrap.versions import get_checksums
from qodana_ci.core.errors import ChecksumMismatchError, UnsupportedPlatformError
from qodana_ci.core.logging import get_logger

LOGGER = get_logger(__name__)

_CHUNK_SIZE = 1024 * 1024

# Checksums file published with every Qodana CLI release
CHECKSUMS_FILE = "checksums.txt"


def sha256sum(path: Path) -> str:
    """Compute the lowercase hex SHA-256 digest of a file."""
    digest = hashlib.sha256()
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
            digest.update(chunk)
    return digest.hexdigest()


def parse_checksums(text: str) -> Dict[str, str]:
    """Parse a `sha256sum` style listing into {file name: digest}.

    Lines look like `<digest>  <file name>`, optionally with a `*` before the
    name for binary mode. Blank and malformed lines are ignored.
    """
    checksums: Dict[str, str] = {}
    for line in text.splitlines():
        parts = line.split()
        if len(parts) != 2 or len(parts[0]) != 64:
            continue
        digest, name = parts
        checksums[name.lstrip("*")] = digest.lower()
    return checksums


def get_expected_checksum(
    platform_info: PlatformInfo, checksums: Optional[Mapping[str, str]] = None
) -> str:
    """Return the pinned checksum for a platform.

    Args:
        platform_info: Target OS and architecture.
        checksums: Checksum table keyed by "{os}_{arch}" (pinned table if None).

    Raises:
        UnsupportedPlatformError: If no build is pinned for the platform.
    """
    table = checksums if checksums is not None else get_checksums()
    try:
        return table[platform_info.asset_name]
    except KeyError:
        raise UnsupportedPlatformError(
            f"Qodana CLI does not exist for {platform_info.asset_name}"
        ) from None


def verify_checksum(path: Path, expected: str) -> str:
    """Verify a file against its expected checksum.

    Returns:
        The actual checksum.

    Raises:
        ChecksumMismatchError: If the digests differ.
    """
    actual = sha256sum(path)
    if actual != expected.lower():
        raise ChecksumMismatchError(expected, actual)
    LOGGER.debug(f"Checksum verified for {path.name}: {actual}")
    return actual
