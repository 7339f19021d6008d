"""Secure download utilities with SSL certificate handling.

Runner images do not always expose a usable system certificate store to the
Python interpreter, so every request goes through certifi's CA bundle.
"""

from __future__ import annotations

import shutil
import ssl
from pathlib import Path
from typing import Mapping, Optional, Union
from urllib.error import URLError
from urllib.request import Request, urlopen

import certifi

from qodana_ci.core.errors import DownloadError

USER_AGENT = "qodana-ci"


def get_ssl_context() -> ssl.SSLContext:
    """Get an SSL context that uses certifi's CA bundle."""
    return ssl.create_default_context(cafile=certifi.where())


def secure_urlopen(
    url_or_request: Union[str, Request], timeout: Optional[float] = 30.0
):
    """Open a URL with proper SSL certificate verification.

    Args:
        url_or_request: The URL or prepared Request to open.
        timeout: Connection timeout in seconds.

    Returns:
        A file-like object for reading the response.

    Raises:
        URLError: If the URL cannot be opened.
        ValueError: If the URL is not HTTPS.
    """
    url = url_or_request.full_url if isinstance(url_or_request, Request) else url_or_request
    if not url.startswith("https://"):
        raise ValueError(f"Only HTTPS URLs are supported: {url}")

    return urlopen(url_or_request, timeout=timeout, context=get_ssl_context())  # nosec B310


def download_file(
    url: str,
    dest_path: Path,
    timeout: Optional[float] = 60.0,
    headers: Optional[Mapping[str, str]] = None,
) -> Path:
    """Download a file from a URL with proper SSL certificate verification.

    Args:
        url: The URL to download from.
        dest_path: Path to save the downloaded file.
        timeout: Connection timeout in seconds.
        headers: Extra request headers.

    Returns:
        The destination path.

    Raises:
        DownloadError: If the URL cannot be fetched or the file written.
    """
    request = Request(url, headers={"User-Agent": USER_AGENT, **(headers or {})})
    dest_path.parent.mkdir(parents=True, exist_ok=True)
    try:
        with secure_urlopen(request, timeout=timeout) as response, open(dest_path, "wb") as out:
            shutil.copyfileobj(response, out)
    except (URLError, OSError, ValueError) as e:
        dest_path.unlink(missing_ok=True)
        raise DownloadError(f"Failed to download {url}: {e}") from e
    return dest_path
