"""Client for the GitHub Actions results service.

The cache (v2) and artifact (v4) services of GitHub Actions are Twirp RPC
endpoints under ACTIONS_RESULTS_URL, authenticated with the job's
ACTIONS_RUNTIME_TOKEN. Payloads go to and come from signed Azure Blob
Storage URLs handed out by those endpoints.
"""

from __future__ import annotations

import base64
import json
import shutil
from pathlib import Path
from typing import Any, Dict, Mapping, Tuple
from urllib.error import HTTPError, URLError
from urllib.request import Request

from qodana_ci.bootstrap.download import USER_AGENT, secure_urlopen
from qodana_ci.core.errors import ProviderError
from qodana_ci.core.logging import get_logger

LOGGER = get_logger(__name__)

TWIRP_PREFIX = "twirp/github.actions.results.api.v1"
CACHE_SERVICE = "CacheService"
ARTIFACT_SERVICE = "ArtifactService"

_TIMEOUT = 300.0

# Blob service version allowing single-request uploads up to 5000 MiB
BLOB_API_VERSION = "2020-10-02"


class ResultsServiceClient:
    """Minimal JSON Twirp client for the results service.

    Args:
        base_url: Value of ACTIONS_RESULTS_URL.
        token: Value of ACTIONS_RUNTIME_TOKEN.
    """

    def __init__(self, base_url: str, token: str) -> None:
        if not base_url or not token:
            raise ProviderError(
                "ACTIONS_RESULTS_URL and ACTIONS_RUNTIME_TOKEN must be set "
                "to use the Actions results service"
            )
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._token = token

    @classmethod
    def from_env(cls, environ: Mapping[str, str]) -> "ResultsServiceClient":
        return cls(
            environ.get("ACTIONS_RESULTS_URL", ""),
            environ.get("ACTIONS_RUNTIME_TOKEN", ""),
        )

    @property
    def token(self) -> str:
        return self._token

    def call(self, service: str, method: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Invoke a Twirp method and return its decoded JSON response.

        Raises:
            ProviderError: On transport errors or non-2xx responses.
        """
        url = f"{self._base_url}{TWIRP_PREFIX}.{service}/{method}"
        request = Request(
            url,
            data=json.dumps(payload).encode("utf-8"),
            method="POST",
            headers={
                "Content-Type": "application/json",
                "Accept": "application/json",
                "Authorization": f"Bearer {self._token}",
                "User-Agent": USER_AGENT,
            },
        )
        LOGGER.debug(f"POST {service}/{method}")
        try:
            with secure_urlopen(request, timeout=_TIMEOUT) as response:
                body = response.read()
        except HTTPError as e:
            detail = e.read().decode("utf-8", errors="replace")
            raise ProviderError(f"{service}/{method} failed ({e.code}): {detail}") from e
        except URLError as e:
            raise ProviderError(f"{service}/{method} failed: {e.reason}") from e
        return json.loads(body) if body else {}


def upload_blob(signed_url: str, source: Path) -> None:
    """Upload a file to a signed Azure Blob Storage URL as a block blob."""
    size = source.stat().st_size
    with open(source, "rb") as f:
        request = Request(
            signed_url,
            data=f,
            method="PUT",
            headers={
                "Content-Length": str(size),
                "Content-Type": "application/octet-stream",
                "x-ms-blob-type": "BlockBlob",
                "x-ms-version": BLOB_API_VERSION,
                "User-Agent": USER_AGENT,
            },
        )
        try:
            with secure_urlopen(request, timeout=_TIMEOUT):
                pass
        except (HTTPError, URLError) as e:
            raise ProviderError(f"Blob upload failed: {e}") from e


def download_blob(signed_url: str, dest: Path) -> None:
    """Download a signed Azure Blob Storage URL into a file."""
    request = Request(signed_url, headers={"User-Agent": USER_AGENT})
    try:
        with secure_urlopen(request, timeout=_TIMEOUT) as response, open(dest, "wb") as out:
            shutil.copyfileobj(response, out)
    except (HTTPError, URLError) as e:
        raise ProviderError(f"Blob download failed: {e}") from e


def get_backend_ids(token: str) -> Tuple[str, str]:
    """Extract (workflow run, workflow job) backend ids from the runtime token.

    The token is a JWT whose `scp` claim contains a scope of the form
    `Actions.Results:{run_backend_id}:{job_backend_id}`.

    Raises:
        ProviderError: If the token carries no results scope.
    """
    parts = token.split(".")
    if len(parts) < 2:
        raise ProviderError("ACTIONS_RUNTIME_TOKEN is not a JWT")
    claims_segment = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        claims = json.loads(base64.urlsafe_b64decode(claims_segment))
    except (ValueError, json.JSONDecodeError) as e:
        raise ProviderError(f"Failed to decode ACTIONS_RUNTIME_TOKEN: {e}") from e

    for scope in str(claims.get("scp", "")).split(" "):
        scope_parts = scope.split(":")
        if scope_parts[0] == "Actions.Results" and len(scope_parts) == 3:
            return scope_parts[1], scope_parts[2]
    raise ProviderError("ACTIONS_RUNTIME_TOKEN has no Actions.Results scope")


def check_ok(response: Dict[str, Any], message: str) -> Dict[str, Any]:
    if not response.get("ok"):
        raise ProviderError(message)
    return response
