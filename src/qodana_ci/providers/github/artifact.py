"""GitHub Actions artifact provider (artifact service v4)."""

from __future__ import annotations

import shutil
import tempfile
import zipfile
from pathlib import Path
from typing import Callable, Optional, Sequence

from qodana_ci.bootstrap.checksum import sha256sum
from qodana_ci.core.errors import ArtifactServiceError, ProviderError
from qodana_ci.core.logging import get_logger
from qodana_ci.providers.base import ArtifactProvider
from qodana_ci.providers.github.results_api import (
    ARTIFACT_SERVICE,
    ResultsServiceClient,
    check_ok,
    get_backend_ids,
    upload_blob,
)

LOGGER = get_logger(__name__)

ARTIFACT_VERSION = 4


def create_zip(
    files: Sequence[Path], root_dir: Path, archive: Path, continue_on_error: bool
) -> int:
    """Zip files with names relative to root_dir.

    Unreadable files are skipped with a warning when continue_on_error is
    set, otherwise the first failure is raised.

    Returns:
        Number of files added.
    """
    added = 0
    with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for path in files:
            arcname = Path(path).relative_to(root_dir).as_posix()
            try:
                zf.write(path, arcname=arcname)
                added += 1
            except OSError as e:
                if not continue_on_error:
                    raise ArtifactServiceError(f"Failed to add {path}: {e}") from e
                LOGGER.warning(f"Skipping {path} from artifact: {e}")
    return added


class GitHubArtifactProvider(ArtifactProvider):
    """Uploads a zip of files as one workflow artifact.

    Args:
        client_factory: Builds the results service client on first use.
        temp_dir: Scratch directory for the zip.
    """

    def __init__(
        self, client_factory: Callable[[], ResultsServiceClient], temp_dir: Path
    ) -> None:
        self._client_factory = client_factory
        self._client: Optional[ResultsServiceClient] = None
        self._temp_dir = temp_dir

    @property
    def client(self) -> ResultsServiceClient:
        if self._client is None:
            self._client = self._client_factory()
        return self._client

    def upload(
        self,
        name: str,
        files: Sequence[Path],
        root_dir: Path,
        continue_on_error: bool = True,
    ) -> None:
        if not files:
            LOGGER.warning(f"No files found to upload as artifact {name}")
            return

        self._temp_dir.mkdir(parents=True, exist_ok=True)
        scratch = Path(tempfile.mkdtemp(prefix="qodana-artifact-", dir=self._temp_dir))
        try:
            archive = scratch / f"{name}.zip"
            added = create_zip(files, root_dir, archive, continue_on_error)
            size = archive.stat().st_size

            try:
                run_id, job_id = get_backend_ids(self.client.token)
                ids = {
                    "workflow_run_backend_id": run_id,
                    "workflow_job_run_backend_id": job_id,
                }
                created = check_ok(
                    self.client.call(
                        ARTIFACT_SERVICE,
                        "CreateArtifact",
                        {**ids, "name": name, "version": ARTIFACT_VERSION},
                    ),
                    f"Failed to create artifact {name}",
                )
                upload_blob(created["signed_upload_url"], archive)
                finalized = check_ok(
                    self.client.call(
                        ARTIFACT_SERVICE,
                        "FinalizeArtifact",
                        {
                            **ids,
                            "name": name,
                            "size": str(size),
                            "hash": f"sha256:{sha256sum(archive)}",
                        },
                    ),
                    f"Failed to finalize artifact {name}",
                )
            except ProviderError as e:
                raise ArtifactServiceError(str(e)) from e

            LOGGER.info(
                f"Artifact {name} uploaded ({added} files, {size} bytes, "
                f"id {finalized.get('artifact_id')})"
            )
        finally:
            shutil.rmtree(scratch, ignore_errors=True)
