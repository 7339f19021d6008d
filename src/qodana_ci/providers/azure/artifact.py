"""Azure Pipelines artifact provider.

Azure has no API taking a list of files, so the results are staged as a zip
archive next to the results directory and published through logging
commands. The SARIF report is published separately under the name the
SARIF SAST Scans Tab extension looks for.
"""

from __future__ import annotations

import shutil
import zipfile
from pathlib import Path
from typing import Sequence

from qodana_ci.core.logging import get_logger
from qodana_ci.core.models import QODANA_SARIF_NAME
from qodana_ci.providers.azure.commands import AzureCommands
from qodana_ci.providers.base import ArtifactProvider

LOGGER = get_logger(__name__)

REPORT_CONTAINER = "Qodana"
SARIF_ARTIFACT_NAME = "CodeAnalysisLogs"


class AzureArtifactProvider(ArtifactProvider):
    """Publishes the results directory as pipeline artifacts."""

    def __init__(self, commands: AzureCommands) -> None:
        self._commands = commands

    def upload(
        self,
        name: str,
        files: Sequence[Path],
        root_dir: Path,
        continue_on_error: bool = True,
    ) -> None:
        archive = root_dir / f"{name}.zip"
        with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path in files:
                try:
                    zf.write(path, arcname=Path(path).name)
                except OSError as e:
                    if not continue_on_error:
                        raise
                    LOGGER.warning(f"Skipping {path} from artifact: {e}")
        self._commands.upload_artifact(REPORT_CONTAINER, archive, name)

        sarif = next((Path(p) for p in files if Path(p).name == QODANA_SARIF_NAME), None)
        if sarif is None:
            LOGGER.info(f"No {QODANA_SARIF_NAME} in results, skipping {SARIF_ARTIFACT_NAME}")
            return
        staged = root_dir / "qodana.sarif"
        shutil.copyfile(sarif, staged)
        self._commands.upload_artifact(SARIF_ARTIFACT_NAME, staged, SARIF_ARTIFACT_NAME)
