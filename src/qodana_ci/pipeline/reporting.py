"""Uploads the Qodana results directory as a host artifact."""

from __future__ import annotations

from pathlib import Path
from typing import List, Union

from qodana_ci.core.logging import get_logger
from qodana_ci.core.models import StepOutcome
from qodana_ci.providers.base import ArtifactProvider

LOGGER = get_logger(__name__)


def list_report_files(results_dir: Union[str, Path]) -> List[Path]:
    """Return the files directly under results_dir, sorted by name."""
    directory = Path(results_dir)
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file())


class ReportUploader:
    """Best-effort upload of the results directory."""

    def __init__(self, provider: ArtifactProvider) -> None:
        self._provider = provider

    def upload(
        self, results_dir: Union[str, Path], artifact_name: str, execute: bool
    ) -> StepOutcome:
        """Upload the report files as one named artifact.

        Args:
            results_dir: Directory the CLI wrote its reports into.
            artifact_name: Name of the artifact.
            execute: When False nothing is done and the provider is not called.
        """
        if not execute:
            return StepOutcome.skipped("upload disabled")

        try:
            LOGGER.info("Uploading report...")
            results_path = Path(results_dir)
            files = list_report_files(results_path)
            self._provider.upload(
                artifact_name,
                files,
                results_path.parent,
                continue_on_error=True,
            )
        except Exception as e:
            LOGGER.warning(f"Failed to upload report – {e}")
            return StepOutcome.failed(str(e))

        return StepOutcome.success(detail=artifact_name)
