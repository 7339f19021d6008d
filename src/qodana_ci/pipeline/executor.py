"""Pipeline executor for a Qodana run on a CI host."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence

from qodana_ci.bootstrap.install import ToolInstaller
from qodana_ci.core.errors import QodanaCIError, ToolInstallError
from qodana_ci.core.logging import get_logger
from qodana_ci.core.models import (
    FAIL_THRESHOLD_OUTPUT,
    QODANA_FAIL_THRESHOLD,
    Inputs,
    StepOutcome,
    is_execution_successful,
)
from qodana_ci.pipeline.caching import CacheBridge, default_cache_key, should_upload_cache
from qodana_ci.pipeline.reporting import ReportUploader
from qodana_ci.providers.base import Host
from qodana_ci.qodana.arguments import build_scan_args, get_pull_args
from qodana_ci.qodana.runner import QodanaRunner

LOGGER = get_logger(__name__)


class Stage:
    """Pipeline stages that can fail a run."""

    SETUP = "setup"
    INSTALL = "install"
    PULL = "pull"
    SCAN = "scan"


@dataclass
class PipelineResult:
    """Outcome of a pipeline run.

    Attributes:
        exit_code: Exit code of the last CLI invocation, None if never run.
        failed_stage: Stage that failed the run, None on success.
        message: Failure message reported to the host.
        steps: Outcomes of the best-effort steps keyed by name.
    """

    exit_code: Optional[int] = None
    failed_stage: Optional[str] = None
    message: Optional[str] = None
    steps: Dict[str, StepOutcome] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return self.failed_stage is None


class PipelineExecutor:
    """Orchestrates install → pull → scan → report and cache upload.

    Args:
        host: Providers of the CI host.
        installer: Installs the CLI and returns its executable.
        runner_factory: Builds a runner for the installed executable.
        sequential: Run the independent best-effort steps one after another.
    """

    def __init__(
        self,
        host: Host,
        installer: ToolInstaller,
        runner_factory: Optional[Callable[[Path], QodanaRunner]] = None,
        sequential: bool = False,
    ) -> None:
        self._host = host
        self._installer = installer
        self._runner_factory = runner_factory or self._default_runner
        self._sequential = sequential
        self._cache = CacheBridge(host.cache)
        self._reports = ReportUploader(host.artifacts)

    def _default_runner(self, executable: Path) -> QodanaRunner:
        context = self._host.context
        return QodanaRunner(executable, context.env, cwd=context.workspace or None)

    def _run_steps(self, steps: Sequence[Callable[[], StepOutcome]]) -> List[StepOutcome]:
        """Run independent steps, concurrently unless sequential."""
        if self._sequential:
            return [step() for step in steps]
        with ThreadPoolExecutor(max_workers=len(steps)) as pool:
            futures = [pool.submit(step) for step in steps]
            return [future.result() for future in futures]

    def _fail(self, result: PipelineResult, stage: str, message: str) -> PipelineResult:
        result.failed_stage = stage
        result.message = message
        self._host.commands.set_failed(message)
        return result

    def execute(
        self, inputs: Inputs, explicit_args: Optional[Sequence[str]] = None
    ) -> PipelineResult:
        """Run the full pipeline for one set of inputs.

        Args:
            inputs: Run configuration.
            explicit_args: Scan arguments that replace the derived ones.

        Returns:
            PipelineResult describing every stage.
        """
        result = PipelineResult()
        context = self._host.context
        cache_key = default_cache_key(inputs, context, self._installer.version)

        for directory in (inputs.results_dir, inputs.cache_dir):
            try:
                Path(directory).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                return self._fail(result, Stage.SETUP, f"Failed to create {directory}: {e}")

        installed: List[Path] = []
        install_errors: List[QodanaCIError] = []

        def install() -> StepOutcome:
            try:
                installed.append(self._installer.install())
            except QodanaCIError as e:
                install_errors.append(e)
                return StepOutcome.failed(str(e))
            except OSError as e:
                install_errors.append(ToolInstallError(f"Failed to install Qodana CLI: {e}"))
                return StepOutcome.failed(str(e))
            return StepOutcome.success()

        def restore() -> StepOutcome:
            return self._cache.restore(inputs.cache_dir, cache_key, inputs.use_caches)

        _, result.steps["restore"] = self._run_steps([install, restore])
        if install_errors:
            return self._fail(result, Stage.INSTALL, str(install_errors[0]))

        runner = self._runner_factory(installed[0])

        pull_code = runner.pull(get_pull_args(inputs.args))
        result.exit_code = pull_code
        if pull_code != 0:
            return self._fail(result, Stage.PULL, f"qodana pull failed with exit code {pull_code}")

        scan_code = runner.scan(build_scan_args(inputs, context.pr_base_sha, explicit_args))
        result.exit_code = scan_code

        upload_cache = should_upload_cache(
            inputs.use_caches, inputs.cache_default_branch_only, context
        )
        result.steps["report"], result.steps["cache"] = self._run_steps(
            [
                lambda: self._reports.upload(
                    inputs.results_dir, inputs.artifact_name, inputs.upload_result
                ),
                lambda: self._cache.save(inputs.cache_dir, cache_key, upload_cache),
            ]
        )

        if not is_execution_successful(scan_code):
            return self._fail(result, Stage.SCAN, f"qodana scan failed with exit code {scan_code}")
        if scan_code == QODANA_FAIL_THRESHOLD:
            return self._fail(result, Stage.SCAN, FAIL_THRESHOLD_OUTPUT)

        LOGGER.info("Qodana scan finished successfully")
        return result
