from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


# Exit codes reported by the Qodana CLI
QODANA_SUCCESS = 0
QODANA_FAIL_THRESHOLD = 255

FAIL_THRESHOLD_OUTPUT = "The number of problems exceeds the failThreshold"

# Report files written by the CLI into the results directory
QODANA_SARIF_NAME = "qodana.sarif.json"


@dataclass(frozen=True)
class Inputs:
    """Configuration of a single run, resolved once from the CI host.

    Attributes:
        args: Free-form arguments passed through to ``qodana scan``.
        results_dir: Directory the CLI writes its reports into.
        cache_dir: Directory the CLI keeps its caches in.
        primary_cache_key: Key used to save (and first tried to restore) caches.
        additional_cache_key: Fallback prefix key used on restore.
        cache_default_branch_only: Save caches only from the default branch.
        upload_result: Upload the results directory as an artifact.
        artifact_name: Name of the uploaded artifact.
        use_caches: Restore and save the cache directory.
        use_annotations: Publish annotations from the report (host dependent).
        pr_mode: Analyze only the changes of a pull request.
    """

    args: Tuple[str, ...] = ()
    results_dir: str = ""
    cache_dir: str = ""
    primary_cache_key: str = ""
    additional_cache_key: str = ""
    cache_default_branch_only: bool = False
    upload_result: bool = True
    artifact_name: str = "qodana-report"
    use_caches: bool = True
    use_annotations: bool = True
    pr_mode: bool = True


@dataclass(frozen=True)
class CacheKey:
    """A primary cache key plus ordered fallback prefixes for restore."""

    primary: str
    restore_keys: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(
            self, "restore_keys", tuple(k for k in self.restore_keys if k)
        )

    @property
    def all_keys(self) -> Tuple[str, ...]:
        return (self.primary, *self.restore_keys)


class StepStatus(str, Enum):
    """Outcome of a best-effort pipeline step."""

    SUCCESS = "success"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StepOutcome:
    """Result of a best-effort step (cache restore/save, report upload).

    Attributes:
        status: Whether the step ran, was skipped or failed.
        reason: Human readable explanation for skipped or failed steps.
        detail: Step specific value, e.g. the matched cache key.
    """

    status: StepStatus
    reason: Optional[str] = None
    detail: Optional[str] = None

    @classmethod
    def success(cls, detail: Optional[str] = None) -> "StepOutcome":
        return cls(StepStatus.SUCCESS, detail=detail)

    @classmethod
    def skipped(cls, reason: str) -> "StepOutcome":
        return cls(StepStatus.SKIPPED, reason=reason)

    @classmethod
    def failed(cls, reason: str) -> "StepOutcome":
        return cls(StepStatus.FAILED, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status != StepStatus.FAILED


def is_execution_successful(exit_code: int) -> bool:
    """Return True if the CLI finished its analysis, threshold or not."""
    return exit_code in (QODANA_SUCCESS, QODANA_FAIL_THRESHOLD)
