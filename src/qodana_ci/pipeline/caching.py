"""Cache bridge between the Qodana cache directory and the host cache.

Every operation here is best-effort: failures are logged as warnings and
reported as a StepOutcome, never raised.
"""

from __future__ import annotations

from typing import Optional

from qodana_ci.core.logging import get_logger
from qodana_ci.core.models import CacheKey, Inputs, StepOutcome
from qodana_ci.providers.base import CacheProvider, HostContext

LOGGER = get_logger(__name__)


def default_cache_key(inputs: Inputs, context: HostContext, version: str) -> CacheKey:
    """Derive the cache key for a run.

    Keys given in the inputs win. Otherwise the primary key is scoped to the
    ref and commit and the fallback to the ref only, so a new commit on a
    branch restores the latest cache of that branch.
    """
    prefix = f"qodana-{version}-{context.ref}"
    primary = inputs.primary_cache_key or f"{prefix}-{context.sha}"
    additional = inputs.additional_cache_key or prefix
    return CacheKey(primary=primary, restore_keys=(additional,))


def should_upload_cache(
    use_caches: bool, cache_default_branch_only: bool, context: HostContext
) -> bool:
    """Decide whether this run may save its cache.

    With the default-branch restriction only runs on the repository's
    default branch save, which bounds the storage used by feature branches.
    """
    if not use_caches and cache_default_branch_only:
        LOGGER.warning('Turn on "use-caches" option to use "cache-default-branch-only"')

    if use_caches and cache_default_branch_only:
        return bool(context.default_branch) and context.branch == context.default_branch

    return use_caches


class CacheBridge:
    """Restores and saves the Qodana cache directory through a host provider.

    Args:
        provider: Host cache provider.
    """

    def __init__(self, provider: CacheProvider) -> None:
        self._provider = provider

    def _check_supported(self) -> Optional[StepOutcome]:
        if not self._provider.is_supported():
            reason = self._provider.unsupported_reason()
            LOGGER.warning(reason)
            return StepOutcome.skipped(reason)
        return None

    def restore(self, cache_dir: str, key: CacheKey, execute: bool) -> StepOutcome:
        """Restore the cache directory, trying the primary key first."""
        if not execute:
            return StepOutcome.skipped("caching disabled")
        unsupported = self._check_supported()
        if unsupported is not None:
            return unsupported

        try:
            matched = self._provider.restore([cache_dir], key.primary, key.restore_keys)
        except Exception as e:
            LOGGER.warning(f"Failed to restore cache with key {key.primary} – {e}")
            return StepOutcome.failed(str(e))

        if not matched:
            LOGGER.info(f"Cache not found for input keys: {', '.join(key.all_keys)}")
            return StepOutcome.skipped("miss")
        LOGGER.info(f"Cache restored from key: {matched}")
        return StepOutcome.success(detail=matched)

    def save(self, cache_dir: str, key: CacheKey, execute: bool) -> StepOutcome:
        """Save the cache directory under the primary key."""
        if not execute:
            return StepOutcome.skipped("cache upload disabled")
        unsupported = self._check_supported()
        if unsupported is not None:
            return unsupported

        try:
            self._provider.save([cache_dir], key.primary)
        except Exception as e:
            LOGGER.warning(f"Failed to save cache with key {key.primary} – {e}")
            return StepOutcome.failed(str(e))

        LOGGER.info(f"Cache saved with key {key.primary}")
        return StepOutcome.success(detail=key.primary)
