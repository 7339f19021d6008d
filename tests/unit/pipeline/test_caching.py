"""Tests for the cache bridge and cache policy."""

from __future__ import annotations

import logging

import pytest

from fakes import FakeCacheProvider
from qodana_ci.core.errors import CacheServiceError
from qodana_ci.core.models import CacheKey, Inputs, StepStatus
from qodana_ci.pipeline.caching import CacheBridge, default_cache_key, should_upload_cache
from qodana_ci.providers.base import HostContext

KEY = CacheKey("qodana-1-refs/heads/main-abc", ("qodana-1-refs/heads/main",))


class TestDefaultCacheKey:
    def test_derived_from_ref_and_sha(self) -> None:
        context = HostContext(ref="refs/heads/main", sha="abc")
        key = default_cache_key(Inputs(), context, "2024.3.4")
        assert key.primary == "qodana-2024.3.4-refs/heads/main-abc"
        assert key.restore_keys == ("qodana-2024.3.4-refs/heads/main",)

    def test_input_keys_win(self) -> None:
        inputs = Inputs(primary_cache_key="p", additional_cache_key="a")
        key = default_cache_key(inputs, HostContext(), "1")
        assert key.all_keys == ("p", "a")


class TestShouldUploadCache:
    def test_caches_enabled(self) -> None:
        assert should_upload_cache(True, False, HostContext(ref="refs/heads/feature"))

    def test_caches_disabled(self) -> None:
        assert not should_upload_cache(False, False, HostContext())

    def test_default_branch_only_on_default_branch(self) -> None:
        context = HostContext(ref="refs/heads/main", default_branch="main")
        assert should_upload_cache(True, True, context)

    def test_default_branch_only_on_feature_branch(self) -> None:
        context = HostContext(ref="refs/heads/feature", default_branch="main")
        assert not should_upload_cache(True, True, context)

    def test_default_branch_unknown(self) -> None:
        assert not should_upload_cache(True, True, HostContext(ref="refs/heads/main"))

    def test_conflicting_options_warn(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING):
            assert not should_upload_cache(False, True, HostContext())
        assert 'Turn on "use-caches"' in caplog.text


class TestCacheBridgeRestore:
    def test_disabled_does_not_touch_provider(self, fake_cache: FakeCacheProvider) -> None:
        outcome = CacheBridge(fake_cache).restore("/c", KEY, execute=False)
        assert outcome.status is StepStatus.SKIPPED
        assert fake_cache.restored == []

    def test_hit(self) -> None:
        cache = FakeCacheProvider(matched_key="qodana-1-refs/heads/main")
        outcome = CacheBridge(cache).restore("/c", KEY, execute=True)
        assert outcome.status is StepStatus.SUCCESS
        assert outcome.detail == "qodana-1-refs/heads/main"
        assert cache.restored == [(["/c"], KEY.primary, list(KEY.restore_keys))]

    def test_miss(self, fake_cache: FakeCacheProvider, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO):
            outcome = CacheBridge(fake_cache).restore("/c", KEY, execute=True)
        assert outcome.status is StepStatus.SKIPPED
        assert outcome.reason == "miss"
        assert "Cache not found for input keys" in caplog.text

    def test_unsupported(self, caplog: pytest.LogCaptureFixture) -> None:
        cache = FakeCacheProvider(supported=False)
        with caplog.at_level(logging.WARNING):
            outcome = CacheBridge(cache).restore("/c", KEY, execute=True)
        assert outcome.status is StepStatus.SKIPPED
        assert cache.restored == []
        assert "not supported" in caplog.text

    def test_error_is_reported_not_raised(self, caplog: pytest.LogCaptureFixture) -> None:
        cache = FakeCacheProvider(restore_error=CacheServiceError("service down"))
        with caplog.at_level(logging.WARNING):
            outcome = CacheBridge(cache).restore("/c", KEY, execute=True)
        assert outcome.status is StepStatus.FAILED
        assert "service down" in caplog.text


class TestCacheBridgeSave:
    def test_saves_primary_key(self, fake_cache: FakeCacheProvider) -> None:
        outcome = CacheBridge(fake_cache).save("/c", KEY, execute=True)
        assert outcome.ok
        assert fake_cache.saved == [(["/c"], KEY.primary)]

    def test_disabled(self, fake_cache: FakeCacheProvider) -> None:
        outcome = CacheBridge(fake_cache).save("/c", KEY, execute=False)
        assert outcome.reason == "cache upload disabled"
        assert fake_cache.saved == []

    def test_failure_is_a_warning(self, caplog: pytest.LogCaptureFixture) -> None:
        cache = FakeCacheProvider(save_error=CacheServiceError("quota exceeded"))
        with caplog.at_level(logging.WARNING):
            outcome = CacheBridge(cache).save("/c", KEY, execute=True)
        assert outcome.status is StepStatus.FAILED
        assert "Failed to save cache" in caplog.text

    def test_unsupported(self, caplog: pytest.LogCaptureFixture) -> None:
        cache = FakeCacheProvider(supported=False)
        with caplog.at_level(logging.WARNING):
            outcome = CacheBridge(cache).save("/c", KEY, execute=True)
        assert outcome.status is StepStatus.SKIPPED
        assert cache.saved == []
        assert "not supported" in caplog.text
