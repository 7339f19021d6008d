"""Tests for core models."""

from __future__ import annotations

import dataclasses

import pytest

from qodana_ci.core.models import (
    CacheKey,
    Inputs,
    StepOutcome,
    StepStatus,
    is_execution_successful,
)


def test_inputs_defaults() -> None:
    inputs = Inputs()
    assert inputs.args == ()
    assert inputs.upload_result is True
    assert inputs.artifact_name == "qodana-report"
    assert inputs.use_caches is True
    assert inputs.cache_default_branch_only is False


def test_inputs_are_immutable() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        Inputs().use_caches = False  # type: ignore[misc]


def test_cache_key_drops_empty_restore_keys() -> None:
    key = CacheKey("primary", ("", "fallback", ""))
    assert key.restore_keys == ("fallback",)
    assert key.all_keys == ("primary", "fallback")


class TestStepOutcome:
    def test_success_carries_detail(self) -> None:
        outcome = StepOutcome.success(detail="key-1")
        assert outcome.status is StepStatus.SUCCESS
        assert outcome.detail == "key-1"
        assert outcome.ok

    def test_skipped_is_ok(self) -> None:
        outcome = StepOutcome.skipped("caching disabled")
        assert outcome.ok
        assert outcome.reason == "caching disabled"

    def test_failed_is_not_ok(self) -> None:
        assert not StepOutcome.failed("boom").ok


@pytest.mark.parametrize(
    "code, expected",
    [(0, True), (255, True), (1, False), (2, False), (-1, False)],
)
def test_is_execution_successful(code: int, expected: bool) -> None:
    assert is_execution_successful(code) is expected
