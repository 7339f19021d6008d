"""Tests for qodana pull/scan argument construction."""

from __future__ import annotations

from qodana_ci.core.models import Inputs
from qodana_ci.qodana.arguments import (
    build_scan_args,
    extract_arg,
    get_pull_args,
    get_scan_args,
    split_args,
)


class TestSplitArgs:
    def test_splits_on_commas(self) -> None:
        assert split_args("--baseline,qodana.sarif.json") == ["--baseline", "qodana.sarif.json"]

    def test_drops_empty_entries(self) -> None:
        assert split_args("") == []
        assert split_args("-l, ,jetbrains/qodana-jvm,") == ["-l", "jetbrains/qodana-jvm"]


class TestExtractArg:
    def test_short_form(self) -> None:
        assert extract_arg("-l", "--linter", ["-l", "jvm"]) == "jvm"

    def test_long_form(self) -> None:
        assert extract_arg("-l", "--linter", ["--linter", "jvm"]) == "jvm"

    def test_first_occurrence_wins(self) -> None:
        assert extract_arg("-l", "--linter", ["-l", "a", "--linter", "b"]) == "a"

    def test_missing_value(self) -> None:
        assert extract_arg("-l", "--linter", ["--linter"]) == ""

    def test_absent(self) -> None:
        assert extract_arg("-l", "--linter", ["--baseline", "x"]) == ""


class TestGetPullArgs:
    def test_no_flags(self) -> None:
        assert get_pull_args(["--baseline", "qodana.sarif.json"]) == ["pull"]

    def test_forwards_known_flags_in_short_form(self) -> None:
        args = ["--linter", "jetbrains/qodana-jvm", "--project-dir", "app", "--config", "q.yaml"]
        assert get_pull_args(args) == [
            "pull",
            "-l",
            "jetbrains/qodana-jvm",
            "-i",
            "app",
            "--config",
            "q.yaml",
        ]


class TestGetScanArgs:
    def test_directories_come_first(self) -> None:
        assert get_scan_args(["--baseline", "qodana.sarif.json"], "/tmp/res", "/tmp/cache") == [
            "scan",
            "--cache-dir",
            "/tmp/cache",
            "--results-dir",
            "/tmp/res",
            "--baseline",
            "qodana.sarif.json",
        ]


class TestBuildScanArgs:
    def make_inputs(self, pr_mode: bool = True) -> Inputs:
        return Inputs(
            args=("--baseline", "qodana.sarif.json"),
            results_dir="/tmp/res",
            cache_dir="/tmp/cache",
            pr_mode=pr_mode,
        )

    def test_non_pull_request(self) -> None:
        assert build_scan_args(self.make_inputs()) == [
            "scan",
            "--cache-dir",
            "/tmp/cache",
            "--results-dir",
            "/tmp/res",
            "--baseline",
            "qodana.sarif.json",
        ]

    def test_pull_request_adds_commit(self) -> None:
        args = build_scan_args(self.make_inputs(), pr_base_sha="deadbeef")
        assert args[-2:] == ["--commit", "CIdeadbeef"]

    def test_pr_mode_disabled(self) -> None:
        args = build_scan_args(self.make_inputs(pr_mode=False), pr_base_sha="deadbeef")
        assert "--commit" not in args

    def test_explicit_args_bypass_derivation(self) -> None:
        explicit = ["scan", "--print-problems"]
        assert build_scan_args(self.make_inputs(), "deadbeef", explicit) == explicit
