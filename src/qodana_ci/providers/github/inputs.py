"""GitHub Actions input resolution.

Follows the rules of the Actions runner: an input `foo bar` is exposed as
the environment variable `INPUT_FOO BAR` with spaces replaced by
underscores, and booleans must be one of the YAML 1.2 core schema values.
"""

from __future__ import annotations

import os
from typing import Mapping

from qodana_ci.core.errors import ConfigError
from qodana_ci.core.models import Inputs
from qodana_ci.providers.base import HostContext, InputProvider
from qodana_ci.qodana.arguments import split_args

_TRUE_VALUES = ("true", "True", "TRUE")
_FALSE_VALUES = ("false", "False", "FALSE")

# Defaults declared by the action manifest
DEFAULT_ARTIFACT_NAME = "qodana-report"


def input_env_name(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


class GitHubInputProvider(InputProvider):
    """Reads action inputs from the step environment."""

    def __init__(self, environ: Mapping[str, str], context: HostContext) -> None:
        self._environ = environ
        self._context = context

    def get_input(self, name: str) -> str:
        return self._environ.get(input_env_name(name), "").strip()

    def get_bool(self, name: str, default: bool = False) -> bool:
        value = self.get_input(name)
        if not value:
            return default
        if value in _TRUE_VALUES:
            return True
        if value in _FALSE_VALUES:
            return False
        raise ConfigError(
            f'Input does not meet YAML 1.2 "Core Schema" specification: {name}\n'
            "Support boolean input list: `true | True | TRUE | false | False | FALSE`"
        )

    def get_inputs(self) -> Inputs:
        home = os.path.join(self._context.temp_dir, "qodana")
        return Inputs(
            args=tuple(split_args(self.get_input("args"))),
            results_dir=self.get_input("results-dir") or os.path.join(home, "results"),
            cache_dir=self.get_input("cache-dir") or os.path.join(home, "caches"),
            primary_cache_key=self.get_input("primary-cache-key"),
            additional_cache_key=(
                self.get_input("additional-cache-key")
                or self.get_input("additional-cache-hash")
            ),
            cache_default_branch_only=self.get_bool("cache-default-branch-only", False),
            upload_result=self.get_bool("upload-result", True),
            artifact_name=self.get_input("artifact-name") or DEFAULT_ARTIFACT_NAME,
            use_caches=self.get_bool("use-caches", True),
            use_annotations=self.get_bool("use-annotations", True),
            pr_mode=self.get_bool("pr-mode", True),
        )
