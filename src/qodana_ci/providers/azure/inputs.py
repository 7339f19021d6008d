"""Azure Pipelines task input resolution.

Task inputs are exposed as `INPUT_{NAME}` with dots and spaces replaced by
underscores. Booleans are true only for a case-insensitive "true".
"""

from __future__ import annotations

import os
from typing import Mapping

from qodana_ci.core.models import Inputs
from qodana_ci.providers.base import HostContext, InputProvider
from qodana_ci.qodana.arguments import split_args

DEFAULT_ARTIFACT_NAME = "qodana-report"


def input_env_name(name: str) -> str:
    return f"INPUT_{name.replace('.', '_').replace(' ', '_').upper()}"


class AzureInputProvider(InputProvider):
    """Reads task inputs from the task environment."""

    def __init__(self, environ: Mapping[str, str], context: HostContext) -> None:
        self._environ = environ
        self._context = context

    def get_input(self, name: str) -> str:
        return self._environ.get(input_env_name(name), "").strip()

    def get_bool(self, name: str, default: bool = False) -> bool:
        value = self.get_input(name)
        if not value:
            return default
        return value.upper() == "TRUE"

    def get_inputs(self) -> Inputs:
        home = os.path.join(self._context.temp_dir, "qodana")
        # The task has no cache service, annotations or PR mode
        return Inputs(
            args=tuple(split_args(self.get_input("args"))),
            results_dir=self.get_input("resultsDir") or os.path.join(home, "results"),
            cache_dir=self.get_input("cacheDir") or os.path.join(home, "cache"),
            upload_result=self.get_bool("uploadResult", True),
            artifact_name=self.get_input("artifactName") or DEFAULT_ARTIFACT_NAME,
            primary_cache_key="",
            additional_cache_key="",
            use_annotations=False,
            use_caches=False,
            cache_default_branch_only=False,
            pr_mode=False,
        )
