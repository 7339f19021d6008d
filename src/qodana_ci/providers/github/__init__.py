"""GitHub Actions host."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from qodana_ci.providers.base import Host, apply_input_overrides
from qodana_ci.providers.github.artifact import GitHubArtifactProvider
from qodana_ci.providers.github.cache import GitHubCacheProvider
from qodana_ci.providers.github.commands import GitHubCommands
from qodana_ci.providers.github.context import build_github_context
from qodana_ci.providers.github.inputs import GitHubInputProvider, input_env_name
from qodana_ci.providers.github.results_api import ResultsServiceClient


def create_github_host(
    environ: Optional[Mapping[str, str]] = None,
    input_overrides: Optional[Mapping[str, str]] = None,
) -> Host:
    """Assemble the GitHub Actions providers from the step environment."""
    env = apply_input_overrides(
        dict(os.environ) if environ is None else environ, input_overrides, input_env_name
    )
    context = build_github_context(env)
    temp_dir = Path(context.temp_dir)

    def client_factory() -> ResultsServiceClient:
        return ResultsServiceClient.from_env(env)

    return Host(
        name="github",
        context=context,
        inputs=GitHubInputProvider(env, context),
        cache=GitHubCacheProvider(context.server_url, client_factory, temp_dir),
        artifacts=GitHubArtifactProvider(client_factory, temp_dir),
        commands=GitHubCommands(env),
    )


__all__ = ["create_github_host"]
