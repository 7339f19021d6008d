"""Azure Pipelines host."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Mapping, Optional

from qodana_ci.providers.azure.artifact import AzureArtifactProvider
from qodana_ci.providers.azure.commands import AzureCommands
from qodana_ci.providers.azure.inputs import AzureInputProvider, input_env_name
from qodana_ci.providers.base import (
    Host,
    HostContext,
    NullCacheProvider,
    apply_input_overrides,
)


def build_azure_context(environ: Mapping[str, str]) -> HostContext:
    """Build a HostContext from the agent's predefined variables."""
    return HostContext(
        ref=environ.get("BUILD_SOURCEBRANCH", ""),
        sha=environ.get("BUILD_SOURCEVERSION", ""),
        server_url=environ.get("SYSTEM_COLLECTIONURI", ""),
        temp_dir=environ.get("AGENT_TEMPDIRECTORY") or tempfile.gettempdir(),
        tool_cache=environ.get("AGENT_TOOLSDIRECTORY"),
        workspace=environ.get("BUILD_SOURCESDIRECTORY") or str(Path.cwd()),
        debug=environ.get("SYSTEM_DEBUG", "").lower() == "true",
        env=dict(environ),
    )


def create_azure_host(
    environ: Optional[Mapping[str, str]] = None,
    input_overrides: Optional[Mapping[str, str]] = None,
) -> Host:
    """Assemble the Azure Pipelines providers from the task environment."""
    env = apply_input_overrides(
        dict(os.environ) if environ is None else environ, input_overrides, input_env_name
    )
    context = build_azure_context(env)
    commands = AzureCommands()
    return Host(
        name="azure",
        context=context,
        inputs=AzureInputProvider(env, context),
        cache=NullCacheProvider(),
        artifacts=AzureArtifactProvider(commands),
        commands=commands,
    )


__all__ = ["create_azure_host", "build_azure_context"]
