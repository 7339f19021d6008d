"""Inputs file loading.

An inputs file is a YAML mapping of host input names to values, e.g.

    args: --linter,jetbrains/qodana-jvm,--baseline,qodana.sarif.json
    results-dir: ${RUNNER_TEMP:-/tmp}/qodana/results
    use-caches: false

It replays a CI run locally: values replace the ones the host provides.
Environment variables are expanded as ${VAR} or ${VAR:-default}.
"""

from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Mapping

import yaml

from qodana_ci.core.errors import ConfigError
from qodana_ci.core.logging import get_logger

LOGGER = get_logger(__name__)

# Environment variable pattern: ${VAR} or ${VAR:-default}
ENV_VAR_PATTERN = re.compile(r"\$\{([^}:]+)(?::-([^}]*))?\}")


def expand_env_vars(value: str, environ: Mapping[str, str]) -> str:
    """Expand ${VAR} and ${VAR:-default} references in a string."""

    def replace(match: "re.Match[str]") -> str:
        name, default = match.group(1), match.group(2)
        resolved = environ.get(name)
        if resolved:
            return resolved
        if default is not None:
            return default
        LOGGER.warning(f"Environment variable {name} is not set")
        return ""

    return ENV_VAR_PATTERN.sub(replace, value)


def _to_input_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value)
    if value is None:
        return ""
    return str(value)


def load_inputs_file(path: Path, environ: Mapping[str, str]) -> Dict[str, str]:
    """Load input overrides from a YAML file.

    Lists are joined with commas (the `args` input format) and booleans are
    rendered as "true"/"false".

    Raises:
        ConfigError: If the file is missing, not valid YAML or not a mapping.
    """
    if not path.exists():
        raise ConfigError(f"Inputs file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Inputs file {path} must contain a mapping, got {type(data).__name__}")

    inputs = {
        str(key): expand_env_vars(_to_input_value(value), environ)
        for key, value in data.items()
    }
    LOGGER.debug(f"Loaded {len(inputs)} inputs from {path}")
    return inputs
