"""GitHub Actions environment and event payload."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path
from typing import Any, Dict, Mapping

from qodana_ci.core.logging import get_logger
from qodana_ci.providers.base import HostContext

LOGGER = get_logger(__name__)

DEFAULT_SERVER_URL = "https://github.com"


def load_event_payload(environ: Mapping[str, str]) -> Dict[str, Any]:
    """Load the webhook payload that triggered the workflow.

    Returns an empty dict when the payload file is missing or unreadable.
    """
    event_path = environ.get("GITHUB_EVENT_PATH")
    if not event_path:
        return {}
    path = Path(event_path)
    if not path.exists():
        LOGGER.debug(f"GITHUB_EVENT_PATH {event_path} does not exist")
        return {}
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        LOGGER.warning(f"Failed to read event payload {event_path}: {e}")
        return {}


def build_github_context(environ: Mapping[str, str]) -> HostContext:
    """Build a HostContext from the Actions environment."""
    payload = load_event_payload(environ)
    pull_request = payload.get("pull_request") or {}
    repository = payload.get("repository") or {}

    return HostContext(
        ref=payload.get("ref") or environ.get("GITHUB_REF", ""),
        sha=environ.get("GITHUB_SHA", ""),
        default_branch=repository.get("default_branch"),
        pr_base_sha=(pull_request.get("base") or {}).get("sha"),
        server_url=environ.get("GITHUB_SERVER_URL") or DEFAULT_SERVER_URL,
        temp_dir=environ.get("RUNNER_TEMP") or tempfile.gettempdir(),
        tool_cache=environ.get("RUNNER_TOOL_CACHE"),
        workspace=environ.get("GITHUB_WORKSPACE") or str(Path.cwd()),
        debug=environ.get("RUNNER_DEBUG") == "1",
        env=dict(environ),
    )
