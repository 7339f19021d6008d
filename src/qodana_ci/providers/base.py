"""Provider interfaces over CI host services.

A host exposes four narrow capabilities to the pipeline: input resolution,
a cache service, an artifact service and host commands (search path,
run result, annotations). Environment reads are collected into a
HostContext once, so nothing downstream touches os.environ.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Mapping, Optional, Sequence

from qodana_ci.core.errors import CacheServiceError
from qodana_ci.core.models import Inputs


@dataclass(frozen=True)
class HostContext:
    """Snapshot of the host environment needed by the pipeline.

    Attributes:
        ref: Current git ref (e.g. "refs/heads/main").
        sha: Current commit SHA.
        default_branch: Repository default branch name, if known.
        pr_base_sha: Base commit of the pull request being built, if any.
        server_url: URL of the CI server.
        temp_dir: Scratch directory of the job.
        tool_cache: Tool cache directory of the runner, if any.
        workspace: Checked out repository directory.
        debug: Whether the host requested debug logging.
        env: Full environment passed to child processes.
    """

    ref: str = ""
    sha: str = ""
    default_branch: Optional[str] = None
    pr_base_sha: Optional[str] = None
    server_url: str = ""
    temp_dir: str = ""
    tool_cache: Optional[str] = None
    workspace: str = ""
    debug: bool = False
    env: Mapping[str, str] = field(default_factory=dict)

    @property
    def branch(self) -> str:
        """The current ref without its "refs/heads/" prefix."""
        prefix = "refs/heads/"
        return self.ref[len(prefix):] if self.ref.startswith(prefix) else self.ref


class InputProvider(ABC):
    """Read-only access to the host's named inputs."""

    @abstractmethod
    def get_input(self, name: str) -> str:
        """Return the trimmed string value of an input ("" if unset)."""

    @abstractmethod
    def get_bool(self, name: str, default: bool = False) -> bool:
        """Return a boolean input, or default if unset."""

    @abstractmethod
    def get_inputs(self) -> Inputs:
        """Resolve the full Inputs record for a run."""


class CacheProvider(ABC):
    """Save/restore primitives of a host cache service."""

    @abstractmethod
    def is_supported(self) -> bool:
        """Whether the host offers a cache service at all."""

    def unsupported_reason(self) -> str:
        return "Cache is not supported on this CI host"

    @abstractmethod
    def save(self, paths: Sequence[str], key: str) -> None:
        """Save the given paths under key.

        Raises:
            ProviderError: If the service rejects the entry.
        """

    @abstractmethod
    def restore(
        self, paths: Sequence[str], primary_key: str, restore_keys: Sequence[str]
    ) -> Optional[str]:
        """Restore the best matching entry into paths.

        Returns:
            The matched key, or None if nothing matched.
        """


class ArtifactProvider(ABC):
    """Upload primitive of a host artifact service."""

    @abstractmethod
    def upload(
        self,
        name: str,
        files: Sequence[Path],
        root_dir: Path,
        continue_on_error: bool = True,
    ) -> None:
        """Upload files as one named artifact, paths relative to root_dir."""


class HostCommands(ABC):
    """Side-channel commands understood by the host."""

    @abstractmethod
    def add_path(self, directory: Path) -> None:
        """Prepend a directory to the search path of this and later steps."""

    @abstractmethod
    def set_failed(self, message: str) -> None:
        """Mark the run failed with a message."""

    @abstractmethod
    def log_handler(self) -> logging.Handler:
        """Logging handler rendering records in the host's log syntax."""


class NullCacheProvider(CacheProvider):
    """Cache provider for hosts without a cache service."""

    def is_supported(self) -> bool:
        return False

    def save(self, paths: Sequence[str], key: str) -> None:
        raise CacheServiceError("Cache is not supported on this host")

    def restore(
        self, paths: Sequence[str], primary_key: str, restore_keys: Sequence[str]
    ) -> Optional[str]:
        raise CacheServiceError("Cache is not supported on this host")


@dataclass
class Host:
    """All capabilities of one CI host, bundled for the pipeline."""

    name: str
    context: HostContext
    inputs: InputProvider
    cache: CacheProvider
    artifacts: ArtifactProvider
    commands: HostCommands


def apply_input_overrides(
    environ: Mapping[str, str],
    overrides: Optional[Mapping[str, str]],
    env_name: Callable[[str], str],
) -> Mapping[str, str]:
    """Return environ with input overrides mapped to their variable names.

    Args:
        environ: Environment snapshot.
        overrides: Input values keyed by input name.
        env_name: Host function mapping an input name to its variable name.
    """
    if not overrides:
        return environ
    merged = dict(environ)
    for name, value in overrides.items():
        merged[env_name(name)] = value
    return merged
