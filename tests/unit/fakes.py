"""In-memory CI host providers for unit tests."""

from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import List, Optional, Sequence, Tuple


from qodana_ci.core.models import Inputs
from qodana_ci.providers.base import (
    ArtifactProvider,
    CacheProvider,
    Host,
    HostCommands,
    HostContext,
    InputProvider,
)


class FakeInputProvider(InputProvider):
    def __init__(self, inputs: Inputs) -> None:
        self._inputs = inputs

    def get_input(self, name: str) -> str:
        return ""

    def get_bool(self, name: str, default: bool = False) -> bool:
        return default

    def get_inputs(self) -> Inputs:
        return self._inputs


class FakeCacheProvider(CacheProvider):
    def __init__(
        self,
        supported: bool = True,
        matched_key: Optional[str] = None,
        save_error: Optional[Exception] = None,
        restore_error: Optional[Exception] = None,
    ) -> None:
        self.supported = supported
        self.matched_key = matched_key
        self.save_error = save_error
        self.restore_error = restore_error
        self.saved: List[Tuple[List[str], str]] = []
        self.restored: List[Tuple[List[str], str, List[str]]] = []

    def is_supported(self) -> bool:
        return self.supported

    def save(self, paths: Sequence[str], key: str) -> None:
        self.saved.append((list(paths), key))
        if self.save_error is not None:
            raise self.save_error

    def restore(
        self, paths: Sequence[str], primary_key: str, restore_keys: Sequence[str]
    ) -> Optional[str]:
        self.restored.append((list(paths), primary_key, list(restore_keys)))
        if self.restore_error is not None:
            raise self.restore_error
        return self.matched_key


class FakeArtifactProvider(ArtifactProvider):
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.uploads: List[Tuple[str, List[Path], Path, bool]] = []

    def upload(
        self,
        name: str,
        files: Sequence[Path],
        root_dir: Path,
        continue_on_error: bool = True,
    ) -> None:
        self.uploads.append((name, list(files), root_dir, continue_on_error))
        if self.error is not None:
            raise self.error


class FakeCommands(HostCommands):
    def __init__(self) -> None:
        self.paths: List[Path] = []
        self.failures: List[str] = []
        self.stream = io.StringIO()

    def add_path(self, directory: Path) -> None:
        self.paths.append(directory)

    def set_failed(self, message: str) -> None:
        self.failures.append(message)

    def log_handler(self) -> logging.Handler:
        return logging.StreamHandler(self.stream)


def make_host(
    inputs: Optional[Inputs] = None,
    context: Optional[HostContext] = None,
    cache: Optional[CacheProvider] = None,
    artifacts: Optional[ArtifactProvider] = None,
) -> Host:
    return Host(
        name="fake",
        context=context or HostContext(ref="refs/heads/main", sha="abc123"),
        inputs=FakeInputProvider(inputs or Inputs()),
        cache=cache or FakeCacheProvider(),
        artifacts=artifacts or FakeArtifactProvider(),
        commands=FakeCommands(),
    )
