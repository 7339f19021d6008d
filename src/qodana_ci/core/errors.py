"""Exception hierarchy for qodana-ci.

Only installation, configuration and tool-start failures are allowed to
escape to the CLI. Cache and artifact errors are caught by the bridges in
``qodana_ci.pipeline`` and downgraded to warnings.
"""

from __future__ import annotations


class QodanaCIError(Exception):
    """Base class for all qodana-ci errors."""

    pass


class ConfigError(QodanaCIError):
    """Invalid or unreadable configuration input."""

    pass


class ToolInstallError(QodanaCIError):
    """The Qodana CLI could not be acquired."""

    pass


class UnsupportedPlatformError(ToolInstallError):
    """No Qodana CLI build exists for the host platform."""

    pass


class DownloadError(ToolInstallError):
    """The CLI archive could not be downloaded."""

    pass


class ExtractionError(ToolInstallError):
    """The CLI archive could not be extracted."""

    pass


class ChecksumMismatchError(ToolInstallError):
    """The downloaded archive does not match its pinned SHA-256 checksum."""

    def __init__(self, expected: str, actual: str) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            "Downloaded Qodana CLI binary is corrupted. "
            f"Expected SHA-256 checksum: {expected}, actual checksum: {actual}"
        )


class ToolExecutionError(QodanaCIError):
    """The Qodana CLI process could not be started."""

    pass


class ProviderError(QodanaCIError):
    """A host platform service call failed."""

    pass


class CacheServiceError(ProviderError):
    """The host cache service rejected a request."""

    pass


class ArtifactServiceError(ProviderError):
    """The host artifact service rejected a request."""

    pass
