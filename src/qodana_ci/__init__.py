"""qodana-ci: Qodana CLI integration for GitHub Actions and Azure Pipelines."""

__version__ = "0.1.0"
