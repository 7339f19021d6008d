"""CI host providers.

Each supported CI host implements the provider interfaces from
``qodana_ci.providers.base`` so the pipeline is written once.
"""

from __future__ import annotations

from typing import Callable, Dict, Mapping, Optional

from qodana_ci.providers.base import Host

HOST_NAMES = ("github", "azure")


def get_host(
    name: str,
    environ: Optional[Mapping[str, str]] = None,
    input_overrides: Optional[Mapping[str, str]] = None,
) -> Host:
    """Build the host bundle for a CI platform.

    Args:
        name: Host identifier ("github" or "azure").
        environ: Environment snapshot (os.environ if None).
        input_overrides: Input values replacing the host provided ones.

    Raises:
        KeyError: If the host is unknown.
    """
    from qodana_ci.providers.azure import create_azure_host
    from qodana_ci.providers.github import create_github_host

    factories: Dict[str, Callable[..., Host]] = {
        "github": create_github_host,
        "azure": create_azure_host,
    }
    if name not in factories:
        raise KeyError(f"Unknown CI host: {name}. Available: {', '.join(HOST_NAMES)}")
    return factories[name](environ, input_overrides)


__all__ = ["Host", "HOST_NAMES", "get_host"]
