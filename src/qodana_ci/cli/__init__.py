"""Command-line entry point for qodana-ci."""

from __future__ import annotations

import sys
from typing import Iterable, Optional

from qodana_ci.cli.runner import CLIRunner


def main(argv: Optional[Iterable[str]] = None) -> int:
    return CLIRunner().run(argv)


if __name__ == "__main__":
    sys.exit(main())
