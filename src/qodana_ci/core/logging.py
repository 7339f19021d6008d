from __future__ import annotations

import logging
from typing import Optional


def configure_logging(
    *,
    debug: bool = False,
    quiet: bool = False,
    handler: Optional[logging.Handler] = None,
) -> None:
    """Configure root logging level based on CLI flags.

    Precedence:
    - quiet → ERROR
    - debug → DEBUG
    - default → INFO (the CI log is the only output channel)

    When a host handler is given it replaces the default stream handler so
    warnings and errors render as annotations of the CI platform.
    """

    if quiet:
        level = logging.ERROR
    elif debug:
        level = logging.DEBUG
    else:
        level = logging.INFO

    if handler is not None:
        logging.basicConfig(level=level, handlers=[handler], force=True)
    else:
        logging.basicConfig(
            level=level,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            force=True,
        )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a module-level logger."""

    return logging.getLogger(name if name is not None else __name__)
