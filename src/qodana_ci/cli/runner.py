"""CLI runner orchestration.

This module handles command dispatch and execution for the qodana-ci CLI.
"""

from __future__ import annotations

import os
from typing import Iterable, Mapping, Optional

from importlib.metadata import version, PackageNotFoundError

from qodana_ci.cli.arguments import build_parser
from qodana_ci.cli.commands.run import RunCommand
from qodana_ci.cli.commands.status import StatusCommand
from qodana_ci.cli.exit_codes import EXIT_INVALID_USAGE, EXIT_SUCCESS
from qodana_ci.config import load_inputs_file
from qodana_ci.core.errors import ConfigError
from qodana_ci.core.logging import configure_logging, get_logger
from qodana_ci.providers import HOST_NAMES, get_host

LOGGER = get_logger(__name__)


def get_version() -> str:
    """Get qodana-ci version.

    Returns:
        Version string from package metadata or fallback.
    """
    try:
        return version("qodana-ci")
    except PackageNotFoundError:
        # Fallback for editable installs that have not yet built metadata.
        from qodana_ci import __version__
        return __version__


class CLIRunner:
    """Orchestrates CLI execution with subcommand dispatch.

    Args:
        environ: Environment snapshot handed to hosts (os.environ if None).
    """

    def __init__(self, environ: Optional[Mapping[str, str]] = None) -> None:
        self.parser = build_parser()
        self._version = get_version()
        self._environ = dict(os.environ) if environ is None else dict(environ)
        self.status_cmd = StatusCommand(version=self._version)

    def run(self, argv: Optional[Iterable[str]] = None) -> int:
        """Run the CLI.

        Args:
            argv: Command-line arguments (defaults to sys.argv).

        Returns:
            Exit code.
        """
        args = self.parser.parse_args(list(argv) if argv is not None else None)

        if args.version:
            print(self._version)
            return EXIT_SUCCESS

        command = getattr(args, "command", None)

        if command in HOST_NAMES:
            return self._handle_host(args)
        elif command == "status":
            configure_logging(debug=args.debug, quiet=args.quiet)
            return self.status_cmd.execute(args)
        else:
            self.parser.print_help()
            return EXIT_SUCCESS

    def _handle_host(self, args) -> int:
        """Handle a pipeline run on a CI host.

        Args:
            args: Parsed command-line arguments.

        Returns:
            Exit code.
        """
        overrides = None
        if args.inputs_file is not None:
            try:
                overrides = load_inputs_file(args.inputs_file, self._environ)
            except ConfigError as e:
                configure_logging(debug=args.debug, quiet=args.quiet)
                LOGGER.error(str(e))
                return EXIT_INVALID_USAGE

        host = get_host(args.command, self._environ, overrides)
        configure_logging(
            debug=args.debug or host.context.debug,
            quiet=args.quiet,
            handler=host.commands.log_handler(),
        )
        LOGGER.debug(f"qodana-ci {self._version} running on {host.name}")
        return RunCommand(host).execute(args)
