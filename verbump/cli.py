"""
Command-line entry point for verbump.

The ``cli`` group handles options shared by every command (config file,
verbosity, color) and stores them on a :class:`VerbumpContext`;
``main`` runs the group and turns its outcome into a process exit code.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from verbump.config import load_config
from verbump.__version__ import __version__
from verbump.context import VerbumpContext
from verbump.exceptions import ConfigError, VerbumpError
from verbump.utils.logger import get_logger, setup_logging
from verbump.utils.console import print_error, print_warning, reset_console
from verbump.commands.check import check
from verbump.commands.update import update

logger = get_logger("cli")

#: Log level per ``-v`` count; anything above the last entry is DEBUG.
VERBOSITY_LEVELS = (logging.WARNING, logging.INFO, logging.DEBUG)

EXIT_INTERRUPTED = 130


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    envvar="VERBUMP_CONFIG",
    help="Configuration file (default: verbump.toml or package.json).",
)
@click.option("--verbose", "-v", count=True, help="More output; repeat for debug logs.")
@click.option(
    "--color/--no-color",
    default=True,
    envvar="VERBUMP_COLOR",
    help="Colored terminal output.",
)
@click.version_option(__version__, prog_name="verbump", message="%(prog)s %(version)s")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: int, color: bool) -> None:
    """Find and apply dependency upgrades in package.json files.

    \b
    Examples:
      verbump check
      verbump check web/package.json --outdated-only
      verbump update --tier minor --dry-run
    """
    level = VERBOSITY_LEVELS[min(verbose, len(VERBOSITY_LEVELS) - 1)]
    setup_logging(level=level, verbose=verbose > 1)

    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reset_console()

    try:
        settings = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    state = ctx.ensure_object(VerbumpContext)
    state.config = settings
    state.config_path = config or settings.source_path
    state.verbose = verbose
    state.color = color
    logger.debug("verbump %s, config %s", __version__, state.config_path)


cli.add_command(check)
cli.add_command(update)


def main() -> int:
    """Run the CLI and return its exit code.

    0 success, 1 upgrades available or failure, 2 usage error,
    130 interrupted.
    """
    try:
        cli(standalone_mode=False)
    except click.ClickException as exc:
        exc.show()
        return exc.exit_code
    except (click.Abort, KeyboardInterrupt):
        print_warning("\nOperation cancelled by user")
        return EXIT_INTERRUPTED
    except SystemExit as exc:
        if isinstance(exc.code, int) or exc.code is None:
            return exc.code or 0
        return 1
    except VerbumpError as exc:
        print_error(str(exc))
        logger.debug("Unhandled error", exc_info=True)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
