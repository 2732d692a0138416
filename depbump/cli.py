"""
Command-line interface for depbump.

This module provides the CLI entry point: option parsing, configuration
loading, logging setup, and the mapping of errors to exit codes.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import List, Optional, Tuple

import click

from depbump.config import load_config
from depbump.__version__ import __version__
from depbump.constants import CONFIG_ENV_VAR
from depbump.exceptions import ConfigError, DepbumpError
from depbump.commands.update import UpdateOptions, run_update
from depbump.utils.logger import get_logger, setup_logging
from depbump.utils.console import print_error, print_warning, reconfigure_console

logger = get_logger("cli")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--input",
    "-i",
    "input_path",
    type=click.Path(path_type=Path),
    default=None,
    help="Path of a package.json file, or a directory to search upward from "
    "(defaults to the nearest package.json).",
)
@click.option(
    "--exclude",
    "-e",
    multiple=True,
    metavar="PKG,...",
    help="Comma-separated packages to leave untouched (can be repeated).",
)
@click.option(
    "--json",
    "-j",
    "json_output",
    is_flag=True,
    help="Print the resulting package.json instead of writing it.",
)
@click.option(
    "--no-cache",
    is_flag=True,
    help="Always ask the registry; ignore and do not update the version cache.",
)
@click.option(
    "--concurrency",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum registry lookups in flight per dependency section.",
)
@click.option(
    "--registry",
    default=None,
    metavar="URL",
    help="Registry base URL (defaults to $npm_config_registry or npmjs.org).",
)
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar=CONFIG_ENV_VAR,
)
@click.option(
    "--verbose",
    count=True,
    help="Increase verbosity (can be repeated: --verbose --verbose).",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="DEPBUMP_COLOR",
)
@click.version_option(
    __version__,
    "--version",
    "-v",
    prog_name="depbump",
    message="%(prog)s %(version)s",
)
def cli(
    input_path: Optional[Path],
    exclude: Tuple[str, ...],
    json_output: bool,
    no_cache: bool,
    concurrency: Optional[int],
    registry: Optional[str],
    config: Optional[Path],
    verbose: int,
    color: bool,
) -> None:
    """Update package.json dependencies to their latest versions.

    Range operators are kept: ^1.0.0 becomes ^1.3.0, ~2.1.0 becomes ~2.4.1.
    Entries set to "latest" or "*" are never touched.

    \b
    Examples:
      depbump
      depbump --input test/ -e chalk,lodash
      depbump --json > package.next.json
    """
    _configure_logging(verbose)

    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        raise SystemExit(1) from exc

    logger.debug("depbump v%s", __version__)
    if loaded_config.source_path:
        logger.debug("Loaded configuration: %s", loaded_config.to_log_dict())

    options = UpdateOptions.from_config(
        loaded_config,
        input_path=input_path,
        exclude=exclude,
        json_output=json_output,
        no_cache=no_cache,
        concurrency=concurrency,
        registry=registry,
    )
    logger.debug("Options: %s", options)

    run_update(options)


def _configure_logging(verbose: int) -> None:
    """Configure logging level based on verbosity flags."""
    if verbose <= 0:
        level = logging.WARNING
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.DEBUG

    setup_logging(level=level, verbose=verbose >= 2)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the depbump CLI.

    Returns:
        Exit code:
            0   Success (including "Everything up-to-date")
            1   Unhandled or application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli.main(args=argv, prog_name="depbump", standalone_mode=False)
        # --help and --version come back as an exit code
        return result if isinstance(result, int) else 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except click.Abort:
        print_warning("\nOperation cancelled by user")
        return 130

    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else 1

    except DepbumpError as exc:
        print_error(str(exc))
        logger.debug(
            "DepbumpError details: %s",
            exc.details or "<none>",
            exc_info=True,
        )
        return 1

    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
