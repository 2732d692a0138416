"""
Executable module for depbump.

Running:
    python -m depbump

is equivalent to:
    depbump
"""

from __future__ import annotations

import sys


def _print_startup_error(exc: ImportError) -> None:
    """Report a broken installation on stderr."""
    sys.stderr.write("depbump CLI could not be loaded.\n")
    sys.stderr.write(f"Python version : {sys.version}\n")
    try:
        from depbump.__version__ import __version__

        sys.stderr.write(f"depbump version: {__version__}\n")
    except ImportError:
        sys.stderr.write("depbump version: <unknown>\n")
    sys.stderr.write("\n")
    sys.stderr.write(f"ImportError: {exc}\n")


def main() -> int:
    """
    Main entrypoint when executing `python -m depbump`.

    Returns:
        Exit code returned by the CLI.
    """
    try:
        # Import lazily so dependencies are only loaded during CLI use
        from depbump.cli import main as cli_main
    except ImportError as exc:
        _print_startup_error(exc)
        return 1

    return cli_main()


if __name__ == "__main__":
    sys.exit(main())
