"""
Console output utilities for depbump using Rich.

This module provides user-facing output helpers for the CLI.
For diagnostic or debug output, use :mod:`depbump.utils.logger`.

Guidelines:
- print_* functions: user-facing status messages
- print_change / print_done: the update report
- Logging should never go through this module
"""

from __future__ import annotations

import os
import sys
import threading
from contextlib import contextmanager
from typing import Iterator, Mapping, Optional

from rich.theme import Theme
from rich.markup import escape
from rich.console import Console

# ---------------------------------------------------------------------------
# Theme configuration
# ---------------------------------------------------------------------------

DEPBUMP_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
        "dim": "dim",
        "old": "red",
        "new": "green",
    }
)

# ---------------------------------------------------------------------------
# Console lifecycle management
# ---------------------------------------------------------------------------

_console: Optional[Console] = None
_console_lock = threading.Lock()
_use_stderr = False


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stdout.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return a singleton Rich Console instance."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    theme=DEPBUMP_THEME,
                    no_color=not use_color,
                    highlight=False,
                    soft_wrap=True,
                    stderr=_use_stderr,
                )
    return _console


def reconfigure_console() -> None:
    """Reset the global console instance.

    Useful if environment variables (e.g. NO_COLOR) change at runtime.
    """
    global _console
    with _console_lock:
        _console = None


@contextmanager
def status_to_stderr(enabled: bool = True) -> Iterator[None]:
    """Send console output to stderr while the block runs.

    ``--json`` uses this so that stdout carries nothing but the manifest.
    """
    global _console, _use_stderr
    with _console_lock:
        previous = _use_stderr
        _use_stderr = enabled
        _console = None
    try:
        yield
    finally:
        with _console_lock:
            _use_stderr = previous
            _console = None


# ---------------------------------------------------------------------------
# Status message helpers
# ---------------------------------------------------------------------------


def print_success(message: str) -> None:
    """Print a success message."""
    _get_console().print(escape(message), style="success")


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    """Print an error message."""
    _get_console().print(escape(f"{prefix} {message}"), style="error")


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    """Print a warning message."""
    _get_console().print(escape(f"{prefix} {message}"), style="warning")


# ---------------------------------------------------------------------------
# Update report
# ---------------------------------------------------------------------------


def print_change(name: str, old_range: str, new_range: str) -> None:
    """Print one ``<name> <old> → <new>`` line, old in red and new in green."""
    _get_console().print(
        f"{escape(name)} [old]{escape(old_range)}[/old] → [new]{escape(new_range)}[/new]"
    )


def print_done(elapsed: float) -> None:
    """Print the closing line with the elapsed wall-clock time in seconds."""
    _get_console().print(f"\n✨  Done in {elapsed:.2f}s")


def colorize_update_type(update_type: str) -> str:
    """Return a Rich-markup colored update type label.

    Args:
        update_type: Update classification string.

    Returns:
        Rich markup string.
    """
    color_map = {
        "major": "red",
        "minor": "yellow",
        "patch": "green",
        "downgrade": "red",
        "update": "yellow",
    }

    color = color_map.get(update_type.lower())
    return f"[{color}]{update_type}[/{color}]" if color else update_type


def print_summary(counts: Mapping[str, int]) -> None:
    """Print a one-line breakdown of applied changes by update type.

    Args:
        counts: Mapping of update type (``major``/``minor``/...) to count.
    """
    if not counts:
        return
    parts = [f"{colorize_update_type(kind)}: {count}" for kind, count in counts.items()]
    total = sum(counts.values())
    plural = "package" if total == 1 else "packages"
    _get_console().print(f"\n{total} {plural} updated ({', '.join(parts)})", style="dim")


def get_raw_console() -> Console:
    """Return the underlying Rich Console instance."""
    return _get_console()
