"""
Utility helpers for depbump.

This package provides reusable utilities used across depbump, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers
- Async HTTP client utilities
- Version range helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from depbump.utils.filesystem import (
    find_up,
    safe_read_file,
    safe_write_file,
)

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from depbump.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from depbump.utils.console import (
    colorize_update_type,
    get_raw_console,
    print_change,
    print_done,
    print_error,
    print_success,
    print_summary,
    print_warning,
    reconfigure_console,
    status_to_stderr,
)

# ---------------------------------------------------------------------------
# HTTP utilities
# ---------------------------------------------------------------------------

from depbump.utils.http import HTTPClient

# ---------------------------------------------------------------------------
# Version utilities
# ---------------------------------------------------------------------------

from depbump.utils.version_utils import (
    build_range,
    detect_range,
    get_update_type,
    is_sentinel_range,
    strip_range,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_success",
    "print_warning",
    "print_change",
    "print_done",
    "print_summary",
    "get_raw_console",
    "reconfigure_console",
    "status_to_stderr",
    "colorize_update_type",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    # Filesystem
    "find_up",
    "safe_read_file",
    "safe_write_file",
    # HTTP
    "HTTPClient",
    # Version utilities
    "build_range",
    "detect_range",
    "strip_range",
    "is_sentinel_range",
    "get_update_type",
]
