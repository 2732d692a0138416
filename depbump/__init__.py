"""
depbump: bump package.json dependencies to their latest releases.

depbump reads the nearest ``package.json``, asks the npm registry for the
latest published version of every dependency and devDependency, and
rewrites the manifest while keeping each entry's range operator
(``^``, ``~``, ``>=`` ...) intact.

Features include:
    • Range-operator preserving updates (``^1.0.0`` → ``^1.3.0``)
    • Concurrent registry lookups with bounded parallelism
    • Short-lived on-disk cache of registry answers
    • All-or-nothing writes: a failed lookup never leaves a half-updated file
    • JSON output mode for scripting
"""

from __future__ import annotations

from depbump.__version__ import __version__

# ---------------------------------------------------------------------------
# Package Metadata
# ---------------------------------------------------------------------------

__author__ = "depbump Contributors"
__license__ = "Apache-2.0"
__description__ = "Update package.json dependency ranges to the latest registry versions."

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "__version__",
]
