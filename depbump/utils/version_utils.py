"""
Version range helpers for depbump.

This module knows how npm-style range strings are put together: an
optional operator prefix followed by a version number, or one of the
sentinel values that mean "always take whatever is newest". It also
classifies version changes (major/minor/patch) for reporting.
"""

from __future__ import annotations

from typing import Optional, Tuple

from packaging.version import InvalidVersion, Version, parse

from depbump.constants import SENTINEL_RANGES

#: Operators depbump recognizes at the start of a range string.
RANGE_OPERATORS: Tuple[str, ...] = ("", "=", "~", "^", "<", ">", "<=", ">=")


def detect_range(version: str) -> str:
    """Return the leading range operator of ``version``.

    ``<`` and ``>`` absorb a following ``=``; ``=``, ``~`` and ``^`` are
    single-character operators. Anything else is a bare version and
    yields ``""``. An empty string also yields ``""``.

    Examples:
        >>> detect_range("^1.2.3")
        '^'
        >>> detect_range(">=2.0.0")
        '>='
        >>> detect_range("1.2.3")
        ''
    """
    if not version:
        return ""

    first_char = version[0]
    second_char = version[1:2]

    if first_char in "<>":
        if second_char == "=":
            return version[:2]
        return first_char

    if first_char in "=~^":
        return first_char

    return ""


def strip_range(version: str) -> str:
    """Return ``version`` without its leading range operator."""
    return version[len(detect_range(version)):]


def build_range(operator: str, version: str) -> str:
    """Join a range operator and a bare version number."""
    return f"{operator}{version}"


def is_sentinel_range(version: str) -> bool:
    """Return True for ranges that are never pinned (``latest`` and ``*``)."""
    return version.strip() in SENTINEL_RANGES


def get_update_type(
    current_version: Optional[str],
    target_version: Optional[str],
) -> str:
    """Determine the semantic update type between two versions.

    Range operators are ignored, so ``"^1.0.0"`` and ``"1.3.0"`` compare
    as ``1.0.0`` against ``1.3.0``.

    Returns:
        One of:
            - ``"new"``       : No current version exists
            - ``"same"``      : Versions are identical
            - ``"downgrade"`` : Target version is lower than current
            - ``"major"``     : Major version change
            - ``"minor"``     : Minor version change
            - ``"patch"``     : Patch-level change
            - ``"update"``    : Update that cannot be classified further
            - ``"unknown"``   : Invalid or unsupported version comparison

    Examples:
        >>> get_update_type("^1.0.0", "^2.0.0")
        'major'
        >>> get_update_type(None, "1.0.0")
        'new'
    """
    if current_version is None and target_version is None:
        return "unknown"

    if current_version is None:
        return "new"

    if target_version is None:
        return "unknown"

    try:
        current = _parse_version(strip_range(current_version.strip()))
        target = _parse_version(strip_range(target_version.strip()))
    except InvalidVersion:
        return "unknown"

    if target == current:
        return "same"

    if target < current:
        return "downgrade"

    return _classify_upgrade(current, target)


def _parse_version(value: str) -> Version:
    """Parse a version string, accepting a leading ``v`` as npm does."""
    parsed = parse(value.lstrip("vV"))
    if not isinstance(parsed, Version):
        raise InvalidVersion(value)
    return parsed


def _classify_upgrade(current: Version, target: Version) -> str:
    """Classify an upgrade between two valid versions."""
    current_major, current_minor, current_patch = _normalize_release(current)
    target_major, target_minor, target_patch = _normalize_release(target)

    if current_major != target_major:
        return "major"

    if current_minor != target_minor:
        return "minor"

    if current_patch != target_patch:
        return "patch"

    # Pre-release → release or metadata-only updates
    return "update"


def _normalize_release(version: Version) -> Tuple[int, int, int]:
    """Normalize a version's release segment to (major, minor, patch)."""
    release = version.release
    major = release[0] if len(release) > 0 else 0
    minor = release[1] if len(release) > 1 else 0
    patch = release[2] if len(release) > 2 else 0
    return major, minor, patch
