"""
Core functionality exports for depbump.

Importing from here keeps user-facing imports clean and stable:

    from depbump.core import UpdateResolver, RegistryClient
"""

from __future__ import annotations

from depbump.core.cache import VersionCache
from depbump.core.locator import locate_manifest
from depbump.core.registry import RegistryClient
from depbump.core.resolver import UpdateResolver
from depbump.core.manifest import (
    merge_manifest,
    parse_manifest,
    read_manifest,
    serialize_manifest,
    write_manifest,
)

__all__ = [
    "VersionCache",
    "RegistryClient",
    "UpdateResolver",
    "locate_manifest",
    "read_manifest",
    "parse_manifest",
    "merge_manifest",
    "serialize_manifest",
    "write_manifest",
]
