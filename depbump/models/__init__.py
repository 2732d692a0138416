"""
Unified data model exports for depbump.

Example:
    >>> from depbump.models import Manifest, DependencyChange
"""

from __future__ import annotations

from depbump.models.manifest import Manifest
from depbump.models.change import DependencyChange, ManifestUpdate, ResolutionResult

__all__ = [
    "Manifest",
    "DependencyChange",
    "ResolutionResult",
    "ManifestUpdate",
]
