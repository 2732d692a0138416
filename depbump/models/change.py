"""
Update result data models for depbump.

This module defines what the resolver produces: individual dependency
changes, the outcome of resolving one dependency section, and the
combined outcome for a whole manifest.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

from depbump.utils.version_utils import get_update_type


@dataclass(frozen=True)
class DependencyChange:
    """A single range rewrite produced by the resolver.

    Args:
        name: Package name as written in the manifest.
        previous: Range string before the update.
        new: Range string after the update.
        section: Manifest section the entry lives in.
    """

    name: str
    previous: str
    new: str
    section: str = "dependencies"

    @property
    def update_type(self) -> str:
        """Classification of the change (major/minor/patch/...)."""
        return get_update_type(self.previous, self.new)

    def to_display_string(self) -> str:
        """Return the plain ``<name> <old> → <new>`` line."""
        return f"{self.name} {self.previous} → {self.new}"

    def to_json(self) -> Dict[str, str]:
        """Return a JSON-serializable representation."""
        return {
            "name": self.name,
            "previous": self.previous,
            "new": self.new,
            "section": self.section,
        }

    def __str__(self) -> str:
        return self.to_display_string()


@dataclass
class ResolutionResult:
    """Outcome of resolving one dependency section.

    Attributes:
        section: Manifest section name.
        updated: Full dependency map with changed entries substituted,
            in the original key order.
        changes: Changes in the order their lookups completed.
    """

    section: str
    updated: Dict[str, str] = field(default_factory=dict)
    changes: List[DependencyChange] = field(default_factory=list)

    def has_changes(self) -> bool:
        """Return True if at least one entry changed."""
        return bool(self.changes)

    def __len__(self) -> int:
        return len(self.changes)

    def __iter__(self) -> Iterator[DependencyChange]:
        return iter(self.changes)


@dataclass
class ManifestUpdate:
    """Combined outcome for the ``dependencies`` and ``devDependencies`` passes."""

    dependencies: ResolutionResult
    dev_dependencies: ResolutionResult

    @property
    def changes(self) -> List[DependencyChange]:
        """All changes, dependencies first."""
        return [*self.dependencies.changes, *self.dev_dependencies.changes]

    def is_noop(self) -> bool:
        """Return True when neither section changed."""
        return not self.dependencies.has_changes() and not self.dev_dependencies.has_changes()

    def count_by_update_type(self) -> Dict[str, int]:
        """Count changes per update type, most frequent first."""
        return dict(Counter(change.update_type for change in self.changes).most_common())

    def find(self, name: str) -> Optional[DependencyChange]:
        """Return the first change for ``name``, if any."""
        for change in self.changes:
            if change.name == name:
                return change
        return None
