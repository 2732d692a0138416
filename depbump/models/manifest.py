"""
Manifest data model for depbump.

A :class:`Manifest` is an ordered ``package.json`` document. Only the
``dependencies`` and ``devDependencies`` sections are interpreted; every
other field is carried through untouched.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

from depbump.constants import DEPENDENCY_SECTIONS
from depbump.exceptions import ManifestParseError


class Manifest:
    """Ordered package manifest with typed access to dependency sections.

    Args:
        data: Parsed JSON object, in document order.
        path: File the manifest was read from, if any.

    Raises:
        ManifestParseError: A dependency section is not an object of
            string values.
    """

    __slots__ = ("_data", "path")

    def __init__(
        self,
        data: Mapping[str, Any],
        *,
        path: Optional[Path] = None,
    ) -> None:
        self._data: Dict[str, Any] = dict(data)
        self.path = path
        for section in DEPENDENCY_SECTIONS:
            self._validate_section(section)

    def _validate_section(self, section: str) -> None:
        if section not in self._data:
            return
        value = self._data[section]
        file_path = str(self.path) if self.path else None
        if not isinstance(value, dict):
            raise ManifestParseError(
                f"'{section}' must be an object, got {type(value).__name__}",
                file_path=file_path,
                field=section,
            )
        for name, spec in value.items():
            if not isinstance(spec, str):
                raise ManifestParseError(
                    f"Version range for '{name}' in '{section}' must be a string",
                    file_path=file_path,
                    field=section,
                )

    # ------------------------------------------------------------------
    # Dependency sections
    # ------------------------------------------------------------------

    @property
    def dependencies(self) -> Dict[str, str]:
        """Copy of the ``dependencies`` section (empty if absent)."""
        return self.get_section("dependencies")

    @property
    def dev_dependencies(self) -> Dict[str, str]:
        """Copy of the ``devDependencies`` section (empty if absent)."""
        return self.get_section("devDependencies")

    def get_section(self, section: str) -> Dict[str, str]:
        return dict(self._data.get(section) or {})

    def has_section(self, section: str) -> bool:
        return section in self._data

    # ------------------------------------------------------------------
    # Generic ordered-mapping access
    # ------------------------------------------------------------------

    def without(self, fields: Iterable[str]) -> "Manifest":
        """Return a copy with the given top-level fields deleted."""
        dropped = set(fields)
        return Manifest(
            {key: value for key, value in self._data.items() if key not in dropped},
            path=self.path,
        )

    def with_section(self, section: str, entries: Mapping[str, str]) -> "Manifest":
        """Return a copy whose ``section`` is replaced by ``entries``.

        The section keeps its position in the document; a new section is
        appended at the end.
        """
        data = dict(self._data)
        data[section] = dict(entries)
        return Manifest(data, path=self.path)

    def to_dict(self) -> Dict[str, Any]:
        """Return the document as a plain ordered dict."""
        return dict(self._data)

    def keys(self) -> Iterable[str]:
        return self._data.keys()

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Manifest):
            return list(self._data.items()) == list(other._data.items())
        return NotImplemented

    def __repr__(self) -> str:
        return f"Manifest(path={self.path!r}, keys={list(self._data)!r})"
