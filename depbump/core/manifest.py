"""Manifest reading, merging, and writing for depbump.

The merge step rebuilds the manifest from the original document:
internal fields are stripped, every other field keeps its value and
position, and each dependency section is overlaid with the resolver's
updated entries.

Typical usage::

    manifest = read_manifest(path)
    merged = merge_manifest(manifest, updated_deps, updated_dev_deps)
    write_manifest(path, merged)
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Mapping, Optional, Union

from depbump.models.manifest import Manifest
from depbump.utils.logger import get_logger
from depbump.exceptions import ManifestParseError
from depbump.utils.filesystem import safe_read_file, safe_write_file
from depbump.constants import MANIFEST_INDENT, STRIPPED_MANIFEST_FIELDS

logger = get_logger("manifest")


def parse_manifest(text: str, *, path: Optional[Path] = None) -> Manifest:
    """Parse manifest JSON text.

    Raises:
        ManifestParseError: The text is not JSON, or not a JSON object.
    """
    file_path = str(path) if path else None
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ManifestParseError(
            f"Invalid JSON: {exc.msg} at line {exc.lineno} column {exc.colno}",
            file_path=file_path,
        ) from exc

    if not isinstance(data, dict):
        raise ManifestParseError(
            f"Manifest must be a JSON object, got {type(data).__name__}",
            file_path=file_path,
        )

    return Manifest(data, path=path)


def read_manifest(path: Union[str, Path]) -> Manifest:
    """Read and parse the manifest at ``path``."""
    manifest_path = Path(path)
    text = safe_read_file(manifest_path)
    manifest = parse_manifest(text, path=manifest_path)
    logger.debug(
        "Read %s: %d dependencies, %d devDependencies",
        manifest_path,
        len(manifest.dependencies),
        len(manifest.dev_dependencies),
    )
    return manifest


def merge_manifest(
    original: Manifest,
    updated_deps: Mapping[str, str],
    updated_dev_deps: Mapping[str, str],
) -> Manifest:
    """Build the manifest to write from ``original`` and the updated sections.

    Entries in the updated maps win over the original's; entries only
    present in the original are kept. A section the original does not
    declare is only added when its updated map is non-empty.
    """
    merged = original.without(STRIPPED_MANIFEST_FIELDS)

    for section, updated in (
        ("dependencies", updated_deps),
        ("devDependencies", updated_dev_deps),
    ):
        if not original.has_section(section) and not updated:
            continue
        entries = {**original.get_section(section), **updated}
        merged = merged.with_section(section, entries)

    return merged


def serialize_manifest(manifest: Manifest) -> str:
    """Serialize a manifest as 4-space indented JSON with a trailing newline."""
    return json.dumps(manifest.to_dict(), indent=MANIFEST_INDENT, ensure_ascii=False) + "\n"


def write_manifest(path: Union[str, Path], manifest: Manifest) -> None:
    """Atomically replace the file at ``path`` with ``manifest``.

    Raises:
        FileOperationError: The file could not be written. The original
            file is left as it was.
    """
    safe_write_file(path, serialize_manifest(manifest))
    logger.info("Wrote %s", path)
