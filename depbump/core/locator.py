"""Manifest discovery for depbump.

``--input`` may name a manifest file directly or a directory to start
the search from. Without it, the search starts in the current working
directory. The search walks up parent directories until a
``package.json`` is found.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from depbump.utils.logger import get_logger
from depbump.utils.filesystem import find_up
from depbump.constants import MANIFEST_FILE_NAME
from depbump.exceptions import ManifestNotFoundError

logger = get_logger("locator")


def locate_manifest(
    start: Optional[Union[str, Path]] = None,
    *,
    file_name: str = MANIFEST_FILE_NAME,
) -> Path:
    """Return the manifest path for ``start``.

    Args:
        start: Explicit manifest file, a directory to search upward from,
            or ``None`` for the current working directory.
        file_name: Manifest file name to look for in directories.

    Returns:
        Resolved path to an existing manifest file.

    Raises:
        ManifestNotFoundError: ``start`` does not exist, or no manifest
            exists in it or any parent directory.
    """
    root = Path(start).expanduser() if start is not None else Path.cwd()

    if root.is_file():
        logger.debug("Using explicit manifest: %s", root)
        return root.resolve()

    if not root.exists():
        raise ManifestNotFoundError(
            f"Unable to find {root}",
            search_root=str(root),
        )

    found = find_up(file_name, root)
    if found is None:
        raise ManifestNotFoundError(
            f"Unable to find {file_name} in {root.resolve()} "
            "or any of its parent directories",
            search_root=str(root.resolve()),
        )

    logger.info("Using manifest %s", found)
    return found
