"""npm registry client for depbump.

Resolves the latest published version of a package by reading the
``latest`` dist-tag from the registry's package document. Requests use
the abbreviated metadata format, which is much smaller than the full
document and still carries ``dist-tags``.

Typical usage::

    async with HTTPClient() as http:
        registry = RegistryClient(http)
        version = await registry.fetch_latest("left-pad")   # "1.3.0"
"""

from __future__ import annotations

import os
from typing import Optional
from urllib.parse import quote

from depbump.utils.http import HTTPClient
from depbump.utils.logger import get_logger
from depbump.exceptions import PackageNotFoundError, RegistryError
from depbump.constants import (
    DEFAULT_REGISTRY_URL,
    LATEST_DIST_TAG,
    REGISTRY_ACCEPT_HEADER,
    REGISTRY_ENV_VAR,
)

logger = get_logger("registry")

__all__ = ["RegistryClient", "package_url", "default_registry_url"]


def default_registry_url() -> str:
    """Return the registry from ``npm_config_registry`` or the public default."""
    return os.environ.get(REGISTRY_ENV_VAR) or DEFAULT_REGISTRY_URL


def package_url(registry: str, name: str) -> str:
    """Return the package document URL for ``name``.

    Scoped names keep their ``@`` but have the slash encoded, as the
    registry expects::

        >>> package_url("https://registry.npmjs.org", "@types/node")
        'https://registry.npmjs.org/@types%2Fnode'
    """
    return f"{registry.rstrip('/')}/{quote(name, safe='@')}"


class RegistryClient:
    """Looks up latest versions on an npm-compatible registry.

    Args:
        http_client: A configured :class:`HTTPClient`; owns the connection
            pool and the request concurrency limit.
        registry_url: Registry base URL. Defaults to
            :func:`default_registry_url`.
    """

    def __init__(
        self,
        http_client: HTTPClient,
        registry_url: Optional[str] = None,
    ) -> None:
        self.http_client = http_client
        self.registry_url = (registry_url or default_registry_url()).rstrip("/")

    async def fetch_latest(self, name: str) -> str:
        """Return the latest published version of ``name``.

        Raises:
            PackageNotFoundError: The registry does not know ``name``.
            RegistryError: The document has no ``latest`` dist-tag.
            NetworkError: The registry could not be reached.
        """
        url = package_url(self.registry_url, name)
        logger.debug("Fetching %s", url)

        try:
            document = await self.http_client.get_json(
                url, headers={"Accept": REGISTRY_ACCEPT_HEADER}
            )
        except PackageNotFoundError as exc:
            raise PackageNotFoundError(
                f"Package '{name}' not found in registry",
                package_name=name,
                url=url,
                status_code=404,
            ) from exc

        dist_tags = document.get("dist-tags")
        latest = dist_tags.get(LATEST_DIST_TAG) if isinstance(dist_tags, dict) else None

        if not isinstance(latest, str) or not latest:
            raise RegistryError(
                f"Registry returned no latest version for '{name}'",
                package_name=name,
                url=url,
            )

        logger.debug("%s latest is %s", name, latest)
        return latest
