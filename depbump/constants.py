"""
Centralized constants for depbump.

This module defines immutable configuration values used across depbump,
including registry endpoints, cache settings, manifest field names, and
logging formats. All values are intended to be treated as read-only.
"""

from typing import Final, FrozenSet, Sequence

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "depbump/{version}"

# ---------------------------------------------------------------------------
# npm registry
# ---------------------------------------------------------------------------

#: Default npm registry base URL.
DEFAULT_REGISTRY_URL: Final[str] = "https://registry.npmjs.org"

#: Environment variable npm itself uses to override the registry.
REGISTRY_ENV_VAR: Final[str] = "npm_config_registry"

#: Accept header for the abbreviated ("corgi") package document.
REGISTRY_ACCEPT_HEADER: Final[str] = (
    "application/vnd.npm.install-v1+json; q=1.0, application/json; q=0.8, */*"
)

#: Dist-tag that designates the latest published release.
LATEST_DIST_TAG: Final[str] = "latest"

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Retries are disabled: a failed lookup fails the run.
DEFAULT_MAX_RETRIES: Final[int] = 0

#: Default number of registry lookups in flight per dependency section.
DEFAULT_CONCURRENCY: Final[int] = 10

# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

#: File name of the version cache inside the system temp directory.
CACHE_FILE_NAME: Final[str] = "depbump-cache.json"

#: Default time-to-live for cached versions, in seconds (15 minutes).
DEFAULT_CACHE_TTL: Final[int] = 15 * 60

#: Whether the cache is consulted by default.
DEFAULT_CACHE_ENABLED: Final[bool] = True

# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

#: Manifest file name searched for when no explicit file is given.
MANIFEST_FILE_NAME: Final[str] = "package.json"

#: Manifest sections whose entries are updated.
DEPENDENCY_SECTIONS: Final[Sequence[str]] = ("dependencies", "devDependencies")

#: Top-level fields never written back to the manifest.
STRIPPED_MANIFEST_FIELDS: Final[FrozenSet[str]] = frozenset({"_id", "readme"})

#: Range values that are never updated.
SENTINEL_RANGES: Final[FrozenSet[str]] = frozenset({"latest", "*"})

#: Indentation used when serializing the manifest.
MANIFEST_INDENT: Final[int] = 4

#: Maximum allowed file size (in bytes) when reading manifests.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# Configuration files
# ---------------------------------------------------------------------------

#: Dedicated configuration file name.
CONFIG_FILE_NAME: Final[str] = "depbump.toml"

#: Environment variable pointing at an explicit configuration file.
CONFIG_ENV_VAR: Final[str] = "DEPBUMP_CONFIG"

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp and logger name.
LOG_VERBOSE_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
