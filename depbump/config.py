"""Configuration file loader for depbump.

Handles discovery, loading, parsing, and validation of configuration files.
Supports two formats:

- ``depbump.toml``: settings under ``[depbump]`` table
- ``pyproject.toml``: settings under ``[tool.depbump]`` table

Discovery order:

1. Explicit path from ``--config`` or ``DEPBUMP_CONFIG``
2. ``depbump.toml`` in current directory
3. ``pyproject.toml`` with ``[tool.depbump]`` section

Configuration precedence: defaults < config file < CLI args.

Example (``depbump.toml``)::

    [depbump]
    exclude = ["react", "react-dom"]
    concurrency = 8
    cache_ttl = 600
"""

from __future__ import annotations

import tomli as tomllib
from pathlib import Path
from typing import Any, Dict, List, Optional
from dataclasses import dataclass, field

from depbump.exceptions import ConfigError
from depbump.utils.logger import get_logger
from depbump.constants import (
    CONFIG_FILE_NAME,
    DEFAULT_CACHE_ENABLED,
    DEFAULT_CACHE_TTL,
    DEFAULT_CONCURRENCY,
    DEFAULT_TIMEOUT,
)

logger = get_logger("config")


@dataclass
class DepbumpConfig:
    """Parsed and validated depbump configuration.

    All fields have defaults, so empty config files are valid.

    Attributes:
        exclude: Package names never updated. Combined with ``--exclude``.
        concurrency: Registry lookups in flight per dependency section.
        registry: Registry base URL, or ``None`` for ``npm_config_registry``
            / the public registry.
        cache: Whether the version cache is used.
        cache_ttl: Seconds a cached version stays valid.
        timeout: Registry request timeout in seconds.
        source_path: Path to loaded config file, or ``None`` if using defaults.
    """

    exclude: List[str] = field(default_factory=list)
    concurrency: int = DEFAULT_CONCURRENCY
    registry: Optional[str] = None
    cache: bool = DEFAULT_CACHE_ENABLED
    cache_ttl: int = DEFAULT_CACHE_TTL
    timeout: int = DEFAULT_TIMEOUT

    # Metadata (not a user-facing option)
    source_path: Optional[Path] = field(default=None, repr=False)

    def to_log_dict(self) -> Dict[str, Any]:
        """Return configuration as dictionary for debug logging.

        Excludes ``source_path`` metadata.
        """
        return {
            "exclude": list(self.exclude),
            "concurrency": self.concurrency,
            "registry": self.registry,
            "cache": self.cache,
            "cache_ttl": self.cache_ttl,
            "timeout": self.timeout,
        }


def discover_config_file(explicit_path: Optional[Path] = None) -> Optional[Path]:
    """Find the configuration file to load.

    Args:
        explicit_path: Explicit config path. If provided, must exist.

    Returns:
        Resolved path to config file, or ``None`` if not found.

    Raises:
        ConfigError: Explicit path provided but does not exist.
    """
    if explicit_path is not None:
        resolved = explicit_path.resolve()
        if not resolved.is_file():
            raise ConfigError(
                f"Configuration file not found: {explicit_path}",
                config_path=str(explicit_path),
            )
        logger.debug("Using explicit config: %s", resolved)
        return resolved

    cwd = Path.cwd()

    depbump_toml = cwd / CONFIG_FILE_NAME
    if depbump_toml.is_file():
        logger.debug("Found %s: %s", CONFIG_FILE_NAME, depbump_toml)
        return depbump_toml

    pyproject_toml = cwd / "pyproject.toml"
    if pyproject_toml.is_file() and _pyproject_has_depbump_section(pyproject_toml):
        logger.debug("Found [tool.depbump] in pyproject.toml: %s", pyproject_toml)
        return pyproject_toml

    logger.debug("No configuration file found")
    return None


def _pyproject_has_depbump_section(path: Path) -> bool:
    """Check if pyproject.toml contains a [tool.depbump] section.

    Parse errors count as "no section" so that an unrelated broken
    pyproject.toml does not stop depbump from running.
    """
    try:
        raw = _read_toml(path)
    except ConfigError:
        return False
    tool = raw.get("tool", {})
    return isinstance(tool, dict) and "depbump" in tool


def load_config(config_path: Optional[Path] = None) -> DepbumpConfig:
    """Load and validate depbump configuration.

    Args:
        config_path: Explicit path to config file. If ``None``, uses
            auto-discovery (see :func:`discover_config_file`).

    Returns:
        Validated :class:`DepbumpConfig` with values from file or defaults.

    Raises:
        ConfigError: File cannot be parsed, has unknown keys, or invalid values.
    """
    resolved = discover_config_file(config_path)

    if resolved is None:
        return DepbumpConfig()

    logger.info("Loading configuration from %s", resolved)
    raw = _read_toml(resolved)

    if resolved.name == "pyproject.toml":
        table_name = "[tool.depbump]"
        tool = raw.get("tool", {})
        if not isinstance(tool, dict):
            raise ConfigError(
                f"[tool] must be a table, got {type(tool).__name__}",
                config_path=str(resolved),
            )
        section = tool.get("depbump", {})
    else:
        table_name = "[depbump]"
        section = raw.get("depbump", {})

    if not isinstance(section, dict):
        raise ConfigError(
            f"{table_name} must be a table, got {type(section).__name__}",
            config_path=str(resolved),
        )

    if not section:
        logger.debug("Config file found but no depbump section, using defaults")
        return DepbumpConfig(source_path=resolved)

    config = _parse_section(section, config_path=str(resolved))
    config.source_path = resolved

    logger.debug("Loaded configuration: %s", config.to_log_dict())
    return config


def _read_toml(path: Path) -> Dict[str, Any]:
    """Read and parse a TOML file.

    Raises:
        ConfigError: File cannot be read or is invalid TOML.
    """
    try:
        with open(path, "rb") as fh:
            return tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Invalid TOML in {path.name}: {exc}",
            config_path=str(path),
        ) from exc
    except OSError as exc:
        raise ConfigError(
            f"Cannot read configuration file {path}: {exc}",
            config_path=str(path),
        ) from exc


def _require_int(
    section: Dict[str, Any],
    key: str,
    *,
    minimum: int,
    config_path: str,
) -> int:
    val = section[key]
    # bool is an int subclass; reject it explicitly
    if isinstance(val, bool) or not isinstance(val, int):
        raise ConfigError(
            f"{key} must be an integer, got {type(val).__name__}",
            config_path=config_path,
            option=key,
        )
    if val < minimum:
        raise ConfigError(
            f"{key} must be >= {minimum}, got {val}",
            config_path=config_path,
            option=key,
        )
    return val


def _parse_section(
    section: Dict[str, Any],
    *,
    config_path: str,
) -> DepbumpConfig:
    """Parse and validate the ``[depbump]`` or ``[tool.depbump]`` table.

    Raises:
        ConfigError: Unknown keys or incorrect types.
    """
    config = DepbumpConfig()

    known_top = {"exclude", "concurrency", "registry", "cache", "cache_ttl", "timeout"}

    unknown_top = set(section.keys()) - known_top
    if unknown_top:
        raise ConfigError(
            f"Unknown configuration keys: {', '.join(sorted(unknown_top))}",
            config_path=config_path,
        )

    if "exclude" in section:
        val = section["exclude"]
        if not isinstance(val, list) or not all(isinstance(v, str) for v in val):
            raise ConfigError(
                "exclude must be a list of package names",
                config_path=config_path,
                option="exclude",
            )
        config.exclude = list(val)

    if "concurrency" in section:
        config.concurrency = _require_int(
            section, "concurrency", minimum=1, config_path=config_path
        )

    if "registry" in section:
        val = section["registry"]
        if not isinstance(val, str) or not val.startswith(("http://", "https://")):
            raise ConfigError(
                "registry must be an http(s) URL",
                config_path=config_path,
                option="registry",
            )
        config.registry = val

    if "cache" in section:
        val = section["cache"]
        if not isinstance(val, bool):
            raise ConfigError(
                f"cache must be a boolean, got {type(val).__name__}",
                config_path=config_path,
                option="cache",
            )
        config.cache = val

    if "cache_ttl" in section:
        config.cache_ttl = _require_int(
            section, "cache_ttl", minimum=0, config_path=config_path
        )

    if "timeout" in section:
        config.timeout = _require_int(
            section, "timeout", minimum=1, config_path=config_path
        )

    return config
