"""Update command implementation for depbump.

One run of depbump:

1. **locate_manifest**: find ``package.json`` (explicit path or upward search)
2. **read_manifest**: parse it
3. **UpdateResolver**: resolve both dependency sections concurrently,
   consulting the :class:`VersionCache` before the registry
4. No changes → report "Everything up-to-date" and stop without writing
5. **merge_manifest**: rebuild the manifest with the updated sections
6. Write the file atomically, or print the JSON with ``--json``
7. Flush freshly resolved versions to the cache

A failed lookup aborts the run before step 5, so the manifest is either
fully updated or untouched.
"""

from __future__ import annotations

import time
import asyncio
from pathlib import Path
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional

import click

from depbump.config import DepbumpConfig
from depbump.models import Manifest, ManifestUpdate
from depbump.exceptions import FileOperationError
from depbump.constants import DEFAULT_CACHE_TTL, DEFAULT_CONCURRENCY, DEFAULT_TIMEOUT
from depbump.core import (
    RegistryClient,
    UpdateResolver,
    VersionCache,
    locate_manifest,
    merge_manifest,
    read_manifest,
    serialize_manifest,
    write_manifest,
)
from depbump.utils import (
    HTTPClient,
    get_logger,
    print_change,
    print_done,
    print_success,
    print_summary,
    status_to_stderr,
)

logger = get_logger("commands.update")


def parse_exclude(values: Iterable[str]) -> FrozenSet[str]:
    """Split comma-separated ``--exclude`` values into a set of names.

    Example::

        >>> sorted(parse_exclude(["chalk,lodash", " react "]))
        ['chalk', 'lodash', 'react']
    """
    names = set()
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part:
                names.add(part)
    return frozenset(names)


@dataclass
class UpdateOptions:
    """Everything one run needs, after merging config file and CLI flags.

    Attributes:
        input_path: Manifest file or search start directory; ``None`` for cwd.
        exclude: Package names never updated.
        json_output: Print the resulting manifest instead of writing it.
        use_cache: Consult and update the version cache.
        cache_ttl: Seconds a cached version stays valid.
        cache_path: Cache file location; ``None`` for the temp-dir default.
        concurrency: Lookups in flight per dependency section.
        registry: Registry base URL override.
        timeout: Registry request timeout in seconds.
    """

    input_path: Optional[Path] = None
    exclude: FrozenSet[str] = field(default_factory=frozenset)
    json_output: bool = False
    use_cache: bool = True
    cache_ttl: int = DEFAULT_CACHE_TTL
    cache_path: Optional[Path] = None
    concurrency: int = DEFAULT_CONCURRENCY
    registry: Optional[str] = None
    timeout: int = DEFAULT_TIMEOUT

    @classmethod
    def from_config(
        cls,
        config: DepbumpConfig,
        *,
        input_path: Optional[Path] = None,
        exclude: Iterable[str] = (),
        json_output: bool = False,
        no_cache: bool = False,
        concurrency: Optional[int] = None,
        registry: Optional[str] = None,
    ) -> "UpdateOptions":
        """Overlay CLI flags on a loaded configuration."""
        return cls(
            input_path=input_path,
            exclude=frozenset(config.exclude) | parse_exclude(exclude),
            json_output=json_output,
            use_cache=config.cache and not no_cache,
            cache_ttl=config.cache_ttl,
            concurrency=concurrency if concurrency is not None else config.concurrency,
            registry=registry or config.registry,
            timeout=config.timeout,
        )


@dataclass
class UpdateReport:
    """What a run did.

    Attributes:
        manifest_path: The manifest that was processed.
        update: Resolver outcome for both sections.
        manifest: The merged manifest, or ``None`` on a no-op run.
        written: Whether the manifest file was rewritten.
        elapsed: Wall-clock seconds, filled in by :func:`run_update`.
    """

    manifest_path: Path
    update: ManifestUpdate
    manifest: Optional[Manifest] = None
    written: bool = False
    elapsed: float = 0.0

    @property
    def up_to_date(self) -> bool:
        return self.update.is_noop()


def run_update(options: UpdateOptions) -> UpdateReport:
    """Run one update and print the closing timing line.

    With ``json_output`` every status line goes to stderr, leaving the
    manifest alone on stdout.

    Raises:
        DepbumpError: Manifest missing or invalid, a lookup failed, or the
            manifest could not be written.
    """
    started = time.perf_counter()
    with status_to_stderr(options.json_output):
        report = asyncio.run(update_manifest(options))
        report.elapsed = time.perf_counter() - started
        print_done(report.elapsed)
    return report


async def update_manifest(options: UpdateOptions) -> UpdateReport:
    """Async implementation of one depbump run (see module docstring)."""
    manifest_path = locate_manifest(options.input_path)
    manifest = read_manifest(manifest_path)

    cache: Optional[VersionCache] = None
    if options.use_cache:
        cache = VersionCache(options.cache_path, ttl=options.cache_ttl)
        cache.load()

    async with HTTPClient(
        timeout=options.timeout,
        max_concurrency=options.concurrency,
    ) as http:
        registry = RegistryClient(http, options.registry)
        resolver = UpdateResolver(
            registry,
            cache=cache,
            concurrency=options.concurrency,
        )
        update = await resolver.resolve_manifest(manifest, options.exclude)

    report = UpdateReport(manifest_path=manifest_path, update=update)

    for change in update.changes:
        print_change(change.name, change.previous, change.new)

    if update.is_noop():
        print_success("Everything up-to-date")
        _flush_cache(cache)
        return report

    merged = merge_manifest(
        manifest,
        update.dependencies.updated,
        update.dev_dependencies.updated,
    )
    report.manifest = merged

    if options.json_output:
        click.echo(serialize_manifest(merged), nl=False)
    else:
        write_manifest(manifest_path, merged)
        report.written = True

    _flush_cache(cache)
    print_summary(update.count_by_update_type())
    return report


def _flush_cache(cache: Optional[VersionCache]) -> None:
    """Persist fresh cache entries; a failure here never fails the run."""
    if cache is None:
        return
    try:
        cache.flush()
    except FileOperationError as exc:
        logger.warning("Could not update version cache: %s", exc)
