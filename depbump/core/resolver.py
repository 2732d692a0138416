"""Range-preserving update resolution for depbump.

For every dependency entry the resolver looks up the latest published
version and rebuilds the range with the entry's original operator::

    "^1.0.0"  + latest 1.3.0  →  "^1.3.0"
    ">=2.0.0" + latest 3.1.0  →  ">=3.1.0"
    "1.0.0"   + latest 1.0.1  →  "1.0.1"

Entries set to ``latest`` or ``*`` are left alone and never looked up.
So are ranges that do not point at a registry version at all (git URLs,
``file:`` paths, ``npm:`` aliases, ``workspace:`` ranges, GitHub
shorthands).

Lookups for one section run concurrently, at most ``concurrency`` at a
time. Completed lookups are drained by a single consumer that owns the
change list and the updated map, so lookup tasks never write shared
state. The first failed lookup cancels the rest and propagates; callers
must not write anything in that case.

Typical usage::

    async with HTTPClient() as http:
        resolver = UpdateResolver(RegistryClient(http), cache=cache)
        update = await resolver.resolve_manifest(manifest, exclude={"react"})
        for change in update.changes:
            print(change)
"""

from __future__ import annotations

import asyncio
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from depbump.core.cache import VersionCache
from depbump.core.registry import RegistryClient
from depbump.models.manifest import Manifest
from depbump.utils.logger import get_logger
from depbump.constants import DEFAULT_CONCURRENCY
from depbump.models.change import DependencyChange, ManifestUpdate, ResolutionResult
from depbump.utils.version_utils import build_range, detect_range, is_sentinel_range

logger = get_logger("resolver")

__all__ = ["UpdateResolver", "is_registry_range"]


def is_registry_range(version: str) -> bool:
    """Return True if ``version`` refers to a registry release.

    Protocol specs (``git+https:``, ``file:``, ``npm:``, ``workspace:``)
    and ``owner/repo`` shorthands name something else entirely and are
    not rewritten.
    """
    return ":" not in version and "/" not in version


class UpdateResolver:
    """Computes updated dependency maps for a manifest.

    Args:
        registry: Source of latest versions.
        cache: Optional TTL cache consulted before the registry. Fresh
            answers are buffered on it; flushing is the caller's job.
        concurrency: Maximum lookups in flight per dependency section.
    """

    def __init__(
        self,
        registry: RegistryClient,
        *,
        cache: Optional[VersionCache] = None,
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")

        self.registry = registry
        self.cache = cache
        self.concurrency = concurrency

        # One lookup per package name per run, shared by both sections
        self._lookups: Dict[str, "asyncio.Task[str]"] = {}

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def resolve(
        self,
        dep_map: Mapping[str, str],
        exclude: Iterable[str] = (),
        *,
        section: str = "dependencies",
    ) -> ResolutionResult:
        """Resolve one dependency section.

        Args:
            dep_map: Package name → previous range.
            exclude: Names to skip entirely (exact match).
            section: Section name recorded on each change.

        Returns:
            A :class:`ResolutionResult` whose ``updated`` map keeps the
            order of ``dep_map`` and whose ``changes`` are in completion
            order.

        Raises:
            DepbumpError: A lookup failed; no partial result is returned.
        """
        excluded = set(exclude)
        candidates = [name for name in dep_map if name not in excluded]
        skipped = len(dep_map) - len(candidates)
        if skipped:
            logger.debug("Excluded %d package(s) from %s", skipped, section)

        semaphore = asyncio.Semaphore(self.concurrency)
        updated: Dict[str, str] = dict(dep_map)
        changes: List[DependencyChange] = []

        tasks = [
            asyncio.ensure_future(self._resolve_entry(name, dep_map[name], semaphore))
            for name in candidates
        ]

        try:
            for next_done in asyncio.as_completed(tasks):
                name, new_range = await next_done
                if new_range is None:
                    continue
                updated[name] = new_range
                changes.append(
                    DependencyChange(
                        name=name,
                        previous=dep_map[name],
                        new=new_range,
                        section=section,
                    )
                )
        except BaseException:
            await _cancel_all(tasks)
            raise

        logger.info(
            "%s: %d checked, %d changed", section, len(candidates), len(changes)
        )
        return ResolutionResult(section=section, updated=updated, changes=changes)

    async def resolve_manifest(
        self,
        manifest: Manifest,
        exclude: Iterable[str] = (),
    ) -> ManifestUpdate:
        """Resolve ``dependencies`` and ``devDependencies`` concurrently."""
        excluded = frozenset(exclude)
        tasks = [
            asyncio.ensure_future(
                self.resolve(manifest.dependencies, excluded, section="dependencies")
            ),
            asyncio.ensure_future(
                self.resolve(
                    manifest.dev_dependencies, excluded, section="devDependencies"
                )
            ),
        ]

        try:
            deps, dev_deps = await asyncio.gather(*tasks)
        except BaseException:
            await _cancel_all(tasks)
            raise

        return ManifestUpdate(dependencies=deps, dev_dependencies=dev_deps)

    async def lookup(self, name: str) -> str:
        """Return the latest version of ``name``, cache first."""
        task = self._lookups.get(name)
        if task is None:
            task = asyncio.ensure_future(self._lookup_uncached(name))
            self._lookups[name] = task
        return await task

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _lookup_uncached(self, name: str) -> str:
        if self.cache is not None:
            cached = self.cache.get(name)
            if cached is not None:
                logger.debug("Cache hit for %s: %s", name, cached)
                return cached

        latest = await self.registry.fetch_latest(name)

        if self.cache is not None:
            self.cache.set(name, latest)
        return latest

    async def _resolve_entry(
        self,
        name: str,
        previous: str,
        semaphore: asyncio.Semaphore,
    ) -> Tuple[str, Optional[str]]:
        """Return ``(name, new_range)``, with ``new_range`` None when unchanged."""
        if is_sentinel_range(previous):
            logger.debug("Skipping %s: pinned to %r", name, previous)
            return name, None

        if not is_registry_range(previous):
            logger.debug("Skipping %s: %r is not a registry range", name, previous)
            return name, None

        async with semaphore:
            latest = await self.lookup(name)

        candidate = build_range(detect_range(previous), latest)
        if candidate == previous:
            return name, None
        return name, candidate


async def _cancel_all(tasks: List["asyncio.Future[Any]"]) -> None:
    """Cancel unfinished tasks and wait for them to settle."""
    for task in tasks:
        if not task.done():
            task.cancel()
    await asyncio.gather(*tasks, return_exceptions=True)
