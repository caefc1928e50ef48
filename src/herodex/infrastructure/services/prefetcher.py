"""Two-phase image prefetching: the visible branch first, then everything else.

Loads run strictly one at a time so a large catalog never floods the loader;
the currently selected subcategory's images are fetched before the rest.
Prefetching is advisory, renderers always fall back to
:meth:`ImageCache.request`.
"""

from __future__ import annotations

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Iterator, Optional

from ...domain.models import Catalog, Coordinate, Subcategory
from ...utils.logging import get_logger
from .image_cache import UNAVAILABLE, ImageCache

LOGGER = get_logger(__name__)


def _subcategory_refs(subcategory: Subcategory) -> Iterator[str]:
    if subcategory.thumbnail:
        yield subcategory.thumbnail
    for item in subcategory.items:
        yield from item.image_refs()


@dataclass(frozen=True)
class PrefetchPlan:
    priority: tuple[str, ...] = ()
    background: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.priority) + len(self.background)

    def __iter__(self) -> Iterator[str]:
        yield from self.priority
        yield from self.background


def plan_prefetch(catalog: Catalog, coordinate: Coordinate) -> PrefetchPlan:
    """Split every image ref of *catalog* into priority and background lists.

    Priority holds the refs of the subcategory at *coordinate*; background
    holds all other refs in traversal order.  Each ref appears once.
    """

    selected = catalog.subcategory(coordinate.category, coordinate.subcategory)
    priority: list[str] = []
    seen: set[str] = set()
    if selected is not None:
        for ref in _subcategory_refs(selected):
            if ref not in seen:
                seen.add(ref)
                priority.append(ref)

    background: list[str] = []
    for category in catalog.categories:
        for subcategory in category.subcategories:
            if subcategory is selected:
                continue
            for ref in _subcategory_refs(subcategory):
                if ref not in seen:
                    seen.add(ref)
                    background.append(ref)
    return PrefetchPlan(priority=tuple(priority), background=tuple(background))


@dataclass
class PrefetchReport:
    loaded: int = 0
    unavailable: int = 0
    already_cached: int = 0
    cancelled: bool = False

    @property
    def processed(self) -> int:
        return self.loaded + self.unavailable + self.already_cached


class Prefetcher:
    """Walks a :class:`PrefetchPlan` through an :class:`ImageCache`."""

    def __init__(self, cache: ImageCache, plan: PrefetchPlan) -> None:
        self._cache = cache
        self._plan = plan
        self._stop = threading.Event()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._future: Optional[Future] = None

    @property
    def plan(self) -> PrefetchPlan:
        return self._plan

    def run(self) -> PrefetchReport:
        """Load the whole plan on the calling thread, one ref at a time."""

        report = PrefetchReport()
        for ref in self._plan:
            if self._stop.is_set():
                report.cancelled = True
                break
            if self._cache.get(ref) is not None:
                report.already_cached += 1
                continue
            outcome = self._cache.request(ref).result()
            if outcome is UNAVAILABLE:
                report.unavailable += 1
            else:
                report.loaded += 1
        LOGGER.info(
            "Prefetch finished: %d loaded, %d unavailable, %d cached%s",
            report.loaded,
            report.unavailable,
            report.already_cached,
            " (cancelled)" if report.cancelled else "",
        )
        return report

    def start(self) -> Future:
        """Run the plan on a dedicated background worker."""

        if self._future is not None:
            return self._future
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="herodex-prefetch")
        self._future = self._executor.submit(self.run)
        self._executor.shutdown(wait=False)
        return self._future

    def stop(self) -> None:
        """Ask a running prefetch to stop before its next load."""
        self._stop.set()

    def wait(self, timeout: float | None = None) -> Optional[PrefetchReport]:
        if self._future is None:
            return None
        return self._future.result(timeout=timeout)


__all__ = ["PrefetchPlan", "PrefetchReport", "Prefetcher", "plan_prefetch"]
