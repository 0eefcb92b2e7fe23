"""
Cache-aside read path for the project listing.

A result page is looked up in the cache store under a key derived from the
normalized filter. On a miss the data source is asked for the matching count
and the requested page, the page is assembled, written back with a fixed TTL
and returned. Concurrent misses for the same filter may each compute and
write the page; writes replace the entry wholesale so the last writer wins.
"""

from __future__ import annotations

import math
import time
from typing import TYPE_CHECKING, Any, Callable, Mapping, Optional, Protocol, Sequence, Union

from shared.config import is_cache_enabled
from shared.errors import CacheUnavailableError, DataUnavailableError
from shared.logging import get_logger

from ..domain import CACHE_KEY_PREFIX, ProjectFilter, ProjectItem, ResultPage

if TYPE_CHECKING:  # pragma: no cover - imported for typing only
    from shared.metrics import MetricsCollector


DEFAULT_CACHE_TTL = 600


class ProjectDataSource(Protocol):
    """Relational store answering listing queries."""

    async def count(self, project_filter: ProjectFilter) -> int: ...

    async def find(
        self, project_filter: ProjectFilter, page: int, per_page: int
    ) -> Sequence[Mapping[str, Any]]: ...


class CacheStore(Protocol):
    """Key-value store with TTL expiry and pattern eviction."""

    async def get(self, key: str) -> Optional[bytes]: ...

    async def set(self, key: str, value: Union[bytes, str], ttl_seconds: int) -> bool: ...

    async def delete_pattern(self, pattern: str) -> int: ...


class ProjectQueryGateway:
    """Serves result pages from the cache, computing them from the data source on a miss."""

    def __init__(
        self,
        data_source: ProjectDataSource,
        cache: CacheStore,
        *,
        ttl_seconds: int = DEFAULT_CACHE_TTL,
        cache_enabled: Callable[[], bool] = is_cache_enabled,
        key_prefix: str = CACHE_KEY_PREFIX,
        metrics: Optional["MetricsCollector"] = None,
    ) -> None:
        self.data_source = data_source
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix
        self._cache_enabled = cache_enabled
        self.metrics = metrics
        self.logger = get_logger("projects.gateway")

    async def get_page(self, project_filter: ProjectFilter) -> ResultPage:
        """
        Return the result page for a normalized filter.

        Raises DataUnavailableError when the data source fails on a miss;
        nothing is cached in that case. Cache failures are logged and
        never fail the read.
        """
        cache_key = project_filter.cache_key(self.key_prefix)

        if self._cache_enabled():
            cached = await self._read_cache(cache_key)
            if cached is not None:
                return cached
        else:
            self._count("project_cache_lookups_total", result="bypass")

        page = await self._compute_page(project_filter)
        await self._write_cache(cache_key, page)
        return page

    async def invalidate_all(self) -> int:
        """
        Delete every cached result page.

        Returns the number of entries removed. Raises CacheUnavailableError
        when the store cannot complete the delete; callers may retry.
        """
        pattern = f"{self.key_prefix}*"
        try:
            deleted = await self.cache.delete_pattern(pattern)
        except CacheUnavailableError as exc:
            self.logger.error("Project cache invalidation failed", pattern=pattern, error=str(exc))
            self._count("project_cache_invalidations_total", status="error")
            raise

        self.logger.info("Project cache invalidated", pattern=pattern, deleted=deleted)
        self._count("project_cache_invalidations_total", status="ok")
        return deleted

    async def _compute_page(self, project_filter: ProjectFilter) -> ResultPage:
        page = project_filter.page
        per_page = project_filter.per_page

        try:
            start = time.perf_counter()
            total = await self.data_source.count(project_filter)
            self._observe("count", time.perf_counter() - start)

            start = time.perf_counter()
            rows = await self.data_source.find(project_filter, page, per_page)
            self._observe("find", time.perf_counter() - start)
        except DataUnavailableError as exc:
            self.logger.error(
                "Project data source query failed",
                filter=project_filter.to_dict(),
                error=exc.message,
            )
            raise

        return ResultPage(
            total=total,
            current_page=page,
            per_page=per_page,
            last_page=max(1, math.ceil(total / per_page)),
            items=tuple(ProjectItem.from_row(row) for row in rows),
        )

    async def _read_cache(self, key: str) -> Optional[ResultPage]:
        """Read a cached result page, treating any failure as a miss."""
        try:
            raw = await self.cache.get(key)
        except CacheUnavailableError as exc:
            self.logger.warning("Project cache read failed", key=key, error=exc.message)
            self._count("project_cache_lookups_total", result="error")
            return None

        if raw is None:
            self.logger.debug("Project cache miss", key=key)
            self._count("project_cache_lookups_total", result="miss")
            return None

        try:
            page = ResultPage.from_json(raw)
        except (ValueError, KeyError, TypeError):
            self.logger.warning("Discarding malformed cache payload", key=key)
            self._count("project_cache_lookups_total", result="error")
            return None

        self.logger.debug("Project cache hit", key=key)
        self._count("project_cache_lookups_total", result="hit")
        return page

    async def _write_cache(self, key: str, page: ResultPage) -> None:
        try:
            stored = await self.cache.set(key, page.to_json(), self.ttl_seconds)
        except CacheUnavailableError as exc:
            self.logger.warning("Project cache write failed", key=key, error=exc.message)
            self._count("project_cache_writes_total", status="error")
            return

        if not stored:
            self.logger.warning("Project cache write was not stored", key=key)
            self._count("project_cache_writes_total", status="error")
            return

        self._count("project_cache_writes_total", status="ok")

    def _count(self, metric_name: str, **labels: str) -> None:
        if self.metrics:
            self.metrics.increment_counter(metric_name, **labels)

    def _observe(self, operation: str, duration: float) -> None:
        if self.metrics:
            self.metrics.observe_histogram("project_query_duration_seconds", duration, operation=operation)
