"""
PostgreSQL data source for the project listing.
"""

from typing import Any, Dict, List, Optional

import asyncpg

from shared.errors import DataUnavailableError
from shared.logging import get_logger
from ..domain import ProjectFilter
from .query_builder import ProjectQueryBuilder


class PostgresProjectRepository:
    """Answers count and page queries against the imported project tables."""

    def __init__(self, dsn: str, *, min_size: int = 2, max_size: int = 10, command_timeout: float = 30):
        self.dsn = dsn
        self.min_size = min_size
        self.max_size = max_size
        self.command_timeout = command_timeout
        self.logger = get_logger("projects.persistence.postgres")
        self.pool: Optional[asyncpg.Pool] = None

    async def start(self):
        """Open the connection pool."""
        try:
            self.pool = await asyncpg.create_pool(
                self.dsn,
                min_size=self.min_size,
                max_size=self.max_size,
                command_timeout=self.command_timeout
            )
        except (asyncpg.PostgresError, OSError) as e:
            self.logger.error("Failed to start PostgreSQL pool", error=str(e))
            raise DataUnavailableError(f"PostgreSQL unavailable: {e}") from e

        self.logger.info("PostgreSQL pool started", min_size=self.min_size, max_size=self.max_size)

    async def stop(self):
        """Close the connection pool."""
        if self.pool:
            await self.pool.close()
            self.pool = None
            self.logger.info("PostgreSQL pool stopped")

    async def count(self, project_filter: ProjectFilter) -> int:
        """Count projects matching the filter."""
        sql, params = ProjectQueryBuilder(project_filter).count_query()
        value = await self._fetchval(sql, params)
        return int(value or 0)

    async def find(self, project_filter: ProjectFilter, page: int, per_page: int) -> List[Dict[str, Any]]:
        """Return one page of flattened project rows in the filter's sort order."""
        sql, params = ProjectQueryBuilder(project_filter).page_query(page, per_page)
        records = await self._fetch(sql, params)
        return [dict(record) for record in records]

    async def health_check(self) -> bool:
        """Check PostgreSQL health."""
        try:
            return await self._fetchval("SELECT 1", []) == 1
        except DataUnavailableError:
            return False

    async def _fetchval(self, sql: str, params: List[Any]) -> Any:
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                return await conn.fetchval(sql, *params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            self.logger.error("PostgreSQL query failed", error=str(e))
            raise DataUnavailableError(f"PostgreSQL query failed: {e}") from e

    async def _fetch(self, sql: str, params: List[Any]) -> List[asyncpg.Record]:
        pool = self._require_pool()
        try:
            async with pool.acquire() as conn:
                return await conn.fetch(sql, *params)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            self.logger.error("PostgreSQL query failed", error=str(e))
            raise DataUnavailableError(f"PostgreSQL query failed: {e}") from e

    def _require_pool(self) -> asyncpg.Pool:
        if self.pool is None:
            raise DataUnavailableError("PostgreSQL pool is not started")
        return self.pool
