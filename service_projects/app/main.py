"""
Project listing service for the Project Board.
"""

import time
from datetime import datetime, timezone
from typing import Dict, Optional

from fastapi import Query
from fastapi.responses import JSONResponse

from shared.base_service import BaseService
from shared.config import is_cache_enabled

from .caching import ProjectQueryGateway, RedisCacheStore
from .domain import ProjectFilter
from .persistence import PostgresProjectRepository


class ProjectsService(BaseService):
    """Project listing service implementation."""

    def __init__(self):
        super().__init__("projects", 8000)

        self.repository = PostgresProjectRepository(
            self.config.postgres_dsn,
            min_size=self.config.postgres_min_pool_size,
            max_size=self.config.postgres_max_pool_size,
        )
        self.cache_store = RedisCacheStore.from_url(self.config.redis_url)
        self.gateway = ProjectQueryGateway(
            self.repository,
            self.cache_store,
            ttl_seconds=self.config.projects_cache_ttl_seconds,
            cache_enabled=is_cache_enabled,
            metrics=self.metrics,
        )

        self._setup_project_routes()

        # Expose service instance via app state for introspection/testing
        self.app.state.projects_service = self

    async def _on_startup(self) -> None:
        await self.repository.start()

    async def _on_shutdown(self) -> None:
        await self.repository.stop()
        await self.cache_store.close()

    async def _check_dependencies(self) -> Dict[str, str]:
        redis_ok = await self.cache_store.health_check()
        postgres_ok = await self.repository.health_check()
        return {
            "redis": "ok" if redis_ok else "error",
            "postgres": "ok" if postgres_ok else "error",
        }

    def _setup_project_routes(self):
        """Set up project listing routes."""

        @self.app.get("/api/projects")
        async def list_projects(
            category: Optional[str] = Query(None, description="Skill category to filter by"),
            currency: Optional[str] = Query(None, description="Budget currency code"),
            sort_by: Optional[str] = Query(None, alias="sortBy"),
            sort_order: Optional[str] = Query(None, alias="sortOrder"),
            page: Optional[str] = Query(None),
            per_page: Optional[str] = Query(None, alias="perPage"),
        ):
            """Return one page of projects matching the filter."""
            start_time = time.perf_counter()

            project_filter = ProjectFilter.from_query(
                category=category,
                currency=currency,
                sort_by=sort_by,
                sort_order=sort_order,
                page=page,
                per_page=per_page,
            )
            result = await self.gateway.get_page(project_filter)

            execution_ms = (time.perf_counter() - start_time) * 1000
            response = JSONResponse(
                content={
                    "success": True,
                    "data": [item.to_dict() for item in result.items],
                    "pagination": result.pagination(),
                    "debug": {
                        "executionTime": f"{execution_ms:.2f} ms",
                        "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
                    },
                }
            )
            response.headers["Cache-Control"] = "no-cache"
            response.headers["X-Execution-Time"] = f"{execution_ms:.2f}ms"
            return response

        @self.app.post("/api/projects/cache/invalidate")
        async def invalidate_project_cache():
            """Drop every cached result page, typically after an import run."""
            deleted = await self.gateway.invalidate_all()
            return {"success": True, "deleted": deleted}


def create_app():
    """Create FastAPI application."""
    service = ProjectsService()
    return service.app


if __name__ == "__main__":
    service = ProjectsService()
    service.run()
