"""
Project listing service for the Project Board.

Serves imported freelance project listings through a filtered, paginated
JSON endpoint backed by a Redis result-page cache.

Structure:
- app.main: FastAPI app, routes, and dependency wiring.
- app.domain: Filter normalization and display-ready result types.
- app.caching: Redis cache store and the cache-aside query gateway.
- app.persistence: PostgreSQL data source and SQL builder.
"""
