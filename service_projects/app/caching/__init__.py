"""
Result-page caching for the project listing.

Pages are cached whole under a key derived from the normalized filter and
expire after a fixed TTL. Bulk imports clear the whole namespace through
ProjectQueryGateway.invalidate_all().
"""

from .gateway import CacheStore, ProjectDataSource, ProjectQueryGateway
from .redis_store import RedisCacheStore

__all__ = ["CacheStore", "ProjectDataSource", "ProjectQueryGateway", "RedisCacheStore"]
