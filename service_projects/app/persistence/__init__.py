"""
Relational data source for the project listing.
"""

from .postgres import PostgresProjectRepository
from .query_builder import ProjectQueryBuilder

__all__ = ["PostgresProjectRepository", "ProjectQueryBuilder"]
