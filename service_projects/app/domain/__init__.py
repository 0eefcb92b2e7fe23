"""
Domain types for the project listing: filters, items and result pages.
"""

from .filters import (
    CACHE_KEY_PREFIX,
    DEFAULT_PER_PAGE,
    MAX_PER_PAGE,
    ProjectFilter,
    SortField,
    SortOrder,
)
from .models import EmployerSummary, ProjectItem, ResultPage

__all__ = [
    "CACHE_KEY_PREFIX",
    "DEFAULT_PER_PAGE",
    "MAX_PER_PAGE",
    "ProjectFilter",
    "SortField",
    "SortOrder",
    "EmployerSummary",
    "ProjectItem",
    "ResultPage",
]
