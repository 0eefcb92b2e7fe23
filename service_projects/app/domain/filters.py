"""
Listing filter normalization and cache key derivation.
"""

from __future__ import annotations

import hashlib
import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from shared.errors import InvalidFilterError


DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 25
MAX_PER_PAGE = 100
CACHE_KEY_PREFIX = "projects:"
MAX_CATEGORY_LENGTH = 100

_CURRENCY_PATTERN = re.compile(r"^[A-Z]{3}$")


class SortField(str, Enum):
    """Columns a listing may be ordered by."""

    PUBLISHED_AT = "published_at"
    BUDGET_AMOUNT = "budget_amount"
    NAME = "name"

    @classmethod
    def parse(cls, value: Any) -> "SortField":
        """Return the matching field, or the default for anything unrecognized."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.PUBLISHED_AT


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any) -> "SortOrder":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return cls.DESC


@dataclass(frozen=True)
class ProjectFilter:
    """Normalized query criteria for the project listing."""

    category: Optional[str] = None
    currency: Optional[str] = None
    sort_by: SortField = SortField.PUBLISHED_AT
    sort_order: SortOrder = SortOrder.DESC
    page: int = DEFAULT_PAGE
    per_page: int = DEFAULT_PER_PAGE

    def __post_init__(self) -> None:
        # Coerce through the allow-lists so a raw string never reaches a query,
        # and so equivalent filters share one cache key
        object.__setattr__(self, "sort_by", SortField.parse(self.sort_by))
        object.__setattr__(self, "sort_order", SortOrder.parse(self.sort_order))
        object.__setattr__(self, "page", _positive_int(self.page, DEFAULT_PAGE))
        object.__setattr__(self, "per_page", _positive_int(self.per_page, DEFAULT_PER_PAGE))

    @classmethod
    def from_query(
        cls,
        *,
        category: Optional[str] = None,
        currency: Optional[str] = None,
        sort_by: Optional[str] = None,
        sort_order: Optional[str] = None,
        page: Any = None,
        per_page: Any = None,
    ) -> "ProjectFilter":
        """
        Build a filter from raw request parameters.

        Unusable sort, page and page size values fall back to their defaults.
        A currency that is not a three-letter code, or an over-long category,
        raises InvalidFilterError.
        """
        normalized_category = _blank_to_none(category)
        if normalized_category and len(normalized_category) > MAX_CATEGORY_LENGTH:
            raise InvalidFilterError(
                f"category must be at most {MAX_CATEGORY_LENGTH} characters",
                {"field": "category"},
            )

        normalized_currency = _blank_to_none(currency)
        if normalized_currency:
            normalized_currency = normalized_currency.upper()
            if not _CURRENCY_PATTERN.match(normalized_currency):
                raise InvalidFilterError("currency must be a three-letter code", {"field": "currency"})

        return cls(
            category=normalized_category,
            currency=normalized_currency,
            sort_by=SortField.parse(sort_by),
            sort_order=SortOrder.parse(sort_order),
            page=_positive_int(page, DEFAULT_PAGE),
            per_page=min(_positive_int(per_page, DEFAULT_PER_PAGE), MAX_PER_PAGE),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "category": self.category,
            "currency": self.currency,
            "sort_by": self.sort_by.value,
            "sort_order": self.sort_order.value,
            "page": self.page,
            "per_page": self.per_page,
        }

    def canonical(self) -> str:
        """Serialize with a fixed field order so equal filters serialize equally."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":"))

    def cache_key(self, prefix: str = CACHE_KEY_PREFIX) -> str:
        digest = hashlib.md5(self.canonical().encode("utf-8")).hexdigest()
        return f"{prefix}{digest}"


def _blank_to_none(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _positive_int(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return number if number >= 1 else default
