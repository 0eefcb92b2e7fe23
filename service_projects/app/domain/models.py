"""
Display-ready project records and result pages.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class EmployerSummary:
    """Employer details shown next to a project."""

    login: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "login": self.login,
            "first_name": self.first_name,
            "last_name": self.last_name,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "EmployerSummary":
        return cls(
            login=payload["login"],
            first_name=payload.get("first_name"),
            last_name=payload.get("last_name"),
        )


@dataclass(frozen=True)
class ProjectItem:
    """Flattened projection of a project, built fresh for every response."""

    id: int
    name: str
    published_at: str
    budget_amount: Optional[float] = None
    budget_currency: Optional[str] = None
    employer: Optional[EmployerSummary] = None
    skills: str = ""

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the item to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "budget_amount": self.budget_amount,
            "budget_currency": self.budget_currency,
            "published_at": self.published_at,
            "employer": self.employer.to_dict() if self.employer else None,
            "skills": self.skills,
        }

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ProjectItem":
        """Rehydrate an item from cached JSON state."""
        employer = payload.get("employer")
        return cls(
            id=int(payload["id"]),
            name=payload["name"],
            published_at=payload["published_at"],
            budget_amount=_optional_float(payload.get("budget_amount")),
            budget_currency=payload.get("budget_currency"),
            employer=EmployerSummary.from_dict(employer) if employer else None,
            skills=payload.get("skills") or "",
        )

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "ProjectItem":
        """Convert a data source row into an item."""
        login = row.get("employer_login")
        employer = None
        if login:
            employer = EmployerSummary(
                login=str(login),
                first_name=row.get("employer_first_name"),
                last_name=row.get("employer_last_name"),
            )

        return cls(
            id=int(row["id"]),
            name=str(row["name"]),
            # Zero budgets are shown as "no budget"
            budget_amount=_optional_float(row.get("budget_amount")) or None,
            budget_currency=row.get("budget_currency"),
            published_at=_format_timestamp(row.get("published_at")),
            employer=employer,
            skills=row.get("skills") or "",
        )


@dataclass(frozen=True)
class ResultPage:
    """One page of listing results plus pagination metadata."""

    total: int
    current_page: int
    per_page: int
    last_page: int
    items: Tuple[ProjectItem, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "projects": [item.to_dict() for item in self.items],
            "total": self.total,
            "current_page": self.current_page,
            "per_page": self.per_page,
            "last_page": self.last_page,
        }

    def pagination(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "currentPage": self.current_page,
            "perPage": self.per_page,
            "lastPage": self.last_page,
        }

    def to_json(self) -> bytes:
        """Encode the page as stored in the cache."""
        return json.dumps(self.to_dict(), sort_keys=True, separators=(",", ":")).encode("utf-8")

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "ResultPage":
        items: List[ProjectItem] = [ProjectItem.from_dict(item) for item in payload.get("projects", [])]
        return cls(
            total=int(payload["total"]),
            current_page=int(payload["current_page"]),
            per_page=int(payload["per_page"]),
            last_page=int(payload["last_page"]),
            items=tuple(items),
        )

    @classmethod
    def from_json(cls, raw: bytes | str) -> "ResultPage":
        return cls.from_dict(json.loads(raw))


def _optional_float(value: Any) -> Optional[float]:
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _format_timestamp(value: Any) -> str:
    """Render database timestamps as ISO-8601 UTC with second precision."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        else:
            value = value.astimezone(timezone.utc)
        return value.isoformat(timespec="seconds").replace("+00:00", "Z")
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc).isoformat().replace("+00:00", "Z")
    if value is None:
        return ""
    return str(value)
