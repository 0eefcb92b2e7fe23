"""
Parameterized SQL for project listing queries.
"""

from __future__ import annotations

from typing import Any, Dict, List, Tuple

from ..domain import ProjectFilter, SortField, SortOrder


# Identifiers that may be interpolated into ORDER BY; everything else is bound
_SORT_COLUMNS: Dict[SortField, str] = {
    SortField.PUBLISHED_AT: "p.published_at",
    SortField.BUDGET_AMOUNT: "p.budget_amount",
    SortField.NAME: "p.name",
}

_SORT_DIRECTIONS: Dict[SortOrder, str] = {
    SortOrder.ASC: "ASC",
    SortOrder.DESC: "DESC",
}


class ProjectQueryBuilder:
    """Builds count and page queries with $n placeholders for asyncpg."""

    def __init__(self, project_filter: ProjectFilter):
        self.project_filter = project_filter
        self._params: List[Any] = []

    def count_query(self) -> Tuple[str, List[Any]]:
        self._params = []
        where = self._where_clause()
        sql = f"""
SELECT COUNT(DISTINCT p.id) AS total
FROM projects p
WHERE 1=1
{where}
""".strip()
        return sql, list(self._params)

    def page_query(self, page: int, per_page: int) -> Tuple[str, List[Any]]:
        self._params = []
        where = self._where_clause()
        order_by = self._order_clause()
        limit = self._bind(per_page)
        offset = self._bind((max(page, 1) - 1) * per_page)

        sql = f"""
SELECT p.id,
       p.name,
       p.budget_amount,
       p.budget_currency,
       p.published_at,
       e.login AS employer_login,
       e.first_name AS employer_first_name,
       e.last_name AS employer_last_name,
       string_agg(DISTINCT s.name, ',') AS skills
FROM projects p
LEFT JOIN employers e ON p.employer_id = e.id
LEFT JOIN project_skills ps ON p.id = ps.project_id
LEFT JOIN skills s ON ps.skill_id = s.id
WHERE 1=1
{where}
GROUP BY p.id, p.name, p.budget_amount, p.budget_currency, p.published_at,
         e.login, e.first_name, e.last_name
{order_by}
LIMIT {limit} OFFSET {offset}
""".strip()
        return sql, list(self._params)

    def _where_clause(self) -> str:
        clauses: List[str] = []
        if self.project_filter.category:
            placeholder = self._bind(self.project_filter.category)
            clauses.append(
                "  AND EXISTS (\n"
                "    SELECT 1 FROM project_skills ps2\n"
                "    JOIN skills s2 ON ps2.skill_id = s2.id\n"
                f"    WHERE ps2.project_id = p.id AND s2.name = {placeholder}\n"
                "  )"
            )
        if self.project_filter.currency:
            placeholder = self._bind(self.project_filter.currency)
            clauses.append(f"  AND p.budget_currency = {placeholder}")
        return "\n".join(clauses)

    def _order_clause(self) -> str:
        column = _SORT_COLUMNS[self.project_filter.sort_by]
        direction = _SORT_DIRECTIONS[self.project_filter.sort_order]
        # p.id keeps page boundaries stable when sort values tie
        return f"ORDER BY {column} {direction} NULLS LAST, p.id {direction}"

    def _bind(self, value: Any) -> str:
        self._params.append(value)
        return f"${len(self._params)}"
