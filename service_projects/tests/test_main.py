"""
Tests for the project listing HTTP endpoints.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from service_projects.app.domain import ProjectFilter, ProjectItem, ResultPage, SortField, SortOrder
from service_projects.app.main import create_app
from shared.errors import CacheUnavailableError, DataUnavailableError

from conftest import make_rows


@pytest.fixture
def client():
    app = create_app()
    return TestClient(app)


@pytest.fixture
def service(client):
    return client.app.state.projects_service


def _page(count=2, total=2, current_page=1, per_page=25):
    items = tuple(ProjectItem.from_row(row) for row in make_rows(count))
    last_page = max(1, -(-total // per_page))
    return ResultPage(total=total, current_page=current_page, per_page=per_page, last_page=last_page, items=items)


def test_list_projects_returns_envelope(client, service):
    service.gateway.get_page = AsyncMock(return_value=_page())

    response = client.get("/api/projects")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [item["id"] for item in body["data"]] == [1, 2]
    assert body["data"][0]["employer"] == {"login": "employer1", "first_name": "Test", "last_name": None}
    assert body["pagination"] == {"total": 2, "currentPage": 1, "perPage": 25, "lastPage": 1}
    assert body["debug"]["executionTime"].endswith(" ms")
    assert response.headers["Cache-Control"] == "no-cache"
    assert response.headers["X-Execution-Time"].endswith("ms")


def test_list_projects_normalizes_query_parameters(client, service):
    service.gateway.get_page = AsyncMock(return_value=_page(count=0, total=0))

    response = client.get(
        "/api/projects",
        params={
            "category": "Python",
            "currency": "usd",
            "sortBy": "budget_amount",
            "sortOrder": "asc",
            "page": "2",
            "perPage": "10",
        },
    )

    assert response.status_code == 200
    service.gateway.get_page.assert_awaited_once_with(
        ProjectFilter(
            category="Python",
            currency="USD",
            sort_by=SortField.BUDGET_AMOUNT,
            sort_order=SortOrder.ASC,
            page=2,
            per_page=10,
        )
    )


def test_list_projects_defaults_bad_parameters(client, service):
    service.gateway.get_page = AsyncMock(return_value=_page(count=0, total=0))

    response = client.get("/api/projects", params={"sortBy": "password", "page": "abc", "perPage": "0"})

    assert response.status_code == 200
    service.gateway.get_page.assert_awaited_once_with(ProjectFilter())


def test_list_projects_data_unavailable_returns_503(client, service):
    service.gateway.get_page = AsyncMock(side_effect=DataUnavailableError("PostgreSQL query failed"))

    response = client.get("/api/projects")

    assert response.status_code == 503
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "DATA_UNAVAILABLE"
    assert body["error"] == "PostgreSQL query failed"


def test_invalidate_cache(client, service):
    service.gateway.invalidate_all = AsyncMock(return_value=4)

    response = client.post("/api/projects/cache/invalidate")

    assert response.status_code == 200
    assert response.json() == {"success": True, "deleted": 4}


def test_invalidate_cache_failure_returns_503(client, service):
    service.gateway.invalidate_all = AsyncMock(side_effect=CacheUnavailableError("Redis pattern delete failed"))

    response = client.post("/api/projects/cache/invalidate")

    assert response.status_code == 503
    assert response.json()["code"] == "CACHE_UNAVAILABLE"


def test_health_reports_dependencies(client, service):
    service.cache_store.health_check = AsyncMock(return_value=True)
    service.repository.health_check = AsyncMock(return_value=False)

    response = client.get("/health")

    assert response.status_code == 503
    body = response.json()
    assert body["status"] == "error"
    assert body["dependencies"] == {"redis": "ok", "postgres": "error"}


def test_health_ok(client, service):
    service.cache_store.health_check = AsyncMock(return_value=True)
    service.repository.health_check = AsyncMock(return_value=True)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_metrics_endpoint_exposes_http_metrics(client, service):
    service.gateway.get_page = AsyncMock(return_value=_page())
    client.get("/api/projects")

    response = client.get("/metrics")

    assert response.status_code == 200
    assert "http_requests_total" in response.text


def test_request_id_is_echoed(client, service):
    service.gateway.get_page = AsyncMock(return_value=_page())

    response = client.get("/api/projects", headers={"X-Request-ID": "req-123"})

    assert response.headers["X-Request-ID"] == "req-123"


def test_list_projects_rejects_malformed_currency(client, service):
    service.gateway.get_page = AsyncMock()

    response = client.get("/api/projects", params={"currency": "dollars"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["code"] == "INVALID_FILTER"
    service.gateway.get_page.assert_not_awaited()
