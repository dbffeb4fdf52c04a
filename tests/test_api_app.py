"""
Tests for the FastAPI application: health check and GraphQL over HTTP
"""

from unittest.mock import MagicMock

import pytest
from httpx import ASGITransport, AsyncClient

from points_api import __version__
from points_api.api.app import create_app


@pytest.fixture
def client_app(mock_db):
    return create_app(database=mock_db)


@pytest.mark.asyncio
async def test_health_check(client_app):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__}
    assert response.headers.get("x-request-id")


@pytest.mark.asyncio
async def test_graphql_post_uses_injected_database(client_app, mock_db, mock_session):
    mock_result = MagicMock()
    mock_result.scalar_one_or_none.return_value = None
    mock_session.execute.return_value = mock_result

    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/graphql",
            json={
                "query": "query Lookup($id: String!) { userSummary(userId: $id) { user_id } }",
                "variables": {"id": "0xABC"},
            },
        )

    assert response.status_code == 200
    assert response.json() == {"data": {"userSummary": None}}
    mock_db.session.assert_called_once()


@pytest.mark.asyncio
async def test_graphql_validation_error_is_partial_response(client_app):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.post(
            "/graphql",
            json={
                "query": '{ topUsers(limit: 5, orderBy: "user_id", orderByDirection: "desc") '
                "{ user_id } }"
            },
        )

    body = response.json()
    assert response.status_code == 200
    assert body["data"] is None
    assert "Invalid orderBy" in body["errors"][0]["message"]


@pytest.mark.asyncio
async def test_request_id_header_is_echoed_only_when_safe(client_app):
    transport = ASGITransport(app=client_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        kept = await client.get("/health", headers={"X-Request-ID": "client-trace_01"})
        replaced = await client.get("/health", headers={"X-Request-ID": "x" * 500})

    assert kept.headers["x-request-id"] == "client-trace_01"
    assert replaced.headers["x-request-id"] != "x" * 500
    assert len(replaced.headers["x-request-id"]) == 14
