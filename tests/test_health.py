# tests/test_health.py
import pytest

pytestmark = pytest.mark.anyio


async def test_health(client):
    res = await client.get("/health/")

    assert res.status_code == 200
    assert res.json()["status"] == "healthy"
    assert "x-process-time" in res.headers


async def test_database_health(client):
    res = await client.get("/health/db")

    assert res.status_code == 200
    assert res.json() == {"status": "healthy", "database": "connected"}


async def test_unknown_route_uses_message_body(client):
    res = await client.get("/api/nowhere")

    assert res.status_code == 404
    assert res.json() == {"message": "Not Found"}
