import pytest


@pytest.mark.asyncio
async def test_health_check(client):
    response = await client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "message": "Server Healthy"}


@pytest.mark.asyncio
async def test_health_check_echoes_correlation_id(client):
    response = await client.get("/api/health", headers={"X-Correlation-ID": "req-123"})
    assert response.headers["x-correlation-id"] == "req-123"


@pytest.mark.asyncio
async def test_health_check_generates_correlation_id(client):
    response = await client.get("/api/health")
    assert len(response.headers["x-correlation-id"]) == 36


def test_application_module_imports_and_mounts_routers():
    import importlib

    main = importlib.import_module("gyanmitra.main")
    paths = {route.path for route in main.create_app().routes}

    assert "/api/health" in paths
    assert "/api/conversation" in paths
