"""Tests for the HTTP routes."""

from unittest.mock import MagicMock

import pytest
from aiohttp import test_utils

from sensorhub.api.app import create_app
from sensorhub.query.service import DeviceService
from sensorhub.shared.errors import StorageError


@pytest.fixture
def mock_service():
    return MagicMock(spec=DeviceService)


@pytest.fixture
async def client(mock_service):
    async with test_utils.TestClient(test_utils.TestServer(create_app(mock_service))) as test_client:
        yield test_client


async def test_health(client):
    response = await client.get("/api/health")
    assert response.status == 200
    assert (await response.json())["status"] == "ok"


async def test_list_devices(client, mock_service):
    mock_service.list_devices.return_value = {"devices": [], "count": 0}
    response = await client.get("/api/devices")
    assert response.status == 200
    assert await response.json() == {"devices": [], "count": 0}


async def test_list_devices_store_failure(client, mock_service):
    mock_service.list_devices.side_effect = StorageError("down")
    response = await client.get("/api/devices")
    assert response.status == 500
    assert await response.json() == {"error": "Failed to fetch devices"}


async def test_get_device(client, mock_service):
    mock_service.get_device.return_value = {"mac": "AA01"}
    response = await client.get("/api/devices/AA01")
    assert response.status == 200
    assert await response.json() == {"device": {"mac": "AA01"}}
    mock_service.get_device.assert_called_once_with("AA01")


async def test_get_device_not_found(client, mock_service):
    mock_service.get_device.return_value = None
    response = await client.get("/api/devices/missing")
    assert response.status == 404
    assert await response.json() == {"error": "Device not found"}


async def test_device_fields(client, mock_service):
    mock_service.device_fields.return_value = {"mac": "AA01", "fields": ["humidity"]}
    response = await client.get("/api/devices/AA01/fields")
    assert await response.json() == {"mac": "AA01", "fields": ["humidity"]}


async def test_history_requires_field(client, mock_service):
    response = await client.get("/api/devices/AA01/history")
    assert response.status == 400
    mock_service.device_history.assert_not_called()


async def test_history_passes_range(client, mock_service):
    mock_service.device_history.return_value = {"mac": "AA01", "field": "humidity", "count": 0, "data": []}
    response = await client.get("/api/devices/AA01/history", params={"field": "humidity", "start": "-7d"})
    assert response.status == 200
    mock_service.device_history.assert_called_once_with("AA01", "humidity", "-7d", None)


async def test_history_bad_time(client, mock_service):
    mock_service.device_history.side_effect = ValueError("Unrecognized time expression: 'soon'")
    response = await client.get("/api/devices/AA01/history", params={"field": "humidity", "start": "soon"})
    assert response.status == 400
