"""HTTP routes for device queries."""

import asyncio
import functools
import logging
from datetime import datetime, timezone

from aiohttp import web

from sensorhub.query.service import DeviceService
from sensorhub.shared.errors import StorageError
from sensorhub.shared.models import format_iso

logger = logging.getLogger(__name__)

SERVICE_KEY = web.AppKey("device_service", DeviceService)

routes = web.RouteTableDef()


async def _run(request: web.Request, method, *args):
    """Run a blocking service call off the event loop."""
    service = request.app[SERVICE_KEY]
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(getattr(service, method), *args))


@routes.get("/api/health")
async def health(request: web.Request) -> web.Response:
    return web.json_response({"status": "ok", "timestamp": format_iso(datetime.now(timezone.utc))})


@routes.get("/api/devices")
async def list_devices(request: web.Request) -> web.Response:
    try:
        result = await _run(request, "list_devices")
    except StorageError as e:
        logger.error(f"Error fetching devices: {e}")
        return web.json_response({"error": "Failed to fetch devices"}, status=500)
    return web.json_response(result)


@routes.get("/api/devices/{mac}")
async def get_device(request: web.Request) -> web.Response:
    mac = request.match_info["mac"]
    try:
        device = await _run(request, "get_device", mac)
    except StorageError as e:
        logger.error(f"Error fetching device {mac}: {e}")
        return web.json_response({"error": "Failed to fetch device"}, status=500)

    if device is None:
        return web.json_response({"error": "Device not found"}, status=404)
    return web.json_response({"device": device})


@routes.get("/api/devices/{mac}/fields")
async def device_fields(request: web.Request) -> web.Response:
    mac = request.match_info["mac"]
    try:
        result = await _run(request, "device_fields", mac)
    except StorageError as e:
        logger.error(f"Error fetching fields for {mac}: {e}")
        return web.json_response({"error": "Failed to fetch fields"}, status=500)
    return web.json_response(result)


@routes.get("/api/devices/{mac}/history")
async def device_history(request: web.Request) -> web.Response:
    mac = request.match_info["mac"]
    field = request.query.get("field")
    if not field:
        return web.json_response({"error": 'Query parameter "field" is required'}, status=400)

    try:
        result = await _run(
            request,
            "device_history",
            mac,
            field,
            request.query.get("start"),
            request.query.get("stop"),
        )
    except ValueError as e:
        return web.json_response({"error": str(e)}, status=400)
    except StorageError as e:
        logger.error(f"Error fetching history for {mac}/{field}: {e}")
        return web.json_response({"error": "Failed to fetch history"}, status=500)
    return web.json_response(result)


def create_app(service: DeviceService) -> web.Application:
    """Build the web application around a device service."""
    app = web.Application()
    app[SERVICE_KEY] = service
    app.add_routes(routes)
    return app
