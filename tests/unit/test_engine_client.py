"""
Unit tests for the HTTP engine client.

Runs the client against a local aiohttp server standing in for the engine.
"""

import asyncio

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from api.services.engine_client import HttpEngineClient, call_engine
from api.services.errors import EngineUnavailable, ValidationRejected


@pytest_asyncio.fixture
async def engine_server():
    """Local engine control server."""
    state = {
        "config": 'mode = "live"\n',
        "running": False,
        "fail_stop": False,
        "slow_start": False,
        "requests": [],
    }

    async def get_config(request):
        state["requests"].append("GET /config")
        return web.Response(text=state["config"])

    async def post_config(request):
        body = await request.text()
        state["requests"].append("POST /config")
        if "invalid" in body:
            return web.Response(status=422, text="unknown key: invalid")
        state["config"] = body
        return web.Response(status=204)

    async def start(request):
        state["requests"].append("POST /start")
        if state["slow_start"]:
            await asyncio.sleep(1)
        state["running"] = True
        return web.json_response({"ok": True})

    async def stop(request):
        state["requests"].append("POST /stop")
        if state["fail_stop"]:
            return web.Response(status=500, text="internal error")
        state["running"] = False
        return web.json_response({"ok": True})

    app = web.Application()
    app.router.add_get("/config", get_config)
    app.router.add_post("/config", post_config)
    app.router.add_post("/start", start)
    app.router.add_post("/stop", stop)

    server = TestServer(app)
    await server.start_server()
    yield server, state
    await server.close()


@pytest_asyncio.fixture
async def client(engine_server):
    server, _ = engine_server
    engine_client = HttpEngineClient(str(server.make_url("/")), timeout_seconds=2.0)
    yield engine_client
    await engine_client.close()


@pytest.mark.asyncio
async def test_get_config(client, engine_server):
    assert await client.get_config() == 'mode = "live"\n'


@pytest.mark.asyncio
async def test_submit_config(client, engine_server):
    _, state = engine_server

    await client.submit_config('mode = "dry"\n')

    assert state["config"] == 'mode = "dry"\n'


@pytest.mark.asyncio
async def test_submit_rejected_is_validation_error(client, engine_server):
    _, state = engine_server

    with pytest.raises(ValidationRejected, match="unknown key") as exc_info:
        await client.submit_config('invalid = 1\n')

    assert exc_info.value.context["status_code"] == 422
    assert state["config"] == 'mode = "live"\n'


@pytest.mark.asyncio
async def test_start_and_stop(client, engine_server):
    _, state = engine_server

    await client.start()
    assert state["running"] is True

    await client.stop()
    assert state["running"] is False
    assert state["requests"] == ["POST /start", "POST /stop"]


@pytest.mark.asyncio
async def test_server_error_is_engine_unavailable(client, engine_server):
    _, state = engine_server
    state["fail_stop"] = True

    with pytest.raises(EngineUnavailable, match="HTTP 500"):
        await client.stop()


@pytest.mark.asyncio
async def test_timeout_is_engine_unavailable(engine_server):
    server, state = engine_server
    state["slow_start"] = True
    engine_client = HttpEngineClient(str(server.make_url("/")), timeout_seconds=0.2)

    try:
        with pytest.raises(EngineUnavailable):
            await engine_client.start()
    finally:
        await engine_client.close()


@pytest.mark.asyncio
async def test_unreachable_engine_is_engine_unavailable():
    engine_client = HttpEngineClient("http://127.0.0.1:1", timeout_seconds=1.0)

    try:
        with pytest.raises(EngineUnavailable):
            await engine_client.get_config()
    finally:
        await engine_client.close()


@pytest.mark.asyncio
async def test_call_engine_passes_results_through():
    async def read():
        return "value"

    assert await call_engine(read, "read", 1.0) == "value"


@pytest.mark.asyncio
async def test_call_engine_classifies_unknown_errors():
    async def broken():
        raise RuntimeError("socket closed")

    with pytest.raises(EngineUnavailable, match="socket closed") as exc_info:
        await call_engine(broken, "read", 1.0)

    assert exc_info.value.context == {"operation": "read"}
